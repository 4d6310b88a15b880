"""
Single-call HTTP helper for the FileMaker Data API
"""
from typing import Any, Optional

import httpx

from src.utils.logger import get_logger

logger = get_logger(__name__)


DEFAULT_TIMEOUT = 30.0


async def request_json(
    url: str,
    *,
    method: str = "GET",
    headers: Optional[dict[str, str]] = None,
    json_body: Optional[Any] = None,
    auth: Optional[httpx.Auth] = None,
    timeout: float = DEFAULT_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[Any]:
    """
    Perform one request and decode the JSON body.

    Args:
        url: Fully formed endpoint URL
        method: HTTP method
        headers: Extra headers, merged over ``Content-Type: application/json``
        json_body: Request body, serialized as JSON when given
        auth: httpx auth flow, e.g. httpx.BasicAuth for login
        timeout: Request timeout in seconds (ignored for an injected client)
        client: Optional client to reuse instead of opening one per call

    Returns:
        Decoded body, or None on network failure, non-2xx status or
        undecodable body
    """
    merged_headers = {"Content-Type": "application/json", **(headers or {})}

    try:
        if client is not None:
            response = await client.request(
                method, url, headers=merged_headers, json=json_body, auth=auth
            )
        else:
            async with httpx.AsyncClient(timeout=timeout) as owned_client:
                response = await owned_client.request(
                    method, url, headers=merged_headers, json=json_body, auth=auth
                )

        response.raise_for_status()

        logger.debug(f"{method} {url} -> {response.status_code}")

        try:
            return response.json()
        except ValueError as json_err:
            logger.error(f"JSON parsing error for {method} {url}: {json_err}")
            return None

    except httpx.HTTPStatusError as e:
        logger.error(f"FileMaker request failed: {method} {url} -> HTTP {e.response.status_code}")
        return None
    except httpx.HTTPError as e:
        logger.error(f"FileMaker request error: {method} {url}: {e}")
        return None
