"""
Find query construction and record search
"""
from typing import Any, Optional, Union

import httpx

from src.config.settings import FileMakerConfig, MatchMode
from src.filemaker.results import run_request
from src.filemaker.transport import request_json
from src.models.filemaker import FileMakerResult, FindPayload, FindQuery
from src.utils.logger import get_logger

logger = get_logger(__name__)


def build_find_query(
    field_name: str,
    search_text: str,
    mode: Union[MatchMode, str] = MatchMode.exact,
) -> FindQuery:
    """
    Build a single-condition find query.

    ``exact`` prepends ``=`` to the search text; ``raw`` forwards it as-is so
    the caller can use the server's own operators (``>``, ``<=``, ``a...b``).
    """
    if not field_name:
        raise ValueError("field_name is required")
    if not search_text:
        raise ValueError("search_text is required")

    mode = MatchMode(mode)
    expression = f"={search_text}" if mode is MatchMode.exact else search_text
    return FindQuery(query=[{field_name: expression}])


async def find_records(
    config: FileMakerConfig,
    field_name: str,
    search_text: str,
    token: str,
    *,
    database: Optional[str] = None,
    layout: Optional[str] = None,
    mode: Optional[Union[MatchMode, str]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> FileMakerResult[list[dict[str, Any]]]:
    """
    Search ``layout`` for records whose ``field_name`` matches ``search_text``.

    Returns the server's record list unmodified.
    """
    cfg = config.resolve(database=database, layout=layout)
    match_mode = mode if mode is not None else cfg.find_mode

    async def send():
        cfg.check()
        query = build_find_query(field_name, search_text, match_mode)
        logger.debug(f"find on layout={cfg.layout}: {query.to_body()}")
        return await request_json(
            cfg.endpoint("layouts", cfg.layout, "_find"),
            method="POST",
            headers={"Authorization": f"Bearer {token}"},
            json_body=query.to_body(),
            timeout=cfg.timeout,
            client=client,
        )

    result = await run_request(
        send,
        lambda envelope: FindPayload.model_validate(envelope.response).data,
        operation="find_records",
        details={"database": cfg.database, "layout": cfg.layout},
    )
    if result.success:
        logger.info(f"Found {len(result.data)} records on layout={cfg.layout}")
    return result
