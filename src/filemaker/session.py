"""
Session management: login (token issue) and logout (token release)
"""
from typing import Optional

import httpx

from src.config.settings import FileMakerConfig
from src.filemaker.results import run_request
from src.filemaker.transport import request_json
from src.models.filemaker import FileMakerResult, SessionRelease, TokenData
from src.utils.logger import get_logger

logger = get_logger(__name__)


async def acquire_token(
    config: FileMakerConfig,
    *,
    database: Optional[str] = None,
    account: Optional[str] = None,
    password: Optional[str] = None,
    server_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> FileMakerResult[TokenData]:
    """
    Log in with Basic auth and return a Data API session token.

    Arguments override the matching ``config`` values.
    """
    cfg = config.resolve(
        database=database, account=account, password=password, server_url=server_url
    )
    url = cfg.endpoint("sessions")

    async def send():
        cfg.check()
        return await request_json(
            url,
            method="POST",
            json_body={},
            auth=httpx.BasicAuth(cfg.account, cfg.password.get_secret_value()),
            timeout=cfg.timeout,
            client=client,
        )

    result = await run_request(
        send,
        lambda envelope: TokenData.model_validate(envelope.response),
        operation="acquire_token",
        details={"database": cfg.database, "url": url},
    )
    if result.success:
        logger.info(f"Acquired FileMaker session token for database={cfg.database}")
    return result


async def release_token(
    config: FileMakerConfig,
    token: str,
    *,
    database: Optional[str] = None,
    server_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    raise_on_error: bool = False,
) -> FileMakerResult[SessionRelease]:
    """
    Log out, invalidating ``token`` on the server.

    Failures come back as a failed result; with ``raise_on_error`` they raise
    FileMakerAPIError instead.
    """
    cfg = config.resolve(database=database, server_url=server_url)

    async def send():
        cfg.check()
        if not token:
            raise ValueError("token is required")
        return await request_json(
            cfg.endpoint("sessions", token),
            method="DELETE",
            timeout=cfg.timeout,
            client=client,
        )

    result = await run_request(
        send,
        lambda envelope: SessionRelease(token=token),
        operation="release_token",
        details={"database": cfg.database},
    )
    if result.success:
        logger.info(f"Released FileMaker session token for database={cfg.database}")
    elif raise_on_error:
        result.unwrap()
    return result
