"""
Layout (view) metadata lookup
"""
from typing import Any, Iterable, Optional

import httpx

from src.config.settings import FileMakerConfig
from src.filemaker.results import run_request
from src.filemaker.transport import request_json
from src.models.filemaker import FieldDescriptor, FileMakerResult, LayoutMetadata


async def get_layout_metadata(
    config: FileMakerConfig,
    token: str,
    *,
    database: Optional[str] = None,
    layout: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> FileMakerResult[LayoutMetadata]:
    """Fetch field, portal and value-list metadata of a layout."""
    cfg = config.resolve(database=database, layout=layout)

    async def send():
        cfg.check()
        return await request_json(
            cfg.endpoint("layouts", cfg.layout),
            method="GET",
            headers={"Authorization": f"Bearer {token}"},
            timeout=cfg.timeout,
            client=client,
        )

    return await run_request(
        send,
        lambda envelope: LayoutMetadata.model_validate(envelope.response),
        operation="get_layout_metadata",
        details={"database": cfg.database, "layout": cfg.layout},
    )


def reduce_field_metadata(fields: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Reduce ``fieldMetaData`` entries to name/type/displayType/result/valueList/global.

    Keys the server did not send stay absent. Reducing an already reduced
    list returns an equal list.
    """
    return [
        FieldDescriptor.model_validate(field).model_dump(by_alias=True, exclude_none=True)
        for field in fields
    ]
