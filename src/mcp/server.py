"""src.mcp.server

MCP (Model Context Protocol) server for FileMaker Data API.

Current implementation:
- stdio transport
- Tools:
  - get-token
  - abandon-token
  - get-layout-metadata
  - find-records
"""

from __future__ import annotations

import json
from typing import Any

import anyio
import mcp.types as types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.stdio import stdio_server

from src.config.settings import FileMakerConfig, MatchMode, settings
from src.filemaker import (
    acquire_token,
    find_records,
    get_layout_metadata,
    reduce_field_metadata,
    release_token,
)
from src.models.filemaker import FileMakerResult
from src.utils.logger import get_logger

logger = get_logger(__name__)


SERVER_NAME = "filemaker-mcp-server"

filemaker_config = FileMakerConfig.from_settings(settings)


server = Server(
    SERVER_NAME,
    version=settings.service_version,
    instructions=(
        "FileMaker Data API tools. Call get-token first, then get-layout-metadata to "
        "discover field names, then find-records. Call abandon-token when done."
    ),
)


_DATABASE_PROPERTY = {
    "type": "string",
    "description": "FileMaker database (file) name. Defaults to FILEMAKER_DATABASE.",
}
_LAYOUT_PROPERTY = {
    "type": "string",
    "description": "Layout name. Defaults to FILEMAKER_LAYOUT.",
}
_TOKEN_PROPERTY = {
    "type": "string",
    "description": "FileMaker Data API token returned by get-token",
}


@server.list_tools()
async def list_tools(_: types.ListToolsRequest | None) -> types.ListToolsResult:
    return types.ListToolsResult(
        tools=[
            types.Tool(
                name="get-token",
                description=(
                    "Get a FileMaker Data API token. Run this before any other tool; "
                    "pass the returned token to the other tools, including abandon-token."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {"database": _DATABASE_PROPERTY},
                },
            ),
            types.Tool(
                name="abandon-token",
                description="Abandon (log out) a FileMaker Data API token.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "token": _TOKEN_PROPERTY,
                        "database": _DATABASE_PROPERTY,
                    },
                    "required": ["token"],
                },
            ),
            types.Tool(
                name="get-layout-metadata",
                description=(
                    "Get the field definitions of a FileMaker layout.\n"
                    "1. Run get-token to obtain a token.\n"
                    "2. Run this tool with the token to list the layout's fields.\n"
                    "3. Pick the field that fits the user's request, e.g. a name field "
                    "for 'find the record for Tanaka', a phone field for a phone number, "
                    "a date field for date conditions.\n"
                    "4. Pass that field name as fieldName to find-records."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "token": _TOKEN_PROPERTY,
                        "layout": _LAYOUT_PROPERTY,
                        "database": _DATABASE_PROPERTY,
                    },
                    "required": ["token"],
                },
            ),
            types.Tool(
                name="find-records",
                description=(
                    "Find records in a FileMaker layout. Choose fieldName from the "
                    "get-layout-metadata output that best matches searchText.\n"
                    "Dates must be written as mm-dd-yyyy, e.g. 04-01-2025.\n"
                    "With matchMode=raw, searchText may use FileMaker operators: ranges "
                    "such as 04-01-2025...04-30-2025 or 2...9, comparisons such as "
                    "'> 04-01-2025' or '<= 04-01-2025'. With matchMode=exact the text is "
                    "matched as '=searchText'.\n"
                    "Run abandon-token after searching."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "fieldName": {"type": "string", "description": "Field name to search"},
                        "searchText": {"type": "string", "description": "Search text"},
                        "token": _TOKEN_PROPERTY,
                        "matchMode": {
                            "type": "string",
                            "enum": [mode.value for mode in MatchMode],
                            "description": "exact prepends '='; raw forwards searchText as-is",
                        },
                        "layout": _LAYOUT_PROPERTY,
                        "database": _DATABASE_PROPERTY,
                    },
                    "required": ["fieldName", "searchText", "token"],
                },
            ),
        ]
    )


def _text_and_structured(payload: dict[str, Any]):
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    return ([types.TextContent(type="text", text=text)], payload)


def _optional_str(args: dict, key: str) -> str | None:
    value = str(args.get(key) or "").strip()
    return value or None


def _unwrap(result: FileMakerResult, tool: str):
    if not result.success:
        logger.warning(
            f"{tool} failed: {result.error.type.value} {result.error.message} {result.error.details}"
        )
    return result.unwrap()


@server.call_tool()
async def call_tool(name: str, arguments: dict | None):
    args = arguments or {}

    if not filemaker_config.server_url:
        raise RuntimeError("FILEMAKER_SERVER_URL is not configured")

    database = _optional_str(args, "database")

    if name == "get-token":
        result = await acquire_token(filemaker_config, database=database)
        token_data = _unwrap(result, name)
        return [types.TextContent(type="text", text=token_data.token)]

    if name == "abandon-token":
        token = str(args.get("token") or "").strip()
        result = await release_token(filemaker_config, token, database=database)
        _unwrap(result, name)
        return [types.TextContent(type="text", text="Token abandoned successfully")]

    if name == "get-layout-metadata":
        token = str(args.get("token") or "").strip()
        result = await get_layout_metadata(
            filemaker_config,
            token,
            database=database,
            layout=_optional_str(args, "layout"),
        )
        metadata = _unwrap(result, name)
        fields = reduce_field_metadata(metadata.field_meta_data)

        payload = {
            "fields": fields,
            "total_count": len(fields),
        }
        return _text_and_structured(payload)

    if name == "find-records":
        result = await find_records(
            filemaker_config,
            str(args.get("fieldName") or "").strip(),
            str(args.get("searchText") or ""),
            str(args.get("token") or "").strip(),
            database=database,
            layout=_optional_str(args, "layout"),
            mode=_optional_str(args, "matchMode"),
        )
        records = _unwrap(result, name)

        payload = {
            "records": records,
            "total_count": len(records),
        }
        return _text_and_structured(payload)

    raise ValueError(f"Unknown tool: {name}")


async def _run() -> None:
    logger.info(f"{SERVER_NAME} {settings.service_version} running on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(
                notification_options=NotificationOptions(
                    prompts_changed=False,
                    resources_changed=False,
                    tools_changed=False,
                ),
                experimental_capabilities={},
            ),
        )


def main() -> None:
    anyio.run(_run)


if __name__ == "__main__":
    main()
