"""Shared pytest fixtures for filemaker-mcp-server tests."""

import json
import os
from typing import Any, Callable

import httpx
import pytest

# Host FileMaker settings must not leak into tests.
for k in (
    "FILEMAKER_SERVER_URL",
    "FILEMAKER_DATABASE",
    "FILEMAKER_LAYOUT",
    "FILEMAKER_ACCOUNT",
    "FILEMAKER_PASSWORD",
    "FILEMAKER_FIND_MODE",
    "FILEMAKER_REQUEST_TIMEOUT",
):
    os.environ.pop(k, None)

from src.config.settings import FileMakerConfig

SERVER_URL = "https://fms.example.com"
DATABASE_URL = f"{SERVER_URL}/fmi/data/v1/databases/Contacts"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def config() -> FileMakerConfig:
    return FileMakerConfig(
        server_url=SERVER_URL,
        database="Contacts",
        layout="Customers",
        account="admin",
        password="secret",
    )


def fm_body(response: Any = None, code: str = "0", message: str = "OK") -> dict:
    """Build a Data API reply body."""
    return {"response": response or {}, "messages": [{"code": code, "message": message}]}


class RecordingHandler:
    """MockTransport handler that records requests and replies from a callable."""

    def __init__(self, reply: Callable[[httpx.Request], httpx.Response]):
        self.reply = reply
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.reply(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
async def make_client(anyio_backend):
    """Create an AsyncClient backed by httpx.MockTransport.

    Usage: ``client, handler = make_client(lambda req: httpx.Response(200, json=...))``
    """
    clients: list[httpx.AsyncClient] = []

    def _make(reply: Callable[[httpx.Request], httpx.Response]):
        handler = RecordingHandler(reply)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client, handler

    yield _make

    for client in clients:
        await client.aclose()
