"""Unit tests for token acquisition and release."""

import base64

import httpx
import pytest

from conftest import DATABASE_URL, SERVER_URL, fm_body
from src.config.settings import FileMakerConfig
from src.filemaker.session import acquire_token, release_token
from src.models.filemaker import ErrorType, FileMakerAPIError


def _basic(account: str, password: str) -> str:
    return "Basic " + base64.b64encode(f"{account}:{password}".encode()).decode()


class TestAcquireToken:
    """Login against POST /sessions."""

    @pytest.mark.anyio
    async def test_returns_token(self, config, make_client) -> None:
        """A code-0 reply with a token yields success with that token."""
        client, handler = make_client(
            lambda req: httpx.Response(200, json=fm_body({"token": "abc"}))
        )

        result = await acquire_token(config, client=client)

        assert result.success is True
        assert result.data.token == "abc"
        assert result.model_dump()["data"] == {"token": "abc"}
        assert handler.last.method == "POST"
        assert str(handler.last.url) == f"{DATABASE_URL}/sessions"
        assert handler.last.headers["authorization"] == _basic("admin", "secret")

    @pytest.mark.anyio
    async def test_call_arguments_override_config(self, config, make_client) -> None:
        """Explicit arguments win over configured defaults."""
        client, handler = make_client(
            lambda req: httpx.Response(200, json=fm_body({"token": "abc"}))
        )

        await acquire_token(
            config,
            database="Invoices",
            account="reader",
            password="pw",
            server_url="https://other.example.com/",
            client=client,
        )

        assert str(handler.last.url) == (
            "https://other.example.com/fmi/data/v1/databases/Invoices/sessions"
        )
        assert handler.last.headers["authorization"] == _basic("reader", "pw")
        # The config itself is untouched.
        assert config.database == "Contacts"

    @pytest.mark.anyio
    async def test_filemaker_error_code(self, config, make_client) -> None:
        """A non-zero code on HTTP 200 yields FILEMAKER_ERROR."""
        client, _ = make_client(
            lambda req: httpx.Response(
                200,
                json=fm_body(code="212", message="Invalid user account and/or password; please try again"),
            )
        )

        result = await acquire_token(config, client=client)

        assert result.error.type == ErrorType.FILEMAKER_ERROR
        assert result.error.details["code"] == "212"
        assert result.error.message.startswith("Invalid user account")

    @pytest.mark.anyio
    async def test_http_failure_is_invalid_response_with_url(self, config, make_client) -> None:
        """An HTTP failure yields INVALID_RESPONSE naming the attempted URL."""
        client, _ = make_client(lambda req: httpx.Response(401, json=fm_body(code="212")))

        result = await acquire_token(config, client=client)

        assert result.error.type == ErrorType.INVALID_RESPONSE
        assert result.error.details["url"] == f"{DATABASE_URL}/sessions"

    @pytest.mark.anyio
    @pytest.mark.parametrize("response", [{}, {"token": 123}, {"token": None}])
    async def test_malformed_token_is_invalid_response(self, config, make_client, response) -> None:
        """A missing or non-string token yields INVALID_RESPONSE."""
        client, _ = make_client(lambda req: httpx.Response(200, json=fm_body(response)))

        result = await acquire_token(config, client=client)

        assert result.error.type == ErrorType.INVALID_RESPONSE

    @pytest.mark.anyio
    async def test_missing_server_url_is_api_error(self, make_client) -> None:
        """An unconfigured server URL is reported, not raised."""
        client, handler = make_client(lambda req: httpx.Response(200, json=fm_body({"token": "x"})))

        result = await acquire_token(FileMakerConfig(), client=client)

        assert result.error.type == ErrorType.API_ERROR
        assert "FILEMAKER_SERVER_URL" in result.error.message
        assert handler.requests == []

    @pytest.mark.anyio
    async def test_password_never_in_details(self, config, make_client) -> None:
        client, _ = make_client(lambda req: httpx.Response(500))

        result = await acquire_token(config, client=client)

        assert "secret" not in repr(result.error.details)


class TestReleaseToken:
    """Logout against DELETE /sessions/{token}."""

    @pytest.mark.anyio
    async def test_release_success(self, config, make_client) -> None:
        """Code 0 returns a successful result and sends no credentials."""
        client, handler = make_client(lambda req: httpx.Response(200, json={"response": {}, "messages": [{"code": "0", "message": "OK"}]}))

        result = await release_token(config, "abc", client=client)

        assert result.success is True
        assert result.data.token == "abc"
        assert handler.last.method == "DELETE"
        assert str(handler.last.url) == f"{DATABASE_URL}/sessions/abc"
        assert "authorization" not in handler.last.headers

    @pytest.mark.anyio
    async def test_release_strict_success_returns_normally(self, config, make_client) -> None:
        client, _ = make_client(lambda req: httpx.Response(200, json={"messages": [{"code": "0", "message": "OK"}]}))

        result = await release_token(config, "abc", client=client, raise_on_error=True)

        assert result.success is True

    @pytest.mark.anyio
    async def test_release_error_code_is_reported(self, config, make_client) -> None:
        """By default a non-zero code comes back as FILEMAKER_ERROR."""
        client, _ = make_client(
            lambda req: httpx.Response(200, json=fm_body(code="952", message="Invalid FileMaker Data API token (*)"))
        )

        result = await release_token(config, "stale", client=client)

        assert result.error.type == ErrorType.FILEMAKER_ERROR
        assert result.error.details["code"] == "952"

    @pytest.mark.anyio
    async def test_release_error_code_raises_when_strict(self, config, make_client) -> None:
        """With raise_on_error a non-zero code raises."""
        client, _ = make_client(
            lambda req: httpx.Response(200, json=fm_body(code="952", message="Invalid FileMaker Data API token (*)"))
        )

        with pytest.raises(FileMakerAPIError) as exc_info:
            await release_token(config, "stale", client=client, raise_on_error=True)

        assert exc_info.value.code == "952"

    @pytest.mark.anyio
    async def test_release_http_failure_raises_when_strict(self, config, make_client) -> None:
        client, _ = make_client(lambda req: httpx.Response(500))

        with pytest.raises(FileMakerAPIError) as exc_info:
            await release_token(config, "abc", client=client, raise_on_error=True)

        assert exc_info.value.type == ErrorType.INVALID_RESPONSE

    @pytest.mark.anyio
    async def test_release_empty_token_is_api_error(self, config, make_client) -> None:
        client, handler = make_client(lambda req: httpx.Response(200, json=fm_body()))

        result = await release_token(config, "", client=client)

        assert result.error.type == ErrorType.API_ERROR
        assert handler.requests == []


def test_server_url_trailing_slash_is_trimmed() -> None:
    cfg = FileMakerConfig(server_url=f"{SERVER_URL}/", database="Contacts")

    assert cfg.database_url == DATABASE_URL


@pytest.mark.anyio
async def test_release_token_is_one_path_segment(config, make_client) -> None:
    client, handler = make_client(lambda req: httpx.Response(200, json=fm_body()))

    await release_token(config, "ab/c#d", client=client)

    assert handler.last.url.raw_path == b"/fmi/data/v1/databases/Contacts/sessions/ab%2Fc%23d"


@pytest.mark.anyio
async def test_login_uses_basic_auth_over_encoded_database(config, make_client) -> None:
    client, handler = make_client(lambda req: httpx.Response(200, json=fm_body({"token": "t"})))

    result = await acquire_token(config, database="Sales 2024", client=client)

    assert result.success is True
    assert handler.last.url.raw_path == b"/fmi/data/v1/databases/Sales%202024/sessions"
    assert handler.last.headers["authorization"] == _basic("admin", "secret")
