"""
Result normalization shared by every FileMaker operation.

Classification, in order:
1. no response                         -> INVALID_RESPONSE
2. body is not a {response, messages} envelope -> INVALID_RESPONSE
3. messages[0].code != "0"             -> FILEMAKER_ERROR
4. payload missing from response       -> INVALID_RESPONSE
5. any exception raised on the way     -> API_ERROR
"""
from typing import Any, Awaitable, Callable, Optional, TypeVar

from pydantic import ValidationError

from src.models.filemaker import ErrorType, FileMakerEnvelope, FileMakerResult
from src.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

INVALID_RESPONSE_MESSAGE = "Invalid response from FileMaker server"


async def run_request(
    send: Callable[[], Awaitable[Optional[Any]]],
    extract: Callable[[FileMakerEnvelope], T],
    *,
    operation: str,
    details: Optional[dict[str, Any]] = None,
) -> FileMakerResult[T]:
    """
    Run one FileMaker request and classify its outcome.

    Args:
        send: Coroutine factory performing the request; returns the decoded
            body or None
        extract: Builds the success payload from the decoded envelope;
            raising ValidationError / KeyError / TypeError marks the reply
            as malformed
        operation: Short name used in log lines
        details: Diagnostic context attached to failures (never secrets)

    Returns:
        FileMakerResult carrying the payload or a classified error
    """
    details = dict(details or {})

    try:
        body = await send()
        if body is None:
            logger.warning(f"{operation}: no response from FileMaker server")
            return FileMakerResult.fail(ErrorType.INVALID_RESPONSE, INVALID_RESPONSE_MESSAGE, details)

        try:
            envelope = FileMakerEnvelope.model_validate(body)
        except ValidationError as e:
            logger.warning(f"{operation}: malformed response envelope: {e.error_count()} error(s)")
            return FileMakerResult.fail(ErrorType.INVALID_RESPONSE, INVALID_RESPONSE_MESSAGE, details)

        status = envelope.status
        if status.code != "0":
            logger.warning(f"{operation}: FileMaker error {status.code}: {status.message}")
            return FileMakerResult.fail(
                ErrorType.FILEMAKER_ERROR,
                status.message or f"FileMaker error {status.code}",
                {**details, "code": status.code},
            )

        try:
            payload = extract(envelope)
        except (ValidationError, KeyError, TypeError) as e:
            logger.warning(f"{operation}: unexpected response payload: {e}")
            return FileMakerResult.fail(ErrorType.INVALID_RESPONSE, INVALID_RESPONSE_MESSAGE, details)

        return FileMakerResult.ok(payload)

    except Exception as e:
        logger.error(f"{operation} failed: {e!r}")
        return FileMakerResult.fail(
            ErrorType.API_ERROR,
            str(e) or type(e).__name__,
            {**details, "original_error": repr(e)},
        )
