"""Pydantic models for the FileMaker Data API.

Two groups live here:
- wire shapes (find query, response envelope, per-operation payloads)
- the result envelope every client operation returns
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


T = TypeVar("T")


# --- Request shapes ---


class SortRule(BaseModel):
    fieldName: str
    sortOrder: Literal["ascend", "descend"] = "ascend"


class FindQuery(BaseModel):
    """Body of ``POST /layouts/{layout}/_find``."""

    query: list[dict[str, str]] = Field(..., min_length=1)
    sort: Optional[list[SortRule]] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    portal: Optional[list[str]] = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# --- Response shapes ---


class FileMakerMessage(BaseModel):
    code: str
    message: str = ""

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_str(cls, value: Any) -> Any:
        # Some server versions send the code as a number.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class FileMakerEnvelope(BaseModel):
    """``{response: {...}, messages: [{code, message}]}``"""

    model_config = ConfigDict(extra="ignore")

    response: dict[str, Any] = Field(default_factory=dict)
    messages: list[FileMakerMessage] = Field(..., min_length=1)

    @field_validator("response", mode="before")
    @classmethod
    def _null_response(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def status(self) -> FileMakerMessage:
        return self.messages[0]


class TokenData(BaseModel):
    token: str = Field(..., strict=True)


class SessionRelease(BaseModel):
    token: str
    released: bool = True


class FindPayload(BaseModel):
    data: list[dict[str, Any]]


class LayoutMetadata(BaseModel):
    """``response`` of ``GET /layouts/{layout}`` as returned by the server."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    field_meta_data: list[dict[str, Any]] = Field(alias="fieldMetaData")
    portal_meta_data: dict[str, Any] = Field(default_factory=dict, alias="portalMetaData")
    value_lists: list[dict[str, Any]] = Field(default_factory=list, alias="valueLists")


class FieldDescriptor(BaseModel):
    """Reduced view of one ``fieldMetaData`` entry."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    type: Optional[str] = None
    display_type: Optional[str] = Field(default=None, alias="displayType")
    result: Optional[str] = None
    value_list: Optional[str] = Field(default=None, alias="valueList")
    global_: Optional[bool] = Field(default=None, alias="global")


# --- Result envelope ---


class ErrorType(str, Enum):
    INVALID_RESPONSE = "INVALID_RESPONSE"
    FILEMAKER_ERROR = "FILEMAKER_ERROR"
    API_ERROR = "API_ERROR"


class ResultError(BaseModel):
    type: ErrorType
    message: str = Field(..., min_length=1)
    details: dict[str, Any] = Field(default_factory=dict)


class FileMakerAPIError(Exception):
    """Raised when a failed result is unwrapped."""

    def __init__(self, error: ResultError):
        super().__init__(error.message)
        self.error = error

    @property
    def type(self) -> ErrorType:
        return self.error.type

    @property
    def code(self) -> Optional[str]:
        return self.error.details.get("code")


class FileMakerResult(BaseModel, Generic[T]):
    """Outcome of a FileMaker operation: a payload or a classified error."""

    success: bool
    data: Optional[T] = None
    error: Optional[ResultError] = None

    @model_validator(mode="after")
    def _check_variant(self) -> "FileMakerResult[T]":
        if self.success:
            if self.data is None:
                raise ValueError("successful result requires data")
            if self.error is not None:
                raise ValueError("successful result cannot carry an error")
        elif self.error is None:
            raise ValueError("failed result requires an error")
        return self

    @classmethod
    def ok(cls, data: T) -> "FileMakerResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        type: ErrorType,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> "FileMakerResult[T]":
        return cls(
            success=False,
            error=ResultError(type=type, message=message, details=details or {}),
        )

    def unwrap(self) -> T:
        if not self.success:
            raise FileMakerAPIError(self.error)  # type: ignore[arg-type]
        return self.data  # type: ignore[return-value]
