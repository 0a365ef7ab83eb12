"""Unified API response wrapper.

All API endpoints return this format:
{
    "code": 0,           // 0=success, non-0=error code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "...",
    "navigateTo": "...", // optional: client redirects here on success
    "exception": {...},  // optional, DEBUG only: exception chain
    "stacktrace": "..."  // optional, DEBUG only
}
"""

import traceback
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, SerializerFunctionWrapHandler, model_serializer

_OPTIONAL_KEYS = ("navigateTo", "navigate_to", "exception", "stacktrace")


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")
    navigate_to: str | None = Field(default=None, serialization_alias="navigateTo")
    exception: dict[str, Any] | None = None
    stacktrace: str | None = None

    @model_serializer(mode="wrap")
    def _drop_unset_hints(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # optional client hints are omitted, never sent as null
        payload = handler(self)
        for key in _OPTIONAL_KEYS:
            if key in payload and payload[key] is None:
                del payload[key]
        return payload

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data)


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None)


def exception_payload(exc: BaseException) -> dict[str, Any]:
    """Render an exception and its ``__cause__`` chain as nested dicts.

    Shape: {"exceptionClass", "message", "previous"?}; the browser client
    prints each ``previous`` level as a "Caused by:" line.
    """
    payload: dict[str, Any] = {
        "exceptionClass": type(exc).__name__,
        "message": getattr(exc, "message", None) or str(exc),
    }
    if exc.__cause__ is not None:
        payload["previous"] = exception_payload(exc.__cause__)
    return payload


def format_stacktrace(exc: BaseException) -> str:
    text = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return text.replace("\r\n", "\n")


def debug_error_response(code: int, message: str, exc: BaseException) -> ApiResponse:
    resp = error_response(code, message)
    resp.exception = exception_payload(exc)
    resp.stacktrace = format_stacktrace(exc)
    return resp
