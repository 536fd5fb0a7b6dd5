"""Unified API response format."""

from typing import Any
from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from utils.timezone import now_utc


class APIError(BaseModel):
    """Error details in API response."""

    code: str = Field(..., description="Machine-readable error code")
    status_code: int = Field(..., description="HTTP status code")


class APIMeta(BaseModel):
    """Metadata included in every API response."""

    timestamp: datetime = Field(..., description="Response timestamp (UTC)")
    request_id: str = Field(..., description="Unique request identifier for tracing")


class APIResponse(BaseModel):
    """
    Success envelope for all API endpoints.

    `length` is set for list results.
    """

    status: bool = True
    message: str | None = None
    data: Any | None = None
    length: int | None = None
    meta: APIMeta


class APIErrorResponse(BaseModel):
    """
    Error envelope.

    `status` is "fail" for client errors and "error" for server errors.
    `stack` carries the formatted traceback.
    """

    status: str
    error: APIError
    message: str
    stack: str | None = None
    meta: APIMeta


def _meta(request_id: str | None = None) -> APIMeta:
    return APIMeta(timestamp=now_utc(), request_id=request_id or str(uuid4()))


def success_response(
    data: Any = None,
    message: str | None = None,
    length: int | None = None,
    request_id: str | None = None,
) -> APIResponse:
    """Create a success response."""
    return APIResponse(
        status=True,
        message=message,
        data=data,
        length=length,
        meta=_meta(request_id),
    )


def error_response(
    code: str,
    message: str,
    status_code: int,
    stack: str | None = None,
    request_id: str | None = None,
) -> APIErrorResponse:
    """Create an error response."""
    return APIErrorResponse(
        status="fail" if status_code < 500 else "error",
        error=APIError(code=code, status_code=status_code),
        message=message,
        stack=stack,
        meta=_meta(request_id),
    )


class ErrorCodes:
    """Standard error codes for errors not raised as AppError subclasses."""

    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"
