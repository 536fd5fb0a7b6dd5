"""API modules for HTTP interface."""

from api.base import (
    APIError,
    APIMeta,
    APIResponse,
    APIErrorResponse,
    success_response,
    error_response,
    ErrorCodes,
)
