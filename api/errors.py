"""Global exception handlers for FastAPI.

Every error leaves through here as an APIErrorResponse.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from api.base import ErrorCodes, error_response
from core.exceptions import AppError

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "Something went wrong. Please try again later."


def _stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def register_error_handlers(app: FastAPI, environment: str = "development") -> None:
    """Register global exception handlers on the app.

    In production, 5xx messages are replaced with a generic one. The
    stack trace is included in every environment.
    """
    production = environment == "production"

    def respond(request: Request, exc: BaseException, status_code: int, code: str, message: str) -> JSONResponse:
        if production and status_code >= 500:
            message = GENERIC_SERVER_MESSAGE
        body = error_response(
            code,
            message,
            status_code,
            stack=_stack(exc),
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return respond(request, exc, exc.status_code, exc.code, exc.message)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        if "not found" in message.lower():
            return respond(request, exc, 404, ErrorCodes.NOT_FOUND, message)
        return respond(request, exc, 400, ErrorCodes.INVALID_REQUEST, message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        messages = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
        return respond(request, exc, 422, ErrorCodes.VALIDATION_ERROR, "; ".join(messages))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            message = f"Can't find {request.url.path} on this server!"
            return respond(request, exc, 404, ErrorCodes.NOT_FOUND, message)
        return respond(request, exc, exc.status_code, ErrorCodes.INVALID_REQUEST, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return respond(request, exc, 500, ErrorCodes.INTERNAL_ERROR, str(exc) or GENERIC_SERVER_MESSAGE)
