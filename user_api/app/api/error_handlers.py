"""
Exception handlers translating service errors into ``ErrorResponse`` bodies.

Every domain error carries its own status code and error code, so one
handler covers all of them.  Request bodies that cannot be decoded or do
not match the schema are answered with ``400 INVALID_REQUEST``; invalid
path or query parameters keep FastAPI's default 422 answer.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from user_api.app.core.errors import UnexpectedError, UserServiceError
from user_api.app.schemas.user import ErrorResponse


logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, code: str) -> JSONResponse:
    body = ErrorResponse(message=message, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_error_handlers(app: FastAPI) -> None:
    """Register the global exception handlers on ``app``."""

    @app.exception_handler(UserServiceError)
    async def user_service_error_handler(request: Request, exc: UserServiceError) -> JSONResponse:
        if isinstance(exc, UnexpectedError):
            # The message may carry storage details; keep them in the log only.
            logger.error(
                "Unexpected error on %s %s: %s",
                request.method,
                request.url.path,
                exc.message,
                exc_info=exc,
            )
            return _error_response(exc.status_code, exc.default_message, exc.code)
        return _error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        if any(error.get("loc", ("",))[0] == "body" for error in exc.errors()):
            return _error_response(
                status.HTTP_400_BAD_REQUEST, "Invalid request body", "INVALID_REQUEST"
            )
        return await request_validation_exception_handler(request, exc)
