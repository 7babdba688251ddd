"""
Error taxonomy and FastAPI exception handlers.

Services raise these inside a unit of work so the transaction rolls back,
then turn them into result values at their boundary. HTTP errors raised by
routes and auth dependencies are rendered as {"success": false, "error": ...}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class JobFairError(Exception):
    """Base class for expected, user-facing failures."""
    status_code = 500
    error_code = "failure"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(JobFairError):
    status_code = 401
    error_code = "authentication"


class AuthorizationError(JobFairError):
    status_code = 403
    error_code = "authorization"


class NotFoundError(JobFairError):
    status_code = 404
    error_code = "not_found"


class ConflictError(JobFairError):
    status_code = 409
    error_code = "conflict"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"[HTTPException] {exc.detail} | Path={request.url.path}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"[ValidationError] Path={request.url.path} | {exc.errors()}")
        return JSONResponse(
            status_code=422,
            content={"success": False, "error": "Invalid request parameters", "details": jsonable_errors(exc)},
        )

    @app.exception_handler(JobFairError)
    async def jobfair_exception_handler(request: Request, exc: JobFairError):
        logger.warning(f"[{exc.__class__.__name__}] {exc.message} | Path={request.url.path}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message, "error_code": exc.error_code},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[UnhandledError] Path={request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry raw exception objects that JSONResponse cannot encode
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
