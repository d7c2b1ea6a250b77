"""Exception handlers that turn storefront errors into JSON responses.

Every error body has the shape ``{"error": "<message>"}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.errors import PersistenceError, StorefrontError

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong"


def _request_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        body = {"error": exc.message}
        if isinstance(exc, PersistenceError):
            logger.error("Persistence failure", path=request.url.path, error=exc.message)
            body["retryable"] = exc.retryable
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _request_validation_message(exc)})

    # Protean ValidationError → 400, ObjectNotFoundError → 404, ...
    register_exception_handlers(app)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path, method=request.method)
        return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})
