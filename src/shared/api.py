"""Shared HTTP plumbing: camelCase schemas and error mapping.

Every failure leaves as ``{"error": ..., "kind": ...}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.exceptions import InternalError, MarketplaceError

logger = structlog.get_logger(__name__)


class ApiSchema(BaseModel):
    """Request/response bodies use camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OkResponse(ApiSchema):
    ok: bool = True


def error_response(status_code: int, message: str, kind: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "kind": kind})


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())[1:])
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MarketplaceError)
    async def handle_marketplace_error(request: Request, exc: MarketplaceError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            "Request failed",
            method=request.method,
            path=request.url.path,
            kind=exc.kind,
            status_code=exc.status_code,
            error=exc.message,
        )
        return error_response(exc.status_code, exc.message, exc.kind)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return error_response(400, _describe_validation_errors(exc), "validation_error")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), "http_error")

    @app.exception_handler(PyMongoError)
    async def handle_store_error(request: Request, exc: PyMongoError):
        logger.error(
            "Document store failure",
            method=request.method,
            path=request.url.path,
            error=str(exc),
        )
        internal = InternalError()
        return error_response(internal.status_code, internal.message, internal.kind)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error", method=request.method, path=request.url.path)
        internal = InternalError()
        return error_response(internal.status_code, internal.message, internal.kind)
