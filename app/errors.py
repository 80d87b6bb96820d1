"""Outermost error boundary: unknown routes and unhandled faults."""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas import InternalErrorResponse, RoutingErrorResponse
from settings import get_settings

logger = logging.getLogger(__name__)

SUGGESTED_ENDPOINTS = ["/api/sensor (GET/POST)", "/health"]

# Unknown paths and unsupported methods on known paths are both routing misses.
_ROUTING_STATUSES = {status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED}


async def routing_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code not in _ROUTING_STATUSES:
        return await http_exception_handler(request, exc)
    logger.info(
        "No route for request",
        extra={"path": request.url.path, "method": request.method},
    )
    body = RoutingErrorResponse(
        error="Endpoint not found",
        path=request.url.path,
        method=request.method,
        suggested_endpoints=SUGGESTED_ENDPOINTS,
    )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content=body.model_dump(by_alias=True)
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error while processing request",
        extra={"path": request.url.path, "method": request.method},
    )
    stack = None
    if not get_settings().is_production:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    body = InternalErrorResponse(
        error="Internal server error", message=str(exc), stack=stack
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(exclude_none=True),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, routing_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
