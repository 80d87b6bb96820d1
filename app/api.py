"""HTTP route definitions for the service."""

from __future__ import annotations

import json
import time
from typing import Any, Dict, Union

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.schemas import (
    EndpointInfo,
    FailureResponse,
    HealthStatus,
    ReadingCreated,
    ReadingList,
    ServiceDescriptor,
    ValidationErrorResponse,
)
from datastore.base import PersistenceError
from services.readings import REQUIRED_WIRE_FIELDS, ReadingService, ValidationError

SERVICE_NAME = "Motor Monitoring API"
SERVICE_VERSION = "1.0.0"

ENDPOINTS = (
    EndpointInfo(method="POST", path="/api/sensor", description="Submit a sensor reading"),
    EndpointInfo(method="GET", path="/api/sensor", description="Fetch the latest 100 readings"),
    EndpointInfo(method="GET", path="/health", description="Check service status"),
)

router = APIRouter()


def get_service(request: Request) -> ReadingService:
    return request.app.state.reading_service


async def read_payload(request: Request) -> Dict[str, Any]:
    """Decode the JSON body, refusing anything that is not an object."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError as exc:
        raise ValidationError(missing=REQUIRED_WIRE_FIELDS) from exc
    if not isinstance(body, dict):
        raise ValidationError(missing=REQUIRED_WIRE_FIELDS)
    return body


def _validation_response(exc: ValidationError) -> JSONResponse:
    error = "Missing required fields" if exc.missing else "Invalid field values"
    body = ValidationErrorResponse(error=error, missing=exc.missing, invalid=exc.invalid)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


def _failure_response(error: str, exc: Exception) -> JSONResponse:
    body = FailureResponse(error=error, details=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump()
    )


@router.post(
    "/api/sensor",
    status_code=status.HTTP_201_CREATED,
    response_model=ReadingCreated,
    summary="Store a sensor reading and report threshold alerts.",
    responses={
        400: {"model": ValidationErrorResponse},
        500: {"model": FailureResponse},
    },
)
async def create_reading(
    request: Request,
    service: ReadingService = Depends(get_service),
) -> Union[ReadingCreated, JSONResponse]:
    try:
        payload = await read_payload(request)
    except ValidationError as exc:
        return _validation_response(exc)

    try:
        result = await run_in_threadpool(service.ingest, payload)
    except ValidationError as exc:
        return _validation_response(exc)
    except PersistenceError as exc:
        return _failure_response("Failed to process reading", exc)
    return ReadingCreated(id=result.id, received_at=result.received_at, alerts=result.alerts)


@router.get(
    "/api/sensor",
    response_model=ReadingList,
    summary="Fetch the most recent readings, newest first.",
    responses={500: {"model": FailureResponse}},
)
def list_readings(
    service: ReadingService = Depends(get_service),
) -> Union[ReadingList, JSONResponse]:
    try:
        results = service.recent()
    except PersistenceError as exc:
        return _failure_response("Failed to query readings", exc)
    return ReadingList(count=len(results), results=results)


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
def healthcheck(
    request: Request,
    service: ReadingService = Depends(get_service),
) -> HealthStatus:
    connected = service.database_connected()
    return HealthStatus(
        status="operational",
        database="connected" if connected else "disconnected",
        uptime=time.monotonic() - request.app.state.started_at,
    )


@router.get(
    "/",
    response_model=ServiceDescriptor,
    summary="Describe the service and its endpoints.",
    status_code=status.HTTP_200_OK,
)
async def root() -> ServiceDescriptor:
    return ServiceDescriptor(
        name=SERVICE_NAME, version=SERVICE_VERSION, endpoints=list(ENDPOINTS)
    )
