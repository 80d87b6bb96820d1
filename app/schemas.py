"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Range of the 64-bit timestamp column.
BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1


class CamelModel(BaseModel):
    """Base model exposing camelCase names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReadingPayload(CamelModel):
    """Inbound reading submitted by a device. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    device_id: str = Field(..., min_length=1)
    vibration: float = Field(..., description="Vibration magnitude in g.")
    temperature: float = Field(..., description="Temperature in °C.")
    humidity: Optional[float] = None
    acc_x: Optional[float] = None
    acc_y: Optional[float] = None
    acc_z: Optional[float] = None
    timestamp: Optional[int] = Field(
        default=None,
        ge=BIGINT_MIN,
        le=BIGINT_MAX,
        description="Capture time on the device clock, epoch milliseconds.",
    )


class ReadingCreated(CamelModel):
    """Acknowledgment returned after a reading is stored."""

    success: bool = True
    id: int
    received_at: datetime
    alerts: List[str] = Field(default_factory=list)


class ReadingOut(CamelModel):
    """Stored reading as exposed by the retrieval endpoint, without its id."""

    device_id: str
    vibration: float
    temperature: float
    humidity: Optional[float] = None
    acc_x: Optional[float] = None
    acc_y: Optional[float] = None
    acc_z: Optional[float] = None
    timestamp: Optional[int] = None
    received_at: datetime


class ReadingList(BaseModel):
    count: int = Field(..., ge=0)
    results: List[ReadingOut] = Field(default_factory=list)


class HealthStatus(BaseModel):
    status: str
    database: str
    uptime: float = Field(..., description="Seconds since the application started.")


class EndpointInfo(BaseModel):
    method: str
    path: str
    description: str


class ServiceDescriptor(BaseModel):
    name: str
    version: str
    endpoints: List[EndpointInfo]


class ValidationErrorResponse(BaseModel):
    error: str
    missing: List[str] = Field(default_factory=list)
    invalid: List[str] = Field(default_factory=list)


class FailureResponse(BaseModel):
    error: str
    details: str


class RoutingErrorResponse(CamelModel):
    error: str
    path: str
    method: str
    suggested_endpoints: List[str]


class InternalErrorResponse(BaseModel):
    error: str
    message: str
    stack: Optional[str] = None
