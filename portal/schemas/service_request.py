from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from portal.core.enums import RequestStatus


class StatusChangeBody(BaseModel):
    # left untyped: whatever arrives is judged by the lifecycle (InvalidStatus)
    status: Any = None


class PaymentBody(BaseModel):
    amount: Optional[float] = None


class AdminRequestCreate(BaseModel):
    citizen_id: int
    service_id: int
    status: RequestStatus = RequestStatus.submitted
    description: str = ""


class AdminRequestUpdate(BaseModel):
    citizen_id: Optional[int] = None
    service_id: Optional[int] = None
    status: Optional[RequestStatus] = None
    description: Optional[str] = None


class RequestRow(BaseModel):
    """A request joined with the names the listing pages show."""

    id: int
    citizen_id: int
    service_id: int
    status: RequestStatus
    description: str = ""
    attachment: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    service_name: Optional[str] = None
    department_name: Optional[str] = None
    citizen_name: Optional[str] = None
    citizen_email: Optional[str] = None
    fee: Optional[float] = None
