from __future__ import annotations

from datetime import datetime
from typing import Optional

from portal.core.enums import RequestStatus
from portal.models.common import StoredModel


class ServiceRequest(StoredModel):
    citizen_id: int
    service_id: int
    status: RequestStatus = RequestStatus.submitted
    description: str = ""
    attachment: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
