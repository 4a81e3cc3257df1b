from __future__ import annotations

from datetime import datetime
from typing import Optional

from portal.core.enums import PaymentStatus
from portal.models.common import StoredModel


class Payment(StoredModel):
    request_id: int
    amount: float
    status: PaymentStatus = PaymentStatus.success
    paid_at: Optional[datetime] = None
    created_at: datetime
