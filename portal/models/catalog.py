from __future__ import annotations

from typing import Optional

from portal.models.common import StoredModel


class Department(StoredModel):
    name: str
    description: Optional[str] = None


class Service(StoredModel):
    name: str
    description: Optional[str] = None
    department_id: int
    fee: float = 0.0

    @property
    def requires_payment(self) -> bool:
        return bool(self.fee) and self.fee > 0
