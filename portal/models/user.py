from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from portal.core.enums import Role
from portal.models.common import StoredModel
from portal.models.principal import Principal


class User(StoredModel):
    name: str
    email: str
    role: Role = Role.citizen
    department_id: Optional[int] = None
    password_hash: str = ""
    national_id: Optional[str] = None
    dob: Optional[date] = None
    contact_info: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_principal(self) -> Principal:
        return Principal(
            id=self.id,
            role=self.role,
            department_id=self.department_id,
            name=self.name,
        )
