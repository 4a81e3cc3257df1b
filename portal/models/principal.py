from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from portal.core.enums import Role


class Principal(BaseModel):
    """The authenticated actor of one session. Fixed at login."""

    model_config = ConfigDict(frozen=True)

    id: int
    role: Role
    department_id: Optional[int] = None
    name: str = ""
