from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from portal.core.enums import Role


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Role = Role.citizen
    department_id: Optional[int] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    department_id: Optional[int] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    department_id: Optional[int] = None
    national_id: Optional[str] = None
    dob: Optional[date] = None
    contact_info: Optional[str] = None
    created_at: Optional[datetime] = None
