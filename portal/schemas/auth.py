from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr

from portal.schemas.user import UserOut


class RegisterRequest(BaseModel):
    name: str = ""
    email: EmailStr
    password: str = ""
    confirm_password: str = ""
    national_id: Optional[str] = None
    dob: Optional[date] = None
    contact_info: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginData(BaseModel):
    user: UserOut
    token: str
    home: str
