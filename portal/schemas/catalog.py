from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ---------- Department ----------

class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=2)
    description: Optional[str] = None


class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None


# ---------- Service ----------

class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=2)
    description: Optional[str] = None
    department_id: int
    fee: float = Field(default=0.0, ge=0)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    department_id: Optional[int] = None
    fee: Optional[float] = Field(default=None, ge=0)


class ServiceOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    department_id: int
    department_name: Optional[str] = None
    fee: float = 0.0
