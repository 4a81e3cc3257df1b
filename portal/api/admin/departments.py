from typing import Optional

from fastapi import APIRouter, Depends

from portal.api.admin.gate import ADMIN_GATE
from portal.api.deps import get_storage
from portal.repositories.storage import PortalStorage
from portal.schemas.catalog import DepartmentCreate, DepartmentUpdate
from portal.schemas.outcome import ActionResult, page, success
from portal.services import catalog_service

router = APIRouter(prefix="/admin/departments", tags=["Admin Departments"], dependencies=ADMIN_GATE)


@router.get("", response_model=ActionResult)
async def list_departments(search: Optional[str] = None, storage: PortalStorage = Depends(get_storage)):
    departments = await catalog_service.list_departments(storage, search)
    return page({"departments": departments, "search": search or ""})


@router.post("", response_model=ActionResult)
async def create_department(body: DepartmentCreate, storage: PortalStorage = Depends(get_storage)):
    department = await catalog_service.create_department(storage, body)
    return success(
        f"Department created ({department.name})",
        data=department,
        redirect="/admin/departments",
    )


@router.get("/{department_id}", response_model=ActionResult)
async def get_department(department_id: int, storage: PortalStorage = Depends(get_storage)):
    return page({"department": await catalog_service.get_department(storage, department_id)})


@router.put("/{department_id}", response_model=ActionResult)
async def update_department(
    department_id: int, body: DepartmentUpdate, storage: PortalStorage = Depends(get_storage)
):
    department = await catalog_service.update_department(storage, department_id, body)
    return success("Department updated.", data=department, redirect="/admin/departments")


@router.delete("/{department_id}", response_model=ActionResult)
async def delete_department(department_id: int, storage: PortalStorage = Depends(get_storage)):
    await catalog_service.delete_department(storage, department_id)
    return success("Department deleted.", redirect="/admin/departments")
