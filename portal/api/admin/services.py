from typing import Optional

from fastapi import APIRouter, Depends

from portal.api.admin.gate import ADMIN_GATE
from portal.api.deps import get_storage
from portal.repositories.storage import PortalStorage
from portal.schemas.catalog import ServiceCreate, ServiceUpdate
from portal.schemas.outcome import ActionResult, page, success
from portal.services import catalog_service

router = APIRouter(prefix="/admin/services", tags=["Admin Services"], dependencies=ADMIN_GATE)


@router.get("", response_model=ActionResult)
async def list_services(search: Optional[str] = None, storage: PortalStorage = Depends(get_storage)):
    services = await catalog_service.list_services(storage, search)
    return page({"services": services, "search": search or ""})


@router.post("", response_model=ActionResult)
async def create_service(body: ServiceCreate, storage: PortalStorage = Depends(get_storage)):
    service = await catalog_service.create_service(storage, body)
    return success(f"Service created ({service.name})", data=service, redirect="/admin/services")


@router.get("/{service_id}", response_model=ActionResult)
async def get_service(service_id: int, storage: PortalStorage = Depends(get_storage)):
    return page({"service": await catalog_service.get_service(storage, service_id)})


@router.put("/{service_id}", response_model=ActionResult)
async def update_service(
    service_id: int, body: ServiceUpdate, storage: PortalStorage = Depends(get_storage)
):
    service = await catalog_service.update_service(storage, service_id, body)
    return success("Service updated.", data=service, redirect="/admin/services")


@router.delete("/{service_id}", response_model=ActionResult)
async def delete_service(service_id: int, storage: PortalStorage = Depends(get_storage)):
    await catalog_service.delete_service(storage, service_id)
    return success("Service deleted.", redirect="/admin/services")
