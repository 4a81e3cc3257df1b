from typing import Optional

from fastapi import APIRouter, Depends

from portal.api.admin.gate import ADMIN_GATE
from portal.api.deps import get_storage
from portal.repositories.storage import PortalStorage
from portal.schemas.outcome import ActionResult, page, success
from portal.schemas.service_request import AdminRequestCreate, AdminRequestUpdate
from portal.services import requests_service

router = APIRouter(prefix="/admin/requests", tags=["Admin Requests"], dependencies=ADMIN_GATE)


@router.get("", response_model=ActionResult)
async def list_requests(search: Optional[str] = None, storage: PortalStorage = Depends(get_storage)):
    requests = await requests_service.search_requests(storage, search)
    return page({"requests": requests, "search": search or ""})


@router.post("", response_model=ActionResult)
async def create_request(body: AdminRequestCreate, storage: PortalStorage = Depends(get_storage)):
    request = await requests_service.admin_create_request(storage, body)
    return success("Request created.", data=request, redirect="/admin/requests")


@router.get("/{request_id}", response_model=ActionResult)
async def get_request(request_id: int, storage: PortalStorage = Depends(get_storage)):
    return page({"request": await requests_service.admin_get_request(storage, request_id)})


@router.put("/{request_id}", response_model=ActionResult)
async def update_request(
    request_id: int, body: AdminRequestUpdate, storage: PortalStorage = Depends(get_storage)
):
    request = await requests_service.admin_update_request(storage, request_id, body)
    return success("Request updated.", data=request, redirect="/admin/requests")


@router.delete("/{request_id}", response_model=ActionResult)
async def delete_request(request_id: int, storage: PortalStorage = Depends(get_storage)):
    await requests_service.admin_delete_request(storage, request_id)
    return success("Request deleted.", redirect="/admin/requests")
