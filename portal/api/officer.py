from fastapi import APIRouter, Depends

from portal.api.deps import get_lifecycle, get_storage, require_roles
from portal.core.enums import STAFF_ROLES
from portal.models.principal import Principal
from portal.repositories.storage import PortalStorage
from portal.schemas.outcome import ActionResult, page, success
from portal.schemas.service_request import StatusChangeBody
from portal.services import requests_service
from portal.services.dashboard_service import officer_stats
from portal.services.lifecycle import RequestLifecycle

staff_only = require_roles(*STAFF_ROLES)

router = APIRouter(
    prefix="/dashboard/officer",
    tags=["Officer"],
    dependencies=[Depends(staff_only)],
)


@router.get("", response_model=ActionResult)
async def officer_dashboard(
    principal: Principal = Depends(staff_only),
    storage: PortalStorage = Depends(get_storage),
):
    stats = await officer_stats(storage, principal)
    return page({"user": principal, **stats})


@router.get("/requests", response_model=ActionResult)
async def department_requests(
    principal: Principal = Depends(staff_only),
    storage: PortalStorage = Depends(get_storage),
):
    return page({"requests": await requests_service.department_requests(storage, principal)})


@router.get("/requests/{request_id}", response_model=ActionResult)
async def request_detail(
    request_id: int,
    principal: Principal = Depends(staff_only),
    lifecycle: RequestLifecycle = Depends(get_lifecycle),
):
    request, _ = await lifecycle.view(request_id, principal)
    row = await requests_service.request_detail(lifecycle.storage, request, with_citizen=True)
    return page({"request": row})


@router.post("/requests/{request_id}/status", response_model=ActionResult)
async def change_status(
    request_id: int,
    body: StatusChangeBody,
    principal: Principal = Depends(staff_only),
    lifecycle: RequestLifecycle = Depends(get_lifecycle),
):
    updated = await lifecycle.transition(request_id, principal, body.status)
    return success(
        "Request status updated.",
        data=updated,
        redirect=f"/dashboard/officer/requests/{request_id}",
    )
