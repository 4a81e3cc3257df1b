from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from portal.api.deps import get_lifecycle, get_storage, require_roles
from portal.core.config import Settings, get_settings
from portal.core.enums import Role
from portal.core.errors import PortalError
from portal.models.principal import Principal
from portal.repositories.storage import PortalStorage
from portal.schemas.outcome import ActionResult, page, success
from portal.schemas.service_request import PaymentBody
from portal.services import requests_service
from portal.services.attachments import discard_attachment, store_attachment
from portal.services.catalog_service import service_catalogue
from portal.services.dashboard_service import latest_notifications
from portal.services.lifecycle import RequestLifecycle

citizen_only = require_roles(Role.citizen)

router = APIRouter(prefix="/citizen", tags=["Citizen"], dependencies=[Depends(citizen_only)])


@router.get("", response_model=ActionResult)
async def citizen_dashboard(
    principal: Principal = Depends(citizen_only),
    storage: PortalStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    notifications = await latest_notifications(storage, principal, settings.notifications_limit)
    return page({"user": principal, "notifications": notifications})


# =========================
# Apply for a service
# =========================
@router.get("/apply", response_model=ActionResult)
async def apply_form(storage: PortalStorage = Depends(get_storage)):
    return page({"services": await service_catalogue(storage)})


@router.post("/apply", response_model=ActionResult)
async def apply(
    service_id: int = Form(...),
    description: str = Form(""),
    attachment: Optional[UploadFile] = File(None),
    principal: Principal = Depends(citizen_only),
    lifecycle: RequestLifecycle = Depends(get_lifecycle),
    settings: Settings = Depends(get_settings),
):
    attachment_ref = await store_attachment(attachment, settings)
    try:
        request = await lifecycle.create(principal, service_id, description, attachment_ref)
    except PortalError:
        discard_attachment(attachment_ref, settings)
        raise
    return success(
        "Your request has been submitted.",
        data=request,
        redirect=f"/citizen/requests/{request.id}/pay",
    )


# =========================
# My requests
# =========================
@router.get("/requests", response_model=ActionResult)
async def my_requests(
    principal: Principal = Depends(citizen_only),
    storage: PortalStorage = Depends(get_storage),
):
    return page({"requests": await requests_service.citizen_requests(storage, principal)})


@router.get("/requests/{request_id}", response_model=ActionResult)
async def request_detail(
    request_id: int,
    principal: Principal = Depends(citizen_only),
    lifecycle: RequestLifecycle = Depends(get_lifecycle),
):
    request, _ = await lifecycle.view(request_id, principal)
    row = await requests_service.request_detail(lifecycle.storage, request)
    return page({"request": row})


# =========================
# Payment (simulated)
# =========================
@router.get("/requests/{request_id}/pay", response_model=ActionResult)
async def payment_page(
    request_id: int,
    principal: Principal = Depends(citizen_only),
    lifecycle: RequestLifecycle = Depends(get_lifecycle),
):
    request, service = await lifecycle.payment_quote(request_id, principal)
    row = await requests_service.request_detail(lifecycle.storage, request)
    return page({"request": row, "fee": service.fee})


@router.post("/requests/{request_id}/pay", response_model=ActionResult)
async def pay(
    request_id: int,
    body: Optional[PaymentBody] = None,
    principal: Principal = Depends(citizen_only),
    lifecycle: RequestLifecycle = Depends(get_lifecycle),
):
    amount = body.amount if body else None
    payment = await lifecycle.record_payment(request_id, principal, amount)
    return success(
        "Payment successful!",
        data=payment,
        redirect=f"/citizen/requests/{request_id}",
    )
