"""
Read models for the request listing pages, plus admin maintenance.

Maintenance edits go straight to storage and notify nobody; status changes
that citizens should hear about go through the lifecycle instead.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from portal.core.enums import RequestStatus, Role
from portal.core.errors import NotFound
from portal.models.principal import Principal
from portal.models.service_requests import ServiceRequest
from portal.repositories.storage import PortalStorage
from portal.schemas.service_request import AdminRequestCreate, AdminRequestUpdate, RequestRow

logger = logging.getLogger(__name__)


async def _rows(
    storage: PortalStorage, docs: List[Dict[str, Any]], with_citizen: bool = False
) -> List[RequestRow]:
    services = await storage.services.get_many([d["service_id"] for d in docs])
    departments = await storage.departments.get_many(
        [s["department_id"] for s in services.values()]
    )
    citizens = await storage.users.get_many([d["citizen_id"] for d in docs]) if with_citizen else {}

    rows = []
    for d in docs:
        service = services.get(d["service_id"]) or {}
        dept = departments.get(service.get("department_id")) or {}
        citizen = citizens.get(d["citizen_id"]) or {}
        rows.append(
            RequestRow(
                id=d["_id"],
                citizen_id=d["citizen_id"],
                service_id=d["service_id"],
                status=d["status"],
                description=d.get("description") or "",
                attachment=d.get("attachment"),
                created_at=d["created_at"],
                updated_at=d.get("updated_at"),
                service_name=service.get("name"),
                department_name=dept.get("name"),
                citizen_name=citizen.get("name") if with_citizen else None,
                citizen_email=citizen.get("email") if with_citizen else None,
                fee=service.get("fee"),
            )
        )
    return rows


async def department_service_ids(storage: PortalStorage, principal: Principal) -> Optional[List[int]]:
    """Service ids inside the principal's department; `None` for admins (no limit)."""
    if principal.role == Role.admin:
        return None
    if principal.department_id is None:
        return []
    return await storage.services.ids_for_department(principal.department_id)


async def citizen_requests(storage: PortalStorage, principal: Principal) -> List[RequestRow]:
    return await _rows(storage, await storage.requests.list_for_citizen(principal.id))


async def department_requests(storage: PortalStorage, principal: Principal) -> List[RequestRow]:
    service_ids = await department_service_ids(storage, principal)
    docs = await storage.requests.list_for_services(service_ids)
    return await _rows(storage, docs, with_citizen=True)


async def request_detail(
    storage: PortalStorage, request: ServiceRequest, with_citizen: bool = False
) -> RequestRow:
    doc = request.model_dump()
    doc["_id"] = doc.pop("id")
    rows = await _rows(storage, [doc], with_citizen=with_citizen)
    return rows[0]


# ------------------------------------------------------------------
# Admin maintenance
# ------------------------------------------------------------------
async def search_requests(storage: PortalStorage, q: Optional[str] = None) -> List[RequestRow]:
    filters: Dict[str, Any] = {}
    if q:
        citizen_ids = await storage.users.ids_matching_name(q)
        service_ids = [s["_id"] for s in await storage.services.search(q)]
        filters["$or"] = [
            {"citizen_id": {"$in": citizen_ids}},
            {"service_id": {"$in": service_ids}},
            {"status": {"$regex": re.escape(q), "$options": "i"}},
        ]
    docs = await storage.requests.list_all(filters)
    return await _rows(storage, docs, with_citizen=True)


async def admin_get_request(storage: PortalStorage, request_id: int) -> RequestRow:
    doc = await storage.requests.get(request_id)
    if not doc:
        raise NotFound("Request not found.")
    return (await _rows(storage, [doc], with_citizen=True))[0]


async def admin_create_request(storage: PortalStorage, body: AdminRequestCreate) -> ServiceRequest:
    await _check_refs(storage, body.citizen_id, body.service_id)
    doc = await storage.requests.insert(
        {
            "citizen_id": body.citizen_id,
            "service_id": body.service_id,
            "status": RequestStatus(body.status).value,
            "description": body.description,
            "attachment": None,
        }
    )
    logger.info("Request %s created by admin maintenance", doc["_id"])
    return ServiceRequest.from_doc(doc)


async def admin_update_request(
    storage: PortalStorage, request_id: int, body: AdminRequestUpdate
) -> ServiceRequest:
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    await _check_refs(storage, fields.get("citizen_id"), fields.get("service_id"))
    if "status" in fields:
        fields["status"] = RequestStatus(fields["status"]).value
    doc = (
        await storage.requests.update(request_id, fields)
        if fields
        else await storage.requests.get(request_id)
    )
    if not doc:
        raise NotFound("Request not found.")
    return ServiceRequest.from_doc(doc)


async def admin_delete_request(storage: PortalStorage, request_id: int) -> None:
    if not await storage.requests.delete(request_id):
        raise NotFound("Request not found.")
    logger.info("Request %s deleted by admin maintenance", request_id)


async def _check_refs(
    storage: PortalStorage, citizen_id: Optional[int], service_id: Optional[int]
) -> None:
    if citizen_id is not None:
        citizen = await storage.users.get(citizen_id)
        if not citizen or citizen.get("role") != Role.citizen.value:
            raise NotFound("Citizen not found.")
    if service_id is not None and not await storage.services.get(service_id):
        raise NotFound("Service not found.")
