from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from portal.core.errors import Conflict, NotFound
from portal.models.catalog import Department, Service
from portal.repositories.storage import PortalStorage
from portal.schemas.catalog import (
    DepartmentCreate,
    DepartmentUpdate,
    ServiceCreate,
    ServiceOut,
    ServiceUpdate,
)

logger = logging.getLogger(__name__)


# -------------------------
# Departments
# -------------------------
async def list_departments(storage: PortalStorage, q: Optional[str] = None) -> List[Department]:
    return [Department.from_doc(d) for d in await storage.departments.search(q)]


async def get_department(storage: PortalStorage, department_id: int) -> Department:
    doc = await storage.departments.get(department_id)
    if not doc:
        raise NotFound("Department not found.")
    return Department.from_doc(doc)


async def create_department(storage: PortalStorage, body: DepartmentCreate) -> Department:
    doc = await storage.departments.insert(
        {"name": body.name.strip(), "description": body.description}
    )
    logger.info("Department %s created (%s)", doc["_id"], doc["name"])
    return Department.from_doc(doc)


async def update_department(
    storage: PortalStorage, department_id: int, body: DepartmentUpdate
) -> Department:
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in fields:
        fields["name"] = fields["name"].strip()
    doc = (
        await storage.departments.update(department_id, fields)
        if fields
        else await storage.departments.get(department_id)
    )
    if not doc:
        raise NotFound("Department not found.")
    return Department.from_doc(doc)


async def delete_department(storage: PortalStorage, department_id: int) -> None:
    if not await storage.departments.get(department_id):
        raise NotFound("Department not found.")
    if await storage.services.count_for_department(department_id) > 0:
        raise Conflict("Cannot delete a department that still has services")
    await storage.departments.delete(department_id)
    logger.info("Department %s deleted", department_id)


# -------------------------
# Services
# -------------------------
def _service_out(doc: Dict[str, Any], departments: Dict[int, Dict[str, Any]]) -> ServiceOut:
    dept = departments.get(doc.get("department_id")) or {}
    return ServiceOut(
        id=doc["_id"],
        name=doc["name"],
        description=doc.get("description"),
        department_id=doc["department_id"],
        department_name=dept.get("name"),
        fee=doc.get("fee") or 0.0,
    )


async def list_services(storage: PortalStorage, q: Optional[str] = None) -> List[ServiceOut]:
    """Services matching `q` by their own name or their department's name."""
    dept_ids = None
    if q:
        dept_ids = [d["_id"] for d in await storage.departments.search(q)]
    docs = await storage.services.search(q, dept_ids)
    departments = await storage.departments.get_many([d["department_id"] for d in docs])
    return [_service_out(d, departments) for d in docs]


async def service_catalogue(storage: PortalStorage) -> List[ServiceOut]:
    """Everything a citizen can apply for, grouped by department name."""
    docs = await storage.services.list_all()
    departments = await storage.departments.get_many([d["department_id"] for d in docs])
    rows = [_service_out(d, departments) for d in docs]
    return sorted(rows, key=lambda s: ((s.department_name or "").lower(), s.name.lower()))


async def get_service(storage: PortalStorage, service_id: int) -> ServiceOut:
    doc = await storage.services.get(service_id)
    if not doc:
        raise NotFound("Service not found.")
    departments = await storage.departments.get_many([doc["department_id"]])
    return _service_out(doc, departments)


async def create_service(storage: PortalStorage, body: ServiceCreate) -> Service:
    await get_department(storage, body.department_id)
    doc = await storage.services.insert(
        {
            "name": body.name.strip(),
            "description": body.description,
            "department_id": body.department_id,
            "fee": body.fee,
        }
    )
    logger.info("Service %s created in department %s", doc["_id"], body.department_id)
    return Service.from_doc(doc)


async def update_service(storage: PortalStorage, service_id: int, body: ServiceUpdate) -> Service:
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    if "department_id" in fields:
        await get_department(storage, fields["department_id"])
    if "name" in fields:
        fields["name"] = fields["name"].strip()
    doc = (
        await storage.services.update(service_id, fields)
        if fields
        else await storage.services.get(service_id)
    )
    if not doc:
        raise NotFound("Service not found.")
    return Service.from_doc(doc)


async def delete_service(storage: PortalStorage, service_id: int) -> None:
    if not await storage.services.get(service_id):
        raise NotFound("Service not found.")
    if await storage.requests.count({"service_id": service_id}) > 0:
        raise Conflict("Cannot delete a service that has requests")
    await storage.services.delete(service_id)
    logger.info("Service %s deleted", service_id)
