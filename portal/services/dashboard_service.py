from __future__ import annotations

from typing import Dict, List

from portal.core.enums import RequestStatus
from portal.models.notification import Notification
from portal.models.principal import Principal
from portal.repositories.storage import PortalStorage
from portal.services.requests_service import department_service_ids


async def admin_stats(storage: PortalStorage) -> Dict[str, int]:
    return {
        "users": await storage.users.count(),
        "departments": await storage.departments.count(),
        "services": await storage.services.count(),
        "requests": await storage.requests.count(),
    }


async def officer_stats(storage: PortalStorage, principal: Principal) -> Dict[str, int]:
    service_ids = await department_service_ids(storage, principal)
    scope = {} if service_ids is None else {"service_id": {"$in": service_ids}}

    async def count(status: RequestStatus | None = None) -> int:
        filt = dict(scope)
        if status is not None:
            filt["status"] = status.value
        return await storage.requests.count(filt)

    return {
        "total_requests": await count(),
        "pending_requests": await count(RequestStatus.under_review),
        "approved_requests": await count(RequestStatus.approved),
        "rejected_requests": await count(RequestStatus.rejected),
    }


async def latest_notifications(
    storage: PortalStorage, principal: Principal, limit: int
) -> List[Notification]:
    docs = await storage.notifications.latest_for_user(principal.id, limit)
    return [Notification.from_doc(d) for d in docs]
