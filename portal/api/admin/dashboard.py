from fastapi import APIRouter, Depends

from portal.api.admin.gate import ADMIN_GATE, admin_only
from portal.api.deps import get_storage
from portal.models.principal import Principal
from portal.repositories.storage import PortalStorage
from portal.schemas.outcome import ActionResult, page
from portal.services.dashboard_service import admin_stats

router = APIRouter(prefix="/admin", tags=["Admin Dashboard"], dependencies=ADMIN_GATE)


@router.get("", response_model=ActionResult)
async def admin_dashboard(
    principal: Principal = Depends(admin_only),
    storage: PortalStorage = Depends(get_storage),
):
    return page({"user": principal, "stats": await admin_stats(storage)})
