from typing import Optional

from fastapi import APIRouter, Depends

from portal.api.admin.gate import ADMIN_GATE
from portal.api.deps import get_storage
from portal.repositories.storage import PortalStorage
from portal.schemas.outcome import ActionResult, page, success
from portal.schemas.user import UserCreate, UserUpdate
from portal.services import users_service

router = APIRouter(prefix="/admin/users", tags=["Admin Users"], dependencies=ADMIN_GATE)


# ========================
# LIST USERS
# ========================
@router.get("", response_model=ActionResult)
async def get_all(search: Optional[str] = None, storage: PortalStorage = Depends(get_storage)):
    users = await users_service.list_users(storage, search)
    return page({"users": users, "search": search or ""})


# ========================
# CREATE USER
# ========================
@router.post("", response_model=ActionResult)
async def create(body: UserCreate, storage: PortalStorage = Depends(get_storage)):
    user = await users_service.create_user(storage, body)
    return success(f"Added user ({user['email']})", data=user, redirect="/admin/users")


# ========================
# GET ONE USER
# ========================
@router.get("/{user_id}", response_model=ActionResult)
async def one(user_id: int, storage: PortalStorage = Depends(get_storage)):
    return page({"user": await users_service.get_user(storage, user_id)})


# ========================
# UPDATE USER
# ========================
@router.put("/{user_id}", response_model=ActionResult)
async def update(user_id: int, body: UserUpdate, storage: PortalStorage = Depends(get_storage)):
    user = await users_service.update_user(storage, user_id, body)
    return success(f"Updated user ({user['email']})", data=user, redirect="/admin/users")


# ========================
# DELETE USER
# ========================
@router.delete("/{user_id}", response_model=ActionResult)
async def delete(user_id: int, storage: PortalStorage = Depends(get_storage)):
    await users_service.delete_user(storage, user_id)
    return success("User deleted.", redirect="/admin/users")
