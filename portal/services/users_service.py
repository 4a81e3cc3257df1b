from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pymongo.errors import DuplicateKeyError

from portal.core.enums import Role
from portal.core.errors import Conflict, NotFound, Unauthenticated, ValidationFailed
from portal.core.security import hash_password, verify_password
from portal.mapper.users_mapper import to_user_out
from portal.models.user import User
from portal.repositories.storage import PortalStorage
from portal.schemas.auth import RegisterRequest
from portal.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

HOME_BY_ROLE = {
    Role.admin: "/admin",
    Role.officer: "/dashboard/officer",
    Role.head: "/dashboard/officer",
    Role.citizen: "/citizen",
}


def home_for(role: Role) -> str:
    return HOME_BY_ROLE.get(Role(role), "/")


# -------------------------
# Auth helpers
# -------------------------
async def register_citizen(storage: PortalStorage, body: RegisterRequest) -> Dict[str, Any]:
    if not body.name.strip() or not body.password or not body.confirm_password:
        raise ValidationFailed("Please fill in all required fields", redirect="/auth/register")
    if body.password != body.confirm_password:
        raise ValidationFailed("Passwords do not match", redirect="/auth/register")

    if await storage.users.get_by_email(body.email):
        raise Conflict("Email already registered", redirect="/auth/register")

    doc = await _insert_user(
        storage,
        {
            "name": body.name.strip(),
            "email": body.email,
            "role": Role.citizen.value,
            "department_id": None,
            "password_hash": hash_password(body.password),
            "national_id": body.national_id,
            "dob": body.dob.isoformat() if body.dob else None,
            "contact_info": body.contact_info,
        },
    )
    logger.info("Citizen %s registered", doc["_id"])
    return to_user_out(doc)


async def authenticate(storage: PortalStorage, email: str, password: str) -> User:
    doc = await storage.users.get_by_email(email)
    if not doc or not verify_password(password, doc.get("password_hash", "")):
        logger.info("Failed login for %s", email)
        raise Unauthenticated("Invalid email or password")
    return User.from_doc(doc)


# -------------------------
# Users CRUD (admin)
# -------------------------
async def list_users(storage: PortalStorage, q: Optional[str] = None) -> List[Dict[str, Any]]:
    return [to_user_out(d) for d in await storage.users.search(q)]


async def get_user(storage: PortalStorage, user_id: int) -> Dict[str, Any]:
    doc = await storage.users.get(user_id)
    if not doc:
        raise NotFound("User not found.")
    return to_user_out(doc)


async def create_user(storage: PortalStorage, body: UserCreate) -> Dict[str, Any]:
    await _check_department(storage, body.department_id)
    if await storage.users.get_by_email(body.email):
        raise Conflict("Email already exists")

    doc = await _insert_user(
        storage,
        {
            "name": body.name.strip(),
            "email": body.email,
            "role": body.role.value,
            "department_id": body.department_id,
            "password_hash": hash_password(body.password),
        },
    )
    logger.info("User %s created with role %s", doc["_id"], body.role.value)
    return to_user_out(doc)


async def update_user(storage: PortalStorage, user_id: int, body: UserUpdate) -> Dict[str, Any]:
    patch = body.model_dump(exclude_unset=True)
    if not await storage.users.get(user_id):
        raise NotFound("User not found.")

    update_doc: Dict[str, Any] = {}
    if patch.get("name"):
        update_doc["name"] = patch["name"].strip()
    if patch.get("email"):
        existing = await storage.users.get_by_email(patch["email"])
        if existing and existing["_id"] != user_id:
            raise Conflict("Email already exists")
        update_doc["email"] = patch["email"]
    if patch.get("role") is not None:
        update_doc["role"] = Role(patch["role"]).value
    if "department_id" in patch:
        await _check_department(storage, patch["department_id"])
        update_doc["department_id"] = patch["department_id"]
    if patch.get("password"):
        update_doc["password_hash"] = hash_password(patch["password"])

    doc = await storage.users.update(user_id, update_doc) if update_doc else await storage.users.get(user_id)
    if not doc:
        raise NotFound("User not found.")
    return to_user_out(doc)


async def delete_user(storage: PortalStorage, user_id: int) -> None:
    if not await storage.users.delete(user_id):
        raise NotFound("User not found.")
    logger.info("User %s deleted", user_id)


async def _check_department(storage: PortalStorage, department_id: Optional[int]) -> None:
    if department_id is not None and not await storage.departments.get(department_id):
        raise NotFound("Department not found.")


async def _insert_user(storage: PortalStorage, doc: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return await storage.users.insert(doc)
    except DuplicateKeyError:
        raise Conflict("Email already exists") from None
