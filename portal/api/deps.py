# portal/api/deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from portal.core.access import authorize, forbid_when_authenticated
from portal.core.enums import Role
from portal.core.security import principal_from_token
from portal.db.mongo import get_db
from portal.models.principal import Principal
from portal.repositories.storage import PortalStorage
from portal.services.lifecycle import RequestLifecycle

bearer = HTTPBearer(auto_error=False)


def get_storage(db=Depends(get_db)) -> PortalStorage:
    return PortalStorage(db)


def get_lifecycle(storage: PortalStorage = Depends(get_storage)) -> RequestLifecycle:
    return RequestLifecycle(storage)


def current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Optional[Principal]:
    if credentials is None:
        return None
    return principal_from_token(credentials.credentials)


def require_roles(*roles: Role):
    """Dependency that runs the access gate for `roles` and yields the principal."""
    required = frozenset(roles)

    def dependency(principal: Optional[Principal] = Depends(current_principal)) -> Principal:
        return authorize(principal, required)

    return dependency


require_authenticated = require_roles(*Role)


def guest_only(principal: Optional[Principal] = Depends(current_principal)) -> None:
    forbid_when_authenticated(principal)
