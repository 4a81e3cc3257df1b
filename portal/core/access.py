"""
Access control gate.

Pure checks over an explicit principal. Route code composes them by
calling one after another; each check either returns quietly or raises.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from portal.core.enums import Role
from portal.core.errors import AlreadyAuthenticated, Forbidden, Unauthenticated
from portal.models.principal import Principal

logger = logging.getLogger(__name__)


def authorize(principal: Optional[Principal], required_roles: Iterable[Role]) -> Principal:
    """
    Allow the action when `principal` holds one of `required_roles`.

    Returns the principal (now known to be present) on success.
    Raises `Unauthenticated` without a principal and `Forbidden` when the
    role is not in the set. Calling it again with another set narrows
    the permission further; it has no side effects.
    """
    if principal is None:
        logger.info("Denied anonymous access (requires %s)", _roles(required_roles))
        raise Unauthenticated()

    roles = {Role(r) for r in required_roles}
    if principal.role not in roles:
        logger.info(
            "Denied user %s with role %s (requires %s)",
            principal.id,
            principal.role.value,
            _roles(roles),
        )
        raise Forbidden()
    return principal


def require_authenticated(principal: Optional[Principal]) -> Principal:
    return authorize(principal, Role)


def forbid_when_authenticated(principal: Optional[Principal]) -> None:
    """Guard for the login and registration pages."""
    if principal is not None:
        raise AlreadyAuthenticated()


def _roles(roles: Iterable[Role]) -> str:
    return ",".join(sorted(Role(r).value for r in roles))
