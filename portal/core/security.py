# portal/core/security.py
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import jwt
from passlib.context import CryptContext

from portal.core.config import get_settings
from portal.models.principal import Principal

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@lru_cache
def _pwd() -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=get_settings().bcrypt_rounds,
    )


def _bcrypt_input(password: str | bytes) -> bytes:
    # bcrypt hard limit: 72 BYTES
    if isinstance(password, str):
        password = password.encode("utf-8")
    return password[:72]


def hash_password(password: str) -> str:
    return _pwd().hash(_bcrypt_input(password))


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return _pwd().verify(_bcrypt_input(password), hashed)
    except ValueError:
        # not a bcrypt hash
        return False


# -------------------------
# Session tokens
# -------------------------
def issue_token(principal: Principal) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(principal.id),
        "role": principal.role.value,
        "department_id": principal.department_id,
        "name": principal.name,
        "iat": now,
        "exp": now + timedelta(seconds=settings.session_ttl_seconds),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def principal_from_token(token: str | None) -> Optional[Principal]:
    """
    Rebuild the session principal from a bearer token.
    Anything that does not verify is treated as "not logged in".
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
        return Principal(
            id=int(payload["sub"]),
            role=payload["role"],
            department_id=payload.get("department_id"),
            name=payload.get("name") or "",
        )
    except jwt.ExpiredSignatureError:
        logger.info("Session token expired")
        return None
    except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
        logger.info("Rejected session token: %s", exc)
        return None
