from __future__ import annotations

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from portal.core.config import get_settings

_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(get_settings().mongo_uri)
    return _client


def get_db() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency that returns the Mongo database instance
    """
    return get_client()[get_settings().mongo_db]


async def ensure_indexes(db) -> None:
    await db.users.create_index("email", unique=True)
    await db.services.create_index("department_id")
    await db.requests.create_index("citizen_id")
    await db.requests.create_index("service_id")
    await db.notifications.create_index([("user_id", 1), ("created_at", -1)])
    await db.payments.create_index("request_id")


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
