from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from portal.repositories.counters import CounterRepository


class NotificationRepository:
    def __init__(self, collection, counters: CounterRepository):
        self.collection = collection
        self.counters = counters

    async def insert(self, user_id: int, message: str) -> Dict[str, Any]:
        doc = {
            "_id": await self.counters.next_id("notifications"),
            "user_id": user_id,
            "message": message,
            "is_read": False,
            "created_at": datetime.utcnow(),
        }
        await self.collection.insert_one(doc)
        return doc

    async def latest_for_user(self, user_id: int, limit: int) -> List[Dict[str, Any]]:
        cursor = (
            self.collection.find({"user_id": user_id})
            .sort([("created_at", -1), ("_id", -1)])
            .limit(limit)
        )
        return await cursor.to_list(length=limit)
