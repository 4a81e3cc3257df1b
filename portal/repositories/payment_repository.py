from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from portal.repositories.counters import CounterRepository


class PaymentRepository:
    def __init__(self, collection, counters: CounterRepository):
        self.collection = collection
        self.counters = counters

    async def insert(self, request_id: int, amount: float, status: str) -> Dict[str, Any]:
        now = datetime.utcnow()
        doc = {
            "_id": await self.counters.next_id("payments"),
            "request_id": request_id,
            "amount": amount,
            "status": status,
            "paid_at": now,
            "created_at": now,
        }
        await self.collection.insert_one(doc)
        return doc

    async def list_for_request(self, request_id: int) -> List[Dict[str, Any]]:
        cursor = self.collection.find({"request_id": request_id}).sort("_id", 1)
        return await cursor.to_list(length=None)
