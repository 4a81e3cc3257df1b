from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from portal.repositories.counters import CounterRepository


class ServiceRequestRepository:
    def __init__(self, collection, counters: CounterRepository):
        self.collection = collection
        self.counters = counters

    async def get(self, request_id: int) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"_id": request_id})

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(document)
        doc["_id"] = await self.counters.next_id("requests")
        now = datetime.utcnow()
        doc.setdefault("created_at", now)
        doc.setdefault("updated_at", now)
        await self.collection.insert_one(doc)
        return doc

    async def update_status(self, request_id: int, status: str) -> Optional[Dict[str, Any]]:
        return await self.update(request_id, {"status": status})

    async def update(self, request_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        fields = {**fields, "updated_at": datetime.utcnow()}
        res = await self.collection.update_one({"_id": request_id}, {"$set": fields})
        if res.matched_count != 1:
            return None
        return await self.get(request_id)

    async def delete(self, request_id: int) -> bool:
        res = await self.collection.delete_one({"_id": request_id})
        return res.deleted_count == 1

    async def list_for_citizen(self, citizen_id: int) -> List[Dict[str, Any]]:
        cursor = self.collection.find({"citizen_id": citizen_id}).sort("created_at", -1)
        return await cursor.to_list(length=None)

    async def list_for_services(self, service_ids: List[int] | None) -> List[Dict[str, Any]]:
        """Requests for the given services; `None` means every request."""
        filt: Dict[str, Any] = {}
        if service_ids is not None:
            filt["service_id"] = {"$in": service_ids}
        cursor = self.collection.find(filt).sort("created_at", -1)
        return await cursor.to_list(length=None)

    async def list_all(self, filters: Dict[str, Any] | None = None) -> List[Dict[str, Any]]:
        cursor = self.collection.find(filters or {}).sort("_id", -1)
        return await cursor.to_list(length=None)

    async def count(self, filters: Dict[str, Any] | None = None) -> int:
        return await self.collection.count_documents(filters or {})
