from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from portal.repositories.counters import CounterRepository


def _name_pattern(q: str) -> Dict[str, str]:
    return {"$regex": re.escape(q), "$options": "i"}


class DepartmentRepository:
    def __init__(self, collection, counters: CounterRepository):
        self.collection = collection
        self.counters = counters

    async def get(self, department_id: int) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"_id": department_id})

    async def get_many(self, ids: List[int]) -> Dict[int, Dict[str, Any]]:
        if not ids:
            return {}
        rows = await self.collection.find({"_id": {"$in": list(set(ids))}}).to_list(length=None)
        return {d["_id"]: d for d in rows}

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(document)
        doc["_id"] = await self.counters.next_id("departments")
        await self.collection.insert_one(doc)
        return doc

    async def update(self, department_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        res = await self.collection.update_one({"_id": department_id}, {"$set": fields})
        if res.matched_count != 1:
            return None
        return await self.get(department_id)

    async def delete(self, department_id: int) -> bool:
        res = await self.collection.delete_one({"_id": department_id})
        return res.deleted_count == 1

    async def search(self, q: str | None = None) -> List[Dict[str, Any]]:
        filt: Dict[str, Any] = {"name": _name_pattern(q)} if q else {}
        return await self.collection.find(filt).sort("_id", 1).to_list(length=None)

    async def count(self) -> int:
        return await self.collection.count_documents({})


class ServiceRepository:
    def __init__(self, collection, counters: CounterRepository):
        self.collection = collection
        self.counters = counters

    async def get(self, service_id: int) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"_id": service_id})

    async def get_many(self, ids: List[int]) -> Dict[int, Dict[str, Any]]:
        if not ids:
            return {}
        rows = await self.collection.find({"_id": {"$in": list(set(ids))}}).to_list(length=None)
        return {s["_id"]: s for s in rows}

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(document)
        doc["_id"] = await self.counters.next_id("services")
        await self.collection.insert_one(doc)
        return doc

    async def update(self, service_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        res = await self.collection.update_one({"_id": service_id}, {"$set": fields})
        if res.matched_count != 1:
            return None
        return await self.get(service_id)

    async def delete(self, service_id: int) -> bool:
        res = await self.collection.delete_one({"_id": service_id})
        return res.deleted_count == 1

    async def list_all(self) -> List[Dict[str, Any]]:
        return await self.collection.find({}).sort("_id", 1).to_list(length=None)

    async def ids_for_department(self, department_id: int) -> List[int]:
        rows = await self.collection.find({"department_id": department_id}).to_list(length=None)
        return [s["_id"] for s in rows]

    async def search(
        self, q: str | None = None, department_ids: List[int] | None = None
    ) -> List[Dict[str, Any]]:
        """Services whose name matches `q` or that belong to one of `department_ids`."""
        filt: Dict[str, Any] = {}
        if q:
            clauses: List[Dict[str, Any]] = [{"name": _name_pattern(q)}]
            if department_ids:
                clauses.append({"department_id": {"$in": department_ids}})
            filt["$or"] = clauses
        return await self.collection.find(filt).sort("_id", 1).to_list(length=None)

    async def count(self) -> int:
        return await self.collection.count_documents({})

    async def count_for_department(self, department_id: int) -> int:
        return await self.collection.count_documents({"department_id": department_id})
