from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from portal.repositories.counters import CounterRepository


def _email_norm(email: str) -> str:
    return (email or "").lower().strip()


class UserRepository:
    def __init__(self, collection, counters: CounterRepository):
        self.collection = collection
        self.counters = counters

    async def get(self, user_id: int) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"_id": user_id})

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"email": _email_norm(email)})

    async def get_many(self, ids: List[int]) -> Dict[int, Dict[str, Any]]:
        if not ids:
            return {}
        rows = await self.collection.find({"_id": {"$in": list(set(ids))}}).to_list(length=None)
        return {u["_id"]: u for u in rows}

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        doc = dict(document)
        doc["_id"] = await self.counters.next_id("users")
        doc["email"] = _email_norm(doc.get("email", ""))
        doc.setdefault("created_at", datetime.utcnow())
        await self.collection.insert_one(doc)
        return doc

    async def update(self, user_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if "email" in fields:
            fields = {**fields, "email": _email_norm(fields["email"])}
        res = await self.collection.update_one({"_id": user_id}, {"$set": fields})
        if res.matched_count != 1:
            return None
        return await self.get(user_id)

    async def delete(self, user_id: int) -> bool:
        res = await self.collection.delete_one({"_id": user_id})
        return res.deleted_count == 1

    async def search(self, q: str | None = None) -> List[Dict[str, Any]]:
        filt: Dict[str, Any] = {}
        if q:
            pattern = {"$regex": re.escape(q), "$options": "i"}
            filt["$or"] = [{"name": pattern}, {"email": pattern}, {"role": pattern}]
        return await self.collection.find(filt).sort("_id", 1).to_list(length=None)

    async def ids_matching_name(self, q: str) -> List[int]:
        rows = await self.collection.find(
            {"name": {"$regex": re.escape(q), "$options": "i"}}
        ).to_list(length=None)
        return [u["_id"] for u in rows]

    async def list_by_role(self, role: str) -> List[Dict[str, Any]]:
        return await self.collection.find({"role": role}).sort("name", 1).to_list(length=None)

    async def count(self) -> int:
        return await self.collection.count_documents({})
