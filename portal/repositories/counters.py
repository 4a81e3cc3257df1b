from pymongo import ReturnDocument


class CounterRepository:
    """
    Atomic integer sequences:
    counters: { _id: "requests", seq: 4 }
    """

    def __init__(self, collection):
        self.collection = collection

    async def next_id(self, name: str) -> int:
        doc = await self.collection.find_one_and_update(
            {"_id": name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(doc["seq"])
