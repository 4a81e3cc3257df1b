# portal/models/common.py
from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PortalBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)


class StoredModel(PortalBaseModel):
    """
    A document read back from Mongo.
    Integer ids live in `_id`; the API exposes them as `id`.
    """

    id: int = Field(validation_alias=AliasChoices("_id", "id"))

    @classmethod
    def from_doc(cls, doc: dict | None):
        if doc is None:
            return None
        return cls.model_validate(doc)
