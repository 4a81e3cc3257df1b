from __future__ import annotations

from datetime import datetime

from portal.models.common import StoredModel


class Notification(StoredModel):
    user_id: int
    message: str
    is_read: bool = False
    created_at: datetime
