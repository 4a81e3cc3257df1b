"""
Post-commit events emitted by the request lifecycle, and the sink that
turns them into citizen notifications.
"""
from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from portal.core.enums import RequestStatus
from portal.core.errors import StorageFailure

logger = logging.getLogger(__name__)


class LifecycleEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    request_id: int
    citizen_id: int

    def message(self) -> str:
        raise NotImplementedError


class RequestSubmitted(LifecycleEvent):
    def message(self) -> str:
        return f"Your request #{self.request_id} has been submitted."


class RequestStatusChanged(LifecycleEvent):
    status: RequestStatus

    def message(self) -> str:
        return f"Your request #{self.request_id} has been {self.status.value}."


class PaymentRecorded(LifecycleEvent):
    amount: float

    def message(self) -> str:
        return f"Payment for request #{self.request_id} was successful."



class NotificationStore(Protocol):
    async def insert_notification(self, user_id: int, message: str): ...


class NotificationSink:
    """Delivers one notification per event. Delivery is best-effort."""

    def __init__(self, store: NotificationStore):
        self.store = store

    async def handle(self, event: LifecycleEvent) -> bool:
        try:
            await self.store.insert_notification(event.citizen_id, event.message())
        except StorageFailure:
            logger.warning(
                "Could not notify user %s about request %s (%s)",
                event.citizen_id,
                event.request_id,
                type(event).__name__,
            )
            return False
        return True
