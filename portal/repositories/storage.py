"""
Storage facade used by the request lifecycle.

It exposes the handful of primitives the lifecycle needs and turns driver
errors into `StorageFailure`, so the core never sees a raw pymongo error.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from pymongo.errors import PyMongoError

from portal.core.errors import StorageFailure
from portal.models.catalog import Service
from portal.models.notification import Notification
from portal.models.payment import Payment
from portal.models.service_requests import ServiceRequest
from portal.repositories.catalog_repository import DepartmentRepository, ServiceRepository
from portal.repositories.counters import CounterRepository
from portal.repositories.notification_repository import NotificationRepository
from portal.repositories.payment_repository import PaymentRepository
from portal.repositories.requests import ServiceRequestRepository
from portal.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def storage_errors(operation: str):
    try:
        yield
    except PyMongoError as exc:
        logger.error("Storage operation %s failed", operation, exc_info=True)
        raise StorageFailure() from exc


class PortalStorage:
    def __init__(self, db):
        counters = CounterRepository(db["counters"])
        self.users = UserRepository(db["users"], counters)
        self.departments = DepartmentRepository(db["departments"], counters)
        self.services = ServiceRepository(db["services"], counters)
        self.requests = ServiceRequestRepository(db["requests"], counters)
        self.notifications = NotificationRepository(db["notifications"], counters)
        self.payments = PaymentRepository(db["payments"], counters)

    async def get_request_by_id(self, request_id: int) -> Optional[ServiceRequest]:
        async with storage_errors("get_request_by_id"):
            return ServiceRequest.from_doc(await self.requests.get(request_id))

    async def insert_request(self, fields: dict) -> ServiceRequest:
        async with storage_errors("insert_request"):
            return ServiceRequest.from_doc(await self.requests.insert(fields))

    async def update_request_status(self, request_id: int, status: str) -> Optional[ServiceRequest]:
        async with storage_errors("update_request_status"):
            return ServiceRequest.from_doc(await self.requests.update_status(request_id, status))

    async def get_service_by_id(self, service_id: int) -> Optional[Service]:
        async with storage_errors("get_service_by_id"):
            return Service.from_doc(await self.services.get(service_id))

    async def insert_notification(self, user_id: int, message: str) -> Notification:
        async with storage_errors("insert_notification"):
            return Notification.from_doc(await self.notifications.insert(user_id, message))

    async def insert_payment(self, request_id: int, amount: float, status: str) -> Payment:
        async with storage_errors("insert_payment"):
            return Payment.from_doc(await self.payments.insert(request_id, amount, status))
