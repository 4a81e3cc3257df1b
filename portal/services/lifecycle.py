"""
Request lifecycle engine.

    Submitted -> Under Review -> Approved | Rejected
                     +-> In-Progress

Only `create` enters Submitted. Officers, heads and admins may move a
request to any transition target regardless of its current status; officers
and heads only inside their own department. Every change emits one event,
and the notification sink turns it into one citizen notification after the
storage write has happened.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from portal.core.access import authorize
from portal.core.enums import (
    STAFF_ROLES,
    TERMINAL_STATUSES,
    TRANSITION_TARGETS,
    PaymentStatus,
    RequestStatus,
    Role,
)
from portal.core.errors import Forbidden, InvalidStatus, NoPaymentRequired, NotFound
from portal.models.catalog import Service
from portal.models.payment import Payment
from portal.models.principal import Principal
from portal.models.service_requests import ServiceRequest
from portal.services.events import (
    LifecycleEvent,
    NotificationSink,
    PaymentRecorded,
    RequestStatusChanged,
    RequestSubmitted,
)

logger = logging.getLogger(__name__)


def parse_transition_target(value) -> RequestStatus:
    try:
        status = RequestStatus(value)
    except (ValueError, TypeError):
        raise InvalidStatus() from None
    if status not in TRANSITION_TARGETS:
        raise InvalidStatus()
    return status


def in_department(principal: Principal, service: Service) -> bool:
    if principal.role == Role.admin:
        return True
    return principal.department_id is not None and principal.department_id == service.department_id


def can_view(principal: Principal, request: ServiceRequest, service: Service) -> bool:
    if principal.role == Role.citizen:
        return request.citizen_id == principal.id
    return in_department(principal, service)


class RequestLifecycle:
    def __init__(self, storage, sink: Optional[NotificationSink] = None):
        self.storage = storage
        self.sink = sink or NotificationSink(storage)

    # ------------------------------------------------------------------
    # Create (status = Submitted)
    # ------------------------------------------------------------------
    async def create(
        self,
        principal: Optional[Principal],
        service_id: int,
        description: str = "",
        attachment_ref: Optional[str] = None,
    ) -> ServiceRequest:
        citizen = authorize(principal, {Role.citizen})

        service = await self.storage.get_service_by_id(service_id)
        if service is None:
            raise NotFound("Service not found.")

        request = await self.storage.insert_request(
            {
                "citizen_id": citizen.id,
                "service_id": service.id,
                "status": RequestStatus.submitted.value,
                "description": description or "",
                "attachment": attachment_ref,
            }
        )
        logger.info("Request %s submitted by user %s for service %s", request.id, citizen.id, service.id)

        await self._emit(RequestSubmitted(request_id=request.id, citizen_id=citizen.id))
        return request

    # ------------------------------------------------------------------
    # Status transition (officer / head / admin)
    # ------------------------------------------------------------------
    async def transition(
        self, request_id: int, principal: Optional[Principal], new_status
    ) -> ServiceRequest:
        actor = authorize(principal, STAFF_ROLES)
        status = parse_transition_target(new_status)

        request, service = await self._load(request_id)
        if not in_department(actor, service):
            logger.info(
                "User %s (department %s) may not change request %s of department %s",
                actor.id,
                actor.department_id,
                request.id,
                service.department_id,
            )
            raise Forbidden()

        if request.status in TERMINAL_STATUSES and status != request.status:
            # any target is allowed; reopening a decision is logged
            logger.warning("Request %s reopened from %s by user %s", request.id, request.status.value, actor.id)

        updated = await self.storage.update_request_status(request.id, status.value)
        if updated is None:
            raise NotFound("Request not found.")
        logger.info(
            "Request %s moved %s -> %s by user %s",
            request.id,
            request.status.value,
            status.value,
            actor.id,
        )

        await self._emit(
            RequestStatusChanged(request_id=updated.id, citizen_id=updated.citizen_id, status=status)
        )
        return updated

    # ------------------------------------------------------------------
    # Payment (simulated, owning citizen only)
    # ------------------------------------------------------------------
    async def payment_quote(
        self, request_id: int, principal: Optional[Principal]
    ) -> Tuple[ServiceRequest, Service]:
        """The request and its fee-bearing service, if there is anything to pay."""
        citizen = authorize(principal, {Role.citizen})
        request, service = await self._load(request_id)
        if request.citizen_id != citizen.id:
            raise NotFound("Request not found.")
        if not service.requires_payment:
            raise NoPaymentRequired(redirect=f"/citizen/requests/{request.id}")
        return request, service

    async def record_payment(
        self,
        request_id: int,
        principal: Optional[Principal],
        amount: Optional[float] = None,
    ) -> Payment:
        citizen = authorize(principal, {Role.citizen})
        request, service = await self._load(request_id)
        if request.citizen_id != citizen.id:
            raise Forbidden()
        if not service.requires_payment:
            raise NoPaymentRequired(redirect=f"/citizen/requests/{request.id}")

        # the service fee is what gets charged
        if amount is not None and float(amount) != service.fee:
            logger.warning(
                "Request %s: submitted amount %s differs from fee %s, charging the fee",
                request.id,
                amount,
                service.fee,
            )

        payment = await self.storage.insert_payment(request.id, service.fee, PaymentStatus.success.value)
        logger.info("Payment %s of %s recorded for request %s", payment.id, payment.amount, request.id)

        await self._emit(
            PaymentRecorded(request_id=request.id, citizen_id=citizen.id, amount=payment.amount)
        )
        return payment

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    async def view(self, request_id: int, principal: Optional[Principal]) -> Tuple[ServiceRequest, Service]:
        """Requests outside the principal's reach look the same as missing ones."""
        actor = authorize(principal, Role)
        request, service = await self._load(request_id)
        if not can_view(actor, request, service):
            if actor.role == Role.citizen:
                raise NotFound("Request not found.", redirect="/citizen/requests")
            raise NotFound(
                "Request not found or you don't have access.",
                redirect="/dashboard/officer/requests",
            )
        return request, service

    # ------------------------------------------------------------------
    async def _load(self, request_id: int) -> Tuple[ServiceRequest, Service]:
        request = await self.storage.get_request_by_id(request_id)
        if request is None:
            raise NotFound("Request not found.")
        service = await self.storage.get_service_by_id(request.service_id)
        if service is None:
            raise NotFound("Service not found.")
        return request, service

    async def _emit(self, event: LifecycleEvent) -> None:
        await self.sink.handle(event)
