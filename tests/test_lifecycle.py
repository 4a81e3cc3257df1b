"""
Tests for the request lifecycle engine
"""
import pytest

from conftest import CERTIFICATE, CITIZEN_ID, PERMIT, WATER_HOOKUP
from portal.core.enums import RequestStatus
from portal.core.errors import (
    Forbidden,
    InvalidStatus,
    NoPaymentRequired,
    NotFound,
    StorageFailure,
    Unauthenticated,
)
from portal.services.events import NotificationSink, RequestStatusChanged
from portal.services.lifecycle import RequestLifecycle, parse_transition_target


def notifications_for(db, user_id):
    return [n for n in db["notifications"].docs if n["user_id"] == user_id]


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_submits_and_notifies_once(self, lifecycle, db, citizen):
        request = await lifecycle.create(citizen, CERTIFICATE, "Need a certificate", "/uploads/a.pdf")

        assert request.status == RequestStatus.submitted
        assert request.citizen_id == CITIZEN_ID
        assert request.attachment == "/uploads/a.pdf"
        assert request.created_at is not None

        notes = notifications_for(db, CITIZEN_ID)
        assert len(notes) == 1
        assert notes[0]["message"] == f"Your request #{request.id} has been submitted."
        assert notes[0]["is_read"] is False

    @pytest.mark.asyncio
    async def test_create_requires_citizen(self, lifecycle, officer):
        with pytest.raises(Forbidden):
            await lifecycle.create(officer, CERTIFICATE, "x")
        with pytest.raises(Unauthenticated):
            await lifecycle.create(None, CERTIFICATE, "x")

    @pytest.mark.asyncio
    async def test_create_unknown_service(self, lifecycle, db, citizen):
        with pytest.raises(NotFound):
            await lifecycle.create(citizen, 999, "x")
        assert db["requests"].docs == []
        assert notifications_for(db, CITIZEN_ID) == []

    @pytest.mark.asyncio
    async def test_created_request_visibility(self, lifecycle, citizen, other_citizen, officer, water_officer, admin):
        request = await lifecycle.create(citizen, CERTIFICATE, "x")

        for principal in (citizen, officer, admin):
            found, _ = await lifecycle.view(request.id, principal)
            assert found.id == request.id
        for principal in (other_citizen, water_officer):
            with pytest.raises(NotFound):
                await lifecycle.view(request.id, principal)


class TestTransition:
    @pytest.mark.asyncio
    async def test_officer_approves_in_own_department(self, lifecycle, db, citizen, officer):
        request = await lifecycle.create(citizen, CERTIFICATE, "x")
        assert request.status == RequestStatus.submitted

        updated = await lifecycle.transition(request.id, officer, "Approved")

        assert updated.status == RequestStatus.approved
        assert db["requests"].docs[0]["status"] == "Approved"
        assert updated.updated_at >= request.updated_at

        notes = notifications_for(db, CITIZEN_ID)
        assert len(notes) == 2
        assert notes[-1]["message"] == f"Your request #{request.id} has been Approved."

    @pytest.mark.asyncio
    async def test_each_transition_notifies_exactly_once(self, lifecycle, db, head, seed_request):
        request_id = seed_request()
        for status in ("Under Review", "In-Progress", "Rejected"):
            await lifecycle.transition(request_id, head, status)
            latest = notifications_for(db, CITIZEN_ID)[-1]["message"]
            assert status in latest
            assert f"#{request_id}" in latest
        assert len(notifications_for(db, CITIZEN_ID)) == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["Submitted", "approved", "Closed", "", None, "UnderReview"])
    async def test_invalid_status_leaves_request_untouched(self, lifecycle, db, officer, seed_request, status):
        request_id = seed_request()
        before = dict(db["requests"].docs[0])

        with pytest.raises(InvalidStatus):
            await lifecycle.transition(request_id, officer, status)

        assert db["requests"].docs[0] == before
        assert notifications_for(db, CITIZEN_ID) == []

    @pytest.mark.asyncio
    async def test_other_department_is_forbidden(self, lifecycle, db, water_officer, seed_request):
        request_id = seed_request(service_id=CERTIFICATE)

        with pytest.raises(Forbidden):
            await lifecycle.transition(request_id, water_officer, "Approved")

        assert db["requests"].docs[0]["status"] == "Submitted"
        assert notifications_for(db, CITIZEN_ID) == []

    @pytest.mark.asyncio
    async def test_admin_bypasses_department(self, lifecycle, admin, seed_request):
        request_id = seed_request(service_id=WATER_HOOKUP)
        updated = await lifecycle.transition(request_id, admin, "Rejected")
        assert updated.status == RequestStatus.rejected

    @pytest.mark.asyncio
    async def test_citizen_cannot_transition(self, lifecycle, db, citizen, seed_request):
        request_id = seed_request()
        with pytest.raises(Forbidden):
            await lifecycle.transition(request_id, citizen, "Approved")
        assert db["requests"].docs[0]["status"] == "Submitted"

    @pytest.mark.asyncio
    async def test_officer_without_department_is_forbidden(self, lifecycle, seed_request):
        from portal.core.enums import Role
        from portal.models.principal import Principal

        request_id = seed_request()
        stray = Principal(id=77, role=Role.officer, department_id=None)
        with pytest.raises(Forbidden):
            await lifecycle.transition(request_id, stray, "Approved")

    @pytest.mark.asyncio
    async def test_terminal_states_can_still_move(self, lifecycle, officer, seed_request):
        request_id = seed_request(status=RequestStatus.rejected)
        updated = await lifecycle.transition(request_id, officer, "Under Review")
        assert updated.status == RequestStatus.under_review

    @pytest.mark.asyncio
    async def test_missing_request(self, lifecycle, officer):
        with pytest.raises(NotFound):
            await lifecycle.transition(12345, officer, "Approved")

    def test_parse_transition_target(self):
        assert parse_transition_target("In-Progress") is RequestStatus.in_progress
        assert parse_transition_target(RequestStatus.approved) is RequestStatus.approved
        with pytest.raises(InvalidStatus):
            parse_transition_target(RequestStatus.submitted)


class TestPayment:
    @pytest.mark.asyncio
    async def test_free_service_needs_no_payment(self, lifecycle, db, citizen, seed_request):
        request_id = seed_request(service_id=CERTIFICATE)

        with pytest.raises(NoPaymentRequired) as exc:
            await lifecycle.record_payment(request_id, citizen, 0)

        assert exc.value.redirect == f"/citizen/requests/{request_id}"
        assert db["payments"].docs == []
        assert notifications_for(db, CITIZEN_ID) == []

    @pytest.mark.asyncio
    async def test_paid_service_records_success(self, lifecycle, db, citizen, seed_request):
        request_id = seed_request(service_id=PERMIT)

        payment = await lifecycle.record_payment(request_id, citizen, 25.0)

        assert payment.request_id == request_id
        assert payment.amount == 25.0
        assert payment.status.value == "Success"
        assert payment.paid_at is not None
        assert len(db["payments"].docs) == 1
        assert notifications_for(db, CITIZEN_ID)[-1]["message"] == (
            f"Payment for request #{request_id} was successful."
        )

    @pytest.mark.asyncio
    async def test_fee_is_charged_not_submitted_amount(self, lifecycle, citizen, seed_request):
        request_id = seed_request(service_id=PERMIT)
        payment = await lifecycle.record_payment(request_id, citizen, 1.0)
        assert payment.amount == 25.0

    @pytest.mark.asyncio
    async def test_only_owner_may_pay(self, lifecycle, db, other_citizen, officer, seed_request):
        request_id = seed_request(service_id=PERMIT)
        with pytest.raises(Forbidden):
            await lifecycle.record_payment(request_id, other_citizen)
        with pytest.raises(Forbidden):
            await lifecycle.record_payment(request_id, officer)
        assert db["payments"].docs == []

    @pytest.mark.asyncio
    async def test_payment_quote(self, lifecycle, citizen, other_citizen, seed_request):
        paid = seed_request(_id=1, service_id=PERMIT)
        free = seed_request(_id=2, service_id=CERTIFICATE)

        request, service = await lifecycle.payment_quote(paid, citizen)
        assert (request.id, service.fee) == (paid, 25.0)
        with pytest.raises(NoPaymentRequired):
            await lifecycle.payment_quote(free, citizen)
        with pytest.raises(NotFound):
            await lifecycle.payment_quote(paid, other_citizen)


class TestBestEffortNotifications:
    @pytest.mark.asyncio
    async def test_status_change_survives_notification_failure(self, lifecycle, db, officer, seed_request):
        request_id = seed_request()
        db["notifications"].fail_on.add("insert_one")

        updated = await lifecycle.transition(request_id, officer, "Approved")

        assert updated.status == RequestStatus.approved
        assert db["requests"].docs[0]["status"] == "Approved"
        assert db["notifications"].docs == []

    @pytest.mark.asyncio
    async def test_sink_reports_delivery(self, storage, db):
        sink = NotificationSink(storage)
        event = RequestStatusChanged(request_id=5, citizen_id=CITIZEN_ID, status=RequestStatus.approved)

        assert await sink.handle(event) is True
        db["notifications"].fail_on.add("insert_one")
        assert await sink.handle(event) is False

    @pytest.mark.asyncio
    async def test_custom_sink_receives_events(self, storage, citizen, officer):
        received = []

        class RecordingSink:
            async def handle(self, event):
                received.append(event)

        lifecycle = RequestLifecycle(storage, sink=RecordingSink())
        request = await lifecycle.create(citizen, CERTIFICATE, "x")
        await lifecycle.transition(request.id, officer, "Under Review")

        assert [type(e).__name__ for e in received] == ["RequestSubmitted", "RequestStatusChanged"]
        assert received[1].status == RequestStatus.under_review


class TestStorageFailure:
    @pytest.mark.asyncio
    async def test_driver_errors_surface_as_storage_failure(self, lifecycle, db, officer, seed_request):
        request_id = seed_request()
        db["requests"].fail_on.add("update_one")

        with pytest.raises(StorageFailure):
            await lifecycle.transition(request_id, officer, "Approved")
        assert db["requests"].docs[0]["status"] == "Submitted"
