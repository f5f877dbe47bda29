"""
Unit tests for the Appointment aggregate: creation, the status lifecycle
and the pending event buffer.
"""

import uuid
from datetime import timedelta

import pytest

from scheduleit.domain.entities import (
    ALLOWED_TRANSITIONS,
    Appointment,
    AppointmentStatus,
    Customer,
)
from scheduleit.domain.events import AppointmentBooked, AppointmentCanceled
from scheduleit.domain.exceptions import DomainRuleViolation
from tests.factories.repository_factories import NOW, make_appointment

S = AppointmentStatus

# Every (current, target) pair that the lifecycle accepts
VALID_TRANSITIONS = [
    (S.SCHEDULED, S.IN_PROGRESS),
    (S.SCHEDULED, S.COMPLETED),
    (S.SCHEDULED, S.CANCELED),
    (S.SCHEDULED, S.NO_SHOW),
    (S.IN_PROGRESS, S.COMPLETED),
]

INVALID_TRANSITIONS = [
    (current, target)
    for current in S
    for target in S
    if (current, target) not in VALID_TRANSITIONS
    and not (current == S.SCHEDULED and target == S.SCHEDULED)
]


@pytest.mark.unit
@pytest.mark.domain
@pytest.mark.appointment
class TestAppointmentCreation:
    def test_create_records_booked_event(self):
        customer_id = uuid.uuid4()
        start = NOW + timedelta(days=1)

        appointment = Appointment.create(
            customer_id, start, start + timedelta(hours=1), NOW, notes="First visit"
        )

        assert appointment.status == S.SCHEDULED
        assert appointment.notes == "First visit"
        events = appointment.pending_events
        assert len(events) == 1
        assert isinstance(events[0], AppointmentBooked)
        assert events[0].appointment_id == appointment.id
        assert events[0].customer_id == customer_id
        assert events[0].time_slot == appointment.time_slot

    def test_create_normalises_missing_notes(self):
        start = NOW + timedelta(days=1)
        appointment = Appointment.create(uuid.uuid4(), start, start + timedelta(hours=1), NOW)
        assert appointment.notes == ""

    def test_create_rejects_invalid_slot_without_events(self):
        with pytest.raises(DomainRuleViolation):
            Appointment.create(uuid.uuid4(), NOW - timedelta(hours=1), NOW, NOW)

    def test_equality_is_by_id(self):
        appointment = make_appointment()
        twin = Appointment(
            id=appointment.id,
            customer_id=uuid.uuid4(),
            time_slot=appointment.time_slot,
        )
        assert appointment == twin
        assert hash(appointment) == hash(twin)
        assert appointment != make_appointment()

    def test_is_overlapping_ignores_canceled(self):
        appointment = make_appointment(start=NOW)
        window = (NOW + timedelta(minutes=15), NOW + timedelta(minutes=45))

        assert appointment.is_overlapping(*window)
        appointment.status = S.CANCELED
        assert not appointment.is_overlapping(*window)


@pytest.mark.unit
@pytest.mark.domain
@pytest.mark.appointment
class TestAppointmentLifecycle:
    def test_transition_table_matches_lifecycle(self):
        allowed = {(c, t) for c, targets in ALLOWED_TRANSITIONS.items() for t in targets}
        assert allowed == set(VALID_TRANSITIONS)

    @pytest.mark.parametrize("current,target", VALID_TRANSITIONS)
    def test_valid_transitions(self, current, target):
        appointment = make_appointment(start=NOW + timedelta(hours=2), status=current)

        appointment.apply_status(target, NOW)

        assert appointment.status == target

    @pytest.mark.parametrize("current,target", INVALID_TRANSITIONS)
    def test_invalid_transitions_leave_status_unchanged(self, current, target):
        appointment = make_appointment(start=NOW + timedelta(hours=2), status=current)

        with pytest.raises(DomainRuleViolation):
            appointment.apply_status(target, NOW)

        assert appointment.status == current
        assert appointment.pending_events == ()

    def test_scheduled_to_scheduled_is_a_no_op(self):
        appointment = make_appointment()
        appointment.mark_scheduled()
        assert appointment.status == S.SCHEDULED

    def test_cannot_revert_to_scheduled(self):
        appointment = make_appointment(status=S.COMPLETED)
        with pytest.raises(DomainRuleViolation, match="Cannot revert to Scheduled."):
            appointment.mark_scheduled()

    def test_repeating_the_current_status_is_reported(self):
        appointment = make_appointment(status=S.COMPLETED)
        with pytest.raises(DomainRuleViolation, match="already completed"):
            appointment.mark_completed()

    def test_in_progress_cannot_become_no_show(self):
        appointment = make_appointment(status=S.IN_PROGRESS)
        with pytest.raises(DomainRuleViolation, match="in progress"):
            appointment.mark_no_show()

    def test_rejected_transition_names_the_allowed_targets(self):
        appointment = make_appointment(status=S.IN_PROGRESS)

        with pytest.raises(DomainRuleViolation) as exc_info:
            appointment.mark_no_show()

        assert exc_info.value.message == (
            "Cannot mark a in progress appointment as no-show; "
            "allowed from in progress: completed."
        )

    def test_terminal_status_reports_no_allowed_targets(self):
        appointment = make_appointment(status=S.NO_SHOW)

        with pytest.raises(DomainRuleViolation, match="allowed from no-show: none"):
            appointment.mark_completed()

    @pytest.mark.parametrize(
        "status,active",
        [
            (S.SCHEDULED, True),
            (S.IN_PROGRESS, True),
            (S.COMPLETED, False),
            (S.CANCELED, False),
            (S.NO_SHOW, False),
        ],
    )
    def test_is_active(self, status, active):
        assert make_appointment(status=status).is_active is active


@pytest.mark.unit
@pytest.mark.domain
@pytest.mark.appointment
@pytest.mark.events
class TestAppointmentCancellation:
    def test_cancel_future_appointment_records_event(self):
        appointment = make_appointment(start=NOW + timedelta(hours=1))

        appointment.cancel(NOW)

        assert appointment.status == S.CANCELED
        events = appointment.pull_events()
        assert len(events) == 1
        assert isinstance(events[0], AppointmentCanceled)
        assert events[0].appointment_id == appointment.id

    def test_cancel_twice_is_rejected(self):
        appointment = make_appointment(start=NOW + timedelta(hours=1))
        appointment.cancel(NOW)

        with pytest.raises(DomainRuleViolation, match="already canceled"):
            appointment.cancel(NOW)

    def test_cancel_started_appointment_is_rejected(self):
        appointment = make_appointment(start=NOW)
        with pytest.raises(DomainRuleViolation, match="already started or finished"):
            appointment.cancel(NOW)
        assert appointment.status == S.SCHEDULED

    @pytest.mark.parametrize("status", [S.IN_PROGRESS, S.COMPLETED, S.NO_SHOW])
    def test_cancel_from_other_states_is_rejected(self, status):
        appointment = make_appointment(start=NOW + timedelta(hours=1), status=status)
        with pytest.raises(DomainRuleViolation, match="Cannot cancel a"):
            appointment.cancel(NOW)

    def test_pull_events_clears_buffer(self):
        start = NOW + timedelta(days=1)
        appointment = Appointment.create(uuid.uuid4(), start, start + timedelta(hours=1), NOW)
        appointment.cancel(NOW)

        events = appointment.pull_events()

        assert [e.name for e in events] == ["AppointmentBooked", "AppointmentCanceled"]
        assert appointment.pending_events == ()
        assert appointment.pull_events() == []

    def test_only_scheduled_appointments_can_be_deleted(self):
        make_appointment().ensure_can_be_deleted()
        with pytest.raises(DomainRuleViolation, match="Only scheduled appointments"):
            make_appointment(status=S.CANCELED).ensure_can_be_deleted()


@pytest.mark.unit
@pytest.mark.domain
class TestAppointmentStatusParsing:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Scheduled", S.SCHEDULED),
            ("inprogress", S.IN_PROGRESS),
            ("in_progress", S.IN_PROGRESS),
            ("No-Show", S.NO_SHOW),
            (2, S.CANCELED),
            ("3", S.COMPLETED),
            (4, S.IN_PROGRESS),
            (S.COMPLETED, S.COMPLETED),
        ],
    )
    def test_parse_accepts_names_and_legacy_codes(self, raw, expected):
        assert S.parse(raw) == expected

    @pytest.mark.parametrize("raw", ["Archived", 0, 6, "", True, None])
    def test_parse_rejects_unknown_values(self, raw):
        with pytest.raises(ValueError):
            S.parse(raw)


@pytest.mark.unit
@pytest.mark.domain
@pytest.mark.customer
class TestCustomerEntity:
    def test_email_is_normalised(self):
        customer = Customer(name="  Grace Hopper ", email=" Grace@Example.COM ")
        assert customer.name == "Grace Hopper"
        assert customer.email == "grace@example.com"

    @pytest.mark.parametrize(
        "name,email,message",
        [
            ("", "a@b.c", "Name is required"),
            ("Grace", "", "Email is required"),
            ("Grace", "not-an-email", "Invalid email format"),
        ],
    )
    def test_invalid_customer(self, name, email, message):
        with pytest.raises(ValueError, match=message):
            Customer(name=name, email=email)
