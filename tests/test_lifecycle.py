from datetime import datetime

import pytest

from beautycenter.domain.appointments.lifecycle import TRANSITIONS, TransitionPolicy, can_transition
from beautycenter.domain.appointments.scheduling import SlotLockRegistry
from beautycenter.domain.appointments.service import AppointmentService
from beautycenter.domain.events import AppointmentStatusChanged
from beautycenter.models import AppointmentStatus
from beautycenter.shared.exceptions import InvalidTransitionError, NotFoundError

S = AppointmentStatus

START = datetime(2024, 1, 10, 9, 0)
END = datetime(2024, 1, 10, 10, 0)

# Sequence of triggers that brings a new appointment into each status
PATHS = {
    S.REQUESTED: [],
    S.CONFIRMED: ["confirm"],
    S.IN_PROGRESS: ["confirm", "start"],
    S.COMPLETED: ["confirm", "start", "complete"],
    S.CANCELLED: ["cancel"],
    S.NO_SHOW: ["confirm", "mark_no_show"],
}

EXPECTED = {
    ("confirm", S.REQUESTED): S.CONFIRMED,
    ("start", S.CONFIRMED): S.IN_PROGRESS,
    ("complete", S.IN_PROGRESS): S.COMPLETED,
    ("cancel", S.REQUESTED): S.CANCELLED,
    ("cancel", S.CONFIRMED): S.CANCELLED,
    ("mark_no_show", S.CONFIRMED): S.NO_SHOW,
}


def run(service, trigger, appointment_id):
    method = {
        "confirm": service.confirm_appointment,
        "start": service.start_appointment,
        "complete": service.complete_appointment,
        "cancel": service.cancel_appointment,
        "mark_no_show": service.mark_no_show,
    }[trigger]
    return method(appointment_id)


def bring_to(service, booking, status):
    appointment = service.create_appointment(booking(START, END))
    for trigger in PATHS[status]:
        appointment = run(service, trigger, appointment.id)
    assert appointment.status == status
    return appointment


@pytest.fixture
def strict_service(db, event_bus):
    return AppointmentService(
        db, event_bus, slot_lock_registry=SlotLockRegistry(8), policy=TransitionPolicy.STRICT
    )


def test_transition_table_matches_expected():
    for trigger in TRANSITIONS:
        for status in S:
            assert can_transition(trigger, status) == ((trigger, status) in EXPECTED)


@pytest.mark.parametrize("trigger, source", sorted(EXPECTED, key=str))
def test_allowed_transitions(appointment_service, booking, recorder, trigger, source):
    appointment = bring_to(appointment_service, booking, source)
    recorder.events.clear()

    appointment = run(appointment_service, trigger, appointment.id)

    target = EXPECTED[(trigger, source)]
    assert appointment.status == target
    changes = recorder.of_type(AppointmentStatusChanged)
    assert len(changes) == 1
    assert changes[0].appointment_id == appointment.id
    assert changes[0].old_status == source
    assert changes[0].new_status == target


DISALLOWED = [(t, s) for t in TRANSITIONS for s in S if (t, s) not in EXPECTED]


@pytest.mark.parametrize("trigger, source", DISALLOWED)
def test_lenient_policy_leaves_status_unchanged(appointment_service, booking, recorder, trigger, source):
    appointment = bring_to(appointment_service, booking, source)
    recorder.events.clear()

    appointment = run(appointment_service, trigger, appointment.id)

    assert appointment.status == source
    assert recorder.of_type(AppointmentStatusChanged) == []


@pytest.mark.parametrize("trigger, source", DISALLOWED)
def test_strict_policy_raises(strict_service, booking, db, recorder, trigger, source):
    appointment = bring_to(strict_service, booking, source)
    recorder.events.clear()

    with pytest.raises(InvalidTransitionError):
        run(strict_service, trigger, appointment.id)

    db.expire_all()
    assert strict_service.get_appointment(appointment.id).status == source
    assert recorder.events == []


def test_complete_on_requested_is_a_no_op(appointment_service, booking):
    appointment = appointment_service.create_appointment(booking(START, END))

    appointment = appointment_service.complete_appointment(appointment.id)

    assert appointment.status == S.REQUESTED


def test_transitions_on_missing_appointment_raise_not_found(appointment_service):
    for trigger in TRANSITIONS:
        with pytest.raises(NotFoundError):
            run(appointment_service, trigger, "does-not-exist")


def test_add_and_remove_services_in_any_status(appointment_service, booking, make_service, company):
    extra = make_service(company, name="Blow dry", duration_minutes=20, price="15.00")
    appointment = bring_to(appointment_service, booking, S.COMPLETED)
    original_price = appointment.total_price
    original_end = appointment.end_time

    appointment = appointment_service.add_service(appointment.id, extra.id)
    assert appointment.additional_service_ids == [extra.id]
    assert appointment.total_price == original_price
    assert appointment.end_time == original_end

    # adding twice keeps a set
    appointment = appointment_service.add_service(appointment.id, extra.id)
    assert appointment.additional_service_ids == [extra.id]

    appointment = appointment_service.remove_service(appointment.id, extra.id)
    assert appointment.additional_service_ids == []
    assert appointment.status == S.COMPLETED


def test_primary_service_is_never_an_additional_one(appointment_service, booking, service):
    created = appointment_service.create_appointment(booking(START, END, additionalServiceIds=[service.id]))
    assert created.additional_service_ids == []

    appointment = appointment_service.add_service(created.id, service.id)
    assert appointment.additional_service_ids == []
    assert appointment.service_id == service.id


def test_add_service_not_found(appointment_service, booking):
    appointment = appointment_service.create_appointment(booking(START, END))

    with pytest.raises(NotFoundError):
        appointment_service.add_service(appointment.id, "missing-service")
    with pytest.raises(NotFoundError):
        appointment_service.add_service("missing-appointment", "missing-service")
    with pytest.raises(NotFoundError):
        appointment_service.remove_service("missing-appointment", "missing-service")


def test_delete_appointment(appointment_service, booking):
    appointment = appointment_service.create_appointment(booking(START, END))

    appointment_service.delete_appointment(appointment.id)

    with pytest.raises(NotFoundError):
        appointment_service.get_appointment(appointment.id)
