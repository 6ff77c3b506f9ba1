from datetime import datetime, timedelta, timezone

import pytest

from beautycenter.domain.appointments.scheduling import SlotLockRegistry, is_slot_available, slot_key
from beautycenter.models import AppointmentStatus
from beautycenter.shared.exceptions import NotFoundError, SlotConflictError, ValidationError


def at(hour, minute=0, day=10):
    return datetime(2024, 1, day, hour, minute)


def test_worked_example(appointment_service, booking, company, employee):
    first = appointment_service.create_appointment(booking(at(9), at(10)))
    assert first.status == AppointmentStatus.REQUESTED

    with pytest.raises(SlotConflictError):
        appointment_service.create_appointment(booking(at(9, 30), at(10, 30)))

    third = appointment_service.create_appointment(booking(at(10), at(11)))
    assert third.id != first.id
    assert third.status == AppointmentStatus.REQUESTED


@pytest.mark.parametrize(
    "start, end",
    [
        (at(7), at(8)),
        (at(11), at(12)),
        (at(10, 30), at(11, 30)),
        (at(10), at(11, 0, day=11)),
    ],
)
def test_non_overlapping_windows_are_available(appointment_service, booking, db, company, employee, start, end):
    appointment_service.create_appointment(booking(at(9), at(10)))
    assert is_slot_available(db, company.id, employee.id, start, end)


@pytest.mark.parametrize(
    "start, end",
    [
        (at(9), at(10)),  # identical
        (at(8, 30), at(9, 30)),  # overlaps the start
        (at(9, 30), at(10, 30)),  # overlaps the end
        (at(9, 15), at(9, 45)),  # inside
        (at(8), at(11)),  # contains
        (at(9, 59), at(10, 1)),  # one minute each side
    ],
)
def test_overlapping_windows_are_unavailable(appointment_service, booking, db, company, employee, start, end):
    appointment_service.create_appointment(booking(at(9), at(10)))
    assert not is_slot_available(db, company.id, employee.id, start, end)


def test_abutting_windows_do_not_conflict(appointment_service, booking, db, company, employee):
    appointment_service.create_appointment(booking(at(10), at(11)))

    assert is_slot_available(db, company.id, employee.id, at(11), at(12))
    assert is_slot_available(db, company.id, employee.id, at(9), at(10))


def test_cancelling_frees_the_slot(appointment_service, booking, db, company, employee):
    appointment = appointment_service.create_appointment(booking(at(9), at(10)))
    assert not is_slot_available(db, company.id, employee.id, at(9), at(10))

    appointment_service.cancel_appointment(appointment.id)

    assert is_slot_available(db, company.id, employee.id, at(9), at(10))
    appointment_service.create_appointment(booking(at(9), at(10)))


@pytest.mark.parametrize("trigger", ["cancel", "no_show", "complete"])
def test_terminal_appointments_do_not_hold_the_slot(appointment_service, booking, db, company, employee, trigger):
    appointment = appointment_service.create_appointment(booking(at(9), at(10)))
    if trigger == "cancel":
        appointment_service.cancel_appointment(appointment.id)
    elif trigger == "no_show":
        appointment_service.confirm_appointment(appointment.id)
        appointment_service.mark_no_show(appointment.id)
    else:
        appointment_service.confirm_appointment(appointment.id)
        appointment_service.start_appointment(appointment.id)
        appointment_service.complete_appointment(appointment.id)

    assert is_slot_available(db, company.id, employee.id, at(9), at(10))


def test_in_progress_appointment_holds_the_slot(appointment_service, booking, db, company, employee):
    appointment = appointment_service.create_appointment(booking(at(9), at(10)))
    appointment_service.confirm_appointment(appointment.id)
    appointment_service.start_appointment(appointment.id)

    assert not is_slot_available(db, company.id, employee.id, at(9, 30), at(10, 30))


def test_other_employee_and_company_are_independent(
    appointment_service, booking, db, company, make_company, make_employee, employee
):
    appointment_service.create_appointment(booking(at(9), at(10)))

    colleague = make_employee(company, first_name="Bea")
    assert is_slot_available(db, company.id, colleague.id, at(9), at(10))

    other_company = make_company("Other Salon")
    assert is_slot_available(db, other_company.id, employee.id, at(9), at(10))


@pytest.mark.parametrize(
    "company_id, employee_id, start, end",
    [
        (None, "e", at(9), at(10)),
        ("c", None, at(9), at(10)),
        ("c", "e", None, at(10)),
        ("c", "e", at(9), None),
        ("c", "e", at(10), at(10)),
        ("c", "e", at(10), at(9)),
    ],
)
def test_invalid_arguments_report_unavailable(db, company_id, employee_id, start, end):
    assert is_slot_available(db, company_id, employee_id, start, end) is False


def test_exclude_appointment_ignores_itself(appointment_service, booking, db, company, employee):
    appointment = appointment_service.create_appointment(booking(at(9), at(10)))

    assert not is_slot_available(db, company.id, employee.id, at(9, 30), at(10, 30))
    assert is_slot_available(
        db, company.id, employee.id, at(9, 30), at(10, 30), exclude_appointment_id=appointment.id
    )


def test_timezone_aware_input_is_compared_in_utc(appointment_service, booking, db, company, employee):
    appointment_service.create_appointment(booking(at(9), at(10)))

    plus_two = timezone(timedelta(hours=2))
    # 11:30+02:00 is 09:30 UTC
    start = datetime(2024, 1, 10, 11, 30, tzinfo=plus_two)
    assert not is_slot_available(db, company.id, employee.id, start, start + timedelta(hours=1))
    # 12:00+02:00 is 10:00 UTC, abutting
    start = datetime(2024, 1, 10, 12, 0, tzinfo=plus_two)
    assert is_slot_available(db, company.id, employee.id, start, start + timedelta(hours=1))


def test_conflict_persists_nothing(appointment_service, booking, company):
    appointment_service.create_appointment(booking(at(9), at(10)))
    with pytest.raises(SlotConflictError):
        appointment_service.create_appointment(booking(at(9), at(10)))

    assert len(appointment_service.list_appointments(company_id=company.id)) == 1


def test_end_time_defaults_to_service_duration(appointment_service, booking, make_service, company):
    appointment = appointment_service.create_appointment(booking(at(9)))
    assert appointment.end_time == at(10)

    long_service = make_service(company, name="Coloring", duration_minutes=150, price="90.00")
    appointment = appointment_service.create_appointment(booking(at(13), serviceId=long_service.id))
    assert appointment.end_time == at(15, 30)
    assert appointment.duration_minutes == 150


def test_total_price_defaults_to_sum_of_services(appointment_service, booking, make_service, company):
    manicure = make_service(company, name="Manicure", duration_minutes=30, price="25.50")
    appointment = appointment_service.create_appointment(
        booking(at(9), additionalServiceIds=[manicure.id])
    )

    assert float(appointment.total_price) == pytest.approx(65.50)
    assert appointment.additional_service_ids == [manicure.id]


def test_explicit_total_price_is_kept(appointment_service, booking):
    appointment = appointment_service.create_appointment(booking(at(9), totalPrice="10.00"))
    assert float(appointment.total_price) == pytest.approx(10.0)


def test_end_before_start_is_rejected(appointment_service, booking):
    with pytest.raises(ValidationError):
        appointment_service.create_appointment(booking(at(10), at(9)))
    with pytest.raises(ValidationError):
        appointment_service.create_appointment(booking(at(10), at(10)))


def test_initial_status_confirmed_allowed_terminal_rejected(appointment_service, booking):
    appointment = appointment_service.create_appointment(
        booking(at(9), at(10), status=AppointmentStatus.CONFIRMED)
    )
    assert appointment.status == AppointmentStatus.CONFIRMED

    with pytest.raises(ValidationError):
        appointment_service.create_appointment(booking(at(11), at(12), status=AppointmentStatus.COMPLETED))


def test_missing_references_raise_not_found(appointment_service, booking):
    with pytest.raises(NotFoundError):
        appointment_service.create_appointment(booking(at(9), customerId="missing"))
    with pytest.raises(NotFoundError):
        appointment_service.create_appointment(booking(at(9), employeeId="missing"))
    with pytest.raises(NotFoundError):
        appointment_service.create_appointment(booking(at(9), additionalServiceIds=["missing"]))


def test_employee_from_another_company_is_rejected(appointment_service, booking, make_company, make_employee):
    stranger = make_employee(make_company("Other Salon"), first_name="Zoe")
    with pytest.raises(ValidationError):
        appointment_service.create_appointment(booking(at(9), employeeId=stranger.id))


def test_update_moves_slot_and_rechecks(appointment_service, booking, db, company, employee):
    from beautycenter.domain.appointments.schemas import AppointmentUpdate

    first = appointment_service.create_appointment(booking(at(9), at(10)))
    second = appointment_service.create_appointment(booking(at(11), at(12)))

    # Overlapping itself is fine
    moved = appointment_service.update_appointment(
        first.id, AppointmentUpdate(startTime=at(9, 30), endTime=at(10, 30))
    )
    assert moved.start_time == at(9, 30)

    with pytest.raises(SlotConflictError):
        appointment_service.update_appointment(
            first.id, AppointmentUpdate(startTime=at(10, 45), endTime=at(11, 15))
        )

    db.expire_all()
    assert appointment_service.get_appointment(first.id).start_time == at(9, 30)
    assert appointment_service.get_appointment(second.id).start_time == at(11)


def test_slot_lock_registry_maps_pairs_to_stable_stripes():
    registry = SlotLockRegistry(stripes=4)

    assert registry.lock_for("c1", "e1") is registry.lock_for("c1", "e1")
    assert slot_key("c1", "e1") == slot_key("c1", "e1")
    assert slot_key("c1", "e1") != slot_key("c1", "e2")

    with registry.hold("c1", "e1"):
        assert registry.lock_for("c1", "e1").locked()
    assert not registry.lock_for("c1", "e1").locked()


def test_slot_lock_registry_rejects_zero_stripes():
    with pytest.raises(ValueError):
        SlotLockRegistry(stripes=0)
