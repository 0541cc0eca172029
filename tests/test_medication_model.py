from datetime import date, time

import pytest

from models.medication import DayOfWeek, Medication, MedicationUrgency, parse_intake_time
from models.user import User
from services.medication_store import SqlMedicationStore


def _medication(**fields):
    fields.setdefault("user_id", 1)
    fields.setdefault("name", "Metformin")
    fields.setdefault("intake_times", [])
    fields.setdefault("days_of_week", [])
    return Medication(**fields)


def test_day_of_week_from_date():
    assert DayOfWeek.from_date(date(2024, 1, 1)) is DayOfWeek.MONDAY
    assert DayOfWeek.from_date(date(2024, 1, 7)) is DayOfWeek.SUNDAY
    assert DayOfWeek.WEDNESDAY.display_name == "Wednesday"


def test_parse_intake_time_accepts_short_form_and_rejects_garbage():
    assert parse_intake_time("08:30:00") == time(8, 30)
    assert parse_intake_time("8:30") == time(8, 30)
    assert parse_intake_time("half past eight") is None
    assert parse_intake_time(None) is None


def test_add_intake_time_keeps_a_sorted_set():
    med = _medication()

    assert med.add_intake_time(time(20, 0)) is True
    assert med.add_intake_time(time(8, 0)) is True
    assert med.add_intake_time(time(8, 0)) is False

    assert med.intake_times == ["08:00:00", "20:00:00"]
    assert med.intake_time_values() == [time(8, 0), time(20, 0)]


def test_remove_intake_time():
    med = _medication(intake_times=["08:00:00", "20:00:00"])

    assert med.remove_intake_time(time(8, 0)) is True
    assert med.remove_intake_time(time(8, 0)) is False
    assert med.intake_times == ["20:00:00"]


def test_null_intake_time_is_rejected():
    med = _medication()

    with pytest.raises(ValueError):
        med.add_intake_time(None)
    with pytest.raises(ValueError):
        med.remove_intake_time(None)


def test_set_intake_times_reconciles():
    med = _medication(intake_times=["08:00:00", "12:00:00"])

    med.set_intake_times([time(12, 0), time(18, 0)])

    assert med.intake_time_values() == [time(12, 0), time(18, 0)]


def test_days_are_kept_in_week_order():
    med = _medication()

    med.add_day(DayOfWeek.FRIDAY)
    med.add_day(DayOfWeek.MONDAY)
    med.add_day(DayOfWeek.FRIDAY)

    assert med.days_of_week == ["MONDAY", "FRIDAY"]
    assert med.is_taken_on_day(DayOfWeek.MONDAY)
    assert not med.is_taken_on_day(DayOfWeek.TUESDAY)

    med.remove_day(DayOfWeek.MONDAY)
    assert med.days_of_week == ["FRIDAY"]


def test_no_days_means_every_day():
    med = _medication(days_of_week=["MONDAY"])
    med.clear_days()

    assert all(med.is_taken_on_day(d) for d in DayOfWeek)


def test_sql_store_reads_active_medications(db_session):
    user = User(username="alice", password_hash="x")
    other = User(username="bob", password_hash="x")
    db_session.add_all([user, other])
    db_session.flush()
    db_session.add_all(
        [
            _medication(
                user_id=user.id,
                name="Active",
                urgency=MedicationUrgency.URGENT,
                intake_times=["08:00:00", "garbled"],
                days_of_week=["MONDAY"],
            ),
            _medication(user_id=user.id, name="Stopped", is_active=False, intake_times=["09:00:00"]),
            _medication(user_id=other.id, name="Not mine", intake_times=["09:00:00"]),
        ]
    )
    db_session.commit()

    store = SqlMedicationStore(db_session)

    assert store.owner_exists(user.id)
    assert not store.owner_exists(9999)
    assert not store.owner_exists(None)

    (record,) = store.find_active_medications_for_owner(user.id)
    assert record.name == "Active"
    assert record.urgency is MedicationUrgency.URGENT
    assert record.intake_times == (time(8, 0), None)
    assert record.days_of_week == frozenset({DayOfWeek.MONDAY})


def test_deleting_user_removes_medications(db_session):
    user = User(username="carol", password_hash="x")
    db_session.add(user)
    db_session.flush()
    db_session.add(_medication(user_id=user.id))
    db_session.commit()

    db_session.delete(user)
    db_session.commit()

    assert db_session.query(Medication).count() == 0
