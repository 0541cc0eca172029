from datetime import date, datetime, time

import pytest

from models.medication import MedicationUrgency
from services.dashboard import AlertCategory, DashboardAggregator, build_dashboard
from services.exceptions import InvalidArgumentError, UserNotFoundError
from services.schedule import ScheduleEntry, ScheduleGenerator


def _entry(medication_id, name, at, dosage=None):
    return ScheduleEntry(
        medication_id=medication_id,
        medication_name=name,
        dosage=dosage,
        instructions=None,
        urgency=MedicationUrgency.ROUTINE,
        time=at,
    )


def test_only_doses_after_now_are_counted():
    entries = [_entry(1, "A", time(8, 0)), _entry(1, "A", time(20, 0))]

    summary = DashboardAggregator().summarize("alice", entries, datetime(2024, 1, 1, 10, 0))

    assert summary.todays_dose_count == 1
    assert [m.next_dose_time for m in summary.upcoming_medications] == [time(20, 0)]
    assert summary.active_medication_count == 1


def test_dose_at_exactly_now_is_not_upcoming():
    entries = [_entry(1, "A", time(10, 0))]

    summary = DashboardAggregator().summarize("alice", entries, datetime(2024, 1, 1, 10, 0))

    assert summary.todays_dose_count == 0
    assert summary.upcoming_medications == []


def test_active_count_is_distinct_medications_in_schedule():
    entries = [
        _entry(1, "A", time(8, 0)),
        _entry(1, "A", time(9, 0)),
        _entry(2, "B", time(7, 0)),
    ]

    summary = DashboardAggregator().summarize("alice", entries, time(23, 0))

    assert summary.active_medication_count == 2
    assert summary.todays_dose_count == 0


def test_entries_without_time_are_counted_but_not_upcoming():
    entries = [_entry(1, "A", None), _entry(2, "B", time(15, 0))]

    summary = DashboardAggregator().summarize("alice", entries, time(12, 0))

    assert summary.active_medication_count == 2
    assert summary.todays_dose_count == 1
    assert [m.name for m in summary.upcoming_medications] == ["B"]


def test_upcoming_is_time_ordered_and_stable():
    entries = [
        _entry(1, "A", time(18, 0)),
        _entry(2, "B", time(12, 0)),
        _entry(3, "C", time(12, 0)),
    ]

    summary = DashboardAggregator().summarize("alice", entries, time(6, 0))

    assert [m.name for m in summary.upcoming_medications] == ["B", "C", "A"]


def test_upcoming_medication_fields():
    entries = [_entry(4, "Aspirin", time(22, 0), dosage="75mg")]

    (upcoming,) = DashboardAggregator().summarize("alice", entries, time(6, 0)).upcoming_medications

    assert upcoming.name == "Aspirin"
    assert upcoming.dosage == "75mg"
    assert upcoming.medication_id == 4
    assert upcoming.taken is False
    assert upcoming.status_text == "Pending"
    assert upcoming.urgency is MedicationUrgency.ROUTINE


def test_alerts_reference_earliest_upcoming_medication():
    entries = [_entry(1, "Later", time(21, 0)), _entry(2, "Sooner", time(13, 0))]

    alerts = DashboardAggregator().summarize("alice", entries, time(12, 0)).alerts

    assert [a.category for a in alerts] == [AlertCategory.REFILL, AlertCategory.INTERACTION]
    assert alerts[0].subject_medication == "Sooner"
    assert "Sooner" in alerts[0].message
    assert all(a.advisory for a in alerts)


def test_no_upcoming_doses_leaves_only_interaction_alert():
    summary = DashboardAggregator().summarize("alice", [], time(12, 0))

    assert summary.active_medication_count == 0
    assert [a.category for a in summary.alerts] == [AlertCategory.INTERACTION]
    assert summary.alerts[0].subject_medication is None


def test_null_owner_is_rejected():
    with pytest.raises(InvalidArgumentError):
        DashboardAggregator().summarize(None, [], time(12, 0))


def test_null_entries_are_rejected():
    with pytest.raises(InvalidArgumentError):
        DashboardAggregator().summarize("alice", None, time(12, 0))


def test_build_dashboard_uses_now_for_date_and_cutoff(store):
    store.add(name="Evening", intake_times=(time(8, 0), time(20, 0)))

    summary = build_dashboard(ScheduleGenerator(store), "alice", 1, datetime(2024, 1, 1, 10, 0))

    assert summary.active_medication_count == 1
    assert summary.todays_dose_count == 1
    assert summary.upcoming_medications[0].name == "Evening"


def test_build_dashboard_requires_owner(store):
    with pytest.raises(InvalidArgumentError):
        build_dashboard(ScheduleGenerator(store), None, 1, datetime(2024, 1, 1, 10, 0))


def test_build_dashboard_requires_datetime(store):
    with pytest.raises(InvalidArgumentError):
        build_dashboard(ScheduleGenerator(store), "alice", 1, date(2024, 1, 1))


def test_build_dashboard_propagates_unknown_user(store):
    with pytest.raises(UserNotFoundError):
        build_dashboard(ScheduleGenerator(store), "ghost", 99, datetime(2024, 1, 1, 10, 0))
