"""
Dashboard aggregation: turns today's schedule into the home summary.

  active_medication_count → distinct medication ids in the schedule
  todays_dose_count       → entries strictly after "now"
  upcoming_medications    → those entries, time-ascending (stable)
  alerts                  → advisory placeholders, see build_alerts()
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, time

from models.medication import MedicationUrgency
from services.exceptions import InvalidArgumentError
from services.schedule import DoseStatus, ScheduleEntry, ScheduleGenerator


class AlertCategory(str, enum.Enum):
    REFILL = "Refill"
    INTERACTION = "Interaction"


@dataclass(frozen=True)
class MedicationAlert:
    category: AlertCategory
    message: str
    subject_medication: str | None
    # Alerts are not backed by real refill/interaction analysis yet.
    advisory: bool = True


@dataclass(frozen=True)
class UpcomingMedication:
    name: str
    dosage: str | None
    next_dose_time: time
    taken: bool = False
    medication_id: int | None = None
    instructions: str | None = None
    urgency: MedicationUrgency | None = None
    status: DoseStatus = DoseStatus.UPCOMING

    @property
    def status_text(self) -> str:
        return "Taken" if self.taken else "Pending"


@dataclass
class DashboardSummary:
    active_medication_count: int = 0
    todays_dose_count: int = 0
    upcoming_medications: list[UpcomingMedication] = field(default_factory=list)
    alerts: list[MedicationAlert] = field(default_factory=list)


def _as_time(now) -> time:
    if now is None:
        raise InvalidArgumentError("now cannot be null")
    if isinstance(now, datetime):
        return now.time()
    if isinstance(now, time):
        return now
    raise InvalidArgumentError(f"now must be a datetime or time, got {type(now).__name__}")


def to_upcoming(entry: ScheduleEntry) -> UpcomingMedication:
    return UpcomingMedication(
        name=entry.medication_name,
        dosage=entry.dosage,
        next_dose_time=entry.time,
        taken=entry.taken,
        medication_id=entry.medication_id,
        instructions=entry.instructions,
        urgency=entry.urgency,
        status=entry.status,
    )


class DashboardAggregator:
    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger if logger is not None else logging.getLogger(__name__)

    def summarize(self, owner, entries: list[ScheduleEntry], now) -> DashboardSummary:
        if owner is None:
            self.log.error("Owner reference cannot be null")
            raise InvalidArgumentError("Owner cannot be null")
        if entries is None:
            raise InvalidArgumentError("Schedule entries cannot be null")
        now_time = _as_time(now)

        active_ids = {e.medication_id for e in entries}
        # sorted() is stable: equal times keep their schedule order.
        upcoming = sorted(
            (e for e in entries if e.time is not None and e.time > now_time),
            key=lambda e: e.time,
        )
        summary = DashboardSummary(
            active_medication_count=len(active_ids),
            todays_dose_count=len(upcoming),
            upcoming_medications=[to_upcoming(e) for e in upcoming],
            alerts=self.build_alerts(upcoming),
        )
        self.log.info(
            "Built dashboard for %s: %d active medications, %d upcoming doses, %d alerts",
            owner,
            summary.active_medication_count,
            summary.todays_dose_count,
            len(summary.alerts),
        )
        return summary

    def build_alerts(self, upcoming: list[ScheduleEntry]) -> list[MedicationAlert]:
        """Placeholder alerts. Callers must treat them as advisory only."""
        alerts = []
        if upcoming:
            subject = upcoming[0].medication_name
            alerts.append(
                MedicationAlert(
                    category=AlertCategory.REFILL,
                    message=f"Your medication '{subject}' may need a refill soon",
                    subject_medication=subject,
                )
            )
        alerts.append(
            MedicationAlert(
                category=AlertCategory.INTERACTION,
                message="Review possible interactions between your medications with your pharmacist",
                subject_medication=None,
            )
        )
        self.log.debug("Created %d advisory alerts", len(alerts))
        return alerts


def build_dashboard(generator: ScheduleGenerator, owner, owner_id, now: datetime, aggregator=None) -> DashboardSummary:
    """Schedule for ``now``'s date, then aggregate it against ``now``."""
    if owner is None:
        raise InvalidArgumentError("Owner cannot be null")
    if not isinstance(now, datetime):
        raise InvalidArgumentError("now must be a datetime")
    entries = generator.generate(owner_id, now.date())
    return (aggregator or DashboardAggregator()).summarize(owner, entries, now)
