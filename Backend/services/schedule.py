"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
MedTrack Schedule Generator: today's doses for one user
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

  owner_exists(owner)?  ── no ──→ UserNotFoundError
          │ yes
  find_active_medications_for_owner(owner)
          │
  for each medication:
     no intake times        → skipped (debug)
     days set, today absent → skipped
     otherwise              → one ScheduleEntry per intake time

MISSING INTAKE TIMES (a null inside an otherwise valid set):
  midnight → entry at 00:00 + warning      (default, legacy behaviour)
  skip     → that dose dropped + warning
  fail     → whole generation fails

Anything unexpected while fetching/expanding is re-raised as
ScheduleGenerationError with the original error chained.

The generator is read-only and keeps no state between calls; "today" is
always passed in.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import date, datetime, time

from models.medication import DayOfWeek, MedicationUrgency
from services.exceptions import (
    InvalidArgumentError,
    MissingIntakeTimeError,
    ScheduleGenerationError,
    UserNotFoundError,
)
from services.medication_store import MedicationRecord, MedicationStore


class MissingTimePolicy(str, enum.Enum):
    MIDNIGHT = "midnight"
    SKIP = "skip"
    FAIL = "fail"

    @classmethod
    def parse(cls, raw) -> "MissingTimePolicy":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in cls)
            raise InvalidArgumentError(f"Unknown missing intake time policy '{raw}'. Use one of: {allowed}")


class DoseStatus(str, enum.Enum):
    UPCOMING = "UPCOMING"
    TAKEN = "TAKEN"
    MISSED = "MISSED"


@dataclass(frozen=True)
class ScheduleEntry:
    """One dose of one medication on the current day."""
    medication_id: int
    medication_name: str
    dosage: str | None
    instructions: str | None
    urgency: MedicationUrgency
    time: time
    taken: bool = False
    status: DoseStatus = DoseStatus.UPCOMING

    @property
    def formatted_time(self) -> str:
        return self.time.strftime("%H:%M") if self.time is not None else ""


def require_owner(store: MedicationStore, owner_id, log: logging.Logger) -> None:
    if owner_id is None or not store.owner_exists(owner_id):
        log.error("User not found: %s", owner_id)
        raise UserNotFoundError(owner_id)


def as_date(today) -> date:
    if today is None:
        raise InvalidArgumentError("today cannot be null")
    if isinstance(today, datetime):
        return today.date()
    if isinstance(today, date):
        return today
    raise InvalidArgumentError(f"today must be a date, got {type(today).__name__}")


class ScheduleGenerator:
    def __init__(
        self,
        store: MedicationStore,
        missing_time_policy: MissingTimePolicy | str = MissingTimePolicy.MIDNIGHT,
        logger: logging.Logger | None = None,
    ):
        self.store = store
        self.missing_time_policy = MissingTimePolicy.parse(missing_time_policy)
        self.log = logger if logger is not None else logging.getLogger(__name__)

    def generate(self, owner_id, today) -> list[ScheduleEntry]:
        today = as_date(today)
        day = DayOfWeek.from_date(today)
        self.log.debug("Generating schedule for user %s on %s (%s)", owner_id, today, day.value)

        try:
            require_owner(self.store, owner_id, self.log)
            records = self.store.find_active_medications_for_owner(owner_id)
            if not records:
                self.log.info("No medications found for user %s", owner_id)
                return []

            schedule: list[ScheduleEntry] = []
            for record in records:
                schedule.extend(self._expand(record, day))
        except (UserNotFoundError, ScheduleGenerationError):
            raise
        except Exception as exc:
            self.log.error("Error generating schedule for user %s: %s", owner_id, exc, exc_info=True)
            raise ScheduleGenerationError("Failed to generate medication schedule") from exc

        self.log.info("Generated schedule with %d entries for user %s", len(schedule), owner_id)
        return schedule

    def _expand(self, record: MedicationRecord | None, day: DayOfWeek) -> list[ScheduleEntry]:
        if record is None:
            return []
        if not record.active:
            self.log.debug("Medication %s skipped - inactive", record.id)
            return []
        if not record.intake_times:
            self.log.debug("Medication %s skipped - no intake times", record.id)
            return []
        if not record.applies_on(day):
            self.log.debug("Medication %s skipped - not scheduled on %s", record.id, day.value)
            return []

        entries = []
        for intake_time in record.intake_times:
            resolved = self._resolve_time(record, intake_time)
            if resolved is None:
                continue
            entries.append(
                ScheduleEntry(
                    medication_id=record.id,
                    medication_name=record.name,
                    dosage=record.dosage,
                    instructions=record.instructions,
                    urgency=record.urgency,
                    time=resolved,
                )
            )
        entries.sort(key=lambda e: e.time)
        return entries

    def _resolve_time(self, record: MedicationRecord, intake_time: time | None) -> time | None:
        if intake_time is not None:
            return intake_time
        if self.missing_time_policy is MissingTimePolicy.FAIL:
            raise MissingIntakeTimeError(record.id)
        if self.missing_time_policy is MissingTimePolicy.SKIP:
            self.log.warning("Null intake time encountered for medication ID: %s, dose skipped", record.id)
            return None
        self.log.warning("Null intake time encountered for medication ID: %s, defaulting to 00:00", record.id)
        return time(0, 0)
