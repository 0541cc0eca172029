from datetime import date, datetime, time
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Enum as SAEnum
from sqlalchemy.sql import func

from database import Base

TIME_FORMAT = "%H:%M:%S"


class MedicationUrgency(str, enum.Enum):
    URGENT = "URGENT"
    NONURGENT = "NONURGENT"
    ROUTINE = "ROUTINE"


class DayOfWeek(str, enum.Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_date(cls, day: date) -> "DayOfWeek":
        # date.weekday(): Monday == 0 ... Sunday == 6, same order as the members.
        return list(cls)[day.weekday()]


def format_intake_time(value: time) -> str:
    return value.replace(microsecond=0).strftime(TIME_FORMAT)


def parse_intake_time(raw) -> time | None:
    """Stored value -> time. Anything unreadable comes back as None."""
    if raw is None:
        return None
    if isinstance(raw, time):
        return raw
    text = str(raw).strip()
    for fmt in (TIME_FORMAT, "%H:%M"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    return None


class Medication(Base):
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    urgency = Column(SAEnum(MedicationUrgency), nullable=False, default=MedicationUrgency.ROUTINE)
    dosage = Column(String(120), nullable=True)
    instructions = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    # Value collections owned by the row: "HH:MM:SS" strings and day tags.
    intake_times = Column(JSON, nullable=False, default=list)
    days_of_week = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # JSON columns only notice reassignment, so every mutator builds a new list.

    def intake_time_values(self) -> list[time]:
        values = [parse_intake_time(raw) for raw in (self.intake_times or [])]
        return sorted(v for v in values if v is not None)

    def add_intake_time(self, value: time) -> bool:
        if value is None:
            raise ValueError("Intake time cannot be null")
        key = format_intake_time(value)
        current = list(self.intake_times or [])
        if key in current:
            return False
        self.intake_times = sorted(current + [key])
        return True

    def remove_intake_time(self, value: time) -> bool:
        if value is None:
            raise ValueError("Intake time cannot be null")
        key = format_intake_time(value)
        current = list(self.intake_times or [])
        if key not in current:
            return False
        self.intake_times = [t for t in current if t != key]
        return True

    def set_intake_times(self, values) -> None:
        """Reconcile the stored set with ``values``: drop missing, add new."""
        wanted = {format_intake_time(v) for v in values if v is not None}
        for existing in self.intake_time_values():
            if format_intake_time(existing) not in wanted:
                self.remove_intake_time(existing)
        for value in values:
            if value is not None:
                self.add_intake_time(value)

    def day_values(self) -> set[DayOfWeek]:
        return {DayOfWeek(d) for d in (self.days_of_week or [])}

    def add_day(self, day: DayOfWeek) -> None:
        if day is None:
            raise ValueError("Day cannot be null")
        days = self.day_values()
        days.add(DayOfWeek(day))
        self.days_of_week = [d.value for d in DayOfWeek if d in days]

    def remove_day(self, day: DayOfWeek) -> None:
        if day is None:
            raise ValueError("Day cannot be null")
        days = self.day_values()
        days.discard(DayOfWeek(day))
        self.days_of_week = [d.value for d in DayOfWeek if d in days]

    def clear_days(self) -> None:
        self.days_of_week = []

    def is_taken_on_day(self, day: DayOfWeek) -> bool:
        """Empty day set means every day."""
        days = self.day_values()
        return not days or DayOfWeek(day) in days
