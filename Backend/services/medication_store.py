"""
Read side of the medication store.

The schedule, dashboard and refill engines never touch SQLAlchemy directly;
they ask a ``MedicationStore`` for immutable ``MedicationRecord`` values.
``SqlMedicationStore`` is the production implementation, tests use an
in-memory one.
"""

from dataclasses import dataclass
from datetime import time
from typing import Protocol

from sqlalchemy.orm import Session

from models.medication import DayOfWeek, Medication, MedicationUrgency, parse_intake_time
from models.user import User


def _unique(values) -> tuple:
    seen = set()
    out = []
    for v in values or ():
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return tuple(out)


@dataclass(frozen=True)
class MedicationRecord:
    id: int
    owner_id: int
    name: str
    urgency: MedicationUrgency = MedicationUrgency.ROUTINE
    dosage: str | None = None
    instructions: str | None = None
    intake_times: tuple[time | None, ...] = ()
    days_of_week: frozenset[DayOfWeek] = frozenset()
    active: bool = True

    def __post_init__(self):
        # Value-equal intake times collapse; a missing time (None) is kept once.
        object.__setattr__(self, "intake_times", _unique(self.intake_times))
        object.__setattr__(self, "days_of_week", frozenset(DayOfWeek(d) for d in self.days_of_week or ()))
        object.__setattr__(
            self,
            "urgency",
            MedicationUrgency(self.urgency) if self.urgency is not None else MedicationUrgency.ROUTINE,
        )

    def applies_on(self, day: DayOfWeek) -> bool:
        """Empty ``days_of_week`` means every day."""
        return not self.days_of_week or day in self.days_of_week


class MedicationStore(Protocol):
    def owner_exists(self, owner_id) -> bool: ...

    def find_active_medications_for_owner(self, owner_id) -> list[MedicationRecord]: ...


def to_record(row: Medication) -> MedicationRecord:
    return MedicationRecord(
        id=row.id,
        owner_id=row.user_id,
        name=row.name,
        urgency=row.urgency,
        dosage=row.dosage,
        instructions=row.instructions,
        # Unreadable stored strings become None so the missing-time policy decides.
        intake_times=tuple(parse_intake_time(raw) for raw in (row.intake_times or [])),
        days_of_week=frozenset(DayOfWeek(d) for d in (row.days_of_week or [])),
        active=bool(row.is_active),
    )


class SqlMedicationStore:
    def __init__(self, db: Session):
        self.db = db

    def owner_exists(self, owner_id) -> bool:
        if owner_id is None:
            return False
        return self.db.query(User.id).filter(User.id == owner_id).first() is not None

    def find_active_medications_for_owner(self, owner_id) -> list[MedicationRecord]:
        rows = (
            self.db.query(Medication)
            .filter(Medication.user_id == owner_id, Medication.is_active.is_(True))
            .order_by(Medication.id.asc())
            .all()
        )
        return [to_record(row) for row in rows]
