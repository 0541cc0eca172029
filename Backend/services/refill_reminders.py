import logging
from dataclasses import dataclass
from datetime import date, timedelta

from config import REFILL_HORIZON_DAYS
from models.medication import MedicationUrgency
from services.exceptions import InvalidArgumentError
from services.medication_store import MedicationRecord, MedicationStore
from services.schedule import as_date, require_owner


@dataclass(frozen=True)
class RefillReminder:
    medication_id: int
    medication_name: str
    urgency: MedicationUrgency
    remaining_doses: int
    refill_by_date: date

    def days_until_refill(self, today: date) -> int:
        return max((self.refill_by_date - today).days, 0)


def calculate_remaining_doses(record: MedicationRecord, horizon_days: int = REFILL_HORIZON_DAYS) -> int:
    # Assumes exactly `horizon_days` of supply on hand; not an inventory model.
    return len(record.intake_times) * horizon_days


class RefillEstimator:
    """One reminder per active medication, regardless of weekday."""

    def __init__(
        self,
        store: MedicationStore,
        horizon_days: int = REFILL_HORIZON_DAYS,
        logger: logging.Logger | None = None,
    ):
        if horizon_days is None or int(horizon_days) < 1:
            raise InvalidArgumentError("Refill horizon must be at least one day")
        self.store = store
        self.horizon_days = int(horizon_days)
        self.log = logger if logger is not None else logging.getLogger(__name__)

    def estimate(self, owner_id, today) -> list[RefillReminder]:
        today = as_date(today)
        require_owner(self.store, owner_id, self.log)

        records = self.store.find_active_medications_for_owner(owner_id)
        refill_by = today + timedelta(days=self.horizon_days)
        reminders = [
            RefillReminder(
                medication_id=record.id,
                medication_name=record.name,
                urgency=record.urgency,
                remaining_doses=calculate_remaining_doses(record, self.horizon_days),
                refill_by_date=refill_by,
            )
            for record in records
            if record is not None and record.active
        ]
        self.log.info("Generated %d refill reminders for user %s", len(reminders), owner_id)
        return reminders
