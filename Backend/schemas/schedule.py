import datetime

from pydantic import BaseModel

from models.medication import MedicationUrgency
from services.dashboard import AlertCategory
from services.schedule import DoseStatus


class ScheduleEntryOut(BaseModel):
    medication_id: int
    medication_name: str
    dosage: str | None
    instructions: str | None
    urgency: MedicationUrgency
    time: datetime.time
    formatted_time: str
    taken: bool
    status: DoseStatus


class UpcomingMedicationOut(BaseModel):
    name: str
    dosage: str | None
    next_dose_time: datetime.time
    taken: bool
    medication_id: int | None = None
    urgency: MedicationUrgency | None = None
    status_text: str = "Pending"


class MedicationAlertOut(BaseModel):
    category: AlertCategory
    message: str
    subject_medication: str | None
    advisory: bool = True


class DashboardSummaryOut(BaseModel):
    username: str
    has_medications: bool
    active_medication_count: int
    todays_dose_count: int
    upcoming_medications: list[UpcomingMedicationOut]
    alerts: list[MedicationAlertOut]


class RefillReminderOut(BaseModel):
    medication_id: int
    medication_name: str
    urgency: MedicationUrgency
    remaining_doses: int
    refill_by_date: datetime.date
    days_until_refill: int
