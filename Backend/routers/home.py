from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from config import APP_TIMEZONE, MISSING_INTAKE_TIME_POLICY, REFILL_HORIZON_DAYS
from database import get_db
from dependencies import get_current_user
from models.user import User
from schemas.schedule import (
    DashboardSummaryOut,
    MedicationAlertOut,
    RefillReminderOut,
    ScheduleEntryOut,
    UpcomingMedicationOut,
)
from services.dashboard import DashboardSummary, build_dashboard
from services import medications as medication_service
from services.exceptions import InvalidArgumentError, ScheduleGenerationError, UserNotFoundError
from services.medication_store import SqlMedicationStore
from services.refill_reminders import RefillEstimator, RefillReminder
from services.schedule import ScheduleEntry, ScheduleGenerator

router = APIRouter(prefix="/home", tags=["Home"])


def _now() -> datetime:
    return datetime.now(ZoneInfo(APP_TIMEZONE))


def _generator(db: Session) -> ScheduleGenerator:
    return ScheduleGenerator(SqlMedicationStore(db), missing_time_policy=MISSING_INTAKE_TIME_POLICY)


def _entry_out(entry: ScheduleEntry) -> ScheduleEntryOut:
    return ScheduleEntryOut(
        medication_id=entry.medication_id,
        medication_name=entry.medication_name,
        dosage=entry.dosage,
        instructions=entry.instructions,
        urgency=entry.urgency,
        time=entry.time,
        formatted_time=entry.formatted_time,
        taken=entry.taken,
        status=entry.status,
    )


def _summary_out(username: str, has_medications: bool, summary: DashboardSummary) -> DashboardSummaryOut:
    return DashboardSummaryOut(
        username=username,
        has_medications=has_medications,
        active_medication_count=summary.active_medication_count,
        todays_dose_count=summary.todays_dose_count,
        upcoming_medications=[
            UpcomingMedicationOut(
                name=m.name,
                dosage=m.dosage,
                next_dose_time=m.next_dose_time,
                taken=m.taken,
                medication_id=m.medication_id,
                urgency=m.urgency,
                status_text=m.status_text,
            )
            for m in summary.upcoming_medications
        ],
        alerts=[
            MedicationAlertOut(
                category=a.category,
                message=a.message,
                subject_medication=a.subject_medication,
                advisory=a.advisory,
            )
            for a in summary.alerts
        ],
    )


def _refill_out(reminder: RefillReminder, today) -> RefillReminderOut:
    return RefillReminderOut(
        medication_id=reminder.medication_id,
        medication_name=reminder.medication_name,
        urgency=reminder.urgency,
        remaining_doses=reminder.remaining_doses,
        refill_by_date=reminder.refill_by_date,
        days_until_refill=reminder.days_until_refill(today),
    )


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, UserNotFoundError):
        return HTTPException(status_code=404, detail="User not found")
    if isinstance(exc, InvalidArgumentError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail="Could not build today's medication schedule")


@router.get("/schedule", response_model=list[ScheduleEntryOut])
def get_today_schedule(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        entries = _generator(db).generate(current_user.id, _now().date())
    except (UserNotFoundError, InvalidArgumentError, ScheduleGenerationError) as exc:
        raise _http_error(exc) from exc
    return [_entry_out(e) for e in entries]


@router.get("/summary", response_model=DashboardSummaryOut)
def get_home_summary(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    now = _now()
    try:
        summary = build_dashboard(_generator(db), current_user.username, current_user.id, now)
    except (UserNotFoundError, InvalidArgumentError, ScheduleGenerationError) as exc:
        raise _http_error(exc) from exc
    return _summary_out(
        current_user.username,
        medication_service.has_medications(db, current_user),
        summary,
    )


@router.get("/refills", response_model=list[RefillReminderOut])
def get_refill_reminders(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    today = _now().date()
    try:
        reminders = RefillEstimator(SqlMedicationStore(db), horizon_days=REFILL_HORIZON_DAYS).estimate(
            current_user.id, today
        )
    except (UserNotFoundError, InvalidArgumentError) as exc:
        raise _http_error(exc) from exc
    return [_refill_out(r, today) for r in reminders]
