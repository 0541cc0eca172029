from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_current_user
from models.medication import DayOfWeek, Medication
from models.user import User
from schemas.medication import (
    MedicationCreate,
    MedicationDaysOut,
    MedicationOut,
    MedicationUpdate,
)
from services import medications as medication_service
from services.exceptions import MedicationNotFoundError

router = APIRouter(prefix="/medications", tags=["Medications"])


def _to_out(record: Medication) -> MedicationOut:
    days = record.day_values()
    return MedicationOut(
        id=record.id,
        user_id=record.user_id,
        name=record.name,
        urgency=record.urgency,
        dosage=record.dosage,
        instructions=record.instructions,
        active=bool(record.is_active),
        intake_times=record.intake_time_values(),
        days_of_week=[d for d in DayOfWeek if d in days],
        created_at=record.created_at,
    )


def _not_found(exc: MedicationNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(exc))


@router.get("/", response_model=list[MedicationOut])
def list_medications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [_to_out(row) for row in medication_service.list_medications(db, current_user)]


@router.post("/", response_model=MedicationOut, status_code=201)
def create_medication(
    data: MedicationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = medication_service.create_medication(db, current_user, data)
    return _to_out(row)


@router.get("/{medication_id}", response_model=MedicationOut)
def get_medication(
    medication_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return _to_out(medication_service.get_medication(db, current_user, medication_id))
    except MedicationNotFoundError as exc:
        raise _not_found(exc)


@router.get("/{medication_id}/days", response_model=MedicationDaysOut)
def get_medication_days(
    medication_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        days = medication_service.get_medication_days(db, current_user, medication_id)
    except MedicationNotFoundError as exc:
        raise _not_found(exc)
    return MedicationDaysOut(
        medication_id=medication_id,
        days_of_week=[d for d in DayOfWeek if d in days],
        every_day=not days,
    )


@router.put("/{medication_id}", response_model=MedicationOut)
def update_medication(
    medication_id: int,
    data: MedicationUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        row = medication_service.update_medication(db, current_user, medication_id, data)
    except MedicationNotFoundError as exc:
        raise _not_found(exc)
    return _to_out(row)


@router.delete("/{medication_id}")
def delete_medication(
    medication_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        medication_service.delete_medication(db, current_user, medication_id)
    except MedicationNotFoundError as exc:
        raise _not_found(exc)
    return {"message": "Medication removed"}
