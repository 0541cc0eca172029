import logging

from sqlalchemy.orm import Session

from models.medication import DayOfWeek, Medication
from models.user import User
from schemas.medication import MedicationCreate, MedicationUpdate
from services.exceptions import MedicationNotFoundError

logger = logging.getLogger(__name__)


def _owned_query(db: Session, user: User):
    return db.query(Medication).filter(Medication.user_id == user.id)


def list_medications(db: Session, user: User) -> list[Medication]:
    return _owned_query(db, user).order_by(Medication.created_at.desc(), Medication.id.desc()).all()


def get_medication(db: Session, user: User, medication_id: int) -> Medication:
    row = _owned_query(db, user).filter(Medication.id == medication_id).first()
    if not row:
        logger.error("Medication not found with ID: %s for user: %s", medication_id, user.username)
        raise MedicationNotFoundError(medication_id)
    return row


def has_medications(db: Session, user: User) -> bool:
    return _owned_query(db, user).filter(Medication.is_active.is_(True)).first() is not None


def _apply_days(row: Medication, days) -> None:
    row.clear_days()
    for day in days:
        row.add_day(day)
    if not days:
        logger.debug("No days selected for medication %s, it applies every day", row.id)


def create_medication(db: Session, user: User, data: MedicationCreate) -> Medication:
    row = Medication(
        user_id=user.id,
        name=data.name,
        urgency=data.urgency,
        dosage=data.dosage,
        instructions=data.instructions,
        is_active=data.active,
        intake_times=[],
        days_of_week=[],
    )
    for value in data.intake_times:
        row.add_intake_time(value)
    _apply_days(row, data.days_of_week)

    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created medication %s for user %s", row.id, user.username)
    return row


def update_medication(db: Session, user: User, medication_id: int, data: MedicationUpdate) -> Medication:
    row = get_medication(db, user, medication_id)
    changes = data.model_dump(exclude_unset=True)

    intake_times = changes.pop("intake_times", None)
    days = changes.pop("days_of_week", None)
    if "active" in changes:
        changes["is_active"] = changes.pop("active")
    for key, value in changes.items():
        if value is None and key in {"name", "urgency", "is_active"}:
            logger.warning("Ignoring null %s for medication ID: %s", key, medication_id)
            continue
        setattr(row, key, value)

    if intake_times is not None:
        row.set_intake_times(intake_times)
    if days is not None:
        _apply_days(row, days)

    db.commit()
    db.refresh(row)
    logger.info("Updated medication %s for user %s", row.id, user.username)
    return row


def delete_medication(db: Session, user: User, medication_id: int) -> None:
    row = get_medication(db, user, medication_id)
    db.delete(row)
    db.commit()
    logger.info("Deleted medication %s for user %s", medication_id, user.username)


def get_medication_days(db: Session, user: User, medication_id: int) -> set[DayOfWeek]:
    return get_medication(db, user, medication_id).day_values()
