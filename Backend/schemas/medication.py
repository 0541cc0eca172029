from datetime import datetime, time

from pydantic import BaseModel, Field, field_validator

from models.medication import DayOfWeek, MedicationUrgency


def _unique_times(values):
    seen = set()
    out = []
    for v in values or []:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


def _upper(value):
    return value.strip().upper() if isinstance(value, str) else value


class MedicationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    urgency: MedicationUrgency = MedicationUrgency.ROUTINE
    dosage: str | None = Field(default=None, max_length=120)
    instructions: str | None = Field(default=None, max_length=500)
    intake_times: list[time] = Field(default_factory=list)
    days_of_week: set[DayOfWeek] = Field(default_factory=set)
    active: bool = True

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Medication name cannot be blank")
        return v.strip()

    @field_validator("urgency", mode="before")
    @classmethod
    def urgency_case_insensitive(cls, v):
        return MedicationUrgency.ROUTINE if v is None else _upper(v)

    @field_validator("days_of_week", mode="before")
    @classmethod
    def days_case_insensitive(cls, v):
        return [_upper(d) for d in v] if v is not None else []

    @field_validator("intake_times")
    @classmethod
    def collapse_duplicate_times(cls, v: list[time]) -> list[time]:
        return sorted(_unique_times(v))


class MedicationUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    urgency: MedicationUrgency | None = None
    dosage: str | None = Field(default=None, max_length=120)
    instructions: str | None = Field(default=None, max_length=500)
    intake_times: list[time] | None = None
    days_of_week: set[DayOfWeek] | None = None
    active: bool | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Medication name cannot be blank")
        return v.strip() if v is not None else None

    @field_validator("urgency", mode="before")
    @classmethod
    def urgency_case_insensitive(cls, v):
        return _upper(v)

    @field_validator("days_of_week", mode="before")
    @classmethod
    def days_case_insensitive(cls, v):
        return [_upper(d) for d in v] if v is not None else None

    @field_validator("intake_times")
    @classmethod
    def collapse_duplicate_times(cls, v: list[time] | None) -> list[time] | None:
        return sorted(_unique_times(v)) if v is not None else None


class MedicationOut(BaseModel):
    id: int
    user_id: int
    name: str
    urgency: MedicationUrgency
    dosage: str | None
    instructions: str | None
    active: bool
    intake_times: list[time]
    days_of_week: list[DayOfWeek]
    created_at: datetime | None


class MedicationDaysOut(BaseModel):
    medication_id: int
    days_of_week: list[DayOfWeek]
    every_day: bool
