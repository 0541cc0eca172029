from models.user import User
from models.medication import Medication, MedicationUrgency, DayOfWeek

__all__ = ["User", "Medication", "MedicationUrgency", "DayOfWeek"]
