class MedTrackError(Exception):
    """Base class for domain errors raised by the services layer."""


class UserNotFoundError(MedTrackError):
    def __init__(self, owner_id):
        super().__init__(f"User not found: {owner_id}")
        self.owner_id = owner_id


class InvalidArgumentError(MedTrackError, ValueError):
    """A required input was null or malformed. Programming error, never retried."""


class ScheduleGenerationError(MedTrackError):
    """Wraps any unexpected failure while expanding medications into a schedule.

    The original exception is kept as ``__cause__``.
    """


class MissingIntakeTimeError(MedTrackError):
    def __init__(self, medication_id):
        super().__init__(f"Medication {medication_id} has a missing intake time")
        self.medication_id = medication_id


class MedicationNotFoundError(MedTrackError):
    def __init__(self, medication_id):
        super().__init__(f"Medication not found with ID: {medication_id}")
        self.medication_id = medication_id
