"""Error taxonomy for crying session handling."""


class WeepifyError(Exception):
    """Base class for application errors."""


class CryLogValidationError(WeepifyError):
    """A submitted session was rejected; the user can correct it."""

    code = "validation_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingFieldError(CryLogValidationError):
    """One or more required fields were not provided."""

    code = "missing_field"

    def __init__(self, fields: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(fields)}")
        self.fields = fields


class InvalidIntensityError(CryLogValidationError):
    code = "invalid_intensity"


class InvalidDurationError(CryLogValidationError):
    code = "invalid_duration"


class InvalidDateError(CryLogValidationError):
    code = "invalid_date"


class FutureDateError(CryLogValidationError):
    code = "future_date"


class InvalidTimeError(CryLogValidationError):
    code = "invalid_time"


class StoreError(WeepifyError):
    """Failure raised by the record store."""


class StoreUnavailableError(StoreError):
    """The backing store could not be reached or failed."""


class ConstraintViolationError(StoreError):
    """The store rejected a write because of an integrity constraint."""


class CryLogNotFoundError(StoreError):
    """No session with the given id exists for the owner."""
