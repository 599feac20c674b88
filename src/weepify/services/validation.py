"""Validation of submitted crying sessions."""

import re
from collections.abc import Mapping
from datetime import date, datetime
from zoneinfo import ZoneInfo

from weepify.domain.cry_logs import CryLogChanges, CryLogDraft, Intensity
from weepify.domain.errors import (
    FutureDateError,
    InvalidDateError,
    InvalidDurationError,
    InvalidIntensityError,
    InvalidTimeError,
    MissingFieldError,
)

REQUIRED_FIELDS = (
    "date",
    "start_time",
    "duration_minutes",
    "mood_after",
    "reason",
    "intensity",
)
_TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


def validate_new_cry_log(raw: Mapping[str, object], today: date) -> CryLogDraft:
    """Validate raw submission fields and return a normalized draft.

    Raises a ``CryLogValidationError`` subclass describing the first problem.
    """
    missing = [name for name in REQUIRED_FIELDS if _is_blank(raw.get(name))]
    if missing:
        raise MissingFieldError(missing)

    intensity = parse_intensity(raw["intensity"])
    duration = parse_duration(raw["duration_minutes"])
    day = parse_day(raw["date"])
    if day > today:
        raise FutureDateError("Cannot log crying sessions for future dates")
    start_time = parse_start_time(raw["start_time"])

    return CryLogDraft(
        day=day,
        start_time=start_time,
        duration_minutes=duration,
        intensity=intensity,
        mood_after=str(raw["mood_after"]).strip(),
        reason=str(raw["reason"]).strip(),
    )


def validate_cry_log_changes(raw: Mapping[str, object]) -> CryLogChanges:
    """Validate a partial update of the mutable fields.

    Fields that are absent (or ``None``) are left unchanged. Other keys are
    ignored because date and start time are fixed after creation.
    """
    blank = [
        name
        for name in ("duration_minutes", "intensity", "mood_after", "reason")
        if name in raw and raw[name] is not None and _is_blank(raw[name])
    ]
    if blank:
        raise MissingFieldError(blank)

    intensity = raw.get("intensity")
    duration = raw.get("duration_minutes")
    mood_after = raw.get("mood_after")
    reason = raw.get("reason")
    return CryLogChanges(
        duration_minutes=parse_duration(duration) if duration is not None else None,
        intensity=parse_intensity(intensity) if intensity is not None else None,
        mood_after=str(mood_after).strip() if mood_after is not None else None,
        reason=str(reason).strip() if reason is not None else None,
    )


def parse_intensity(value: object) -> Intensity:
    """Return the case-normalized intensity."""
    try:
        return Intensity(str(value).strip().lower())
    except ValueError:
        raise InvalidIntensityError(
            "Intensity must be one of: low, moderate, high"
        ) from None


def parse_duration(value: object) -> int:
    """Return a positive whole number of minutes."""
    message = "Duration must be a positive number of minutes"
    if isinstance(value, bool):
        raise InvalidDurationError(message)
    if isinstance(value, int):
        minutes = value
    else:
        text = str(value).strip()
        try:
            minutes = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise InvalidDurationError(message) from None
            if not number.is_integer():
                raise InvalidDurationError(message)
            minutes = int(number)
    if minutes <= 0:
        raise InvalidDurationError(message)
    return minutes


def parse_day(value: object) -> date:
    """Parse an ISO date (or the date part of an ISO datetime)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError("Invalid date format, expected YYYY-MM-DD")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise InvalidDateError("Invalid date format, expected YYYY-MM-DD") from None


def parse_start_time(value: object) -> str:
    """Return a 24-hour time normalized to ``HH:MM``."""
    match = _TIME_PATTERN.match(str(value).strip())
    if match is None:
        raise InvalidTimeError("Invalid time format, use HH:MM (24-hour)")
    hours, minutes = match.groups()
    return f"{int(hours):02d}:{minutes}"


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def today_in_timezone(timezone_name: str) -> date:
    """Return the current calendar day in an IANA timezone."""
    return datetime.now(tz=ZoneInfo(timezone_name)).date()
