"""Tear volume estimates derived from session duration and intensity."""

from weepify.domain.cry_logs import Intensity

TEAR_RATES_ML_PER_MIN: dict[Intensity, float] = {
    Intensity.LOW: 0.2,
    Intensity.MODERATE: 0.5,
    Intensity.HIGH: 1.0,
}
PLANTS_PER_ML = 0.01
REHYDRATION_FACTOR = 1.5


def estimate_tear_volume(
    duration_minutes: float | None, intensity: str | None
) -> float:
    """Return the estimated tear volume in ml, rounded to 2 decimals.

    Unknown intensities fall back to the moderate rate.
    """
    if not duration_minutes or not intensity:
        return 0.0
    try:
        rate = TEAR_RATES_ML_PER_MIN[Intensity(intensity.strip().lower())]
    except ValueError:
        rate = TEAR_RATES_ML_PER_MIN[Intensity.MODERATE]
    return round(duration_minutes * rate, 2)


def plants_watered(volume_ml: float) -> float:
    """Return how many plants the given volume would water."""
    return round(volume_ml * PLANTS_PER_ML, 2)


def rehydration_water(volume_ml: float) -> float:
    """Return the water in ml needed to make up for the given tears."""
    return round(volume_ml * REHYDRATION_FACTOR, 2)
