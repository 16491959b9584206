"""Altitude-driven spawn weight multipliers."""

from __future__ import annotations

from dataclasses import dataclass

from .models import AltitudePreference

MIN_ALTITUDE_MULTIPLIER = 0.1
MIN_CONFIDENCE_THRESHOLD = 0.2

# (upper accuracy bound in metres, confidence at the bound, confidence at the previous bound)
_ACCURACY_BANDS: tuple[tuple[float, float, float], ...] = (
    (50.0, 0.8, 1.0),
    (150.0, 0.4, 0.8),
    (300.0, 0.0, 0.4),
)
_FULL_CONFIDENCE_ACCURACY = 10.0


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def confidence_from_accuracy(accuracy: float | None) -> float:
    """Map a GPS vertical accuracy in metres to a confidence in ``[0, 1]``.

    ``<=10`` m is fully trusted, each wider band falls off linearly
    (1.0 -> 0.8 -> 0.4 -> 0) and anything beyond 300 m is ignored.
    """
    if accuracy is None or accuracy < 0:
        return 0.0
    if accuracy <= _FULL_CONFIDENCE_ACCURACY:
        return 1.0

    lower = _FULL_CONFIDENCE_ACCURACY
    for upper, at_upper, at_lower in _ACCURACY_BANDS:
        if accuracy <= upper:
            return at_upper + (at_lower - at_upper) * (upper - accuracy) / (upper - lower)
        lower = upper
    return 0.0


@dataclass(slots=True, frozen=True)
class AltitudeReading:
    value: float
    accuracy: float | None = None
    confidence: float = 0.0

    @classmethod
    def from_gps(cls, value: float, accuracy: float | None) -> AltitudeReading:
        return cls(value=value, accuracy=accuracy, confidence=confidence_from_accuracy(accuracy))


def raw_altitude_bias(altitude: float, preference: AltitudePreference) -> float:
    opt_min, opt_max = preference.optimal
    viable_min, viable_max = preference.viable

    if opt_min <= altitude <= opt_max:
        return 1.0
    if altitude < viable_min or altitude > viable_max:
        return MIN_ALTITUDE_MULTIPLIER

    if altitude < opt_min:
        span = opt_min - viable_min
        t = (altitude - viable_min) / span if span > 0 else 1.0
    else:
        span = viable_max - opt_max
        t = (viable_max - altitude) / span if span > 0 else 1.0
    return lerp(MIN_ALTITUDE_MULTIPLIER, 1.0, t)


def altitude_bias(preference: AltitudePreference | None, altitude: AltitudeReading | None) -> float:
    """Spawn weight multiplier in ``[0.1, 1.0]``.

    Returns 1.0 when either input is missing or the reading is too noisy. Between
    the confidence threshold and full confidence the raw bias is blended in linearly.
    """
    if preference is None or altitude is None:
        return 1.0
    if altitude.confidence < MIN_CONFIDENCE_THRESHOLD:
        return 1.0

    raw = raw_altitude_bias(altitude.value, preference)
    confidence = min(altitude.confidence, 1.0)
    factor = (confidence - MIN_CONFIDENCE_THRESHOLD) / (1.0 - MIN_CONFIDENCE_THRESHOLD)
    return max(MIN_ALTITUDE_MULTIPLIER, lerp(1.0, raw, factor))
