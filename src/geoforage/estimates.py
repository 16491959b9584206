"""Coordinate-only estimates used when no tile data can be found."""

from __future__ import annotations

from .models import BiomeCode, BiomeData, GeologyData

FALLBACK_CONFIDENCE = 0.3
DEFAULT_LITHOLOGY = "mixed_sedimentary"
DEFAULT_SECONDARY_LITHOLOGIES = ("sandstone", "limestone", "shale")
DEFAULT_REALM = "Palearctic"

# (exclusive lower bound on |lat|, biome), checked top down
LATITUDE_BANDS: tuple[tuple[float, BiomeCode], ...] = (
    (66.0, BiomeCode.TUNDRA),
    (55.0, BiomeCode.BOREAL),
    (45.0, BiomeCode.TEMPERATE_CONIFER),
    (35.0, BiomeCode.TEMPERATE_BROADLEAF_MIXED),
    (23.0, BiomeCode.MEDITERRANEAN),
)


def estimate_biome_from_latitude(lat: float) -> BiomeCode:
    abs_lat = abs(lat)
    for lower_bound, biome in LATITUDE_BANDS:
        if abs_lat > lower_bound:
            return biome
    return BiomeCode.TROPICAL_MOIST_BROADLEAF


def estimate_realm_from_coordinates(lat: float, lng: float) -> str:
    """Rough biogeographic realm from continental bounding boxes."""
    if lat > 23 and -30 <= lng <= 170 and (lat > 35 or lng >= 30):
        return "Palearctic"
    if lat > 23 and -170 <= lng <= -30:
        return "Nearctic"
    if -120 <= lng <= -30 and lat <= 30:
        return "Neotropic"
    if lat <= 23 and -20 <= lng <= 55:
        return "Afrotropic"
    if -10 < lat <= 35 and 60 <= lng <= 150:
        return "Indomalayan"
    if lat <= 0 and 110 <= lng <= 180:
        return "Australasia"
    if lat <= -10 and lng >= 165:
        return "Australasia"
    if -30 <= lat <= 30 and lng >= 150:
        return "Oceania"
    return DEFAULT_REALM


def estimate_biome(lat: float, lng: float) -> BiomeData:
    return BiomeData(
        type=estimate_biome_from_latitude(lat),
        realm=estimate_realm_from_coordinates(lat, lng),
        confidence=FALLBACK_CONFIDENCE,
    )


def default_geology() -> GeologyData:
    return GeologyData(
        primary_lithology=DEFAULT_LITHOLOGY,
        secondary_lithologies=DEFAULT_SECONDARY_LITHOLOGIES,
        confidence=FALLBACK_CONFIDENCE,
    )
