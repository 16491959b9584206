"""Geohash encoding, cell geometry and neighbour topology.

Even bit positions bisect longitude, odd positions bisect latitude, starting
from the full ``[-180, 180] x [-90, 90]`` extent. A point lying exactly on a
midpoint is assigned to the upper half.

Approximate cell sizes at the equator::

    1: ~5000km x 5000km
    2: ~1250km x 625km
    3: ~156km x 156km
    4: ~39km x 19.5km
    5: ~4.9km x 4.9km
    6: ~1.2km x 610m
"""

from __future__ import annotations

from .models import GeohashBounds

BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
_DECODE_MAP = {char: index for index, char in enumerate(BASE32)}

# (width_km, height_km) at the equator
CELL_SIZES_KM: dict[int, tuple[float, float]] = {
    1: (5000.0, 5000.0),
    2: (1250.0, 625.0),
    3: (156.0, 156.0),
    4: (39.0, 19.5),
    5: (4.9, 4.9),
    6: (1.2, 0.61),
    7: (0.153, 0.153),
    8: (0.038, 0.019),
    9: (0.0048, 0.0048),
    10: (0.0012, 0.0006),
    11: (0.000149, 0.000149),
    12: (0.000037, 0.000019),
}

COVERAGE_STEP_FACTOR = 0.8


def encode(lat: float, lng: float, precision: int = 5) -> str:
    """Encode a coordinate pair as a geohash of ``precision`` characters."""
    lat_min, lat_max = -90.0, 90.0
    lng_min, lng_max = -180.0, 180.0
    chars: list[str] = []
    index = 0
    bit = 0
    even = True

    while len(chars) < precision:
        if even:
            mid = (lng_min + lng_max) / 2
            if lng >= mid:
                index = index * 2 + 1
                lng_min = mid
            else:
                index *= 2
                lng_max = mid
        else:
            mid = (lat_min + lat_max) / 2
            if lat >= mid:
                index = index * 2 + 1
                lat_min = mid
            else:
                index *= 2
                lat_max = mid
        even = not even

        bit += 1
        if bit == 5:
            chars.append(BASE32[index])
            bit = 0
            index = 0

    return "".join(chars)


def bounds(geohash: str) -> GeohashBounds:
    """Replay the bisection encoded by ``geohash``; unknown characters are skipped."""
    lat_min, lat_max = -90.0, 90.0
    lng_min, lng_max = -180.0, 180.0
    even = True

    for char in geohash.lower():
        index = _DECODE_MAP.get(char)
        if index is None:
            continue
        for shift in range(4, -1, -1):
            bit = (index >> shift) & 1
            if even:
                mid = (lng_min + lng_max) / 2
                if bit:
                    lng_min = mid
                else:
                    lng_max = mid
            else:
                mid = (lat_min + lat_max) / 2
                if bit:
                    lat_min = mid
                else:
                    lat_max = mid
            even = not even

    return GeohashBounds(min_lat=lat_min, max_lat=lat_max, min_lng=lng_min, max_lng=lng_max)


def decode(geohash: str) -> tuple[float, float]:
    """Return the ``(lat, lng)`` centre of the cell."""
    return bounds(geohash).center


def contains(geohash: str, lat: float, lng: float) -> bool:
    cell = bounds(geohash)
    return cell.min_lat <= lat < cell.max_lat and cell.min_lng <= lng < cell.max_lng


def cell_size(precision: int) -> tuple[float, float]:
    """Approximate ``(width_km, height_km)`` of a cell; ``(0, 0)`` for unsupported precisions."""
    return CELL_SIZES_KM.get(precision, (0.0, 0.0))


def cell_degrees(precision: int) -> tuple[float, float]:
    """Exact ``(width_deg, height_deg)`` of a cell at ``precision``."""
    total_bits = 5 * precision
    lng_bits = (total_bits + 1) // 2
    lat_bits = total_bits // 2
    return 360.0 / (1 << lng_bits), 180.0 / (1 << lat_bits)


def wrap_longitude(lng: float) -> float:
    return ((lng + 180.0) % 360.0) - 180.0


def ring(geohash: str, distance: int) -> list[str]:
    """Cells on the square perimeter ``distance`` steps away from ``geohash``.

    Cells are listed row by row from the south-west corner. Longitude wraps at
    the antimeridian and rows beyond the poles are dropped, so rings near the
    poles are shorter than ``8 * distance``.
    """
    if distance < 1:
        return [geohash]

    precision = len(geohash)
    cell = bounds(geohash)
    center_lat, center_lng = cell.center
    lat_delta = cell.max_lat - cell.min_lat
    lng_delta = cell.max_lng - cell.min_lng

    hashes: dict[str, None] = {}
    for i in range(-distance, distance + 1):
        lat = center_lat + i * lat_delta
        if lat < -90.0 or lat > 90.0:
            continue
        for j in range(-distance, distance + 1):
            if abs(i) != distance and abs(j) != distance:
                continue
            lng = wrap_longitude(center_lng + j * lng_delta)
            hashes.setdefault(encode(lat, lng, precision), None)

    hashes.pop(geohash, None)
    return list(hashes)


def neighbors(geohash: str) -> list[str]:
    """The adjacent cells in order sw, s, se, w, e, nw, n, ne (polar rows omitted)."""
    return ring(geohash, 1)


def coverage(area: GeohashBounds, precision: int) -> set[str]:
    """All geohashes at ``precision`` intersecting ``area``."""
    width_deg, height_deg = cell_degrees(precision)
    lat_step = height_deg * COVERAGE_STEP_FACTOR
    lng_step = width_deg * COVERAGE_STEP_FACTOR

    hashes: set[str] = set()
    lat = area.min_lat
    while lat <= area.max_lat:
        lng = area.min_lng
        while lng <= area.max_lng:
            hashes.add(encode(lat, lng, precision))
            lng += lng_step
        lat += lat_step

    for lat, lng in (
        (area.min_lat, area.min_lng),
        (area.min_lat, area.max_lng),
        (area.max_lat, area.min_lng),
        (area.max_lat, area.max_lng),
    ):
        hashes.add(encode(lat, lng, precision))

    return hashes
