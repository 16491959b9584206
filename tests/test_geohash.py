from __future__ import annotations

import pytest

from geoforage import geohash as gh
from geoforage.models import GeohashBounds


@pytest.mark.parametrize(
    ("lat", "lng", "expected"),
    [
        (40.7128, -74.0060, "dr5reg"),
        (51.5074, -0.1278, "gcpvj0"),
        (35.6762, 139.6503, "xn76cy"),
        (-33.8688, 151.2093, "r3gx2f"),
    ],
)
def test_encode_known_vectors(lat: float, lng: float, expected: str) -> None:
    assert gh.encode(lat, lng, 6) == expected


def test_encode_prefixes_are_stable_across_precisions() -> None:
    full = gh.encode(40.7128, -74.0060, 9)

    for precision in range(1, 9):
        assert gh.encode(40.7128, -74.0060, precision) == full[:precision]


def test_decoded_centre_lies_in_cell_and_reencodes() -> None:
    for lat, lng in [(0.0, 0.0), (89.9, 179.9), (-89.9, -179.9), (12.34, -56.78), (-45.5, 120.25)]:
        for precision in (1, 4, 7):
            code = gh.encode(lat, lng, precision)
            centre_lat, centre_lng = gh.decode(code)
            cell = gh.bounds(code)

            assert cell.min_lat <= centre_lat <= cell.max_lat
            assert cell.min_lng <= centre_lng <= cell.max_lng
            assert gh.encode(centre_lat, centre_lng, precision) == code


def test_midpoint_goes_to_upper_half() -> None:
    assert gh.encode(0.0, 0.0, 1) == "s"
    assert gh.contains("s", 0.0, 0.0)
    assert not gh.contains("7", 0.0, 0.0)


def test_decode_skips_unknown_characters() -> None:
    assert gh.decode("dr5r!eg") == gh.decode("dr5reg")
    assert gh.decode("DR5REG") == gh.decode("dr5reg")


def test_north_neighbour_shares_edge() -> None:
    code = gh.encode(40.7128, -74.0060, 5)
    neighbours = gh.neighbors(code)

    assert len(neighbours) == 8
    north = neighbours[6]
    assert gh.bounds(north).min_lat == pytest.approx(gh.bounds(code).max_lat)
    south = neighbours[1]
    assert gh.bounds(south).max_lat == pytest.approx(gh.bounds(code).min_lat)


def test_neighbours_wrap_at_antimeridian() -> None:
    code = gh.encode(10.0, 179.99, 4)
    east = gh.neighbors(code)[4]

    assert gh.bounds(east).min_lng == pytest.approx(-180.0)


def test_neighbours_drop_rows_beyond_pole() -> None:
    code = gh.encode(89.99, 0.0, 4)

    assert len(gh.neighbors(code)) == 5


def test_ring_sizes() -> None:
    code = gh.encode(40.7128, -74.0060, 4)

    assert len(gh.ring(code, 1)) == 8
    assert len(gh.ring(code, 2)) == 16
    assert code not in gh.ring(code, 2)
    assert gh.ring(code, 0) == [code]


def test_cell_size_table() -> None:
    assert gh.cell_size(3) == (156.0, 156.0)
    assert gh.cell_size(4) == (39.0, 19.5)
    assert gh.cell_size(13) == (0.0, 0.0)


def test_cell_degrees_match_bounds() -> None:
    code = gh.encode(40.7128, -74.0060, 5)
    cell = gh.bounds(code)

    width, height = gh.cell_degrees(5)
    assert cell.max_lng - cell.min_lng == pytest.approx(width)
    assert cell.max_lat - cell.min_lat == pytest.approx(height)


def test_coverage_includes_corners_and_interior() -> None:
    area = GeohashBounds(min_lat=40.5, max_lat=41.0, min_lng=-74.3, max_lng=-73.7)
    cells = gh.coverage(area, 4)

    for lat, lng in [(40.5, -74.3), (41.0, -73.7), (40.75, -74.0), (40.51, -73.71)]:
        assert gh.encode(lat, lng, 4) in cells
    assert all(len(cell) == 4 for cell in cells)
