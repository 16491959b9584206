from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

SCHEMA = """
CREATE TABLE tiles (
    geohash TEXT PRIMARY KEY,
    prefix TEXT NOT NULL,
    primary_lithology TEXT NOT NULL,
    secondary_lithologies TEXT,
    geology_confidence REAL NOT NULL,
    biome_type TEXT NOT NULL,
    biome_confidence REAL NOT NULL,
    ecoregion_id INTEGER,
    realm_biome TEXT,
    realm TEXT
);
CREATE INDEX idx_tiles_prefix ON tiles(prefix);
CREATE TABLE metadata (key TEXT PRIMARY KEY, value TEXT NOT NULL);
"""


def write_tile_db(path: Path, rows: list[dict], metadata: dict[str, str] | None = None) -> Path:
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        for row in rows:
            secondaries = row.get("secondary", [])
            conn.execute(
                "INSERT INTO tiles VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    row["geohash"],
                    row["geohash"][:3],
                    row.get("lithology", "granite"),
                    secondaries if isinstance(secondaries, str) else json.dumps(secondaries),
                    row.get("geology_confidence", 0.8),
                    row.get("biome", "temperate_broadleaf_mixed"),
                    row.get("biome_confidence", 0.8),
                    row.get("ecoregion_id"),
                    row.get("realm_biome"),
                    row.get("realm", "Nearctic"),
                ),
            )
        for key, value in (metadata or {}).items():
            conn.execute("INSERT INTO metadata VALUES (?, ?)", (key, value))
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def tile_db(tmp_path: Path) -> Path:
    return write_tile_db(
        tmp_path / "tiles.db",
        [
            {
                "geohash": "dr5r",
                "lithology": "sandstone",
                "secondary": ["shale", "limestone"],
                "geology_confidence": 0.85,
                "ecoregion_id": 412,
                "realm_biome": "NE04",
            },
            {"geohash": "dr5x", "lithology": "unknown", "biome": "temperate_broadleaf_mixed"},
            {"geohash": "dr5", "lithology": "shale", "geology_confidence": 0.6, "ecoregion_id": 0},
            {"geohash": "gcpv", "lithology": "chalk", "realm": "Palearctic", "secondary": "not json"},
        ],
        metadata={"version": "3", "geologySource": "macrostrat", "totalTiles": "4"},
    )
