"""SQLite-backed tile store reading the bundled tile database."""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
import sqlite3
import threading
from enum import Enum
from pathlib import Path
from typing import Iterable

from geoforage.models import BiomeCode, BiomeData, CacheStats, GeologyData, GeoTile
from geoforage.tiles.base import PREFIX_LENGTH, TileCache, TileStoreError, unique

# SQLite's default host parameter limit is 999; stay well under it.
MAX_QUERY_PARAMETERS = 500

_TILE_COLUMNS = (
    "geohash, primary_lithology, secondary_lithologies, geology_confidence, "
    "biome_type, biome_confidence, ecoregion_id, realm"
)


class StoreState(str, Enum):
    """Lifecycle of the database connection."""

    UNINITIALIZED = "uninitialized"
    OPENING = "opening"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


def _parse_secondaries(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    try:
        values = json.loads(raw)
    except json.JSONDecodeError:
        return ()
    if not isinstance(values, list):
        return ()
    return tuple(str(value) for value in values if value)


def tile_from_row(row: sqlite3.Row) -> GeoTile:
    """Convert a ``tiles`` row into a ``GeoTile``."""
    ecoregion_id = row["ecoregion_id"]
    return GeoTile(
        geohash=row["geohash"],
        geology=GeologyData(
            primary_lithology=row["primary_lithology"],
            secondary_lithologies=_parse_secondaries(row["secondary_lithologies"]),
            confidence=float(row["geology_confidence"] or 0.0),
        ),
        biome=BiomeData(
            type=BiomeCode.parse(row["biome_type"]),
            confidence=float(row["biome_confidence"] or 0.0),
            realm=row["realm"] or None,
            ecoregion_id=int(ecoregion_id) if ecoregion_id and int(ecoregion_id) > 0 else None,
        ),
    )


class SqliteTileStore:
    """Read-only tile lookups with an LRU cache in front of SQLite.

    The connection is opened lazily on first use. Concurrent callers share one
    open task. If opening fails the store stays ``FAILED`` and every lookup
    answers "no tile" until ``close()`` resets it.
    """

    def __init__(
        self,
        db_path: str | Path,
        *,
        working_dir: str | Path | None = None,
        cache_size: int = 10_000,
        logger: logging.Logger | None = None,
    ) -> None:
        self._db_path = Path(db_path)
        self._working_dir = Path(working_dir) if working_dir is not None else None
        self._cache = TileCache(max_entries=cache_size)
        self._logger = logger or logging.getLogger("geoforage.tiles.sqlite")

        self._state = StoreState.UNINITIALIZED
        self._conn: sqlite3.Connection | None = None
        self._open_task: asyncio.Task[None] | None = None
        self._lock = threading.Lock()

    @property
    def state(self) -> StoreState:
        return self._state

    async def initialize(self) -> None:
        """Open the database once; later calls return immediately."""
        if self._state in (StoreState.READY, StoreState.FAILED):
            return
        if self._open_task is None or self._open_task.done():
            self._state = StoreState.OPENING
            self._open_task = asyncio.create_task(self._open(), name="tile-store-open")
        await asyncio.shield(self._open_task)

    async def close(self) -> None:
        if self._open_task is not None and not self._open_task.done():
            await asyncio.shield(self._open_task)
        self._open_task = None

        if self._conn is not None:
            with self._lock:
                self._conn.close()
            self._conn = None
            self._logger.info("tile_store_closed", extra={"db_path": str(self._db_path)})

        self._cache.clear()
        self._state = StoreState.CLOSED

    async def get_tile(self, geohash: str) -> GeoTile | None:
        hit, tile = self._cache.lookup(geohash)
        if hit:
            return tile

        conn = await self._ready_connection()
        if conn is None:
            return None

        try:
            rows = await asyncio.to_thread(
                self._query, conn, f"SELECT {_TILE_COLUMNS} FROM tiles WHERE geohash = ?", (geohash,)
            )
        except sqlite3.Error:
            self._logger.warning("tile_query_failed", extra={"geohash": geohash}, exc_info=True)
            return None

        tile = self._convert(rows[0]) if rows else None
        self._cache.store(geohash, tile)
        return tile

    async def get_tiles(self, geohashes: Iterable[str]) -> list[GeoTile]:
        """Batch lookup: cache hits first, then one ``IN`` query per parameter chunk."""
        requested = unique(geohashes)
        found: dict[str, GeoTile] = {}
        pending: list[str] = []
        for geohash in requested:
            hit, tile = self._cache.lookup(geohash)
            if not hit:
                pending.append(geohash)
            elif tile is not None:
                found[geohash] = tile

        if pending:
            conn = await self._ready_connection()
            if conn is not None:
                try:
                    fetched = await asyncio.to_thread(self._fetch_many, conn, pending)
                except sqlite3.Error:
                    self._logger.warning(
                        "tile_batch_query_failed", extra={"count": len(pending)}, exc_info=True
                    )
                else:
                    for geohash in pending:
                        tile = fetched.get(geohash)
                        self._cache.store(geohash, tile)
                        if tile is not None:
                            found[geohash] = tile

        return [found[geohash] for geohash in requested if geohash in found]

    async def get_tiles_by_prefix(self, prefix: str) -> dict[str, GeoTile]:
        conn = await self._ready_connection()
        if conn is None:
            return {}

        if len(prefix) == PREFIX_LENGTH:
            sql = f"SELECT {_TILE_COLUMNS} FROM tiles WHERE prefix = ?"
            params: tuple[str, ...] = (prefix,)
        else:
            sql = f"SELECT {_TILE_COLUMNS} FROM tiles WHERE geohash LIKE ?"
            params = (f"{prefix}%",)

        try:
            rows = await asyncio.to_thread(self._query, conn, sql, params)
        except sqlite3.Error:
            self._logger.warning("tile_prefix_query_failed", extra={"prefix": prefix}, exc_info=True)
            return {}

        tiles: dict[str, GeoTile] = {}
        for row in rows:
            tile = self._convert(row)
            if tile is None:
                continue
            tiles[tile.geohash] = tile
            self._cache.store(tile.geohash, tile)
        return tiles

    async def get_metadata(self) -> dict[str, str]:
        conn = await self._ready_connection()
        if conn is None:
            return {}
        try:
            rows = await asyncio.to_thread(self._query, conn, "SELECT key, value FROM metadata", ())
        except sqlite3.Error:
            self._logger.warning("tile_metadata_query_failed", exc_info=True)
            return {}
        return {row["key"]: row["value"] for row in rows}

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    async def _ready_connection(self) -> sqlite3.Connection | None:
        await self.initialize()
        if self._state is not StoreState.READY:
            return None
        return self._conn

    async def _open(self) -> None:
        try:
            path = await asyncio.to_thread(self._prepare_database)
            conn = await asyncio.to_thread(self._connect, path)
        except (TileStoreError, sqlite3.Error, OSError) as exc:
            self._state = StoreState.FAILED
            self._logger.warning(
                "tile_store_open_failed",
                extra={"db_path": str(self._db_path), "error": str(exc)},
            )
            return

        self._conn = conn
        self._state = StoreState.READY
        self._logger.info("tile_store_opened", extra={"db_path": str(path)})

    def _prepare_database(self) -> Path:
        if not self._db_path.exists():
            raise TileStoreError(f"Tile database not found: {self._db_path}")
        if self._working_dir is None:
            return self._db_path

        target = self._working_dir / self._db_path.name
        if not target.exists():
            self._working_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self._db_path, target)
            self._logger.info("tile_store_copied", extra={"source": str(self._db_path), "target": str(target)})
        return target

    @staticmethod
    def _connect(path: Path) -> sqlite3.Connection:
        conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("SELECT geohash FROM tiles LIMIT 1").fetchall()
        except sqlite3.Error as exc:
            conn.close()
            raise TileStoreError(f"Not a tile database: {path}") from exc
        return conn

    def _convert(self, row: sqlite3.Row) -> GeoTile | None:
        """Parse a row; malformed rows are logged and read as absent."""
        try:
            return tile_from_row(row)
        except (ValueError, TypeError):
            self._logger.warning("tile_row_malformed", extra={"geohash": row["geohash"]}, exc_info=True)
            return None

    def _query(self, conn: sqlite3.Connection, sql: str, params: tuple[str, ...]) -> list[sqlite3.Row]:
        with self._lock:
            return conn.execute(sql, params).fetchall()

    def _fetch_many(self, conn: sqlite3.Connection, geohashes: list[str]) -> dict[str, GeoTile]:
        tiles: dict[str, GeoTile] = {}
        for start in range(0, len(geohashes), MAX_QUERY_PARAMETERS):
            chunk = tuple(geohashes[start : start + MAX_QUERY_PARAMETERS])
            placeholders = ", ".join("?" for _ in chunk)
            sql = f"SELECT {_TILE_COLUMNS} FROM tiles WHERE geohash IN ({placeholders})"
            for row in self._query(conn, sql, chunk):
                tile = self._convert(row)
                if tile is not None:
                    tiles[tile.geohash] = tile
        return tiles
