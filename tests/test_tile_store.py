from __future__ import annotations

import asyncio
import sqlite3
import time
from pathlib import Path

import pytest

from geoforage.config import Settings
from geoforage.models import BiomeCode, BiomeData, GeologyData, GeoTile
from geoforage.tiles import (
    InMemoryTileStore,
    SqliteTileStore,
    StoreState,
    TileCache,
    build_tile_store,
)

from conftest import write_tile_db


def test_get_tile_parses_row(tile_db: Path) -> None:
    async def _run():
        store = SqliteTileStore(tile_db)
        tile = await store.get_tile("dr5r")
        coarse = await store.get_tile("dr5")
        await store.close()
        return tile, coarse

    tile, coarse = asyncio.run(_run())

    assert tile is not None
    assert tile.geology.primary_lithology == "sandstone"
    assert tile.geology.secondary_lithologies == ("shale", "limestone")
    assert tile.geology.confidence == pytest.approx(0.85)
    assert tile.biome.type is BiomeCode.TEMPERATE_BROADLEAF_MIXED
    assert tile.biome.realm == "Nearctic"
    assert tile.biome.ecoregion_id == 412
    assert coarse is not None
    assert coarse.biome.ecoregion_id is None


def test_malformed_secondaries_parse_as_empty(tile_db: Path) -> None:
    async def _run():
        store = SqliteTileStore(tile_db)
        return await store.get_tile("gcpv")

    tile = asyncio.run(_run())

    assert tile is not None
    assert tile.geology.secondary_lithologies == ()


def test_malformed_rows_read_as_absent(tmp_path: Path) -> None:
    db_path = write_tile_db(
        tmp_path / "bad.db",
        [{"geohash": "dr5r"}, {"geohash": "dr5q", "geology_confidence": "not a number"}],
    )

    async def _run():
        store = SqliteTileStore(db_path)
        single = await store.get_tile("dr5q")
        store.clear_cache()
        batch = await store.get_tiles(["dr5q", "dr5r"])
        store.clear_cache()
        by_prefix = await store.get_tiles_by_prefix("dr5")
        await store.close()
        return single, batch, by_prefix

    single, batch, by_prefix = asyncio.run(_run())

    assert single is None
    assert [tile.geohash for tile in batch] == ["dr5r"]
    assert set(by_prefix) == {"dr5r"}


def test_misses_are_memoized(tile_db: Path) -> None:
    async def _run():
        store = SqliteTileStore(tile_db)
        first = await store.get_tile("zzzz")
        second = await store.get_tile("zzzz")
        return first, second, store.cache_stats()

    first, second, stats = asyncio.run(_run())

    assert first is None and second is None
    assert stats.tiles_cached == 1
    assert stats.misses == 1
    assert stats.hits == 1


def test_batch_lookup_uses_one_query_and_keeps_request_order(tile_db: Path) -> None:
    statements: list[str] = []

    async def _run():
        store = SqliteTileStore(tile_db)
        await store.initialize()
        store._conn.set_trace_callback(statements.append)
        tiles = await store.get_tiles(["gcpv", "nope", "dr5r", "gcpv"])
        again = await store.get_tiles(["dr5r", "nope"])
        await store.close()
        return tiles, again

    tiles, again = asyncio.run(_run())

    assert [tile.geohash for tile in tiles] == ["gcpv", "dr5r"]
    assert [tile.geohash for tile in again] == ["dr5r"]
    assert len([sql for sql in statements if " IN (" in sql]) == 1


def test_batch_lookup_chunks_parameters(tile_db: Path) -> None:
    statements: list[str] = []
    hashes = [f"x{index:04d}" for index in range(1_200)] + ["dr5r"]

    async def _run():
        store = SqliteTileStore(tile_db)
        await store.initialize()
        store._conn.set_trace_callback(statements.append)
        return await store.get_tiles(hashes)

    tiles = asyncio.run(_run())

    assert [tile.geohash for tile in tiles] == ["dr5r"]
    assert len([sql for sql in statements if " IN (" in sql]) == 3


def test_prefix_scan_populates_cache(tile_db: Path) -> None:
    async def _run():
        store = SqliteTileStore(tile_db)
        tiles = await store.get_tiles_by_prefix("dr5")
        stats_after_scan = store.cache_stats()
        await store.get_tile("dr5x")
        return tiles, stats_after_scan, store.cache_stats()

    tiles, after_scan, after_lookup = asyncio.run(_run())

    assert set(tiles) == {"dr5", "dr5r", "dr5x"}
    assert after_scan.tiles_cached == 3
    assert after_lookup.hits == 1


def test_metadata(tile_db: Path) -> None:
    async def _run():
        store = SqliteTileStore(tile_db)
        return await store.get_metadata()

    metadata = asyncio.run(_run())

    assert metadata["geologySource"] == "macrostrat"
    assert metadata["totalTiles"] == "4"


def test_missing_database_answers_no_tile_until_reset(tmp_path: Path) -> None:
    db_path = tmp_path / "later.db"

    async def _run():
        store = SqliteTileStore(db_path)
        missing = await store.get_tile("dr5r")
        failed_state = store.state
        metadata = await store.get_metadata()

        write_tile_db(db_path, [{"geohash": "dr5r"}])
        still_failed = await store.get_tile("dr5r")

        await store.close()
        closed_state = store.state
        recovered = await store.get_tile("dr5r")
        return missing, failed_state, metadata, still_failed, closed_state, recovered, store.state

    missing, failed_state, metadata, still_failed, closed_state, recovered, final_state = asyncio.run(_run())

    assert missing is None
    assert failed_state is StoreState.FAILED
    assert metadata == {}
    assert still_failed is None
    assert closed_state is StoreState.CLOSED
    assert recovered is not None
    assert final_state is StoreState.READY


def test_non_tile_database_fails_to_open(tmp_path: Path) -> None:
    db_path = tmp_path / "empty.db"
    sqlite3.connect(db_path).close()

    async def _run():
        store = SqliteTileStore(db_path)
        tile = await store.get_tile("dr5r")
        return tile, store.state

    tile, state = asyncio.run(_run())

    assert tile is None
    assert state is StoreState.FAILED


def test_concurrent_initialize_opens_once(tile_db: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[Path] = []
    original = SqliteTileStore._connect

    def counting_connect(path: Path) -> sqlite3.Connection:
        calls.append(path)
        return original(path)

    monkeypatch.setattr(SqliteTileStore, "_connect", staticmethod(counting_connect))

    async def _run():
        store = SqliteTileStore(tile_db)
        await asyncio.gather(*(store.initialize() for _ in range(5)))
        tiles = await asyncio.gather(store.get_tile("dr5r"), store.get_tile("gcpv"))
        await store.close()
        await store.close()
        return tiles, store.state

    tiles, state = asyncio.run(_run())

    assert len(calls) == 1
    assert all(tile is not None for tile in tiles)
    assert state is StoreState.CLOSED


def test_cancelled_caller_does_not_cancel_shared_open(tile_db: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    original = SqliteTileStore._prepare_database

    def slow_prepare(self: SqliteTileStore) -> Path:
        time.sleep(0.2)
        return original(self)

    monkeypatch.setattr(SqliteTileStore, "_prepare_database", slow_prepare)

    async def _run():
        store = SqliteTileStore(tile_db)
        impatient = asyncio.create_task(store.get_tile("dr5r"))
        patient = asyncio.create_task(store.get_tile("dr5r"))
        await asyncio.sleep(0.05)
        impatient.cancel()
        tile = await patient
        state = store.state
        await store.close()
        return impatient, tile, state

    impatient, tile, state = asyncio.run(_run())

    assert impatient.cancelled()
    assert tile is not None
    assert state is StoreState.READY


def test_working_dir_receives_copy(tile_db: Path, tmp_path: Path) -> None:
    work = tmp_path / "work"

    async def _run():
        store = SqliteTileStore(tile_db, working_dir=work)
        tile = await store.get_tile("dr5r")
        await store.close()
        return tile

    tile = asyncio.run(_run())

    assert tile is not None
    assert (work / tile_db.name).exists()


def test_failed_query_is_not_memoized(tile_db: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    async def _run():
        store = SqliteTileStore(tile_db)
        await store.initialize()

        def broken_query(conn, sql, params):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(store, "_query", broken_query)
        failed = await store.get_tile("dr5r")
        monkeypatch.undo()
        recovered = await store.get_tile("dr5r")
        return failed, recovered

    failed, recovered = asyncio.run(_run())

    assert failed is None
    assert recovered is not None


def test_tile_cache_evicts_least_recently_used() -> None:
    cache = TileCache(max_entries=2)
    cache.store("a", None)
    cache.store("b", None)
    cache.lookup("a")
    cache.store("c", None)

    assert "a" in cache
    assert "b" not in cache
    assert len(cache) == 2


def test_in_memory_store_contract() -> None:
    tile = GeoTile(
        geohash="dr5r",
        geology=GeologyData(primary_lithology="granite", confidence=0.9),
        biome=BiomeData(type=BiomeCode.BOREAL, confidence=0.9, realm="Nearctic"),
    )

    async def _run():
        store = InMemoryTileStore([tile], metadata={"version": "1"})
        await store.initialize()
        found = await store.get_tile("dr5r")
        batch = await store.get_tiles(["nope", "dr5r", "dr5r"])
        by_prefix = await store.get_tiles_by_prefix("dr5")
        metadata = await store.get_metadata()
        await store.close()
        return found, batch, by_prefix, metadata

    found, batch, by_prefix, metadata = asyncio.run(_run())

    assert found == tile
    assert batch == [tile]
    assert by_prefix == {"dr5r": tile}
    assert metadata == {"version": "1"}


def test_build_tile_store_selects_backend(tile_db: Path) -> None:
    assert isinstance(build_tile_store(Settings(tiles_db_path=None)), InMemoryTileStore)
    assert isinstance(build_tile_store(Settings(tiles_db_path=str(tile_db))), SqliteTileStore)
