"""Tile storage backends."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import PREFIX_LENGTH, TileCache, TileStore, TileStoreError
from .memory import InMemoryTileStore
from .sqlite import SqliteTileStore, StoreState

if TYPE_CHECKING:
    from geoforage.config import Settings


def build_tile_store(settings: Settings) -> TileStore:
    """Pick the SQLite store when a database path is configured, else an empty in-memory one."""
    if settings.tiles_db_path:
        return SqliteTileStore(
            settings.tiles_db_path,
            working_dir=settings.tiles_working_dir,
            cache_size=settings.tile_cache_size,
        )
    return InMemoryTileStore()


__all__ = [
    "PREFIX_LENGTH",
    "InMemoryTileStore",
    "SqliteTileStore",
    "StoreState",
    "TileCache",
    "TileStore",
    "TileStoreError",
    "build_tile_store",
]
