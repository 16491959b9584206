"""Tile store contract and the shared lookup cache."""

from __future__ import annotations

from collections import OrderedDict
from typing import Iterable, Protocol

from geoforage.models import CacheStats, GeoTile

PREFIX_LENGTH = 3


class TileStoreError(RuntimeError):
    """Raised inside a store when the backing database cannot be opened or queried."""


class TileStore(Protocol):
    """Read-only geohash -> tile lookups. Implementations never raise to callers."""

    async def initialize(self) -> None:
        """Open the backing data; safe to call repeatedly."""

    async def close(self) -> None:
        """Release the backing data; ``initialize`` may run again afterwards."""

    async def get_tile(self, geohash: str) -> GeoTile | None:
        """Return the tile stored at exactly ``geohash``."""

    async def get_tiles(self, geohashes: Iterable[str]) -> list[GeoTile]:
        """Return the known tiles among ``geohashes``, in request order."""

    async def get_tiles_by_prefix(self, prefix: str) -> dict[str, GeoTile]:
        """Return every tile whose geohash starts with the coarse ``prefix``."""

    async def get_metadata(self) -> dict[str, str]:
        """Return build provenance recorded with the tile data."""

    def clear_cache(self) -> None:
        """Forget memoized lookups."""

    def cache_stats(self) -> CacheStats:
        """Report cache size and hit counters."""


_MISSING = object()


class TileCache:
    """Bounded LRU memo of geohash lookups, including negative results."""

    def __init__(self, max_entries: int = 10_000) -> None:
        self._max_entries = max_entries
        self._entries: OrderedDict[str, GeoTile | None] = OrderedDict()
        self._hits = 0
        self._misses = 0

    def __contains__(self, geohash: str) -> bool:
        return geohash in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, geohash: str) -> tuple[bool, GeoTile | None]:
        entry = self._entries.get(geohash, _MISSING)
        if entry is _MISSING:
            self._misses += 1
            return False, None
        self._entries.move_to_end(geohash)
        self._hits += 1
        return True, entry  # type: ignore[return-value]

    def store(self, geohash: str, tile: GeoTile | None) -> None:
        self._entries[geohash] = tile
        self._entries.move_to_end(geohash)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> CacheStats:
        return CacheStats(tiles_cached=len(self._entries), hits=self._hits, misses=self._misses)


def unique(geohashes: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(geohashes))
