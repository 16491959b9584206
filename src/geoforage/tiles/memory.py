from __future__ import annotations

from typing import Iterable, Mapping

from geoforage.models import CacheStats, GeoTile
from geoforage.tiles.base import unique


class InMemoryTileStore:
    """Dict-backed tile store for tests, embedding callers and database-less runs."""

    def __init__(self, tiles: Iterable[GeoTile] = (), metadata: Mapping[str, str] | None = None) -> None:
        self._tiles: dict[str, GeoTile] = {tile.geohash: tile for tile in tiles}
        self._metadata = dict(metadata or {})
        self._hits = 0
        self._misses = 0

    def add(self, tile: GeoTile) -> None:
        self._tiles[tile.geohash] = tile

    async def initialize(self) -> None:
        return None

    async def close(self) -> None:
        self.clear_cache()

    async def get_tile(self, geohash: str) -> GeoTile | None:
        tile = self._tiles.get(geohash)
        if tile is None:
            self._misses += 1
        else:
            self._hits += 1
        return tile

    async def get_tiles(self, geohashes: Iterable[str]) -> list[GeoTile]:
        tiles = []
        for geohash in unique(geohashes):
            tile = await self.get_tile(geohash)
            if tile is not None:
                tiles.append(tile)
        return tiles

    async def get_tiles_by_prefix(self, prefix: str) -> dict[str, GeoTile]:
        return {geohash: tile for geohash, tile in self._tiles.items() if geohash.startswith(prefix)}

    async def get_metadata(self) -> dict[str, str]:
        return dict(self._metadata)

    def clear_cache(self) -> None:
        self._hits = 0
        self._misses = 0

    def cache_stats(self) -> CacheStats:
        return CacheStats(tiles_cached=len(self._tiles), hits=self._hits, misses=self._misses)
