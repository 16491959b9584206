"""Per-field resolution of geology and biome through the tile fallback chain.

Each field walks the tiers independently:

1. the detailed tile at the lookup geohash;
2. the coarse tile at the geohash prefix;
3. square rings of neighbouring tiles, nearest ring first;
4. a coordinate-only estimate, which always yields a concrete value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from . import geohash as gh
from .estimates import default_geology, estimate_biome
from .models import BiomeData, DataSource, GeologyData, GeoTile, LocationGeoData, ResolutionTier
from .tiles.base import TileStore, unique

DEFAULT_LOOKUP_PRECISION = 4
DEFAULT_COARSE_PRECISION = 3
DEFAULT_MAX_RINGS = 2
DEFAULT_MAX_DISTANCE_KM = 200.0


@dataclass(slots=True)
class _Resolution:
    geohash: str
    query: tuple[float, float] | None = None
    geology: GeologyData | None = None
    biome: BiomeData | None = None
    geology_tier: ResolutionTier = ResolutionTier.ESTIMATE
    biome_tier: ResolutionTier = ResolutionTier.ESTIMATE

    @property
    def complete(self) -> bool:
        return self.geology is not None and self.biome is not None

    def absorb(self, tile: GeoTile | None, tier: ResolutionTier) -> None:
        if tile is None:
            return
        if self.geology is None and tile.geology.is_known:
            self.geology = tile.geology
            self.geology_tier = tier
        if self.biome is None and tile.biome.is_known:
            self.biome = tile.biome
            self.biome_tier = tier

    def finish(self) -> LocationGeoData:
        lat, lng = self.query if self.query is not None else gh.decode(self.geohash)
        if self.geology is None:
            self.geology = default_geology()
            self.geology_tier = ResolutionTier.ESTIMATE
        if self.biome is None:
            self.biome = estimate_biome(lat, lng)
            self.biome_tier = ResolutionTier.ESTIMATE
        return LocationGeoData(
            geology=self.geology,
            biome=self.biome,
            data_source=data_source_for(self.geology_tier, self.biome_tier),
            geohash=self.geohash,
            geology_tier=self.geology_tier,
            biome_tier=self.biome_tier,
        )


def data_source_for(geology_tier: ResolutionTier, biome_tier: ResolutionTier) -> DataSource:
    tiers = {geology_tier, biome_tier}
    if tiers == {ResolutionTier.DETAILED}:
        return DataSource.DETAILED
    if ResolutionTier.ESTIMATE in tiers:
        return DataSource.FALLBACK
    return DataSource.COARSE


class FallbackResolver:
    """Resolve coordinates or geohashes to concrete geology and biome data. Never raises."""

    def __init__(
        self,
        store: TileStore,
        *,
        precision: int = DEFAULT_LOOKUP_PRECISION,
        coarse_precision: int = DEFAULT_COARSE_PRECISION,
        max_rings: int = DEFAULT_MAX_RINGS,
        max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._precision = precision
        self._coarse_precision = coarse_precision
        self._max_rings = max_rings
        self._max_distance_km = max_distance_km
        self._logger = logger or logging.getLogger("geoforage.fallback")

    @property
    def precision(self) -> int:
        return self._precision

    async def resolve_location(self, lat: float, lng: float) -> LocationGeoData:
        return await self.resolve_geohash(gh.encode(lat, lng, self._precision), query=(lat, lng))

    async def resolve_geohash(self, geohash: str, *, query: tuple[float, float] | None = None) -> LocationGeoData:
        """Resolve a cell; estimates use ``query`` when given, else the cell centre."""
        resolution = _Resolution(geohash=geohash, query=query)
        try:
            resolution.absorb(await self._store.get_tile(geohash), ResolutionTier.DETAILED)

            coarse = self._coarse_hash(geohash)
            if not resolution.complete and coarse is not None:
                resolution.absorb(await self._store.get_tile(coarse), ResolutionTier.COARSE)

            for distance in self.ring_distances(geohash):
                if resolution.complete:
                    break
                for tile in await self._store.get_tiles(gh.ring(geohash, distance)):
                    resolution.absorb(tile, ResolutionTier.NEARBY)
        except Exception:  # noqa: BLE001
            self._logger.warning("location_resolution_failed", extra={"geohash": geohash}, exc_info=True)

        result = resolution.finish()
        self._logger.debug(
            "location_resolved",
            extra={
                "geohash": geohash,
                "data_source": result.data_source.value,
                "geology_tier": result.geology_tier.value,
                "biome_tier": result.biome_tier.value,
            },
        )
        return result

    async def resolve_tiles(self, geohashes: Iterable[str]) -> dict[str, LocationGeoData]:
        """Resolve many geohashes with a bounded number of store round-trips.

        Detailed tiles, coarse tiles and the union of every needed ring cell are
        each fetched with one batched lookup before results are stitched per geohash.
        """
        requested = unique(geohashes)
        resolutions = {geohash: _Resolution(geohash=geohash) for geohash in requested}
        if not requested:
            return {}

        try:
            detailed = {tile.geohash: tile for tile in await self._store.get_tiles(requested)}
            for geohash, resolution in resolutions.items():
                resolution.absorb(detailed.get(geohash), ResolutionTier.DETAILED)

            coarse_needed = {
                geohash: coarse
                for geohash, resolution in resolutions.items()
                if not resolution.complete and (coarse := self._coarse_hash(geohash)) is not None
            }
            if coarse_needed:
                coarse_tiles = {
                    tile.geohash: tile for tile in await self._store.get_tiles(unique(coarse_needed.values()))
                }
                for geohash, coarse in coarse_needed.items():
                    resolutions[geohash].absorb(coarse_tiles.get(coarse), ResolutionTier.COARSE)

            ring_plan: dict[str, list[list[str]]] = {
                geohash: [gh.ring(geohash, distance) for distance in self.ring_distances(geohash)]
                for geohash, resolution in resolutions.items()
                if not resolution.complete
            }
            needed_cells = unique(cell for rings in ring_plan.values() for cells in rings for cell in cells)
            if needed_cells:
                nearby = {tile.geohash: tile for tile in await self._store.get_tiles(needed_cells)}
                for geohash, rings in ring_plan.items():
                    resolution = resolutions[geohash]
                    for cells in rings:
                        if resolution.complete:
                            break
                        for cell in cells:
                            resolution.absorb(nearby.get(cell), ResolutionTier.NEARBY)
        except Exception:  # noqa: BLE001
            self._logger.warning("batch_resolution_failed", extra={"count": len(requested)}, exc_info=True)

        return {geohash: resolution.finish() for geohash, resolution in resolutions.items()}

    def ring_distances(self, geohash: str) -> list[int]:
        """Ring indices to search, capped by ring count and real-world distance."""
        _, cell_height_km = gh.cell_size(len(geohash))
        return [
            distance
            for distance in range(1, self._max_rings + 1)
            if distance * cell_height_km <= self._max_distance_km
        ]

    def _coarse_hash(self, geohash: str) -> str | None:
        if len(geohash) <= self._coarse_precision:
            return None
        return geohash[: self._coarse_precision]
