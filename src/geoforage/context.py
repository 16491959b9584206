"""Explicit service context owning the tile store, resolver and selector."""

from __future__ import annotations

import logging
import random
from typing import Iterable

from .altitude import AltitudeReading
from .config import Settings
from .fallback import FallbackResolver
from .mappings import MappingTables
from .models import CacheStats, LocationGeoData, ResourceSpawn, SpawnConfig
from .selection import ResourceSelector
from .tiles import TileStore, build_tile_store


class GeoContext:
    """Public entry point for location lookups and resource spawning.

    Build one per process with ``build_context`` and pass it to callers. Use it
    as an async context manager, or call ``close()``, to release the tile store.
    """

    def __init__(
        self,
        store: TileStore,
        resolver: FallbackResolver,
        mappings: MappingTables,
        selector: ResourceSelector,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.mappings = mappings
        self.selector = selector
        self._logger = logger or logging.getLogger("geoforage.context")

    async def __aenter__(self) -> GeoContext:
        await self.initialize()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def initialize(self) -> None:
        await self.store.initialize()

    async def close(self) -> None:
        await self.store.close()

    async def get_location_data(self, lat: float, lng: float) -> LocationGeoData:
        return await self.resolver.resolve_location(lat, lng)

    async def get_tiles_data(self, geohashes: Iterable[str]) -> dict[str, LocationGeoData]:
        return await self.resolver.resolve_tiles(geohashes)

    async def spawn_resources(
        self,
        lat: float,
        lng: float,
        altitude: AltitudeReading | None = None,
    ) -> list[ResourceSpawn]:
        """Spawn a batch of resources at a location; falls back to rarity-only picks on lookup errors."""
        geo: LocationGeoData | None = None
        if self.selector.config.use_geo_data:
            try:
                geo = await self.resolver.resolve_location(lat, lng)
            except Exception:  # noqa: BLE001
                self._logger.warning("spawn_geo_lookup_failed", extra={"lat": lat, "lng": lng}, exc_info=True)

        spawns = self.selector.spawn(geo, altitude)
        self._logger.debug(
            "resources_spawned",
            extra={"lat": lat, "lng": lng, "count": len(spawns), "geohash": geo.geohash if geo else None},
        )
        return spawns

    def set_spawn_config(self, **changes: object) -> SpawnConfig:
        return self.selector.update_config(**changes)

    def clear_cache(self) -> None:
        self.store.clear_cache()

    def cache_stats(self) -> CacheStats:
        return self.store.cache_stats()


def spawn_config_from_settings(settings: Settings) -> SpawnConfig:
    return SpawnConfig(
        stone_ratio=settings.spawn_stone_ratio,
        count_min=settings.spawn_count_min,
        count_max=settings.spawn_count_max,
        use_rarity=settings.spawn_use_rarity,
        food_ratio=settings.spawn_food_ratio,
    )


def build_context(settings: Settings, *, store: TileStore | None = None) -> GeoContext:
    """Wire a context from settings; ``store`` overrides the configured backend."""
    store = store if store is not None else build_tile_store(settings)
    resolver = FallbackResolver(
        store,
        precision=settings.lookup_precision,
        coarse_precision=settings.coarse_precision,
        max_rings=settings.max_search_rings,
        max_distance_km=settings.max_search_distance_km,
    )
    mappings = MappingTables.load()
    selector = ResourceSelector(
        mappings,
        config=spawn_config_from_settings(settings),
        rng=random.Random(settings.random_seed),
        min_confidence=settings.min_geo_confidence,
        secondary_chance=settings.secondary_lithology_chance,
    )
    return GeoContext(store, resolver, mappings, selector)
