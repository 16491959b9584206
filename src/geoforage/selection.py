"""Weighted resource selection driven by resolved geology, biome and altitude."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import replace
from typing import Sequence, TypeVar

from . import catalog
from .altitude import AltitudeReading, altitude_bias
from .catalog import Resource
from .mappings import MappingTables
from .models import LocationGeoData, ResourceMapping, ResourceSpawn, ResourceType, SpawnConfig

T = TypeVar("T")

MIN_GEO_CONFIDENCE = 0.2
SECONDARY_LITHOLOGY_CHANCE = 0.3
MAX_QUANTITY_STEPS = 5


def select_weighted(items: Sequence[T], weights: Sequence[float], rng: random.Random) -> T:
    """Pick one item with probability proportional to its weight.

    Mismatched lengths or a non-positive total degrade to a uniform pick.
    """
    if not items:
        raise ValueError("Cannot select from an empty sequence")
    if len(items) != len(weights):
        return rng.choice(items)
    total = sum(weights)
    if total <= 0:
        return rng.choice(items)

    remaining = rng.random() * total
    for item, weight in zip(items, weights):
        remaining -= weight
        if remaining <= 0:
            return item
    return items[-1]


class ResourceSelector:
    """Chooses stones, woods and foods for a location and rolls spawn quantities."""

    def __init__(
        self,
        mappings: MappingTables,
        *,
        config: SpawnConfig | None = None,
        rng: random.Random | None = None,
        min_confidence: float = MIN_GEO_CONFIDENCE,
        secondary_chance: float = SECONDARY_LITHOLOGY_CHANCE,
        logger: logging.Logger | None = None,
    ) -> None:
        self._mappings = mappings
        self._config = config or SpawnConfig()
        self._validate(self._config)
        self._rng = rng or random.Random()
        self._min_confidence = min_confidence
        self._secondary_chance = secondary_chance
        self._logger = logger or logging.getLogger("geoforage.selection")

    @property
    def config(self) -> SpawnConfig:
        return self._config

    def update_config(self, **changes: object) -> SpawnConfig:
        """Apply a partial update; unknown field names raise ``TypeError``."""
        updated = replace(self._config, **changes)
        self._validate(updated)
        self._config = updated
        self._logger.info("spawn_config_updated", extra={"changes": sorted(changes)})
        return updated

    def select_by_rarity(self, resources: Sequence[Resource], altitude: AltitudeReading | None = None) -> Resource:
        if not self._config.use_rarity:
            return self._rng.choice(resources)
        weights = [resource.rarity * altitude_bias(resource.altitude, altitude) for resource in resources]
        return select_weighted(resources, weights, self._rng)

    def select_from_mapping(
        self,
        mapping: ResourceMapping,
        resource_type: ResourceType,
        altitude: AltitudeReading | None = None,
    ) -> Resource | None:
        """Weighted pick among the mapping's ids that exist in the catalog."""
        weighted = len(mapping.resource_ids) == len(mapping.weights)
        candidates: list[Resource] = []
        weights: list[float] = []
        for index, resource_id in enumerate(mapping.resource_ids):
            resource = catalog.by_id(resource_type, resource_id)
            if resource is None:
                self._logger.debug(
                    "mapping_resource_missing", extra={"mapping": mapping.key, "resource_id": resource_id}
                )
                continue
            candidates.append(resource)
            if weighted:
                weights.append(mapping.weights[index] * altitude_bias(resource.altitude, altitude))

        if not candidates:
            return None
        return select_weighted(candidates, weights, self._rng)

    def random_stone(self, geo: LocationGeoData | None = None, altitude: AltitudeReading | None = None) -> Resource:
        stones = catalog.resources(ResourceType.STONE)
        if not self._geo_usable(geo, geo.geology.confidence if geo else 0.0):
            return self.select_by_rarity(stones, altitude)

        geology = geo.geology
        mapping = self._mappings.lithology(geology.primary_lithology)
        if mapping is not None:
            stone = self.select_from_mapping(mapping, ResourceType.STONE, altitude)
            if stone is not None:
                return stone

        for lithology in geology.secondary_lithologies:
            if self._rng.random() >= self._secondary_chance:
                continue
            mapping = self._mappings.lithology(lithology)
            if mapping is None:
                continue
            stone = self.select_from_mapping(mapping, ResourceType.STONE, altitude)
            if stone is not None:
                return stone

        return self.select_by_rarity(stones, altitude)

    def random_wood(self, geo: LocationGeoData | None = None, altitude: AltitudeReading | None = None) -> Resource:
        return self._select_living(ResourceType.WOOD, geo, altitude)

    def random_food(self, geo: LocationGeoData | None = None, altitude: AltitudeReading | None = None) -> Resource:
        return self._select_living(ResourceType.FOOD, geo, altitude)

    def roll_quantity(self, rarity: float) -> int:
        """``1 + floor(random * max(1, floor(rarity * 5) + 1))``; common resources roll up to 6."""
        steps = max(1, math.floor(rarity * MAX_QUANTITY_STEPS) + 1)
        return 1 + math.floor(self._rng.random() * steps)

    def spawn(self, geo: LocationGeoData | None, altitude: AltitudeReading | None = None) -> list[ResourceSpawn]:
        config = self._config
        count = self._rng.randint(config.count_min, config.count_max)
        spawns: list[ResourceSpawn] = []
        for _ in range(count):
            if self._rng.random() < config.stone_ratio:
                resource = self.random_stone(geo, altitude)
            elif self._rng.random() < config.food_ratio:
                resource = self.random_food(geo, altitude)
            else:
                resource = self.random_wood(geo, altitude)
            spawns.append(
                ResourceSpawn(
                    resource_id=resource.id,
                    type=resource.type,
                    quantity=self.roll_quantity(resource.rarity),
                )
            )
        return spawns

    @staticmethod
    def toolstones() -> list[Resource]:
        return catalog.toolstones()

    def _select_living(
        self,
        resource_type: ResourceType,
        geo: LocationGeoData | None,
        altitude: AltitudeReading | None,
    ) -> Resource:
        everything = catalog.resources(resource_type)
        if not self._geo_usable(geo, geo.biome.confidence if geo else 0.0):
            return self.select_by_rarity(everything, altitude)

        biome = geo.biome
        if resource_type is ResourceType.WOOD:
            mapping = self._mappings.woods(biome.realm, biome.type)
        else:
            mapping = self._mappings.foods(biome.realm, biome.type)
        if mapping is not None:
            resource = self.select_from_mapping(mapping, resource_type, altitude)
            if resource is not None:
                return resource

        in_biome = catalog.by_biome(resource_type, biome.type)
        if in_biome:
            return self.select_by_rarity(in_biome, altitude)
        return self.select_by_rarity(everything, altitude)

    def _geo_usable(self, geo: LocationGeoData | None, confidence: float) -> bool:
        return geo is not None and self._config.use_geo_data and confidence >= self._min_confidence

    @staticmethod
    def _validate(config: SpawnConfig) -> None:
        if config.count_min < 0 or config.count_max < config.count_min:
            raise ValueError(f"Invalid spawn count range: [{config.count_min}, {config.count_max}]")
        for name in ("stone_ratio", "food_ratio"):
            value = getattr(config, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
