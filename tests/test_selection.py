from __future__ import annotations

import random
from collections import Counter

import pytest

from geoforage import catalog
from geoforage.altitude import AltitudeReading
from geoforage.mappings import MappingKind, MappingTables
from geoforage.models import (
    BiomeCode,
    BiomeData,
    DataSource,
    GeologyData,
    LocationGeoData,
    ResourceType,
    SpawnConfig,
)
from geoforage.selection import ResourceSelector, select_weighted

TABLES = MappingTables.load()


def _geo(
    lithology: str = "granite",
    secondaries: tuple[str, ...] = (),
    biome: BiomeCode = BiomeCode.TEMPERATE_BROADLEAF_MIXED,
    realm: str | None = "Nearctic",
    confidence: float = 0.9,
) -> LocationGeoData:
    return LocationGeoData(
        geology=GeologyData(primary_lithology=lithology, secondary_lithologies=secondaries, confidence=confidence),
        biome=BiomeData(type=biome, confidence=confidence, realm=realm),
        data_source=DataSource.DETAILED,
        geohash="dr5r",
    )


def _selector(seed: int = 1, **kwargs) -> ResourceSelector:
    return ResourceSelector(TABLES, rng=random.Random(seed), **kwargs)


def _ids(kind: MappingKind, code: str) -> set[str]:
    return set(TABLES.by_code(kind, code).resource_ids)


def test_select_weighted_rejects_empty() -> None:
    with pytest.raises(ValueError):
        select_weighted([], [], random.Random(0))


def test_select_weighted_follows_weights() -> None:
    rng = random.Random(42)

    counts = Counter(select_weighted(["common", "rare"], [3.0, 1.0], rng) for _ in range(4000))

    assert 2.5 < counts["common"] / counts["rare"] < 3.6


def test_select_weighted_degrades_to_uniform() -> None:
    rng = random.Random(3)

    mismatched = Counter(select_weighted(["a", "b"], [1.0], rng) for _ in range(2000))
    zero_total = Counter(select_weighted(["a", "b"], [0.0, 0.0], rng) for _ in range(2000))

    assert set(mismatched) == {"a", "b"}
    assert set(zero_total) == {"a", "b"}
    assert 0.4 < mismatched["a"] / 2000 < 0.6


def test_roll_quantity_bounds() -> None:
    selector = _selector()

    assert {selector.roll_quantity(0.0) for _ in range(200)} == {1}
    common = {selector.roll_quantity(1.0) for _ in range(2000)}
    assert common == {1, 2, 3, 4, 5, 6}
    assert all(1 <= selector.roll_quantity(0.35) <= 2 for _ in range(200))


def test_stone_follows_primary_lithology() -> None:
    selector = _selector()
    expected = set(TABLES.lithology("granite").resource_ids)

    picks = {selector.random_stone(_geo("Granite")).id for _ in range(300)}

    assert picks <= expected
    assert "granite" in picks


def test_stone_uses_secondary_lithology() -> None:
    selector = _selector(secondary_chance=1.0)

    picks = {selector.random_stone(_geo("moon_rock", secondaries=("basalt",))).id for _ in range(200)}

    assert picks <= set(TABLES.lithology("basalt").resource_ids)


def test_low_confidence_ignores_geology() -> None:
    selector = _selector(seed=11)

    picks = {selector.random_stone(_geo("granite", confidence=0.1)).id for _ in range(500)}

    assert not picks <= set(TABLES.lithology("granite").resource_ids)


def test_wood_uses_realm_biome_table() -> None:
    selector = _selector()

    picks = {selector.random_wood(_geo()).id for _ in range(300)}

    assert picks <= _ids(MappingKind.WOOD, "NE04")
    assert "european_oak" not in picks


def test_food_uses_realm_biome_table() -> None:
    selector = _selector()
    geo = _geo(biome=BiomeCode.TROPICAL_MOIST_BROADLEAF, realm="Neotropic")

    picks = {selector.random_food(geo).id for _ in range(300)}

    assert picks <= _ids(MappingKind.FOOD, "NO01")


def test_living_resources_fall_back_to_biome() -> None:
    selector = _selector()
    geo = _geo(biome=BiomeCode.DESERT, realm=None)
    desert_woods = {wood.id for wood in catalog.by_biome(ResourceType.WOOD, BiomeCode.DESERT)}

    picks = {selector.random_wood(geo).id for _ in range(200)}

    assert picks <= desert_woods


def test_high_altitude_suppresses_lowland_species() -> None:
    geo = _geo(biome=BiomeCode.MANGROVE, realm="Oceania")
    mountain = AltitudeReading(value=2000.0, accuracy=5.0, confidence=1.0)

    coastal = _selector(seed=5)
    alpine = _selector(seed=5)

    at_sea_level = Counter(coastal.random_wood(geo).id for _ in range(2000))
    up_high = Counter(alpine.random_wood(geo, mountain).id for _ in range(2000))

    assert at_sea_level["mangrove"] / 2000 > 0.45
    assert up_high["mangrove"] / 2000 < 0.3


def test_spawn_counts_and_types() -> None:
    selector = _selector(seed=8)

    for _ in range(50):
        spawns = selector.spawn(_geo())
        assert 3 <= len(spawns) <= 5
        for spawn in spawns:
            assert catalog.by_id(spawn.type, spawn.resource_id) is not None
            assert spawn.quantity >= 1


def test_spawn_ratios() -> None:
    stones_only = _selector(config=SpawnConfig(stone_ratio=1.0))
    foods_only = _selector(config=SpawnConfig(stone_ratio=0.0, food_ratio=1.0))
    woods_only = _selector(config=SpawnConfig(stone_ratio=0.0, food_ratio=0.0))

    assert {spawn.type for spawn in stones_only.spawn(_geo())} == {ResourceType.STONE}
    assert {spawn.type for spawn in foods_only.spawn(_geo())} == {ResourceType.FOOD}
    assert {spawn.type for spawn in woods_only.spawn(_geo())} == {ResourceType.WOOD}


def test_spawn_without_location() -> None:
    selector = _selector(config=SpawnConfig(count_min=2, count_max=2, use_rarity=False))

    spawns = selector.spawn(None)

    assert len(spawns) == 2


def test_update_config() -> None:
    selector = _selector()

    updated = selector.update_config(count_min=1, count_max=1)

    assert updated.count_min == 1
    assert selector.config.count_max == 1
    assert len(selector.spawn(None)) == 1


def test_update_config_rejects_bad_values() -> None:
    selector = _selector()

    with pytest.raises(TypeError):
        selector.update_config(colour="blue")
    with pytest.raises(ValueError):
        selector.update_config(count_min=6, count_max=2)
    with pytest.raises(ValueError):
        selector.update_config(stone_ratio=1.5)
    assert selector.config == SpawnConfig()


def test_toolstones() -> None:
    assert {stone.id for stone in ResourceSelector.toolstones()} == {
        "flint",
        "chert",
        "obsidian",
        "quartzite",
        "greenstone",
    }
