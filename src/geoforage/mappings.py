"""Weighted resource mapping tables bundled as package data.

Three tables are shipped: lithology name -> stones, and realm+biome composite
code (``"PA04"``) -> woods or foods. Each table is parsed and validated once,
then served from read-only dicts.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from functools import cache
from importlib.resources import files
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import BiomeCode, ResourceMapping

logger = logging.getLogger("geoforage.mappings")

REALM_CODES: dict[str, str] = {
    "Palearctic": "PA",
    "Nearctic": "NE",
    "Neotropic": "NO",
    "Afrotropic": "AF",
    "Indomalayan": "IN",
    "Australasia": "AU",
    "Oceania": "OC",
}

BIOME_NUMBERS: dict[BiomeCode, str] = {
    BiomeCode.TROPICAL_MOIST_BROADLEAF: "01",
    BiomeCode.TROPICAL_DRY_BROADLEAF: "02",
    BiomeCode.TROPICAL_CONIFER: "03",
    BiomeCode.TEMPERATE_BROADLEAF_MIXED: "04",
    BiomeCode.TEMPERATE_CONIFER: "05",
    BiomeCode.BOREAL: "06",
    BiomeCode.TROPICAL_GRASSLAND: "07",
    BiomeCode.TEMPERATE_GRASSLAND: "08",
    BiomeCode.FLOODED_GRASSLAND: "09",
    BiomeCode.MONTANE: "10",
    BiomeCode.TUNDRA: "11",
    BiomeCode.MEDITERRANEAN: "12",
    BiomeCode.DESERT: "13",
    BiomeCode.MANGROVE: "14",
}

_REALMS_BY_CODE = {code: realm for realm, code in REALM_CODES.items()}
_BIOMES_BY_NUMBER = {number: biome for biome, number in BIOME_NUMBERS.items()}


class MappingKind(str, Enum):
    LITHOLOGY = "lithology"
    WOOD = "wood"
    FOOD = "food"


MAPPING_FILES: dict[MappingKind, str] = {
    MappingKind.LITHOLOGY: "lithology_to_stones.json",
    MappingKind.WOOD: "realm_biomes_to_woods.json",
    MappingKind.FOOD: "realm_biomes_to_foods.json",
}


class MappingEntry(BaseModel):
    """One ``{resourceIds, weights}`` record as stored in the JSON tables."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    resource_ids: list[str] = Field(alias="resourceIds", min_length=1)
    weights: list[float] = Field(default_factory=list)


def normalize_lithology(name: str) -> str:
    return "_".join(name.strip().lower().split())


def realm_biome_code(realm: str | None, biome: BiomeCode | str | None) -> str | None:
    """Composite key such as ``"PA04"``; ``None`` when either half is unknown."""
    if not realm or biome is None:
        return None
    realm_code = REALM_CODES.get(realm)
    biome_number = BIOME_NUMBERS.get(BiomeCode.parse(biome))
    if realm_code is None or biome_number is None:
        return None
    return f"{realm_code}{biome_number}"


def split_realm_biome_code(code: str) -> tuple[str | None, BiomeCode | None]:
    return _REALMS_BY_CODE.get(code[:2]), _BIOMES_BY_NUMBER.get(code[2:])


def parse_table(kind: MappingKind, payload: Mapping[str, object]) -> dict[str, ResourceMapping]:
    """Validate raw JSON into mappings, skipping metadata keys and invalid entries."""
    table: dict[str, ResourceMapping] = {}
    for key, raw in payload.items():
        if key.startswith("_"):
            continue
        try:
            entry = MappingEntry.model_validate(raw)
        except ValidationError:
            logger.warning("mapping_entry_invalid", extra={"kind": kind.value, "key": key})
            continue

        if kind is MappingKind.LITHOLOGY:
            table[normalize_lithology(key)] = ResourceMapping(
                key=normalize_lithology(key),
                resource_ids=tuple(entry.resource_ids),
                weights=tuple(entry.weights),
            )
        else:
            realm, biome = split_realm_biome_code(key)
            table[key] = ResourceMapping(
                key=key,
                resource_ids=tuple(entry.resource_ids),
                weights=tuple(entry.weights),
                realm=realm,
                biome=biome,
            )
    return table


@cache
def load_table(kind: MappingKind) -> Mapping[str, ResourceMapping]:
    resource = files("geoforage") / "data" / MAPPING_FILES[kind]
    payload = json.loads(resource.read_text(encoding="utf-8"))
    table = parse_table(kind, payload)
    logger.debug("mapping_table_loaded", extra={"kind": kind.value, "entries": len(table)})
    return MappingProxyType(table)


class MappingTables:
    """Read-only lookups over the three mapping tables. Absence is reported as ``None``."""

    def __init__(self, tables: Mapping[MappingKind, Mapping[str, ResourceMapping]]) -> None:
        self._tables = {kind: MappingProxyType(dict(tables.get(kind, {}))) for kind in MappingKind}

    @classmethod
    def load(cls) -> MappingTables:
        return cls({kind: load_table(kind) for kind in MappingKind})

    def lithology(self, name: str | None) -> ResourceMapping | None:
        if not name:
            return None
        return self._tables[MappingKind.LITHOLOGY].get(normalize_lithology(name))

    def woods(self, realm: str | None, biome: BiomeCode | str | None) -> ResourceMapping | None:
        code = realm_biome_code(realm, biome)
        return self.by_code(MappingKind.WOOD, code) if code else None

    def foods(self, realm: str | None, biome: BiomeCode | str | None) -> ResourceMapping | None:
        code = realm_biome_code(realm, biome)
        return self.by_code(MappingKind.FOOD, code) if code else None

    def by_code(self, kind: MappingKind, code: str) -> ResourceMapping | None:
        return self._tables[kind].get(code)

    def known_lithologies(self) -> list[str]:
        return sorted(self._tables[MappingKind.LITHOLOGY])

    def realm_biome_codes(self, kind: MappingKind) -> list[str]:
        return sorted(self._tables[kind])
