from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

UNKNOWN = "unknown"


class BiomeCode(str, Enum):
    TROPICAL_MOIST_BROADLEAF = "tropical_moist_broadleaf"
    TROPICAL_DRY_BROADLEAF = "tropical_dry_broadleaf"
    TROPICAL_CONIFER = "tropical_conifer"
    TEMPERATE_BROADLEAF_MIXED = "temperate_broadleaf_mixed"
    TEMPERATE_CONIFER = "temperate_conifer"
    BOREAL = "boreal"
    TROPICAL_GRASSLAND = "tropical_grassland"
    TEMPERATE_GRASSLAND = "temperate_grassland"
    FLOODED_GRASSLAND = "flooded_grassland"
    MONTANE = "montane"
    TUNDRA = "tundra"
    MEDITERRANEAN = "mediterranean"
    DESERT = "desert"
    MANGROVE = "mangrove"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> BiomeCode:
        """Map a stored biome string to a code, treating anything unrecognised as unknown."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def display_name(self) -> str:
        return BIOME_DISPLAY_NAMES[self]


BIOME_DISPLAY_NAMES: dict[BiomeCode, str] = {
    BiomeCode.TROPICAL_MOIST_BROADLEAF: "Tropical Rainforest",
    BiomeCode.TROPICAL_DRY_BROADLEAF: "Tropical Dry Forest",
    BiomeCode.TROPICAL_CONIFER: "Tropical Conifer Forest",
    BiomeCode.TEMPERATE_BROADLEAF_MIXED: "Temperate Forest",
    BiomeCode.TEMPERATE_CONIFER: "Conifer Forest",
    BiomeCode.BOREAL: "Boreal Forest",
    BiomeCode.TROPICAL_GRASSLAND: "Savanna",
    BiomeCode.TEMPERATE_GRASSLAND: "Grassland",
    BiomeCode.FLOODED_GRASSLAND: "Wetland",
    BiomeCode.MONTANE: "Mountain Shrubland",
    BiomeCode.TUNDRA: "Tundra",
    BiomeCode.MEDITERRANEAN: "Mediterranean",
    BiomeCode.DESERT: "Desert",
    BiomeCode.MANGROVE: "Mangrove",
    BiomeCode.UNKNOWN: "Unknown",
}


class DataSource(str, Enum):
    """Provenance reported to callers of a location lookup."""

    DETAILED = "detailed"
    COARSE = "coarse"
    FALLBACK = "fallback"


class ResolutionTier(str, Enum):
    """Which step of the fallback chain produced a single field."""

    DETAILED = "detailed"
    COARSE = "coarse"
    NEARBY = "nearby"
    ESTIMATE = "estimate"


class ResourceType(str, Enum):
    STONE = "stone"
    WOOD = "wood"
    FOOD = "food"


@dataclass(slots=True, frozen=True)
class GeohashBounds:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def center(self) -> tuple[float, float]:
        return (self.min_lat + self.max_lat) / 2, (self.min_lng + self.max_lng) / 2


@dataclass(slots=True, frozen=True)
class GeologyData:
    primary_lithology: str
    secondary_lithologies: tuple[str, ...] = ()
    confidence: float = 0.0

    @property
    def is_known(self) -> bool:
        return self.primary_lithology != UNKNOWN


@dataclass(slots=True, frozen=True)
class BiomeData:
    type: BiomeCode
    confidence: float = 0.0
    realm: str | None = None
    ecoregion_id: int | None = None

    @property
    def is_known(self) -> bool:
        return self.type is not BiomeCode.UNKNOWN


@dataclass(slots=True, frozen=True)
class GeoTile:
    geohash: str
    geology: GeologyData
    biome: BiomeData


@dataclass(slots=True)
class LocationGeoData:
    geology: GeologyData
    biome: BiomeData
    data_source: DataSource
    geohash: str
    geology_tier: ResolutionTier = ResolutionTier.DETAILED
    biome_tier: ResolutionTier = ResolutionTier.DETAILED


@dataclass(slots=True, frozen=True)
class ResourceMapping:
    key: str
    resource_ids: tuple[str, ...]
    weights: tuple[float, ...]
    realm: str | None = None
    biome: BiomeCode | None = None


@dataclass(slots=True, frozen=True)
class AltitudePreference:
    optimal: tuple[float, float]
    viable: tuple[float, float]


@dataclass(slots=True, frozen=True)
class ResourceSpawn:
    resource_id: str
    type: ResourceType
    quantity: int


@dataclass(slots=True)
class SpawnConfig:
    """Tunable spawn parameters; see ``ResourceSelector.update_config``."""

    stone_ratio: float = 0.6
    count_min: int = 3
    count_max: int = 5
    use_rarity: bool = True
    use_geo_data: bool = True
    food_ratio: float = 0.0


@dataclass(slots=True)
class CacheStats:
    tiles_cached: int = 0
    hits: int = 0
    misses: int = 0
