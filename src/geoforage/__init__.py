"""Geohash-indexed geology and biome lookup with weighted resource spawning."""

from .context import GeoContext, build_context
from .models import DataSource, LocationGeoData, ResourceSpawn, ResourceType, SpawnConfig

__version__ = "0.1.0"

__all__ = [
    "DataSource",
    "GeoContext",
    "LocationGeoData",
    "ResourceSpawn",
    "ResourceType",
    "SpawnConfig",
    "build_context",
]
