"""Runtime configuration for geoforage."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="GEOFORAGE_", env_file=".env", extra="ignore")

    app_name: str = "geoforage"
    log_level: str = "INFO"

    tiles_db_path: str | None = Field(
        default=None,
        description="Bundled SQLite tile database. When unset an empty in-memory store is used.",
    )
    tiles_working_dir: str | None = Field(
        default=None,
        description="Directory the bundled database is copied into before opening.",
    )
    tile_cache_size: int = Field(default=10_000, ge=1)

    lookup_precision: int = Field(default=4, ge=1, le=12)
    coarse_precision: int = Field(default=3, ge=1, le=12)
    max_search_rings: int = Field(default=2, ge=0)
    max_search_distance_km: float = Field(default=200.0, ge=0)

    min_geo_confidence: float = Field(default=0.2, ge=0, le=1)
    secondary_lithology_chance: float = Field(default=0.3, ge=0, le=1)

    spawn_stone_ratio: float = Field(default=0.6, ge=0, le=1)
    spawn_food_ratio: float = Field(default=0.0, ge=0, le=1)
    spawn_count_min: int = Field(default=3, ge=0)
    spawn_count_max: int = Field(default=5, ge=0)
    spawn_use_rarity: bool = True
    random_seed: int | None = None


settings = Settings()
