"""CLI entrypoint for geoforage."""

from __future__ import annotations

import asyncio
from dataclasses import asdict, is_dataclass
from enum import Enum

import typer
from rich import print

from geoforage import geohash as gh
from geoforage.altitude import AltitudeReading
from geoforage.config import Settings, settings
from geoforage.context import GeoContext, build_context
from geoforage.models import GeohashBounds
from geoforage.telemetry import configure_logging

app = typer.Typer(help="Geohash geology/biome lookup and resource spawning")


def _plain(value):
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def _settings(db: str | None = None, seed: int | None = None) -> Settings:
    updates: dict[str, object] = {}
    if db is not None:
        updates["tiles_db_path"] = db
    if seed is not None:
        updates["random_seed"] = seed
    return settings.model_copy(update=updates) if updates else settings


def _context(db: str | None = None, seed: int | None = None) -> GeoContext:
    effective = _settings(db, seed)
    configure_logging(effective.log_level)
    return build_context(effective)


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "tiles_db_path": settings.tiles_db_path,
            "tiles_working_dir": settings.tiles_working_dir,
            "lookup_precision": settings.lookup_precision,
            "max_search_rings": settings.max_search_rings,
            "max_search_distance_km": settings.max_search_distance_km,
        }
    )


@app.command("locate")
def locate(
    lat: float = typer.Option(..., help="Latitude in degrees"),
    lng: float = typer.Option(..., help="Longitude in degrees"),
    db: str = typer.Option(None, help="Tile database path (overrides GEOFORAGE_TILES_DB_PATH)"),
) -> None:
    """Resolve geology and biome for a coordinate."""

    async def _run():
        async with _context(db) as context:
            return await context.get_location_data(lat, lng)

    resolved = asyncio.run(_run())
    print({**_plain(resolved), "biome_name": resolved.biome.type.display_name})


@app.command("spawn")
def spawn(
    lat: float = typer.Option(..., help="Latitude in degrees"),
    lng: float = typer.Option(..., help="Longitude in degrees"),
    altitude: float = typer.Option(None, help="GPS altitude in metres"),
    accuracy: float = typer.Option(None, help="GPS vertical accuracy in metres"),
    count_min: int = typer.Option(None, help="Minimum number of spawns"),
    count_max: int = typer.Option(None, help="Maximum number of spawns"),
    stone_ratio: float = typer.Option(None, help="Probability a slot is a stone"),
    food_ratio: float = typer.Option(None, help="Probability a non-stone slot is food"),
    seed: int = typer.Option(None, help="Random seed for reproducible spawns"),
    db: str = typer.Option(None, help="Tile database path (overrides GEOFORAGE_TILES_DB_PATH)"),
) -> None:
    """Spawn a batch of resources at a coordinate."""
    overrides = {
        name: value
        for name, value in {
            "count_min": count_min,
            "count_max": count_max,
            "stone_ratio": stone_ratio,
            "food_ratio": food_ratio,
        }.items()
        if value is not None
    }
    reading = AltitudeReading.from_gps(altitude, accuracy) if altitude is not None else None

    async def _run():
        async with _context(db, seed) as context:
            if overrides:
                try:
                    context.set_spawn_config(**overrides)
                except ValueError as exc:
                    raise typer.BadParameter(str(exc)) from exc
            return await context.spawn_resources(lat, lng, reading)

    print({"spawns": _plain(asyncio.run(_run()))})


@app.command("area")
def area(
    min_lat: float = typer.Option(..., help="South edge"),
    min_lng: float = typer.Option(..., help="West edge"),
    max_lat: float = typer.Option(..., help="North edge"),
    max_lng: float = typer.Option(..., help="East edge"),
    db: str = typer.Option(None, help="Tile database path (overrides GEOFORAGE_TILES_DB_PATH)"),
) -> None:
    """Resolve every lookup cell covering a bounding box."""
    box = GeohashBounds(min_lat=min_lat, max_lat=max_lat, min_lng=min_lng, max_lng=max_lng)

    async def _run():
        async with _context(db) as context:
            cells = sorted(gh.coverage(box, context.resolver.precision))
            return await context.get_tiles_data(cells)

    resolved = asyncio.run(_run())
    print(
        {
            geohash: {
                "geology": data.geology.primary_lithology,
                "biome": data.biome.type.value,
                "biome_name": data.biome.type.display_name,
                "data_source": data.data_source.value,
            }
            for geohash, data in resolved.items()
        }
    )


@app.command("encode")
def encode(
    lat: float = typer.Option(..., help="Latitude in degrees"),
    lng: float = typer.Option(..., help="Longitude in degrees"),
    precision: int = typer.Option(6, help="Geohash length"),
) -> None:
    print({"geohash": gh.encode(lat, lng, precision)})


@app.command("decode")
def decode(geohash: str) -> None:
    lat, lng = gh.decode(geohash)
    print({"lat": lat, "lng": lng, "bounds": _plain(gh.bounds(geohash)), "cell_km": gh.cell_size(len(geohash))})


@app.command("neighbors")
def neighbors(geohash: str, distance: int = typer.Option(1, help="Ring distance")) -> None:
    print({"geohash": geohash, "ring": gh.ring(geohash, distance)})


@app.command("tile")
def tile(geohash: str, db: str = typer.Option(None, help="Tile database path")) -> None:
    """Show the stored tile for a geohash without any fallback."""

    async def _run():
        async with _context(db) as context:
            return await context.store.get_tile(geohash)

    found = asyncio.run(_run())
    if found is None:
        print({"tile": None})
        raise typer.Exit(code=1)
    print({"tile": _plain(found)})


@app.command("metadata")
def metadata(db: str = typer.Option(None, help="Tile database path")) -> None:
    """Show tile database build provenance."""

    async def _run():
        async with _context(db) as context:
            return await context.store.get_metadata()

    print({"metadata": asyncio.run(_run())})


if __name__ == "__main__":
    app()
