"""Static resource tables: stones keyed by lithology, woods and foods keyed by biome and realm."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .models import AltitudePreference, BiomeCode, ResourceType

TMB = BiomeCode.TROPICAL_MOIST_BROADLEAF
TDB = BiomeCode.TROPICAL_DRY_BROADLEAF
TCF = BiomeCode.TROPICAL_CONIFER
TBM = BiomeCode.TEMPERATE_BROADLEAF_MIXED
TEC = BiomeCode.TEMPERATE_CONIFER
BOR = BiomeCode.BOREAL
TGR = BiomeCode.TROPICAL_GRASSLAND
TEG = BiomeCode.TEMPERATE_GRASSLAND
FLD = BiomeCode.FLOODED_GRASSLAND
MON = BiomeCode.MONTANE
TUN = BiomeCode.TUNDRA
MED = BiomeCode.MEDITERRANEAN
DES = BiomeCode.DESERT
MAN = BiomeCode.MANGROVE

PA, NE, NO, AF, IN, AU, OC = (
    "Palearctic",
    "Nearctic",
    "Neotropic",
    "Afrotropic",
    "Indomalayan",
    "Australasia",
    "Oceania",
)


@dataclass(slots=True, frozen=True)
class Resource:
    id: str
    name: str
    type: ResourceType
    category: str
    rarity: float
    biomes: tuple[BiomeCode, ...] = ()
    realms: tuple[str, ...] = ()
    lithologies: tuple[str, ...] = ()
    altitude: AltitudePreference | None = None
    toolstone: bool = False


def _stone(
    resource_id: str,
    name: str,
    category: str,
    rarity: float,
    lithologies: Sequence[str],
    toolstone: bool = False,
) -> Resource:
    return Resource(
        id=resource_id,
        name=name,
        type=ResourceType.STONE,
        category=category,
        rarity=rarity,
        lithologies=tuple(lithologies),
        toolstone=toolstone,
    )


def _living(
    resource_type: ResourceType,
    resource_id: str,
    name: str,
    category: str,
    rarity: float,
    biomes: Sequence[BiomeCode],
    realms: Sequence[str],
    altitude: AltitudePreference | None = None,
) -> Resource:
    return Resource(
        id=resource_id,
        name=name,
        type=resource_type,
        category=category,
        rarity=rarity,
        biomes=tuple(biomes),
        realms=tuple(realms),
        altitude=altitude,
    )


def _wood(
    resource_id: str,
    name: str,
    category: str,
    rarity: float,
    biomes: Sequence[BiomeCode],
    realms: Sequence[str],
    altitude: AltitudePreference | None = None,
) -> Resource:
    return _living(ResourceType.WOOD, resource_id, name, category, rarity, biomes, realms, altitude)


def _food(
    resource_id: str,
    name: str,
    category: str,
    rarity: float,
    biomes: Sequence[BiomeCode],
    realms: Sequence[str],
    altitude: AltitudePreference | None = None,
) -> Resource:
    return _living(ResourceType.FOOD, resource_id, name, category, rarity, biomes, realms, altitude)


def _band(optimal: tuple[float, float], viable: tuple[float, float]) -> AltitudePreference:
    return AltitudePreference(optimal=optimal, viable=viable)


STONES: tuple[Resource, ...] = (
    # sedimentary
    _stone("limestone", "Limestone", "sedimentary", 0.7, ["limestone", "lime_mudstone", "wackestone", "packstone"]),
    _stone("chalk", "Chalk", "sedimentary", 0.4, ["chalk", "calcarite"]),
    _stone("dolomite", "Dolomite", "sedimentary", 0.35, ["dolomite", "dolostone"]),
    _stone("sandstone", "Sandstone", "sedimentary", 0.6, ["sandstone", "arenite", "arkose", "greywacke"]),
    _stone("siltstone", "Siltstone", "sedimentary", 0.4, ["siltstone"]),
    _stone("shale", "Shale", "sedimentary", 0.5, ["shale", "mudstone", "claystone"]),
    _stone("mudstone", "Mudstone", "sedimentary", 0.5, ["mudstone", "claystone", "argillite"]),
    _stone("conglomerate", "Conglomerate", "sedimentary", 0.3, ["conglomerate", "breccia", "diamictite"]),
    _stone("clay", "Clay", "sedimentary", 0.8, ["clay", "mudite"]),
    _stone("flint", "Flint", "sedimentary", 0.35, ["chert", "flint"], toolstone=True),
    _stone("chert", "Chert", "sedimentary", 0.3, ["chert", "novaculite", "radiolarite"], toolstone=True),
    _stone("travertine", "Travertine", "sedimentary", 0.2, ["travertine", "tufa"]),
    # plutonic
    _stone("granite", "Granite", "igneous_plutonic", 0.3, ["granite", "granodiorite", "monzonite"]),
    _stone("diorite", "Diorite", "igneous_plutonic", 0.2, ["diorite", "tonalite"]),
    _stone("gabbro", "Gabbro", "igneous_plutonic", 0.15, ["gabbro", "norite", "troctolite"]),
    _stone("diabase", "Diabase", "igneous_plutonic", 0.2, ["diabase", "dolerite"]),
    _stone("pegmatite", "Pegmatite", "igneous_plutonic", 0.15, ["pegmatite"]),
    # volcanic
    _stone("basalt", "Basalt", "igneous_volcanic", 0.25, ["basalt", "trachybasalt"]),
    _stone("andesite", "Andesite", "igneous_volcanic", 0.2, ["andesite", "trachyandesite"]),
    _stone("rhyolite", "Rhyolite", "igneous_volcanic", 0.15, ["rhyolite", "rhyodacite", "dacite"]),
    _stone("tuff", "Tuff", "igneous_volcanic", 0.25, ["tuff", "volcanic_ash", "ignimbrite", "welded_tuff"]),
    _stone("obsidian", "Obsidian", "igneous_volcanic", 0.1, ["obsidian", "volcanic_glass"], toolstone=True),
    # metamorphic
    _stone("marble", "Marble", "metamorphic", 0.15, ["marble"]),
    _stone("slate", "Slate", "metamorphic", 0.3, ["slate"]),
    _stone("phyllite", "Phyllite", "metamorphic", 0.25, ["phyllite"]),
    _stone("schist", "Schist", "metamorphic", 0.25, ["schist", "mica_schist"]),
    _stone("gneiss", "Gneiss", "metamorphic", 0.2, ["gneiss", "orthogneiss", "paragneiss"]),
    _stone("quartzite", "Quartzite", "metamorphic", 0.15, ["quartzite"], toolstone=True),
    _stone("amphibolite", "Amphibolite", "metamorphic", 0.15, ["amphibolite"]),
    _stone("greenstone", "Greenstone", "metamorphic", 0.15, ["greenstone", "greenschist"], toolstone=True),
    _stone("soapstone", "Soapstone", "metamorphic", 0.12, ["soapstone", "steatite", "talc_schist"]),
    _stone("serpentinite", "Serpentinite", "metamorphic", 0.1, ["serpentinite", "serpentine"]),
    # ore
    _stone("malachite", "Malachite", "ore", 0.08, ["copper_ore", "mineralized"]),
    _stone("hematite", "Hematite", "ore", 0.12, ["iron_formation", "ironstone"]),
    _stone("magnetite", "Magnetite", "ore", 0.08, ["iron_formation", "ironstone"]),
)

WOODS: tuple[Resource, ...] = (
    # Palearctic
    _wood("european_oak", "European Oak", "hardwood", 0.25, [TBM, MED], [PA]),
    _wood("european_beech", "European Beech", "hardwood", 0.35, [TBM], [PA]),
    _wood("european_ash", "European Ash", "hardwood", 0.3, [TBM], [PA]),
    _wood("silver_birch", "Silver Birch", "hardwood", 0.4, [BOR, TBM], [PA]),
    _wood("scots_pine", "Scots Pine", "softwood", 0.7, [BOR, TEC], [PA]),
    _wood("norway_spruce", "Norway Spruce", "softwood", 0.6, [BOR, TEC, MON], [PA], _band((500, 1800), (0, 2300))),
    _wood("european_larch", "European Larch", "softwood", 0.25, [TEC, MON], [PA], _band((1000, 2000), (200, 2500))),
    _wood("english_yew", "English Yew", "hardwood", 0.1, [TBM, TEC], [PA]),
    _wood("cedar_of_lebanon", "Cedar of Lebanon", "softwood", 0.2, [MED, MON], [PA], _band((1300, 2000), (500, 3000))),
    _wood("olive", "Olive Wood", "fruit", 0.1, [MED], [PA]),
    # Nearctic
    _wood("american_oak", "American Oak", "hardwood", 0.25, [TBM], [NE]),
    _wood("sugar_maple", "Sugar Maple", "hardwood", 0.25, [TBM], [NE]),
    _wood("shagbark_hickory", "Shagbark Hickory", "hardwood", 0.15, [TBM], [NE]),
    _wood("paper_birch", "Paper Birch", "hardwood", 0.4, [BOR, TBM], [NE]),
    _wood("douglas_fir", "Douglas Fir", "softwood", 0.5, [TEC, MON], [NE], _band((0, 1500), (0, 3000))),
    _wood("eastern_white_pine", "Eastern White Pine", "softwood", 0.6, [TBM, TEC], [NE]),
    _wood("black_spruce", "Black Spruce", "softwood", 0.6, [BOR], [NE]),
    _wood("western_red_cedar", "Western Red Cedar", "softwood", 0.3, [TEC], [NE], _band((0, 1000), (0, 2000))),
    _wood("bald_cypress", "Bald Cypress", "softwood", 0.2, [FLD, TBM], [NE], _band((0, 100), (0, 500))),
    _wood("black_walnut", "Black Walnut", "fruit", 0.12, [TBM], [NE]),
    _wood("black_cherry", "Black Cherry", "fruit", 0.15, [TBM], [NE]),
    _wood("mesquite", "Mesquite", "hardwood", 0.4, [DES, TEG], [NE, NO]),
    # Neotropic
    _wood("mahogany", "Mahogany", "tropical", 0.05, [TMB, TDB], [NO]),
    _wood("brazil_nut", "Brazil Nut", "tropical", 0.08, [TMB], [NO]),
    _wood("ceiba", "Ceiba", "tropical", 0.15, [TMB, TDB], [NO]),
    _wood("balsa", "Balsa", "tropical", 0.3, [TMB], [NO]),
    _wood("lignum_vitae", "Lignum Vitae", "tropical", 0.05, [TDB], [NO]),
    _wood("caribbean_pine", "Caribbean Pine", "softwood", 0.4, [TCF, TGR], [NO]),
    # Afrotropic
    _wood("african_mahogany", "African Mahogany", "tropical", 0.06, [TMB, TDB], [AF]),
    _wood("iroko", "Iroko", "tropical", 0.08, [TMB], [AF]),
    _wood("african_ebony", "African Ebony", "tropical", 0.02, [TMB], [AF]),
    _wood("baobab", "Baobab", "hardwood", 0.1, [TGR, TDB], [AF]),
    _wood("umbrella_thorn", "Umbrella Thorn", "hardwood", 0.4, [TGR, DES], [AF]),
    # Indomalayan
    _wood("teak", "Teak", "tropical", 0.08, [TMB, TDB], [IN]),
    _wood("sandalwood", "Sandalwood", "tropical", 0.05, [TDB], [IN, AU]),
    _wood("sal", "Sal", "hardwood", 0.3, [TDB, TMB], [IN]),
    _wood("bamboo", "Bamboo", "tropical", 0.5, [TMB, TCF], [IN]),
    _wood("merkus_pine", "Merkus Pine", "softwood", 0.3, [TCF], [IN], _band((200, 1500), (0, 2000))),
    # Australasia
    _wood("eucalyptus", "Eucalyptus", "hardwood", 0.6, [TBM, MED, TGR], [AU]),
    _wood("blackwood", "Tasmanian Blackwood", "hardwood", 0.25, [TBM], [AU]),
    _wood("jarrah", "Jarrah", "hardwood", 0.2, [MED], [AU]),
    _wood("kauri", "Kauri", "softwood", 0.1, [TBM], [AU]),
    _wood("huon_pine", "Huon Pine", "softwood", 0.05, [TBM], [AU], _band((0, 600), (0, 1000))),
    # Oceania
    _wood("coconut_palm", "Coconut Palm", "tropical", 0.5, [TMB, MAN], [OC, IN]),
    # spanning several realms
    _wood("willow", "Willow", "hardwood", 0.5, [TBM, BOR, FLD, TEG], [PA, NE]),
    _wood("arctic_willow", "Arctic Willow", "hardwood", 0.4, [TUN], [PA, NE]),
    _wood("juniper", "Juniper", "softwood", 0.3, [MON, DES, TEG, MED], [PA, NE], _band((1000, 3000), (0, 3800))),
    _wood("mangrove", "Mangrove", "tropical", 0.4, [MAN], [NO, AF, IN, AU, OC], _band((0, 5), (0, 20))),
)

FOODS: tuple[Resource, ...] = (
    # Palearctic
    _food("wild_garlic", "Wild Garlic", "greens", 0.6, [TBM], [PA]),
    _food("elderberry", "Elderberry", "berry", 0.5, [TBM, MED], [PA]),
    _food("wild_strawberry_pa", "Woodland Strawberry", "berry", 0.5, [TBM, TEC], [PA]),
    _food("bilberry", "Bilberry", "berry", 0.5, [BOR, TEC, MON], [PA]),
    _food("hazelnut", "Hazelnut", "nut", 0.4, [TBM], [PA]),
    _food("sweet_chestnut", "Sweet Chestnut", "nut", 0.3, [TBM, MED], [PA]),
    _food("fig", "Wild Fig", "fruit", 0.3, [MED, DES], [PA]),
    # Nearctic
    _food("blueberry", "Blueberry", "berry", 0.5, [TBM, BOR], [NE]),
    _food("pawpaw", "Pawpaw", "fruit", 0.2, [TBM], [NE]),
    _food("elderberry_ne", "American Elderberry", "berry", 0.5, [TBM], [NE]),
    _food("wild_strawberry_ne", "Virginia Strawberry", "berry", 0.5, [TBM, TEG], [NE]),
    _food("pecan", "Pecan", "nut", 0.25, [TBM, TEG], [NE]),
    _food("ramps", "Ramps", "greens", 0.4, [TBM], [NE]),
    _food("pinyon_nut", "Pinyon Nut", "nut", 0.2, [MON, DES], [NE], _band((1500, 2500), (1000, 3000))),
    _food("prickly_pear", "Prickly Pear", "fruit", 0.4, [DES, MED], [NE, NO]),
    # Neotropic
    _food("acai", "Acai", "berry", 0.4, [TMB, FLD], [NO]),
    _food("brazil_nut_food", "Brazil Nut", "nut", 0.2, [TMB], [NO]),
    _food("passion_fruit", "Passion Fruit", "fruit", 0.4, [TMB, TDB], [NO]),
    _food("cacao", "Cacao", "fruit", 0.2, [TMB], [NO]),
    _food("guava", "Guava", "fruit", 0.4, [TDB, TGR, TCF], [NO]),
    # Afrotropic
    _food("baobab_fruit", "Baobab Fruit", "fruit", 0.3, [TGR, TDB], [AF]),
    _food("moringa", "Moringa", "greens", 0.4, [TDB, TGR], [AF, IN]),
    _food("marula", "Marula", "fruit", 0.3, [TGR], [AF]),
    _food("shea_nut", "Shea Nut", "nut", 0.25, [TGR], [AF]),
    # Indomalayan
    _food("durian", "Durian", "fruit", 0.15, [TMB], [IN]),
    _food("mangosteen", "Mangosteen", "fruit", 0.15, [TMB], [IN]),
    _food("jackfruit", "Jackfruit", "fruit", 0.3, [TMB, TDB], [IN]),
    _food("water_spinach", "Water Spinach", "greens", 0.5, [FLD, TMB], [IN]),
    # Australasia
    _food("davidson_plum", "Davidson Plum", "fruit", 0.2, [TMB, TBM], [AU]),
    _food("macadamia", "Macadamia", "nut", 0.2, [TMB, TBM], [AU]),
    _food("quandong", "Quandong", "fruit", 0.2, [DES, MED, TGR], [AU]),
    _food("kakadu_plum", "Kakadu Plum", "fruit", 0.15, [TGR, TDB], [AU]),
    _food("finger_lime", "Finger Lime", "fruit", 0.15, [TMB, TBM], [AU]),
    _food("warrigal_greens", "Warrigal Greens", "greens", 0.4, [MED, MAN], [AU, OC]),
    # Oceania
    _food("breadfruit", "Breadfruit", "fruit", 0.4, [TMB], [OC, IN]),
    _food("coconut", "Coconut", "nut", 0.5, [TMB, MAN], [OC, IN, AF]),
    # spanning several realms
    _food("lingonberry", "Lingonberry", "berry", 0.5, [BOR, TUN], [PA, NE]),
    _food("cloudberry", "Cloudberry", "berry", 0.25, [TUN, BOR], [PA, NE]),
    _food("nettle", "Stinging Nettle", "greens", 0.7, [TBM, BOR, TEG], [PA, NE]),
)

_TABLES: dict[ResourceType, tuple[Resource, ...]] = {
    ResourceType.STONE: STONES,
    ResourceType.WOOD: WOODS,
    ResourceType.FOOD: FOODS,
}
_BY_ID: dict[ResourceType, dict[str, Resource]] = {
    resource_type: {resource.id: resource for resource in table} for resource_type, table in _TABLES.items()
}


def resources(resource_type: ResourceType) -> tuple[Resource, ...]:
    return _TABLES[resource_type]


def by_id(resource_type: ResourceType, resource_id: str) -> Resource | None:
    return _BY_ID[resource_type].get(resource_id)


def by_biome(resource_type: ResourceType, biome: BiomeCode | str) -> list[Resource]:
    code = BiomeCode.parse(biome) if isinstance(biome, str) else biome
    return [resource for resource in _TABLES[resource_type] if code in resource.biomes]


def by_realm(resource_type: ResourceType, realm: str) -> list[Resource]:
    return [resource for resource in _TABLES[resource_type] if realm in resource.realms]


def by_category(resource_type: ResourceType, category: str) -> list[Resource]:
    return [resource for resource in _TABLES[resource_type] if resource.category == category]


def toolstones() -> list[Resource]:
    """Stones that can be knapped into cutting tools."""
    return [stone for stone in STONES if stone.toolstone]
