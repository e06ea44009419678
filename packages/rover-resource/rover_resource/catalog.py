"""Catalog loading: JSON data files with built-in defaults."""
from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rover_atlas import BiomeDef

from rover_resource.types import ItemDef, JobDef, NpcTemplate, RecipeDef, StationDef

logger = logging.getLogger(__name__)

CATALOG_FILES = ("config", "items", "recipes", "stations", "jobs", "biomes", "npcs")

DEFAULT_DATA: dict[str, Any] = {
    "config": {
        "version": "0.1",
        "worldSeed": "WORLD_V01",
        "tilePrecision": 7,
        "maxLogEntries": 600,
        "drains": {
            "hungerPerMin": 0.25,
            "thirstPerMin": 0.35,
            "moraleRecoverPerMinRest": 0.10,
        },
        "jobStrenuousDrainMultiplier": 2.0,
        "autoConsumeThreshold": 50,
        "idleMaxCyclesPerSim": 20,
        "xp": {"base": 100, "growth": 1.35},
    },
    "biomes": [
        {"id": "wild_forest", "name": "Wild Forest Edge", "weight": 22, "tags": ["wild"]},
        {"id": "riverbed", "name": "Riverbed Flats", "weight": 12, "tags": ["wet"]},
        {"id": "overgrown_suburb", "name": "Overgrown Suburb", "weight": 20, "tags": ["ruins", "wild"]},
        {"id": "collapsed_downtown", "name": "Collapsed Downtown", "weight": 14, "tags": ["ruins", "danger"]},
        {"id": "industrial_scrap", "name": "Industrial Scrapfields", "weight": 16, "tags": ["ruins", "industrial"]},
        {"id": "desert_highway", "name": "Desert Highway Cut", "weight": 16, "tags": ["dry"]},
    ],
    "items": [
        {"id": "stick", "name": "Stick", "category": "resource", "stackSize": 50},
        {"id": "stone", "name": "Stone", "category": "resource", "stackSize": 50},
        {"id": "fiber", "name": "Fiber/Reeds", "category": "resource", "stackSize": 50},
        {"id": "scrap_metal", "name": "Scrap Metal", "category": "resource", "stackSize": 50},
        {"id": "wiring", "name": "Wiring Bundle", "category": "resource", "stackSize": 50},
        {"id": "ration_basic", "name": "Basic Ration Pack", "category": "food", "stackSize": 20,
         "food": {"hunger": 10, "morale": -2, "quality": "low"}},
        {"id": "water_clean", "name": "Clean Water", "category": "water", "stackSize": 20,
         "water": {"thirst": 18, "morale": 0}},
        {"id": "water_dirty", "name": "Dirty Water", "category": "water", "stackSize": 20,
         "water": {"thirst": 12, "morale": -2, "dirty": True}},
        {"id": "meat_raw", "name": "Raw Meat", "category": "food", "stackSize": 20,
         "food": {"hunger": 8, "morale": -1, "quality": "low", "raw": True}},
        {"id": "fish_raw", "name": "Raw Fish", "category": "food", "stackSize": 20,
         "food": {"hunger": 7, "morale": -1, "quality": "low", "raw": True}},
        {"id": "meal_hearty", "name": "Hearty Meal", "category": "food", "stackSize": 10,
         "food": {"hunger": 28, "morale": 10, "quality": "high"}},
        {"id": "bandage", "name": "Bandage", "category": "medical", "stackSize": 10,
         "med": {"minorInjuryReduceMins": 90}},
        {"id": "antidote", "name": "Antidote", "category": "medical", "stackSize": 5,
         "med": {"cureSickness": True}},
        {"id": "revive_serum", "name": "Revive Serum", "category": "medical", "stackSize": 3,
         "med": {"revive": True}},
        {"id": "knife_pocket", "name": "Pocket Knife", "category": "tool", "stackSize": 1, "equipSlot": "mainHand",
         "tool": {"tag": "cutting", "tier": 0, "durabilityMax": 60, "power": 1}},
        {"id": "spear_fishing", "name": "Fishing Spear", "category": "tool", "stackSize": 1, "equipSlot": "mainHand",
         "tool": {"tag": "fishing", "tier": 1, "durabilityMax": 70, "power": 2}},
        {"id": "trap_simple", "name": "Simple Trap", "category": "tool", "stackSize": 1, "equipSlot": "utility",
         "tool": {"tag": "trap", "tier": 1, "durabilityMax": 40, "power": 1}},
        {"id": "hatchet_stone", "name": "Stone Hatchet", "category": "tool", "stackSize": 1, "equipSlot": "mainHand",
         "tool": {"tag": "chopping", "tier": 1, "durabilityMax": 55, "power": 2}},
        {"id": "clothes_basic", "name": "Basic Clothes", "category": "armor", "stackSize": 1, "equipSlot": "body",
         "armor": {"tier": 0, "durabilityMax": 80, "protection": 0.05}},
        {"id": "boots_scrap", "name": "Scrap Boots", "category": "armor", "stackSize": 1, "equipSlot": "legs",
         "armor": {"tier": 1, "durabilityMax": 90, "protection": 0.08}},
    ],
    "stations": [
        {"id": "storage", "name": "Storage", "levels": [
            {"level": 0, "cost": [], "effects": [{"type": "storageCap", "value": 60}]},
            {"level": 1, "cost": [{"id": "scrap_metal", "qty": 10}, {"id": "wiring", "qty": 3}],
             "effects": [{"type": "storageCap", "value": 90}]},
            {"level": 2, "cost": [{"id": "scrap_metal", "qty": 25}, {"id": "wiring", "qty": 10}],
             "effects": [{"type": "storageCap", "value": 130}]},
        ]},
        {"id": "bunks", "name": "Bunks", "levels": [
            {"level": 0, "cost": [], "effects": [{"type": "crewCap", "value": 2}]},
            {"level": 1, "cost": [{"id": "fiber", "qty": 12}, {"id": "scrap_metal", "qty": 8}],
             "effects": [{"type": "crewCap", "value": 3}]},
            {"level": 2, "cost": [{"id": "fiber", "qty": 25}, {"id": "scrap_metal", "qty": 18}, {"id": "wiring", "qty": 5}],
             "effects": [{"type": "crewCap", "value": 4}]},
        ]},
        {"id": "workbench", "name": "Workbench", "levels": [
            {"level": 0, "cost": [], "effects": [{"type": "stationLevel", "value": 0}]},
            {"level": 1, "cost": [{"id": "scrap_metal", "qty": 12}], "effects": [{"type": "stationLevel", "value": 1}]},
            {"level": 2, "cost": [{"id": "scrap_metal", "qty": 28}, {"id": "wiring", "qty": 8}],
             "effects": [{"type": "stationLevel", "value": 2}]},
        ]},
        {"id": "stove", "name": "Camp Stove", "levels": [
            {"level": 0, "cost": [], "effects": [{"type": "stationLevel", "value": 0}]},
            {"level": 1, "cost": [{"id": "scrap_metal", "qty": 10}], "effects": [{"type": "stationLevel", "value": 1}]},
        ]},
        {"id": "purifier", "name": "Water Purifier", "levels": [
            {"level": 0, "cost": [], "effects": [{"type": "purifierEnabled", "value": False}]},
            {"level": 1, "cost": [{"id": "wiring", "qty": 6}, {"id": "scrap_metal", "qty": 12}],
             "effects": [{"type": "purifierEnabled", "value": True}]},
        ]},
        {"id": "recycler", "name": "Recycler", "levels": [
            {"level": 0, "cost": [], "effects": [{"type": "recyclerEnabled", "value": False}]},
            {"level": 1, "cost": [{"id": "scrap_metal", "qty": 18}, {"id": "wiring", "qty": 7}],
             "effects": [{"type": "recyclerEnabled", "value": True}]},
        ]},
    ],
    "recipes": [
        {"id": "cordage", "name": "Cordage", "category": "materials", "station": "workbench", "stationLevel": 0,
         "timeSec": 60, "inputs": [{"id": "fiber", "qty": 3}], "outputs": [],
         "special": {"makeItem": {"id": "cordage_item", "name": "Cordage", "category": "material",
                                  "stackSize": 30}, "qty": 1}},
        {"id": "spear_fishing", "name": "Fishing Spear", "category": "tools", "station": "workbench",
         "stationLevel": 0, "timeSec": 180,
         "inputs": [{"id": "stick", "qty": 3}, {"id": "stone", "qty": 2}, {"id": "fiber", "qty": 2}],
         "outputs": [{"id": "spear_fishing", "qty": 1}]},
        {"id": "trap_simple", "name": "Simple Trap", "category": "tools", "station": "workbench",
         "stationLevel": 0, "timeSec": 150,
         "inputs": [{"id": "stick", "qty": 2}, {"id": "fiber", "qty": 3}],
         "outputs": [{"id": "trap_simple", "qty": 1}]},
        {"id": "hatchet_stone", "name": "Stone Hatchet", "category": "tools", "station": "workbench",
         "stationLevel": 0, "timeSec": 210,
         "inputs": [{"id": "stick", "qty": 2}, {"id": "stone", "qty": 3}, {"id": "fiber", "qty": 2}],
         "outputs": [{"id": "hatchet_stone", "qty": 1}]},
        {"id": "bandage", "name": "Bandage", "category": "medical", "station": "workbench", "stationLevel": 0,
         "timeSec": 120, "inputs": [{"id": "fiber", "qty": 4}], "outputs": [{"id": "bandage", "qty": 1}]},
        {"id": "cook_meat", "name": "Cook Meat", "category": "food", "station": "stove", "stationLevel": 0,
         "timeSec": 180, "inputs": [{"id": "meat_raw", "qty": 1}], "outputs": [{"id": "ration_basic", "qty": 1}]},
        {"id": "cook_fish", "name": "Cook Fish", "category": "food", "station": "stove", "stationLevel": 0,
         "timeSec": 150, "inputs": [{"id": "fish_raw", "qty": 1}], "outputs": [{"id": "ration_basic", "qty": 1}]},
        {"id": "boil_water", "name": "Boil Dirty Water", "category": "water", "station": "stove", "stationLevel": 0,
         "timeSec": 120, "inputs": [{"id": "water_dirty", "qty": 1}], "outputs": [{"id": "water_clean", "qty": 1}]},
        {"id": "meal_hearty", "name": "Hearty Meal", "category": "food", "station": "stove", "stationLevel": 1,
         "timeSec": 600, "inputs": [{"id": "ration_basic", "qty": 2}, {"id": "fiber", "qty": 1}],
         "outputs": [{"id": "meal_hearty", "qty": 1}]},
    ],
    "jobs": [
        {"id": "forage", "name": "Forage", "alwaysAvailable": True, "baseSec": 600, "strenuous": False,
         "toolTag": "cutting",
         "yields": [{"id": "stick", "min": 2, "max": 6}, {"id": "stone", "min": 1, "max": 4},
                    {"id": "fiber", "min": 0, "max": 4}],
         "risk": {"minorInjury": 0.03, "majorInjury": 0.005, "toolWear": 0.12, "sickness": 0.0},
         "xpSkill": "Wilderness"},
        {"id": "fish", "name": "Fish", "alwaysAvailable": True, "baseSec": 900, "strenuous": False,
         "toolTag": "fishing",
         "yields": [{"id": "fish_raw", "min": 1, "max": 3}, {"id": "water_dirty", "min": 0, "max": 1}],
         "risk": {"minorInjury": 0.02, "majorInjury": 0.004, "toolWear": 0.10, "sickness": 0.0},
         "xpSkill": "Wilderness"},
        {"id": "hunt", "name": "Hunt", "alwaysAvailable": True, "baseSec": 1200, "strenuous": True,
         "toolTag": "cutting",
         "yields": [{"id": "meat_raw", "min": 1, "max": 3}],
         "risk": {"minorInjury": 0.06, "majorInjury": 0.01, "toolWear": 0.15, "sickness": 0.0},
         "xpSkill": "Wilderness"},
        {"id": "trap", "name": "Set Traps", "alwaysAvailable": True, "baseSec": 1800, "strenuous": False,
         "toolTag": "trap",
         "yields": [{"id": "meat_raw", "min": 0, "max": 3}],
         "risk": {"minorInjury": 0.04, "majorInjury": 0.007, "toolWear": 0.10, "sickness": 0.0},
         "requiresItem": "trap_simple", "xpSkill": "Wilderness"},
        {"id": "scavenge", "name": "Scavenge Ruins", "alwaysAvailable": False, "biomeTags": ["ruins"],
         "baseSec": 1500, "strenuous": True, "toolTag": "chopping",
         "yields": [{"id": "scrap_metal", "min": 2, "max": 7}, {"id": "wiring", "min": 0, "max": 2}],
         "risk": {"minorInjury": 0.09, "majorInjury": 0.02, "toolWear": 0.20, "sickness": 0.03},
         "xpSkill": "Scavenge"},
    ],
    "npcs": [
        {"id": "npc_scavenger", "name": "Zig", "archetype": "Lone Scavenger",
         "perk": {"id": "perk_scrounger", "name": "Scrounger", "desc": "+10% salvage yield."},
         "quirk": {"id": "quirk_picky", "name": "Picky Eater", "desc": "Hates low-tier rations."},
         "stats": {"Wilderness": 2, "Scavenge": 5, "Mechanics": 2, "Cooking": 1, "Medical": 1, "Grit": 4}},
        {"id": "npc_medic", "name": "Dot", "archetype": "Road Medic",
         "perk": {"id": "perk_fieldmed", "name": "Field Medic", "desc": "Reduces injury downtime."},
         "quirk": {"id": "quirk_germaphobe", "name": "Germaphobe", "desc": "Hates dirty water (morale hit)."},
         "stats": {"Wilderness": 2, "Scavenge": 2, "Mechanics": 1, "Cooking": 2, "Medical": 6, "Grit": 3}},
    ],
}

INJECTED_ITEMS: list[dict[str, Any]] = [
    {"id": "bottle_empty", "name": "Empty Bottle", "category": "container", "stackSize": 20,
     "container": {"waterUnits": 1, "gatherSeconds": 30}},
    {"id": "milk_jug_empty", "name": "Empty Milk Jug", "category": "container", "stackSize": 10,
     "container": {"waterUnits": 5, "gatherSeconds": 60}},
    {"id": "bucket_empty", "name": "Empty Bucket", "category": "container", "stackSize": 5,
     "container": {"waterUnits": 10, "gatherSeconds": 120}},
    {"id": "water_dirty", "name": "Dirty Water", "category": "water", "stackSize": 99,
     "water": {"thirst": 25, "dirty": True}},
]

INJECTED_JOBS: list[dict[str, Any]] = [
    {"id": "gather_water", "name": "Gather Water", "alwaysAvailable": True, "baseMinutes": 1,
     "xpSkill": "Wilderness", "variant": "gather_water", "yields": []},
    {"id": "explore", "name": "Explore Nearby Tile", "alwaysAvailable": True, "baseMinutes": 25,
     "xpSkill": "Wilderness", "variant": "explore", "yields": []},
]


@dataclass
class Catalog:
    """Read-only definitions keyed by id, plus the raw config mapping."""

    config: dict[str, Any] = field(default_factory=dict)
    items: dict[str, ItemDef] = field(default_factory=dict)
    recipes: dict[str, RecipeDef] = field(default_factory=dict)
    stations: dict[str, StationDef] = field(default_factory=dict)
    jobs: dict[str, JobDef] = field(default_factory=dict)
    biomes: dict[str, BiomeDef] = field(default_factory=dict)
    npcs: dict[str, NpcTemplate] = field(default_factory=dict)
    used_fallback: bool = False

    def item(self, item_id: str) -> ItemDef | None:
        return self.items.get(item_id)

    def item_name(self, item_id: str) -> str:
        item = self.items.get(item_id)
        return item.name if item is not None else item_id

    def biome_list(self) -> list[BiomeDef]:
        return list(self.biomes.values())

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> Catalog:
        """Build a catalog from raw JSON-shaped data, applying core injections."""
        catalog = cls(config=copy.deepcopy(data.get("config") or {}))
        for raw in data.get("items") or ():
            item = ItemDef.from_dict(raw)
            catalog.items[item.id] = item
        for raw in data.get("recipes") or ():
            recipe = RecipeDef.from_dict(raw)
            catalog.recipes[recipe.id] = recipe
            made = (raw.get("special") or {}).get("makeItem")
            if made and made["id"] not in catalog.items:
                catalog.items[made["id"]] = ItemDef.from_dict(made)
        for raw in data.get("stations") or ():
            station = StationDef.from_dict(raw)
            catalog.stations[station.id] = station
        for raw in data.get("jobs") or ():
            job = JobDef.from_dict(raw)
            catalog.jobs[job.id] = job
        for raw in data.get("biomes") or ():
            biome = BiomeDef.from_dict(raw)
            catalog.biomes[biome.id] = biome
        for raw in data.get("npcs") or ():
            npc = NpcTemplate.from_dict(raw)
            catalog.npcs[npc.id] = npc

        for raw in INJECTED_ITEMS:
            if raw["id"] not in catalog.items:
                catalog.items[raw["id"]] = ItemDef.from_dict(raw)
        for raw in INJECTED_JOBS:
            if raw["id"] not in catalog.jobs:
                catalog.jobs[raw["id"]] = JobDef.from_dict(raw)
        return catalog


def _read_json(path: Path) -> Any | None:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.warning("could not read catalog file %s, using defaults", path)
        return None


def load_catalog(path: str | Path | None = None) -> Catalog:
    """Load ``<name>.json`` files from *path*, falling back to defaults per file.

    With no *path*, the built-in defaults are used for everything.
    """
    data: dict[str, Any] = {}
    used_fallback = False
    base = Path(path) if path is not None else None
    for name in CATALOG_FILES:
        raw = _read_json(base / f"{name}.json") if base is not None else None
        expected = dict if name == "config" else list
        if not isinstance(raw, expected):
            used_fallback = True
            raw = copy.deepcopy(DEFAULT_DATA[name])
        data[name] = raw

    catalog = Catalog.from_data(data)
    catalog.used_fallback = used_fallback
    if used_fallback and base is not None:
        logger.info("catalog at %s is incomplete, built-in defaults filled the gaps", base)
    return catalog
