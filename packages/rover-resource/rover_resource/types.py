"""Catalog definition types: items, jobs, recipes, stations and NPC templates."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

EQUIP_SLOTS = ("mainHand", "offHand", "body", "legs", "utility")
FOOD_QUALITIES = ("low", "mid", "high")


def qty_map(entries: Any) -> dict[str, int]:
    """Normalize ``[{"id": .., "qty": ..}]`` or ``{id: qty}`` into ``{id: qty}``."""
    if not entries:
        return {}
    if isinstance(entries, dict):
        return {k: int(v) for k, v in entries.items()}
    result: dict[str, int] = {}
    for entry in entries:
        if not entry or not entry.get("id"):
            continue
        result[entry["id"]] = result.get(entry["id"], 0) + int(entry.get("qty", 1))
    return result


@dataclass(frozen=True)
class FoodDef:
    hunger: float = 10
    morale: float = 0
    quality: str = "low"
    raw: bool = False


@dataclass(frozen=True)
class WaterDef:
    thirst: float = 10
    morale: float = 0
    dirty: bool = False


@dataclass(frozen=True)
class MedDef:
    minor_injury_reduce_mins: float = 0
    cure_sickness: bool = False
    revive: bool = False


@dataclass(frozen=True)
class ToolDef:
    tag: str
    tier: int = 0
    durability_max: int = 0
    power: int = 0


@dataclass(frozen=True)
class ArmorDef:
    tier: int = 0
    durability_max: int = 0
    protection: float = 0.0


@dataclass(frozen=True)
class ContainerDef:
    water_units: int = 1
    gather_seconds: int = 30


@dataclass(frozen=True)
class ItemDef:
    """Immutable item catalog entry.

    Items with ``stack_size == 1`` are tracked as individual instances
    (each with its own durability); everything else stacks by id.

    Attributes:
        id: Unique identifier.
        name: Display name.
        category: resource, food, water, medical, tool, armor, container...
        stack_size: Maximum stack size; 1 marks an instance item.
        equip_slot: Slot the item occupies when equipped, if any.
    """

    id: str
    name: str = ""
    category: str = "resource"
    stack_size: int = 50
    equip_slot: str | None = None
    food: FoodDef | None = None
    water: WaterDef | None = None
    med: MedDef | None = None
    tool: ToolDef | None = None
    armor: ArmorDef | None = None
    container: ContainerDef | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ItemDef id must be non-empty")
        if self.stack_size < 1:
            raise ValueError(f"stack_size must be >= 1, got {self.stack_size}")
        if self.equip_slot is not None and self.equip_slot not in EQUIP_SLOTS:
            raise ValueError(f"unknown equip slot {self.equip_slot!r}")
        if self.food is not None and self.food.quality not in FOOD_QUALITIES:
            raise ValueError(f"unknown food quality {self.food.quality!r}")

    @property
    def is_instance(self) -> bool:
        return self.stack_size == 1

    @property
    def max_durability(self) -> int | None:
        if self.tool is not None and self.tool.durability_max:
            return self.tool.durability_max
        if self.armor is not None and self.armor.durability_max:
            return self.armor.durability_max
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ItemDef:
        food = data.get("food")
        water = data.get("water")
        med = data.get("med")
        tool = data.get("tool")
        armor = data.get("armor")
        container = data.get("container")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            category=data.get("category", "resource"),
            stack_size=int(data.get("stackSize", data.get("stack_size", 50))),
            equip_slot=data.get("equipSlot", data.get("equip_slot")),
            food=FoodDef(
                hunger=food.get("hunger", 10),
                morale=food.get("morale", 0),
                quality=food.get("quality", "low"),
                raw=bool(food.get("raw", False)),
            ) if food else None,
            water=WaterDef(
                thirst=water.get("thirst", 10),
                morale=water.get("morale", 0),
                dirty=bool(water.get("dirty", False)),
            ) if water else None,
            med=MedDef(
                minor_injury_reduce_mins=med.get("minorInjuryReduceMins", 0),
                cure_sickness=bool(med.get("cureSickness", False)),
                revive=bool(med.get("revive", False)),
            ) if med else None,
            tool=ToolDef(
                tag=tool["tag"],
                tier=int(tool.get("tier", 0)),
                durability_max=int(tool.get("durabilityMax", 0)),
                power=int(tool.get("power", 0)),
            ) if tool else None,
            armor=ArmorDef(
                tier=int(armor.get("tier", 0)),
                durability_max=int(armor.get("durabilityMax", 0)),
                protection=float(armor.get("protection", 0.0)),
            ) if armor else None,
            container=ContainerDef(
                water_units=int(container.get("waterUnits", 1)),
                gather_seconds=int(container.get("gatherSeconds", 30)),
            ) if container else None,
        )


@dataclass(frozen=True)
class YieldDef:
    item_id: str
    min: int = 1
    max: int = 1
    chance: float = 1.0


@dataclass(frozen=True)
class RiskDef:
    minor_injury: float = 0.0
    major_injury: float = 0.0
    tool_wear: float = 0.0
    sickness: float = 0.0


@dataclass(frozen=True)
class JobDef:
    """Immutable job catalog entry.

    ``variant`` is ``None`` for ordinary yield jobs, or ``"gather_water"`` /
    ``"explore"`` for the jobs that need extra input when queued.
    """

    id: str
    name: str = ""
    base_sec: float = 600
    strenuous: bool = False
    tool_tag: str | None = None
    yields: tuple[YieldDef, ...] = ()
    risk: RiskDef = field(default_factory=RiskDef)
    xp_skill: str | None = None
    always_available: bool = False
    biome_tags: tuple[str, ...] = ()
    biomes: tuple[str, ...] = ()
    requires_item: str | None = None
    variant: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("JobDef id must be non-empty")
        if self.base_sec <= 0:
            raise ValueError(f"base_sec must be > 0, got {self.base_sec}")

    @property
    def gated(self) -> bool:
        return self.always_available or bool(self.biome_tags) or bool(self.biomes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JobDef:
        if "baseSec" in data:
            base_sec = data["baseSec"]
        elif "baseMinutes" in data:
            base_sec = data["baseMinutes"] * 60
        else:
            base_sec = data.get("base_sec", 600)
        risk = data.get("risk") or {}
        yields = []
        for y in data.get("yields") or ():
            lo = int(y.get("min", 1))
            yields.append(YieldDef(
                item_id=y["id"],
                min=lo,
                max=int(y.get("max", lo)),
                chance=float(y.get("chance", 1.0)),
            ))
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            base_sec=base_sec or 600,
            strenuous=bool(data.get("strenuous", False)),
            tool_tag=data.get("toolTag"),
            yields=tuple(yields),
            risk=RiskDef(
                minor_injury=risk.get("minorInjury", 0.0),
                major_injury=risk.get("majorInjury", 0.0),
                tool_wear=risk.get("toolWear", 0.0),
                sickness=risk.get("sickness", 0.0),
            ),
            xp_skill=data.get("xpSkill"),
            always_available=bool(data.get("alwaysAvailable", False)),
            biome_tags=tuple(data.get("biomeTags") or ()),
            biomes=tuple(data.get("biomes") or data.get("biomeIds") or ()),
            requires_item=data.get("requiresItem"),
            variant=data.get("variant"),
        )


@dataclass(frozen=True)
class RecipeDef:
    """Immutable crafting recipe definition.

    Attributes:
        id: Recipe identifier.
        station: Station whose queue runs the craft.
        station_level: Minimum station level required.
        time_sec: Craft duration in seconds.
        inputs: Items consumed (item_id -> quantity).
        outputs: Items produced (item_id -> quantity).
    """

    id: str
    name: str = ""
    station: str = "workbench"
    station_level: int = 0
    time_sec: float = 60
    inputs: dict[str, int] = field(default_factory=dict)
    outputs: dict[str, int] = field(default_factory=dict)
    category: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("RecipeDef id must be non-empty")
        if self.time_sec < 0:
            raise ValueError(f"time_sec must be >= 0, got {self.time_sec}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecipeDef:
        outputs = {k: v for k, v in qty_map(data.get("outputs")).items() if v > 0}
        special = data.get("special") or {}
        made = special.get("makeItem")
        if made:
            outputs[made["id"]] = outputs.get(made["id"], 0) + int(special.get("qty", 1))
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            station=data.get("station", "workbench"),
            station_level=int(data.get("stationLevel", 0)),
            time_sec=data.get("timeSec") or 60,
            inputs=qty_map(data.get("inputs")),
            outputs=outputs,
            category=data.get("category", ""),
        )


@dataclass(frozen=True)
class StationLevel:
    level: int
    cost: dict[str, int] = field(default_factory=dict)
    effects: tuple[dict[str, Any], ...] = ()

    def effect(self, effect_type: str, default: Any = None) -> Any:
        for eff in self.effects:
            if eff.get("type") == effect_type:
                return eff.get("value", default)
        return default


@dataclass(frozen=True)
class StationDef:
    """RV module with upgrade levels; each level carries a cost and effects."""

    id: str
    name: str = ""
    levels: tuple[StationLevel, ...] = ()

    def level(self, level: int) -> StationLevel | None:
        for lvl in self.levels:
            if lvl.level == level:
                return lvl
        return self.levels[0] if self.levels else None

    def next_level(self, current: int) -> StationLevel | None:
        for lvl in self.levels:
            if lvl.level == current + 1:
                return lvl
        return None

    @property
    def max_level(self) -> int:
        return max((lvl.level for lvl in self.levels), default=0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StationDef:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            levels=tuple(
                StationLevel(
                    level=int(lvl["level"]),
                    cost=qty_map(lvl.get("cost")),
                    effects=tuple(dict(e) for e in lvl.get("effects") or ()),
                )
                for lvl in data.get("levels") or ()
            ),
        )


@dataclass(frozen=True)
class NpcTemplate:
    id: str
    name: str
    archetype: str = ""
    stats: dict[str, int] = field(default_factory=dict)
    perk: dict[str, str] | None = None
    quirk: dict[str, str] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NpcTemplate:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            archetype=data.get("archetype", ""),
            stats=dict(data.get("stats") or {}),
            perk=dict(data["perk"]) if data.get("perk") else None,
            quirk=dict(data["quirk"]) if data.get("quirk") else None,
        )
