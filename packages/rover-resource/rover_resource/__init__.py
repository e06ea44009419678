"""rover-resource - Item, job and recipe definitions plus inventories."""
from rover_resource.catalog import DEFAULT_DATA, Catalog, load_catalog
from rover_resource.inventory import Inventory, InventoryHelper, ItemInstance
from rover_resource.recipe import can_afford, can_craft, pay, refund
from rover_resource.types import (
    EQUIP_SLOTS,
    ArmorDef,
    ContainerDef,
    FoodDef,
    ItemDef,
    JobDef,
    MedDef,
    NpcTemplate,
    RecipeDef,
    RiskDef,
    StationDef,
    StationLevel,
    ToolDef,
    WaterDef,
    YieldDef,
)

__all__ = [
    "ArmorDef",
    "Catalog",
    "ContainerDef",
    "DEFAULT_DATA",
    "EQUIP_SLOTS",
    "FoodDef",
    "Inventory",
    "InventoryHelper",
    "ItemDef",
    "ItemInstance",
    "JobDef",
    "MedDef",
    "NpcTemplate",
    "RecipeDef",
    "RiskDef",
    "StationDef",
    "StationLevel",
    "ToolDef",
    "WaterDef",
    "YieldDef",
    "can_afford",
    "can_craft",
    "load_catalog",
    "pay",
    "refund",
]
