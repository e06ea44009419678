"""Paying for and refunding item bundles (recipe inputs, upgrade costs)."""
from __future__ import annotations

from typing import Callable, Mapping

from rover_resource.inventory import Inventory, InventoryHelper
from rover_resource.types import ItemDef, RecipeDef


def can_afford(inventory: Inventory, cost: Mapping[str, int]) -> bool:
    """Check if inventory holds every item in *cost*."""
    return InventoryHelper.has_all(inventory, dict(cost))


def pay(inventory: Inventory, cost: Mapping[str, int],
        items: Mapping[str, ItemDef]) -> bool:
    """Deduct *cost*. Validates everything first; returns False with no effect if short."""
    if any(name not in items for name in cost):
        return False
    if not can_afford(inventory, cost):
        return False
    for name, qty in cost.items():
        InventoryHelper.remove_item(inventory, items[name], qty)
    return True


def refund(inventory: Inventory, goods: Mapping[str, int],
           items: Mapping[str, ItemDef],
           new_uid: Callable[[], str]) -> list[tuple[str, int]]:
    """Add *goods* back one line at a time. Returns the lines that did not fit."""
    dropped: list[tuple[str, int]] = []
    for name, qty in goods.items():
        item = items.get(name)
        if item is None or not InventoryHelper.add_item(inventory, item, qty, new_uid):
            dropped.append((name, qty))
    return dropped


def can_craft(inventory: Inventory, recipe: RecipeDef) -> bool:
    """Check if inventory has all required inputs."""
    return can_afford(inventory, recipe.inputs)
