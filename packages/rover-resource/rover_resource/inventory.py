"""Inventory component and helper functions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from rover_resource.types import ItemDef


@dataclass
class ItemInstance:
    """A single non-stacking item (tool, armor) with its own durability."""

    uid: str
    item_id: str
    durability: int | None = None


@dataclass
class Inventory:
    """Mutable inventory component.

    Attributes:
        stacks: Mapping of item_id -> quantity for stacking items.
        instances: Individual items in insertion order.
        capacity: Maximum units held (-1 for unlimited). Every stack unit and
            every instance counts as one unit.
    """

    stacks: dict[str, int] = field(default_factory=dict)
    instances: list[ItemInstance] = field(default_factory=list)
    capacity: int = -1


class InventoryHelper:
    """Pure functions for inventory manipulation.

    Adding mutations are all-or-nothing: if the units do not fit, nothing is
    added and the call reports failure.
    """

    @staticmethod
    def used(inv: Inventory) -> int:
        return sum(inv.stacks.values()) + len(inv.instances)

    @staticmethod
    def free(inv: Inventory) -> int | None:
        """Units still available, or None when unlimited."""
        if inv.capacity == -1:
            return None
        return max(0, inv.capacity - InventoryHelper.used(inv))

    @staticmethod
    def can_fit(inv: Inventory, units: int) -> bool:
        if units < 0:
            raise ValueError(f"units must be >= 0, got {units}")
        if inv.capacity == -1:
            return True
        return InventoryHelper.used(inv) + units <= inv.capacity

    # --- Stacks ---

    @staticmethod
    def add(inv: Inventory, name: str, amount: int = 1) -> bool:
        """Add a stack amount. Returns False, changing nothing, if it does not fit."""
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        if amount == 0:
            return True
        if not InventoryHelper.can_fit(inv, amount):
            return False
        inv.stacks[name] = inv.stacks.get(name, 0) + amount
        return True

    @staticmethod
    def remove(inv: Inventory, name: str, amount: int = 1) -> bool:
        """Remove a stack amount. Returns False, changing nothing, if short."""
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        if amount == 0:
            return True
        current = inv.stacks.get(name, 0)
        if current < amount:
            return False
        remaining = current - amount
        if remaining == 0:
            del inv.stacks[name]
        else:
            inv.stacks[name] = remaining
        return True

    @staticmethod
    def count(inv: Inventory, name: str) -> int:
        """Quantity of *name* held, stacks and instances combined."""
        return inv.stacks.get(name, 0) + sum(1 for i in inv.instances if i.item_id == name)

    @staticmethod
    def has(inv: Inventory, name: str, amount: int = 1) -> bool:
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        return InventoryHelper.count(inv, name) >= amount

    @staticmethod
    def has_all(inv: Inventory, requirements: dict[str, int]) -> bool:
        for name, needed in requirements.items():
            if InventoryHelper.count(inv, name) < needed:
                return False
        return True

    @staticmethod
    def missing(inv: Inventory, requirements: dict[str, int]) -> dict[str, int]:
        """Shortfall per item for *requirements*; empty when all are met."""
        short: dict[str, int] = {}
        for name, needed in requirements.items():
            have = InventoryHelper.count(inv, name)
            if have < needed:
                short[name] = needed - have
        return short

    # --- Instances ---

    @staticmethod
    def find_instance(inv: Inventory, uid: str) -> ItemInstance | None:
        for inst in inv.instances:
            if inst.uid == uid:
                return inst
        return None

    @staticmethod
    def instances_of(inv: Inventory, item_id: str) -> list[ItemInstance]:
        return [i for i in inv.instances if i.item_id == item_id]

    @staticmethod
    def add_instance(inv: Inventory, inst: ItemInstance) -> bool:
        if not InventoryHelper.can_fit(inv, 1):
            return False
        inv.instances.append(inst)
        return True

    @staticmethod
    def take_instance(inv: Inventory, uid: str) -> ItemInstance | None:
        for index, inst in enumerate(inv.instances):
            if inst.uid == uid:
                del inv.instances[index]
                return inst
        return None

    # --- Item-aware routing ---

    @staticmethod
    def add_item(inv: Inventory, item: ItemDef, qty: int,
                 new_uid: Callable[[], str]) -> bool:
        """Add *qty* of *item*: instance items get one ItemInstance each."""
        if qty < 0:
            raise ValueError(f"amount must be >= 0, got {qty}")
        if not item.is_instance:
            return InventoryHelper.add(inv, item.id, qty)
        if not InventoryHelper.can_fit(inv, qty):
            return False
        for _ in range(qty):
            inv.instances.append(ItemInstance(new_uid(), item.id, item.max_durability))
        return True

    @staticmethod
    def remove_item(inv: Inventory, item: ItemDef, qty: int) -> bool:
        """Remove *qty* of *item*; instance items go newest first."""
        if qty < 0:
            raise ValueError(f"amount must be >= 0, got {qty}")
        if not item.is_instance:
            return InventoryHelper.remove(inv, item.id, qty)
        matches = [i for i, inst in enumerate(inv.instances) if inst.item_id == item.id]
        if len(matches) < qty:
            return False
        for index in reversed(matches[len(matches) - qty:]):
            del inv.instances[index]
        return True

    # --- Transfers ---

    @staticmethod
    def transfer(source: Inventory, target: Inventory, name: str, amount: int = 1) -> bool:
        """Move a stack amount. Validates both sides before touching either."""
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")
        if source.stacks.get(name, 0) < amount:
            return False
        if not InventoryHelper.can_fit(target, amount):
            return False
        InventoryHelper.remove(source, name, amount)
        InventoryHelper.add(target, name, amount)
        return True

    @staticmethod
    def transfer_instance(source: Inventory, target: Inventory, uid: str) -> bool:
        if InventoryHelper.find_instance(source, uid) is None:
            return False
        if not InventoryHelper.can_fit(target, 1):
            return False
        target.instances.append(InventoryHelper.take_instance(source, uid))
        return True

    # --- Snapshot ---

    @staticmethod
    def snapshot(inv: Inventory) -> dict:
        return {
            "capacity": inv.capacity,
            "stacks": dict(inv.stacks),
            "instances": [
                {"uid": i.uid, "item_id": i.item_id, "durability": i.durability}
                for i in inv.instances
            ],
        }

    @staticmethod
    def restore(data: dict) -> Inventory:
        return Inventory(
            stacks={k: int(v) for k, v in data.get("stacks", {}).items()},
            instances=[ItemInstance(**d) for d in data.get("instances", [])],
            capacity=int(data.get("capacity", -1)),
        )
