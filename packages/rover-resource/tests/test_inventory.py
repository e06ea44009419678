"""Tests for Inventory and InventoryHelper."""
from __future__ import annotations

import itertools

import pytest
from rover_resource import Inventory, InventoryHelper, ItemDef, ItemInstance, ToolDef

KNIFE = ItemDef("knife_pocket", "Pocket Knife", "tool", stack_size=1, equip_slot="mainHand",
                tool=ToolDef("cutting", 0, 60, 1))
STICK = ItemDef("stick", "Stick")


def uid_factory():
    counter = itertools.count(1)
    return lambda: f"inst_{next(counter)}"


class TestInventoryConstruction:
    def test_empty(self) -> None:
        inv = Inventory()
        assert inv.stacks == {}
        assert inv.instances == []
        assert inv.capacity == -1

    def test_used_counts_stacks_and_instances(self) -> None:
        inv = Inventory(stacks={"stick": 3}, instances=[ItemInstance("a", "knife_pocket")])
        assert InventoryHelper.used(inv) == 4


class TestAdd:
    def test_add_to_existing(self) -> None:
        inv = Inventory(stacks={"stick": 5})
        assert InventoryHelper.add(inv, "stick", 7) is True
        assert inv.stacks["stick"] == 12

    def test_add_over_capacity_is_rejected_whole(self) -> None:
        inv = Inventory(stacks={"stick": 20}, capacity=30)
        assert InventoryHelper.add(inv, "stone", 15) is False
        assert "stone" not in inv.stacks
        assert InventoryHelper.used(inv) == 20

    def test_add_exactly_to_capacity(self) -> None:
        inv = Inventory(stacks={"stick": 20}, capacity=30)
        assert InventoryHelper.add(inv, "stone", 10) is True
        assert InventoryHelper.free(inv) == 0

    def test_unlimited(self) -> None:
        inv = Inventory()
        assert InventoryHelper.add(inv, "gold", 1000) is True
        assert InventoryHelper.free(inv) is None

    def test_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="amount must be >= 0"):
            InventoryHelper.add(Inventory(), "stick", -1)

    def test_capacity_never_exceeded(self) -> None:
        inv = Inventory(capacity=6)
        for amount in (2, 3, 4, 1, 1, 5):
            InventoryHelper.add(inv, "stick", amount)
            assert InventoryHelper.used(inv) <= inv.capacity
        assert InventoryHelper.used(inv) == 6


class TestRemove:
    def test_remove_partial(self) -> None:
        inv = Inventory(stacks={"stick": 10})
        assert InventoryHelper.remove(inv, "stick", 3) is True
        assert inv.stacks["stick"] == 7

    def test_remove_all_clears_stack(self) -> None:
        inv = Inventory(stacks={"stick": 10})
        assert InventoryHelper.remove(inv, "stick", 10) is True
        assert "stick" not in inv.stacks

    def test_remove_more_than_available_changes_nothing(self) -> None:
        inv = Inventory(stacks={"stick": 5})
        assert InventoryHelper.remove(inv, "stick", 6) is False
        assert inv.stacks["stick"] == 5


class TestQueries:
    def test_has_and_missing(self) -> None:
        inv = Inventory(stacks={"fiber": 2, "stick": 4})
        assert InventoryHelper.has(inv, "fiber", 2)
        assert not InventoryHelper.has(inv, "fiber", 3)
        assert InventoryHelper.has_all(inv, {"stick": 4, "fiber": 1})
        assert InventoryHelper.missing(inv, {"fiber": 3, "stone": 1, "stick": 1}) == {"fiber": 1, "stone": 1}

    def test_count_includes_instances(self) -> None:
        inv = Inventory(instances=[ItemInstance("a", "knife_pocket"), ItemInstance("b", "knife_pocket")])
        assert InventoryHelper.count(inv, "knife_pocket") == 2


class TestItemRouting:
    def test_instance_items_get_uids_and_durability(self) -> None:
        inv = Inventory()
        assert InventoryHelper.add_item(inv, KNIFE, 2, uid_factory()) is True
        assert [i.uid for i in inv.instances] == ["inst_1", "inst_2"]
        assert all(i.durability == 60 for i in inv.instances)
        assert inv.stacks == {}

    def test_stack_items_stack(self) -> None:
        inv = Inventory()
        InventoryHelper.add_item(inv, STICK, 4, uid_factory())
        assert inv.stacks == {"stick": 4}

    def test_instance_add_respects_capacity(self) -> None:
        inv = Inventory(stacks={"stick": 5}, capacity=6)
        assert InventoryHelper.add_item(inv, KNIFE, 2, uid_factory()) is False
        assert inv.instances == []

    def test_remove_item_takes_newest_instances(self) -> None:
        inv = Inventory()
        InventoryHelper.add_item(inv, KNIFE, 3, uid_factory())
        assert InventoryHelper.remove_item(inv, KNIFE, 2) is True
        assert [i.uid for i in inv.instances] == ["inst_1"]
        assert InventoryHelper.remove_item(inv, KNIFE, 2) is False
        assert len(inv.instances) == 1


class TestTransfer:
    def test_stack_transfer(self) -> None:
        storage = Inventory(stacks={"ration_basic": 4}, capacity=60)
        pockets = Inventory(capacity=6)
        assert InventoryHelper.transfer(storage, pockets, "ration_basic", 2) is True
        assert storage.stacks["ration_basic"] == 2
        assert pockets.stacks["ration_basic"] == 2

    def test_transfer_rejected_when_target_full(self) -> None:
        storage = Inventory(stacks={"stick": 10})
        pockets = Inventory(stacks={"stone": 5}, capacity=6)
        assert InventoryHelper.transfer(storage, pockets, "stick", 2) is False
        assert storage.stacks["stick"] == 10
        assert "stick" not in pockets.stacks

    def test_transfer_rejected_when_source_short(self) -> None:
        storage = Inventory(stacks={"stick": 1})
        pockets = Inventory(capacity=6)
        assert InventoryHelper.transfer(storage, pockets, "stick", 2) is False
        assert pockets.stacks == {}

    def test_instance_transfer(self) -> None:
        storage = Inventory(instances=[ItemInstance("a", "knife_pocket", 60)])
        pockets = Inventory(capacity=6)
        assert InventoryHelper.transfer_instance(storage, pockets, "a") is True
        assert storage.instances == []
        assert pockets.instances[0].uid == "a"

    def test_instance_transfer_rejected_when_full(self) -> None:
        storage = Inventory(instances=[ItemInstance("a", "knife_pocket", 60)])
        pockets = Inventory(stacks={"stick": 6}, capacity=6)
        assert InventoryHelper.transfer_instance(storage, pockets, "a") is False
        assert len(storage.instances) == 1

    def test_unknown_instance(self) -> None:
        assert InventoryHelper.transfer_instance(Inventory(), Inventory(), "nope") is False


class TestSnapshot:
    def test_roundtrip(self) -> None:
        inv = Inventory(stacks={"stick": 3}, instances=[ItemInstance("a", "knife_pocket", 12)], capacity=60)
        restored = InventoryHelper.restore(InventoryHelper.snapshot(inv))
        assert restored == inv
