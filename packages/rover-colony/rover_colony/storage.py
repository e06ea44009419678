"""RV storage and pocket operations resolved against the catalog."""
from __future__ import annotations

from rover_resource import Inventory, InventoryHelper

from rover_colony.state import Character, GameState


def add_item(state: GameState, inv: Inventory, item_id: str, qty: int = 1) -> bool:
    """Add *qty* of a catalog item; unknown items and overflow are rejected whole."""
    item = state.catalog.item(item_id)
    if item is None:
        return False
    return InventoryHelper.add_item(inv, item, qty, lambda: state.next_id("inst"))


def remove_item(state: GameState, inv: Inventory, item_id: str, qty: int = 1) -> bool:
    item = state.catalog.item(item_id)
    if item is None:
        return False
    return InventoryHelper.remove_item(inv, item, qty)


def add_to_storage(state: GameState, item_id: str, qty: int = 1,
                   ration_allowed: bool | None = None) -> bool:
    """Add to shared RV storage. *ration_allowed* also records the food's ration flag."""
    if not add_item(state, state.rv.storage, item_id, qty):
        return False
    item = state.catalog.item(item_id)
    if ration_allowed is not None and item.category == "food":
        state.rv.ration_prefs[item_id] = bool(ration_allowed)
    return True


def remove_from_storage(state: GameState, item_id: str, qty: int = 1) -> bool:
    return remove_item(state, state.rv.storage, item_id, qty)


def storage_has(state: GameState, item_id: str, qty: int = 1) -> bool:
    return InventoryHelper.has(state.rv.storage, item_id, qty)


def storage_count(state: GameState, item_id: str) -> int:
    return InventoryHelper.count(state.rv.storage, item_id)


def is_ration_allowed(state: GameState, item_id: str) -> bool:
    return state.rv.ration_prefs.get(item_id, False)


def set_ration_allowed(state: GameState, item_id: str, allowed: bool) -> bool:
    """Mark a food as fair game for auto-eating. Persists even with no stock."""
    item = state.catalog.item(item_id)
    if item is None or item.category != "food":
        return False
    state.rv.ration_prefs[item_id] = bool(allowed)
    return True


def owns_item(state: GameState, item_id: str) -> bool:
    """True if storage or any crew member's pockets hold *item_id*."""
    if storage_has(state, item_id):
        return True
    return any(InventoryHelper.has(c.pockets, item_id) for c in state.crew)


def return_to_pockets(state: GameState, char: Character, lines: list[tuple[str, int]],
                      ts: int | None = None) -> None:
    """Put reserved lines back in pockets, spilling into storage, else dropping with a warning."""
    for item_id, qty in lines:
        if add_item(state, char.pockets, item_id, qty):
            continue
        if add_to_storage(state, item_id, qty):
            continue
        state.push_log(f"No room to return {qty}x {state.catalog.item_name(item_id)}; it was lost.",
                       "warn", char.id, ts=ts)
