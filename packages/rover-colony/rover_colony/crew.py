"""Crew creation, recruitment, equipment and storage/pocket transfers."""
from __future__ import annotations

from rover import Outcome, VirtualClock, clamp
from rover.clock import TimeSource
from rover_resource import Catalog, InventoryHelper, ItemDef, ItemInstance, load_catalog

from rover_colony.config import SimConfig
from rover_colony.state import SKILLS, Character, GameState, Needs, recompute_derived_stats
from rover_colony.storage import add_to_storage, remove_from_storage

PLAYER_STATS = {"Wilderness": 2, "Scavenge": 1, "Mechanics": 1, "Cooking": 1, "Medical": 1, "Grit": 2}
STARTER_SUPPLIES = (
    ("ration_basic", 4, True),
    ("water_clean", 4, None),
    ("water_dirty", 1, None),
    ("bottle_empty", 1, None),
)
MAX_PROTECTION = 0.7


def make_character(state: GameState, name: str, *, is_player: bool = False,
                   stats: dict[str, int] | None = None,
                   gear: tuple[str, ...] = (),
                   idle_behavior: str = "rest") -> Character:
    """Build a character, placing *gear* in pockets and equipping what has a slot."""
    char = Character(
        id=state.next_id("player" if is_player else "npc"),
        name=name,
        is_player=is_player,
        stats=dict(stats or {}),
        xp={skill: 0 for skill in SKILLS if skill != "Wits"},
        idle_behavior=idle_behavior,
    )
    char.pockets.capacity = state.config.pockets_capacity
    for item_id in gear:
        item = state.catalog.item(item_id)
        if item is None or not item.is_instance:
            continue
        inst = ItemInstance(state.next_id("inst"), item.id, item.max_durability)
        if InventoryHelper.add_instance(char.pockets, inst) and item.equip_slot:
            char.equipment[item.equip_slot] = inst.uid
    return char


def new_game(catalog: Catalog | None = None, config: SimConfig | None = None,
             time_source: TimeSource | None = None, run_seed: str | None = None) -> GameState:
    """Fresh save: the player aboard the RV with starter supplies."""
    catalog = catalog if catalog is not None else load_catalog()
    config = config if config is not None else SimConfig.from_dict(catalog.config)
    clock = VirtualClock(time_source)
    created_at = clock.now()
    if run_seed is None:
        run_seed = f"{config.world_seed}:{created_at}"

    state = GameState(catalog, config, clock, run_seed, created_at)
    recompute_derived_stats(state)
    player = make_character(state, "Rover", is_player=True, stats=PLAYER_STATS,
                            gear=("knife_pocket", "clothes_basic"))
    state.crew.append(player)
    state.job_queue(player.id)

    for item_id, qty, ration in STARTER_SUPPLIES:
        add_to_storage(state, item_id, qty, ration_allowed=ration)

    state.push_log(f"Welcome aboard the {state.rv.name}.", "system")
    return state


# --- Recruitment ---

def can_recruit(state: GameState) -> bool:
    return len(state.crew) < state.rv.max_crew


def recruit_npc(state: GameState, template_id: str) -> Outcome:
    template = state.catalog.npcs.get(template_id)
    if template is None:
        return Outcome.fail("unknown NPC")
    if not can_recruit(state):
        return Outcome.fail("No bunks available")

    npc = make_character(state, template.name, stats=template.stats, gear=("knife_pocket",))
    npc.perk = dict(template.perk) if template.perk else None
    npc.quirk = dict(template.quirk) if template.quirk else None
    npc.needs = Needs(hunger=70, thirst=70, morale=65)
    state.crew.append(npc)
    state.job_queue(npc.id)
    state.push_log(f"{npc.name} joined your caravan.", "good", npc.id)
    return Outcome.success(npc)


def accept_encounter(state: GameState, tile_id: str, offer: bool = False) -> Outcome:
    """Resolve a tile's recruit encounter. Offering the optional item is up to the player."""
    tile = state.tiles.get(tile_id)
    if tile is None or not tile.encounter:
        return Outcome.fail("no encounter")
    encounter = tile.encounter
    if encounter.get("type") != "recruit_npc":
        return Outcome.fail("unsupported encounter")

    requirement = encounter.get("requirement") or {}
    if offer and requirement:
        if not remove_from_storage(state, requirement["item_id"], requirement.get("qty", 1)):
            return Outcome.fail("cannot pay offer")

    result = recruit_npc(state, encounter["npc_template_id"])
    if not result:
        if offer and requirement:
            add_to_storage(state, requirement["item_id"], requirement.get("qty", 1))
        return result
    tile.encounter = None
    return result


# --- Equipment ---

def equip(state: GameState, char_id: str, uid: str) -> Outcome:
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    inst = InventoryHelper.find_instance(char.pockets, uid)
    if inst is None:
        return Outcome.fail("not in pockets")
    item = state.catalog.item(inst.item_id)
    if item is None or not item.equip_slot:
        return Outcome.fail("not equippable")
    char.equipment[item.equip_slot] = uid
    return Outcome.success(item.equip_slot)


def unequip(state: GameState, char_id: str, slot: str) -> Outcome:
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    if slot not in char.equipment:
        return Outcome.fail("bad slot")
    char.equipment[slot] = None
    return Outcome.success()


def equipped(state: GameState, char: Character, slot: str) -> tuple[ItemDef, ItemInstance] | None:
    uid = char.equipment.get(slot)
    if uid is None:
        return None
    inst = InventoryHelper.find_instance(char.pockets, uid)
    if inst is None:
        return None
    item = state.catalog.item(inst.item_id)
    if item is None:
        return None
    return item, inst


def tool_for(state: GameState, char: Character,
             tool_tag: str | None) -> tuple[ItemDef, ItemInstance] | None:
    """The main-hand tool if it matches *tool_tag*."""
    found = equipped(state, char, "mainHand")
    if found is None or found[0].tool is None:
        return None
    if tool_tag and found[0].tool.tag != tool_tag:
        return None
    return found


def tool_tier(state: GameState, char: Character, tool_tag: str | None) -> int:
    if not tool_tag:
        return 0
    found = tool_for(state, char, tool_tag)
    if found is None:
        return 0
    return max(0, int(found[0].tool.tier))


def total_protection(state: GameState, char: Character) -> float:
    protection = 0.0
    for slot in ("body", "legs"):
        found = equipped(state, char, slot)
        if found is not None and found[0].armor is not None:
            protection += found[0].armor.protection
    return clamp(protection, 0.0, MAX_PROTECTION)


# --- Transfers ---

def transfer_to_pockets(state: GameState, char_id: str, item_id: str, qty: int = 1) -> Outcome:
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    if state.rv.storage.stacks.get(item_id, 0) < qty:
        return Outcome.fail("not in storage")
    if not InventoryHelper.transfer(state.rv.storage, char.pockets, item_id, qty):
        return Outcome.fail("pockets full")
    return Outcome.success()


def transfer_to_storage(state: GameState, char_id: str, item_id: str, qty: int = 1) -> Outcome:
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    if char.pockets.stacks.get(item_id, 0) < qty:
        return Outcome.fail("not in pockets")
    if not InventoryHelper.transfer(char.pockets, state.rv.storage, item_id, qty):
        return Outcome.fail("storage full")
    return Outcome.success()


def transfer_instance_to_pockets(state: GameState, char_id: str, uid: str) -> Outcome:
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    if InventoryHelper.find_instance(state.rv.storage, uid) is None:
        return Outcome.fail("not in storage")
    if not InventoryHelper.transfer_instance(state.rv.storage, char.pockets, uid):
        return Outcome.fail("pockets full")
    return Outcome.success()


def transfer_instance_to_storage(state: GameState, char_id: str, uid: str) -> Outcome:
    """Move an instance to storage; if it was equipped it is unequipped."""
    char = state.character(char_id)
    if char is None:
        return Outcome.fail("bad char")
    if InventoryHelper.find_instance(char.pockets, uid) is None:
        return Outcome.fail("not in pockets")
    if not InventoryHelper.transfer_instance(char.pockets, state.rv.storage, uid):
        return Outcome.fail("storage full")
    for slot, equipped_uid in char.equipment.items():
        if equipped_uid == uid:
            char.equipment[slot] = None
    return Outcome.success()
