"""Moodlets, sickness, injury, downed state and skill progression."""
from __future__ import annotations

from rover import round_half_up, seed_from_string

from rover_colony.state import Character, Condition, GameState, Moodlet
from rover_colony.storage import remove_from_storage, storage_has

MINUTE_MS = 60_000
HOUR_MS = 60 * MINUTE_MS

SICK_MORALE = -10
MINOR_INJURY_MORALE = -5
MAJOR_INJURY_MORALE = -15
DOWNED_MORALE = -50
REVIVED_HEALTH = 60
MAX_LEVEL_UPS = 25


def clamp_need(value: float) -> float:
    return max(0.0, min(100.0, value))


def moodlet(moodlet_id: str, name: str, morale_delta: float, duration_ms: int,
            now: int, note: str = "") -> Moodlet:
    return Moodlet(moodlet_id, name, now + duration_ms, morale_delta, note)


def apply_moodlet(char: Character, mood: Moodlet) -> None:
    """Add *mood*, replacing any moodlet with the same id."""
    char.moodlets = [m for m in char.moodlets if m.id != mood.id]
    char.moodlets.append(mood)


def apply_sickness(state: GameState, char: Character, name: str, duration_ms: int,
                   now: int) -> None:
    char.conditions.sickness = Condition(f"s_{seed_from_string(name)}", name, now + duration_ms)
    state.push_log(f"{char.name} got sick: {name}.", "bad", char.id, ts=now)


def apply_injury(state: GameState, char: Character, severity: str, name: str,
                 duration_ms: int, now: int) -> None:
    if severity not in ("minor", "major"):
        raise ValueError(f"unknown injury severity {severity!r}")
    char.conditions.injury = Condition(f"i_{seed_from_string(name)}", name, now + duration_ms, severity)
    state.push_log(f"{char.name} suffered a {severity} injury: {name}.", "bad", char.id, ts=now)


def revive_character(state: GameState, char: Character, now: int) -> bool:
    if not char.conditions.downed:
        return False
    char.conditions.downed = False
    char.needs.health = REVIVED_HEALTH
    apply_moodlet(char, moodlet("m_revived", "Revived", -12, 6 * HOUR_MS, now,
                                "You cheated death. It feels weird."))
    return True


def down_character(state: GameState, char: Character, now: int) -> None:
    """Mark *char* downed; a revive item in storage is used straight away."""
    char.conditions.downed = True
    state.push_log(f"{char.name} is DOWNED!", "bad", char.id, ts=now)

    for item in state.catalog.items.values():
        if item.med is None or not item.med.revive or not storage_has(state, item.id):
            continue
        remove_from_storage(state, item.id)
        revive_character(state, char, now)
        state.push_log(f"Crew used a {item.name} on {char.name}.", "good", char.id, ts=now)
        break


def expire_effects(state: GameState, char: Character, now: int) -> None:
    char.moodlets = [m for m in char.moodlets if m.ends_at > now]
    sickness = char.conditions.sickness
    if sickness is not None and sickness.ends_at <= now:
        char.conditions.sickness = None
        state.push_log(f"{char.name} recovered from sickness.", "good", char.id, ts=now)
    injury = char.conditions.injury
    if injury is not None and injury.ends_at <= now:
        char.conditions.injury = None
        state.push_log(f"{char.name} recovered from injury.", "good", char.id, ts=now)


def morale_modifier(char: Character) -> float:
    total = sum(m.morale_delta for m in char.moodlets)
    if char.conditions.sickness is not None:
        total += SICK_MORALE
    injury = char.conditions.injury
    if injury is not None and injury.severity == "minor":
        total += MINOR_INJURY_MORALE
    if injury is not None and injury.severity == "major":
        total += MAJOR_INJURY_MORALE
    if char.conditions.downed:
        total += DOWNED_MORALE
    return total


def effective_skill(char: Character, skill: str) -> int:
    """Skill level plus one per 100 unspent XP."""
    return char.stats.get(skill, 0) + char.xp.get(skill, 0) // 100


def xp_to_next(level: int, base: float = 100, growth: float = 1.35) -> int:
    return round_half_up(base * growth ** max(0, level))


def process_level_ups(state: GameState, char: Character, now: int) -> list[tuple[str, int]]:
    """Convert banked XP into levels. Returns ``(skill, levels_gained)`` pairs."""
    base = state.config.xp_base
    growth = state.config.xp_growth
    leveled: list[tuple[str, int]] = []
    for skill in list(char.xp):
        level = char.stats.setdefault(skill, 0)
        xp = char.xp[skill]
        needed = xp_to_next(level, base, growth)
        ups = 0
        while xp >= needed and ups < MAX_LEVEL_UPS:
            xp -= needed
            level += 1
            ups += 1
            needed = xp_to_next(level, base, growth)
        if ups:
            char.stats[skill] = level
            char.xp[skill] = xp
            leveled.append((skill, ups))
            state.push_log(f"{char.name} leveled up: {skill} +{ups}.", "good", char.id, ts=now)
    return leveled
