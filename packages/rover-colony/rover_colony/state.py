"""GameState - the whole simulation, threaded explicitly through every call."""
from __future__ import annotations

from dataclasses import dataclass, field

from rover import EventLog, TimedQueue, VirtualClock
from rover_atlas import TileMap
from rover_resource import Catalog, Inventory

from rover_colony.config import SimConfig
from rover_colony.entries import CraftEntry, JobEntry

SKILLS = ("Wilderness", "Scavenge", "Mechanics", "Cooking", "Medical", "Grit", "Wits")
BASE_STORAGE_CAP = 40
BASE_CREW_CAP = 1


@dataclass
class Moodlet:
    id: str
    name: str
    ends_at: int
    morale_delta: float
    note: str = ""


@dataclass
class Condition:
    """Timed sickness or injury. Injuries carry severity ``minor`` or ``major``."""

    id: str
    name: str
    ends_at: int
    severity: str = "normal"


@dataclass
class Conditions:
    sickness: Condition | None = None
    injury: Condition | None = None
    downed: bool = False


@dataclass
class Needs:
    hunger: float = 80
    thirst: float = 80
    morale: float = 70
    health: float = 100


@dataclass
class Character:
    id: str
    name: str
    is_player: bool = False
    stats: dict[str, int] = field(default_factory=dict)
    xp: dict[str, int] = field(default_factory=dict)
    needs: Needs = field(default_factory=Needs)
    moodlets: list[Moodlet] = field(default_factory=list)
    conditions: Conditions = field(default_factory=Conditions)
    idle_behavior: str = "rest"
    pockets: Inventory = field(default_factory=lambda: Inventory(capacity=6))
    equipment: dict[str, str | None] = field(default_factory=lambda: {
        "mainHand": None, "offHand": None, "body": None, "legs": None, "utility": None,
    })
    perk: dict[str, str] | None = None
    quirk: dict[str, str] | None = None

    @property
    def downed(self) -> bool:
        return self.conditions.downed


@dataclass
class Rv:
    """The mobile base: station levels, shared storage and ration preferences."""

    name: str = "Rusty Rambler"
    stations: dict[str, int] = field(default_factory=dict)
    storage: Inventory = field(default_factory=lambda: Inventory(capacity=BASE_STORAGE_CAP))
    ration_prefs: dict[str, bool] = field(default_factory=dict)
    max_crew: int = BASE_CREW_CAP


@dataclass
class Meta:
    run_seed: str
    created_at: int
    tutorial_done: bool = False
    last_tile_id: str | None = None
    last_lat: float | None = None
    last_lon: float | None = None
    id_counter: int = 0


class GameState:
    """Everything a save holds, plus the catalog and clock it runs against."""

    def __init__(self, catalog: Catalog, config: SimConfig, clock: VirtualClock,
                 run_seed: str, created_at: int) -> None:
        self.catalog = catalog
        self.config = config
        self.clock = clock
        self.meta = Meta(run_seed=run_seed, created_at=created_at)
        self.last_sim_at = created_at
        self.tiles = TileMap(config.world_seed, catalog.biome_list())
        self.rv = Rv(stations={sid: 0 for sid in catalog.stations})
        self.crew: list[Character] = []
        self.job_queues: dict[str, TimedQueue[JobEntry]] = {}
        self.craft_queues: dict[str, TimedQueue[CraftEntry]] = {
            sid: TimedQueue() for sid in catalog.stations
        }
        self.log = EventLog(config.max_log_entries)

    def now(self) -> int:
        return self.clock.now()

    def next_id(self, prefix: str) -> str:
        self.meta.id_counter += 1
        return f"{prefix}_{self.meta.id_counter}"

    def character(self, char_id: str) -> Character | None:
        for char in self.crew:
            if char.id == char_id:
                return char
        return None

    def job_queue(self, char_id: str) -> TimedQueue[JobEntry]:
        queue = self.job_queues.get(char_id)
        if queue is None:
            queue = self.job_queues[char_id] = TimedQueue()
        return queue

    def craft_queue(self, station_id: str) -> TimedQueue[CraftEntry]:
        queue = self.craft_queues.get(station_id)
        if queue is None:
            queue = self.craft_queues[station_id] = TimedQueue()
        return queue

    def push_log(self, text: str, type: str = "info", actor_id: str | None = None,
                 ts: int | None = None) -> None:
        self.log.push(self.now() if ts is None else ts, text, type, actor_id)

    def station_level(self, station_id: str) -> int:
        return self.rv.stations.get(station_id, 0)


def recompute_derived_stats(state: GameState) -> None:
    """Apply station effects: storage capacity and crew cap. Stored items are untouched."""
    storage_cap = BASE_STORAGE_CAP
    crew_cap = BASE_CREW_CAP
    for station in state.catalog.stations.values():
        level = station.level(state.station_level(station.id))
        if level is None:
            continue
        storage_cap = level.effect("storageCap", storage_cap)
        crew_cap = level.effect("crewCap", crew_cap)
    state.rv.storage.capacity = int(storage_cap)
    state.rv.max_crew = int(crew_cap)
    for char in state.crew:
        state.job_queue(char.id)
