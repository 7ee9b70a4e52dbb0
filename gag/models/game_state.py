from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional, Tuple


class PlotState:
    EMPTY = "empty"
    GROWING = "growing"
    HARVESTABLE = "harvestable"
    DEAD = "dead"

    ALL = (EMPTY, GROWING, HARVESTABLE, DEAD)


@dataclass
class Plot:
    """Represents one cultivable cell in a garden."""
    state: str = PlotState.EMPTY
    seed_type: Optional[str] = None
    rarity: Optional[str] = None
    growth_progress: float = 0.0
    growth_total: float = 0.0
    water_level: int = 0
    water_needed: int = 0
    watered: bool = False
    is_mutation: bool = False
    mutation_id: Optional[str] = None

    @property
    def is_thirsty(self) -> bool:
        return self.state == PlotState.GROWING and self.water_level < self.water_needed

    @property
    def is_occupied(self) -> bool:
        return self.state in (PlotState.GROWING, PlotState.HARVESTABLE)


@dataclass
class Stats:
    """Lifetime counters used by achievements."""
    total_harvested: int = 0
    total_earned: int = 0
    total_watered: int = 0
    total_seeds_bought: int = 0
    mutations_found: int = 0
    rare_plants_grown: int = 0
    epic_plants_grown: int = 0
    legendary_plants_grown: int = 0
    mythic_plants_grown: int = 0
    unique_types_grown: int = 0
    maxed_upgrades: int = 0
    storms_weathered: int = 0
    types_grown: List[str] = field(default_factory=list)


@dataclass
class WeatherState:
    current: str = "sunny"
    time_remaining: float = 180000.0


@dataclass
class GameState:
    """The internal, mutable representation of one profile's game."""
    coins: int = 100
    plots: List[Plot] = field(default_factory=lambda: [Plot() for _ in range(6)])
    inventory: Dict[str, int] = field(default_factory=lambda: {"daisy": 3, "sunflower": 1})
    upgrades: Dict[str, int] = field(default_factory=lambda: {
        "watering_can": 0, "garden_size": 0, "sell_bonus": 0, "lucky_seeds": 0,
    })
    discovered_mutations: List[str] = field(default_factory=list)
    completed_achievements: List[str] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)
    weather: WeatherState = field(default_factory=WeatherState)
    last_save_time: int = 0


# --- External Immutable View ---

@dataclass(frozen=True)
class GameStateView:
    """The external read-only view of a game state. Plots and stats are detached copies."""
    coins: int
    plots: Tuple[Plot, ...]
    inventory: MappingProxyType
    upgrades: MappingProxyType
    discovered_mutations: Tuple[str, ...]
    completed_achievements: Tuple[str, ...]
    stats: Stats
    weather: WeatherState
    last_save_time: int
