from dataclasses import dataclass, fields
from typing import Any, Dict


@dataclass(frozen=True)
class GameSettings:
    """Tunable constants for the simulation and its scheduler."""
    tick_ms: int = 1000
    auto_save_ticks: int = 30
    auto_water_ticks: int = 30
    weather_min_duration_ms: int = 120000
    weather_max_duration_ms: int = 300000
    weather_repeat_accept: float = 0.3
    drought_drain_chance: float = 0.005
    # Recipe chances are quoted per this much real time; per-tick odds scale by tick_ms over it.
    mutation_chance_window_ms: int = 60000
    offline_cap_ms: int = 24 * 60 * 60 * 1000
    offline_min_ms: int = 5000
    max_profiles: int = 10
    profile_name_max_length: int = 12

    @classmethod
    def field_names(cls) -> set:
        return {f.name for f in fields(cls)}

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.field_names()}
