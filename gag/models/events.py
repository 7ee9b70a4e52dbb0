from dataclasses import dataclass
from typing import Tuple

from .assets import Achievement, MutationRecipe


@dataclass(frozen=True)
class GameEvent:
    """Base class for everything the engine publishes toward a presentation layer."""


@dataclass(frozen=True)
class WeatherChanged(GameEvent):
    weather_id: str


@dataclass(frozen=True)
class MutationFound(GameEvent):
    plot_index: int
    mutation: MutationRecipe


@dataclass(frozen=True)
class StormDamage(GameEvent):
    plot_indices: Tuple[int, ...]


@dataclass(frozen=True)
class AutoWatered(GameEvent):
    count: int


@dataclass(frozen=True)
class AchievementUnlocked(GameEvent):
    achievement: Achievement


@dataclass(frozen=True)
class UiRefresh(GameEvent):
    pass
