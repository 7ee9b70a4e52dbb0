from .assets import (
    AvailabilityWindow,
    SeedSpecies,
    Category,
    RarityTier,
    WeatherType,
    UpgradeLevel,
    UpgradeTrack,
    MutationRecipe,
    Achievement,
)
from .game_state import (
    PlotState,
    Plot,
    Stats,
    WeatherState,
    GameState,
    GameStateView,
)
from .results import (
    PlantResult,
    HarvestResult,
    MutationEvent,
    OfflineReport,
)
from .events import (
    GameEvent,
    WeatherChanged,
    MutationFound,
    StormDamage,
    AutoWatered,
    AchievementUnlocked,
    UiRefresh,
)
from .settings import GameSettings
from .profile import Profile

__all__ = [
    "AvailabilityWindow",
    "SeedSpecies",
    "Category",
    "RarityTier",
    "WeatherType",
    "UpgradeLevel",
    "UpgradeTrack",
    "MutationRecipe",
    "Achievement",
    "PlotState",
    "Plot",
    "Stats",
    "WeatherState",
    "GameState",
    "GameStateView",
    "PlantResult",
    "HarvestResult",
    "MutationEvent",
    "OfflineReport",
    "GameEvent",
    "WeatherChanged",
    "MutationFound",
    "StormDamage",
    "AutoWatered",
    "AchievementUnlocked",
    "UiRefresh",
    "GameSettings",
    "Profile",
]
