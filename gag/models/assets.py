from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple


@dataclass(frozen=True)
class AvailabilityWindow:
    """A yearly month/day range during which a seasonal seed is sold. May wrap past new year."""
    start_month: int
    start_day: int
    end_month: int
    end_day: int

    def contains(self, day: date) -> bool:
        start = (self.start_month, self.start_day)
        end = (self.end_month, self.end_day)
        current = (day.month, day.day)

        if start <= end:
            return start <= current <= end
        return current >= start or current <= end


@dataclass(frozen=True)
class SeedSpecies:
    """Represents a single seed definition from seeds.json."""
    id: str
    name: str
    emoji: str
    stages: Tuple[str, ...]
    grow_time: int
    water_needed: int
    base_sell_price: int
    seed_cost: int
    category: str
    availability: Optional[AvailabilityWindow] = None


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str = "#FFFFFF"


@dataclass(frozen=True)
class RarityTier:
    """Represents a rarity tier from rarities.json. Tiers are kept in commonest-first order."""
    id: str
    name: str
    multiplier: float
    chance: float


@dataclass(frozen=True)
class WeatherType:
    """Represents a weather definition from weather.json."""
    id: str
    name: str
    icon: str
    growth_modifier: float = 1.0
    water_drain: float = 1.0
    mutation_modifier: float = 1.0
    damage_chance: float = 0.0
    weight: float = 0.0


@dataclass(frozen=True)
class UpgradeLevel:
    """
    A single rung of an upgrade ladder. Only the payload field relevant to the
    owning track is set; the rest keep their defaults.
    """
    effect: str
    cost: int
    water_count: Optional[int] = None
    plots: Optional[int] = None
    columns: Optional[int] = None
    bonus: float = 0.0
    boost: float = 0.0


@dataclass(frozen=True)
class UpgradeTrack:
    """Represents an upgrade ladder from upgrades.json."""
    id: str
    name: str
    icon: str
    description: str
    levels: Tuple[UpgradeLevel, ...] = field(default_factory=tuple)

    @property
    def max_level(self) -> int:
        return len(self.levels) - 1


@dataclass(frozen=True)
class MutationRecipe:
    """Represents a mutation recipe from mutations.json. Ingredients form an unordered pair."""
    id: str
    name: str
    emoji: str
    ingredients: Tuple[str, str]
    chance: float
    sell_price: int
    description: str = ""

    def matches(self, species_a: str, species_b: str) -> bool:
        return sorted((species_a, species_b)) == sorted(self.ingredients)


@dataclass(frozen=True)
class Achievement:
    """Represents an achievement definition from achievements.json."""
    id: str
    name: str
    description: str
    icon: str
    stat: str
    target: int
    reward: int
