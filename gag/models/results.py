from dataclasses import dataclass
from typing import Optional

from .assets import MutationRecipe, SeedSpecies


@dataclass(frozen=True)
class PlantResult:
    rarity: str
    species: SeedSpecies


@dataclass(frozen=True)
class HarvestResult:
    """What came out of a plot. Coins are only added once this is passed to sell_harvest."""
    seed_type: Optional[str]
    rarity: Optional[str]
    rarity_name: str
    is_mutation: bool
    mutation_id: Optional[str]
    sell_price: int
    name: str
    emoji: str


@dataclass(frozen=True)
class MutationEvent:
    plot_index: int
    mutation: MutationRecipe


@dataclass(frozen=True)
class OfflineReport:
    """Summary of the catch-up growth applied when a save is loaded."""
    elapsed_ms: int
    plants_advanced: int
    plants_now_ready: int
