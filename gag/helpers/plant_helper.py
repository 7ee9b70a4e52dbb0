import math
import random
from datetime import date
from typing import Dict, List, Optional

from ..models import Category, RarityTier, SeedSpecies


class PlantHelper:
    """
    Manages the species registry and rarity tiers.
    Seasonal seeds live in the same registry as everything else and carry an optional availability window.
    """

    def __init__(self, seeds: Dict[str, SeedSpecies], rarities: List[RarityTier], categories: Dict[str, Category]):
        self.seeds_by_id: Dict[str, SeedSpecies] = dict(seeds)
        self.rarities: List[RarityTier] = list(rarities)
        self.rarities_by_id: Dict[str, RarityTier] = {r.id: r for r in rarities}
        self.categories_by_id: Dict[str, Category] = dict(categories)

        self.seeds_by_category: Dict[str, List[SeedSpecies]] = {}
        self._categorize_seeds()

    def _categorize_seeds(self):
        for seed in self.seeds_by_id.values():
            self.seeds_by_category.setdefault(seed.category, []).append(seed)

    def get_seed_by_id(self, seed_id: str) -> Optional[SeedSpecies]:
        return self.seeds_by_id.get(seed_id)

    def get_all_seeds(self) -> List[SeedSpecies]:
        return list(self.seeds_by_id.values())

    def get_seeds_in_category(self, category: str) -> List[SeedSpecies]:
        return list(self.seeds_by_category.get(category, []))

    def get_rarity_by_id(self, rarity_id: Optional[str]) -> Optional[RarityTier]:
        if rarity_id is None:
            return None
        return self.rarities_by_id.get(rarity_id)

    def get_rarity_name(self, rarity_id: Optional[str]) -> str:
        rarity = self.get_rarity_by_id(rarity_id)
        return rarity.name if rarity else "Common"

    def get_rarity_multiplier(self, rarity_id: Optional[str]) -> float:
        rarity = self.get_rarity_by_id(rarity_id)
        return rarity.multiplier if rarity else 1.0

    def rarity_rank(self, rarity_id: Optional[str]) -> int:
        """Position of a tier from commonest (0) upward. Unknown ids rank as common."""
        for i, rarity in enumerate(self.rarities):
            if rarity.id == rarity_id:
                return i
        return 0

    def at_least(self, rarity_id: Optional[str], floor_id: str) -> str:
        """Returns whichever of the two tiers is rarer."""
        if rarity_id is not None and self.rarity_rank(rarity_id) >= self.rarity_rank(floor_id):
            return rarity_id
        return floor_id

    @property
    def common_id(self) -> str:
        if "common" in self.rarities_by_id:
            return "common"
        return self.rarities[0].id if self.rarities else "common"

    def roll_rarity(self, lucky_boost: float = 0.0, rng: Optional[random.Random] = None) -> str:
        """
        Rolls a rarity tier. Tiers are walked rarest first, each non-common tier getting an equal share of
        the luck boost, and the first tier whose cumulative chance exceeds a single uniform draw wins.
        Anything left over falls through to common.
        """
        rng = rng or random
        roll = rng.random()
        tier_count = len(self.rarities)
        per_tier_boost = lucky_boost / (tier_count - 1) if tier_count > 1 else 0.0

        cumulative = 0.0
        for rarity in reversed(self.rarities):
            cumulative += rarity.chance
            if rarity.id != self.common_id:
                cumulative += per_tier_boost
            if roll < cumulative:
                return rarity.id

        return self.common_id

    def is_available(self, seed: SeedSpecies, on_day: date) -> bool:
        if seed.availability is None:
            return True
        return seed.availability.contains(on_day)

    def get_available_seeds(self, on_day: date) -> List[SeedSpecies]:
        return [seed for seed in self.get_all_seeds() if self.is_available(seed, on_day)]

    @staticmethod
    def get_stage_emoji(seed: SeedSpecies, fraction: float) -> str:
        """Picks the display stage for a growth fraction in [0, 1]."""
        if not seed.stages:
            return seed.emoji
        index = min(int(math.floor(max(0.0, fraction) * len(seed.stages))), len(seed.stages) - 1)
        return seed.stages[index]
