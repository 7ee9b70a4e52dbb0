import math

from ..models import HarvestResult, Plot
from .mutation_helper import MutationHelper
from .plant_helper import PlantHelper


class SalesHelper:
    """A helper class for pricing harvested plants."""

    MUTATION_FALLBACK_PRICE = 50
    MUTATION_FALLBACK_NAME = "Mutation"
    MUTATION_FALLBACK_EMOJI = "🧬"
    CURRENCY_EMOJI = "🪙"

    def __init__(self, plant_helper: PlantHelper, mutation_helper: MutationHelper):
        self.plant_helper = plant_helper
        self.mutation_helper = mutation_helper

    def get_sale_price(self, seed_type: str, rarity_id: str, sell_bonus: float = 0.0) -> int:
        """floor(base price x rarity multiplier x (1 + sell bonus)) for a regular plant."""

        seed = self.plant_helper.get_seed_by_id(seed_type)
        if seed is None:
            print(f"CRITICAL ERROR: Unknown seed '{seed_type}' in get_sale_price. Returning 0.")
            return 0

        multiplier = self.plant_helper.get_rarity_multiplier(rarity_id)
        return int(math.floor(seed.base_sell_price * multiplier * (1 + sell_bonus)))

    def build_harvest_result(self, plot: Plot, sell_bonus: float = 0.0) -> HarvestResult:
        """Prices a harvestable plot. Mutations sell at their fixed recipe price and ignore the sell bonus."""

        if plot.is_mutation:
            mutation = self.mutation_helper.get_mutation_by_id(plot.mutation_id)
            sell_price = mutation.sell_price if mutation else self.MUTATION_FALLBACK_PRICE
            name = mutation.name if mutation else self.MUTATION_FALLBACK_NAME
            emoji = mutation.emoji if mutation else self.MUTATION_FALLBACK_EMOJI
        else:
            seed = self.plant_helper.get_seed_by_id(plot.seed_type)
            sell_price = self.get_sale_price(plot.seed_type, plot.rarity, sell_bonus)
            name = seed.name if seed else str(plot.seed_type)
            emoji = seed.emoji if seed else "❓"

        return HarvestResult(
            seed_type=plot.seed_type,
            rarity=plot.rarity,
            rarity_name=self.plant_helper.get_rarity_name(plot.rarity),
            is_mutation=plot.is_mutation,
            mutation_id=plot.mutation_id,
            sell_price=sell_price,
            name=name,
            emoji=emoji,
        )

    @staticmethod
    def format_coins(amount: int) -> str:
        """Formats a coin amount as '999', '1.2K' or '3.4M'."""

        sign = "-" if amount < 0 else ""
        amount = abs(amount)

        if amount >= 1_000_000:
            return f"{sign}{amount / 1_000_000:.1f}M"
        if amount >= 1_000:
            return f"{sign}{amount / 1_000:.1f}K"
        return f"{sign}{amount}"
