from datetime import date
from typing import Dict, List, Optional

from ..models import SeedSpecies, UpgradeLevel, UpgradeTrack
from .plant_helper import PlantHelper


class ShopHelper:
    """Answers questions about the seed shop and the upgrade ladders: prices, levels and level effects."""

    WATERING_CAN = "watering_can"
    GARDEN_SIZE = "garden_size"
    SELL_BONUS = "sell_bonus"
    LUCKY_SEEDS = "lucky_seeds"

    def __init__(self, plant_helper: PlantHelper, upgrade_catalog: Dict[str, UpgradeTrack]):
        self.plant_helper = plant_helper
        self.upgrade_catalog = upgrade_catalog

    def get_seed_stock(self, on_day: date) -> List[SeedSpecies]:
        """Seeds currently on sale, in catalogue order."""
        return self.plant_helper.get_available_seeds(on_day)

    def get_track(self, track_id: str) -> Optional[UpgradeTrack]:
        return self.upgrade_catalog.get(track_id)

    def get_level(self, track_id: str, level: int) -> Optional[UpgradeLevel]:
        """The level entry, clamped into the ladder so an out-of-range saved level still resolves."""

        track = self.get_track(track_id)
        if track is None:
            return None
        return track.levels[max(0, min(level, track.max_level))]

    def is_maxed(self, track_id: str, level: int) -> bool:
        track = self.get_track(track_id)
        return track is not None and level >= track.max_level

    def get_next_cost(self, track_id: str, level: int) -> Optional[int]:
        track = self.get_track(track_id)
        if track is None or level >= track.max_level:
            return None
        return track.levels[level + 1].cost

    def get_water_count(self, level: int, total_plots: int) -> int:
        """How many plots a single bulk watering reaches. A level without a count reaches every plot."""

        entry = self.get_level(self.WATERING_CAN, level)
        if entry is None or entry.water_count is None:
            return total_plots
        return entry.water_count

    def get_plot_count(self, level: int) -> int:
        entry = self.get_level(self.GARDEN_SIZE, level)
        return entry.plots if entry and entry.plots else 6

    def get_grid_columns(self, level: int) -> int:
        entry = self.get_level(self.GARDEN_SIZE, level)
        if entry and entry.columns:
            return entry.columns
        return 3 if self.get_plot_count(level) <= 9 else 4

    def get_sell_bonus(self, level: int) -> float:
        entry = self.get_level(self.SELL_BONUS, level)
        return entry.bonus if entry else 0.0

    def get_lucky_boost(self, level: int) -> float:
        entry = self.get_level(self.LUCKY_SEEDS, level)
        return entry.boost if entry else 0.0
