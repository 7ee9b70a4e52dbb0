import copy
import json
import math
from typing import Any, Dict, List, Optional

from ..models import GameState, Plot, PlotState, Stats, WeatherState
from .logging_helper import LoggingHelper
from .shop_helper import ShopHelper


class GameStateHelper:
    """
    Builds default game states and converts them to and from the persisted save layout.
    Loading always merges over defaults, so saves written before a field existed still load.
    """

    PLOT_KEYS = {
        "state": "state", "seed_type": "seedType", "rarity": "rarity",
        "growth_progress": "growthProgress", "growth_total": "growthTotal",
        "water_level": "waterLevel", "water_needed": "waterNeeded", "watered": "watered",
        "is_mutation": "isMutation", "mutation_id": "mutationId",
    }
    STATS_KEYS = {
        "total_harvested": "totalHarvested", "total_earned": "totalEarned", "total_watered": "totalWatered",
        "total_seeds_bought": "totalSeedsBought", "mutations_found": "mutationsFound",
        "rare_plants_grown": "rarePlantsGrown", "epic_plants_grown": "epicPlantsGrown",
        "legendary_plants_grown": "legendaryPlantsGrown", "mythic_plants_grown": "mythicPlantsGrown",
        "unique_types_grown": "uniqueTypesGrown", "maxed_upgrades": "maxedUpgrades",
        "storms_weathered": "stormsWeathered", "types_grown": "typesGrown",
    }
    WEATHER_KEYS = {"current": "current", "time_remaining": "timeRemaining"}

    def __init__(self, shop_helper: ShopHelper, logger: Optional[LoggingHelper] = None):
        self.shop_helper = shop_helper
        self.logger = logger or LoggingHelper()

    def create_default_state(self, now_ms: int = 0) -> GameState:
        state = GameState(last_save_time=now_ms)
        self.ensure_plot_count(state)
        return state

    def ensure_plot_count(self, state: GameState) -> int:
        """Pads the plot list up to the garden-size plot count. Never truncates. Returns plots added."""

        required = self.shop_helper.get_plot_count(state.upgrades.get(ShopHelper.GARDEN_SIZE, 0))
        added = 0
        while len(state.plots) < required:
            state.plots.append(Plot())
            added += 1
        return added

    # --- Serialization ---

    def to_dict(self, state: GameState) -> Dict[str, Any]:
        return {
            "coins": state.coins,
            "plots": [{key: getattr(plot, attr) for attr, key in self.PLOT_KEYS.items()} for plot in state.plots],
            "inventory": dict(state.inventory),
            "upgrades": dict(state.upgrades),
            "discoveredMutations": list(state.discovered_mutations),
            "completedAchievements": list(state.completed_achievements),
            "stats": {key: copy.copy(getattr(state.stats, attr)) for attr, key in self.STATS_KEYS.items()},
            "weather": {key: getattr(state.weather, attr) for attr, key in self.WEATHER_KEYS.items()},
            "lastSaveTime": state.last_save_time,
        }

    def dumps(self, state: GameState) -> str:
        return json.dumps(self.to_dict(state), ensure_ascii=False)

    @staticmethod
    def _merge(defaults: Dict[str, Any], loaded: Any) -> Dict[str, Any]:
        merged = dict(defaults)
        if isinstance(loaded, dict):
            merged.update(loaded)
        return merged

    @staticmethod
    def _is_number(value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)

    @classmethod
    def _repair_types(cls, defaults: Dict[str, Any], merged: Dict[str, Any]) -> Dict[str, Any]:
        """Replaces every value whose type disagrees with its default by that default."""

        repaired = dict(merged)
        for key, default in defaults.items():
            value = repaired.get(key)
            if isinstance(default, bool):
                valid = isinstance(value, bool)
            elif isinstance(default, (int, float)):
                valid = cls._is_number(value)
            elif isinstance(default, str):
                valid = isinstance(value, str)
            elif default is None:
                valid = value is None or isinstance(value, str)
            else:
                continue
            if not valid:
                repaired[key] = default
        return repaired

    def _plot_from_dict(self, plot_dict: Any) -> Plot:
        if not isinstance(plot_dict, dict):
            return Plot()

        defaults = {key: getattr(Plot(), attr) for attr, key in self.PLOT_KEYS.items()}
        merged = self._repair_types(defaults, self._merge(defaults, plot_dict))

        if merged["state"] not in PlotState.ALL:
            return Plot()

        plot = Plot(**{attr: merged[key] for attr, key in self.PLOT_KEYS.items()})
        if plot.state != PlotState.EMPTY and not plot.seed_type:
            return Plot()

        seed = self.shop_helper.plant_helper.get_seed_by_id(plot.seed_type) if plot.is_occupied else None
        if seed is not None and plot.growth_total <= 0:
            plot.growth_total = seed.grow_time
        if seed is not None and plot.water_needed <= 0:
            plot.water_needed = seed.water_needed
        return plot

    @staticmethod
    def _clean_inventory(raw: Any) -> Dict[str, int]:
        if not isinstance(raw, dict):
            return {}
        return {seed_id: int(count) for seed_id, count in raw.items()
                if GameStateHelper._is_number(count) and count > 0}

    @staticmethod
    def _string_list(raw: Any) -> List[str]:
        if not isinstance(raw, list):
            return []
        return [item for item in raw if isinstance(item, str)]

    def from_dict(self, raw: Dict[str, Any], now_ms: int = 0) -> GameState:
        """
        Rebuilds a GameState from a persisted record. The record is merged over a fresh default state
        field by field (top level, stats, upgrades, weather and each plot), then the plot list is padded.
        """

        defaults = self.to_dict(self.create_default_state(now_ms))
        data = self._merge(defaults, raw)

        stats_data = self._repair_types(defaults["stats"], self._merge(defaults["stats"], data.get("stats")))
        upgrades_data = self._merge(defaults["upgrades"], data.get("upgrades"))
        weather_data = self._repair_types(defaults["weather"], self._merge(defaults["weather"], data.get("weather")))

        plots_raw = data.get("plots")
        plots = [self._plot_from_dict(p) for p in plots_raw] if isinstance(plots_raw, list) else []

        stats = Stats(**{attr: stats_data[key] for attr, key in self.STATS_KEYS.items()})
        stats.types_grown = self._string_list(stats.types_grown)

        state = GameState(
            coins=data["coins"] if self._is_number(data["coins"]) else defaults["coins"],
            plots=plots,
            inventory=self._clean_inventory(data.get("inventory")),
            upgrades={track: int(level) for track, level in upgrades_data.items() if self._is_number(level)},
            discovered_mutations=self._string_list(data.get("discoveredMutations")),
            completed_achievements=self._string_list(data.get("completedAchievements")),
            stats=stats,
            weather=WeatherState(**{attr: weather_data[key] for attr, key in self.WEATHER_KEYS.items()}),
            last_save_time=data["lastSaveTime"] if self._is_number(data["lastSaveTime"]) else now_ms,
        )

        added = self.ensure_plot_count(state)
        if added:
            self.logger.log(f"Save Load: Padded garden with {added} missing plot(s).", "WARNING")
        return state

    def loads(self, text: Optional[str], now_ms: int = 0) -> Optional[GameState]:
        """Parses a saved JSON string. Corrupt or non-object data counts as no save and returns None."""

        if not text:
            return None
        try:
            raw = json.loads(text)
        except (TypeError, ValueError) as e:
            self.logger.log(f"Save Load: Failed to parse save data: {e}. Treating as no save.", "WARNING")
            return None

        if not isinstance(raw, dict):
            self.logger.log("Save Load: Save data is not an object. Treating as no save.", "WARNING")
            return None

        return self.from_dict(raw, now_ms)
