import json
import pathlib
from typing import Any, Callable, Dict, List, Optional

from ..models import (
    Achievement,
    AvailabilityWindow,
    Category,
    GameSettings,
    MutationRecipe,
    RarityTier,
    SeedSpecies,
    UpgradeLevel,
    UpgradeTrack,
    WeatherType,
)
from .logging_helper import LoggingHelper

DEFAULT_DATA_PATH = pathlib.Path(__file__).resolve().parent.parent / "data"


class DataHelper:
    """
    Handles the loading and validation of all JSON data files from the data directory.
    This class is responsible for parsing raw JSON into structured dataclass objects.
    It operates in a read-only manner on the data path.
    """

    def __init__(self, data_path_obj: Optional[pathlib.Path] = None, logger: Optional[LoggingHelper] = None):
        self.data_path = pathlib.Path(data_path_obj) if data_path_obj else DEFAULT_DATA_PATH
        self.logger = logger or LoggingHelper()

        self.seeds: Dict[str, SeedSpecies] = {}
        self.categories: Dict[str, Category] = {}
        self.rarities: List[RarityTier] = []
        self.weather: Dict[str, WeatherType] = {}
        self.upgrades: Dict[str, UpgradeTrack] = {}
        self.mutations: List[MutationRecipe] = []
        self.achievements: List[Achievement] = []
        self.settings: GameSettings = GameSettings()

    def load_all_data(self) -> "DataHelper":
        """Master method to load all data files. Returns self so construction can be chained."""

        self.logger.log("Data loading process initiated.", "INFO")

        self.settings = self._load_settings_data()
        self.categories = self._load_categories_data()
        self.seeds = self._load_seeds_data()
        self.rarities = self._load_rarities_data()
        self.weather = self._load_weather_data()
        self.upgrades = self._load_upgrades_data()
        self.mutations = self._load_mutations_data()
        self.achievements = self._load_achievements_data()

        self._validate_references()
        self.logger.log("All data files loaded and processed.", "INFO")
        return self

    def _load_json_file(self, filename: str, default_data: Any) -> Any:
        """Generic JSON file loader with validation and logging. Does not write to disk."""

        file_path = self.data_path / filename
        log_prefix = f"Data Load ({filename}): "
        try:
            if file_path.exists():
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)

                if data:
                    self.logger.log(f"{log_prefix}Successfully loaded {len(data)} entries.", "DEBUG")
                    return data
                else:
                    self.logger.log(f"{log_prefix}File is empty. Using default fallback data.", "WARNING")
                    return default_data
            else:
                self.logger.log(
                    f"{log_prefix}File not found. This is a critical error if not intended. "
                    "Using default fallback data.", "ERROR"
                )
                return default_data
        except (OSError, json.JSONDecodeError) as e:
            self.logger.log(f"{log_prefix}Failed to load or parse: {e}. Using default fallback data.", "ERROR")
            return default_data

    def _build_entries(self, filename: str, entries: List[Dict[str, Any]], builder: Callable[[Dict[str, Any]], Any]) -> list:
        """Builds one dataclass per raw entry, skipping (and logging) entries that do not fit the schema."""

        built = []
        for raw in entries:
            try:
                built.append(builder(dict(raw)))
            except (TypeError, ValueError, KeyError) as e:
                self.logger.log(f"Data Load ({filename}): Skipping malformed entry {raw!r}: {e}", "ERROR")
        return built

    def _load_settings_data(self) -> GameSettings:
        data = self._load_json_file("settings.json", {})
        if not isinstance(data, dict):
            data = {}

        known = GameSettings.field_names()
        for key in set(data) - known:
            self.logger.log(f"Data Load (settings.json): Unknown setting '{key}' ignored.", "WARNING")

        settings = GameSettings().as_dict()
        for key, value in data.items():
            if key in known:
                settings[key] = value
        return GameSettings(**settings)

    def _load_categories_data(self) -> Dict[str, Category]:
        fallback = {"flower": {"name": "Flower"}}
        data = self._load_json_file("categories.json", fallback)
        return {cat_id: Category(id=cat_id, **details) for cat_id, details in data.items()}

    def _load_seeds_data(self) -> Dict[str, SeedSpecies]:
        fallback = [{
            "id": "daisy", "name": "Daisy", "emoji": "🌼", "stages": ["🌱", "🌿", "🌼"], "grow_time": 30000,
            "water_needed": 2, "base_sell_price": 5, "seed_cost": 3, "category": "flower",
        }]
        data = self._load_json_file("seeds.json", fallback)

        def build(s_dict: Dict[str, Any]) -> SeedSpecies:
            s_dict['stages'] = tuple(s_dict.get('stages') or [s_dict['emoji']])
            window = s_dict.pop('availability', None)
            if window:
                s_dict['availability'] = AvailabilityWindow(**window)
            return SeedSpecies(**s_dict)

        return {s.id: s for s in self._build_entries("seeds.json", data, build)}

    def _load_rarities_data(self) -> List[RarityTier]:
        fallback = [{"id": "common", "name": "Common", "multiplier": 1.0, "chance": 1.0}]
        data = self._load_json_file("rarities.json", fallback)
        return self._build_entries("rarities.json", data, lambda r_dict: RarityTier(**r_dict))

    def _load_weather_data(self) -> Dict[str, WeatherType]:
        fallback = [{"id": "sunny", "name": "Sunny", "icon": "☀️", "weight": 1}]
        data = self._load_json_file("weather.json", fallback)
        return {w.id: w for w in self._build_entries("weather.json", data, lambda w_dict: WeatherType(**w_dict))}

    def _load_upgrades_data(self) -> Dict[str, UpgradeTrack]:
        fallback = [
            {"id": "watering_can", "name": "Watering Can", "icon": "🚿", "description": "",
             "levels": [{"effect": "Waters 1 plot", "cost": 0, "water_count": 1}]},
            {"id": "garden_size", "name": "Garden Size", "icon": "🏡", "description": "",
             "levels": [{"effect": "6 plots", "cost": 0, "plots": 6, "columns": 3}]},
            {"id": "sell_bonus", "name": "Market Stall", "icon": "🏪", "description": "",
             "levels": [{"effect": "+0% sell price", "cost": 0}]},
            {"id": "lucky_seeds", "name": "Lucky Seeds", "icon": "🍀", "description": "",
             "levels": [{"effect": "No luck bonus", "cost": 0}]},
        ]
        data = self._load_json_file("upgrades.json", fallback)

        def build(u_dict: Dict[str, Any]) -> UpgradeTrack:
            u_dict['levels'] = tuple(UpgradeLevel(**level) for level in u_dict.get('levels', []))
            if not u_dict['levels']:
                raise ValueError("an upgrade track needs at least one level")
            return UpgradeTrack(**u_dict)

        return {u.id: u for u in self._build_entries("upgrades.json", data, build)}

    def _load_mutations_data(self) -> List[MutationRecipe]:
        data = self._load_json_file("mutations.json", [])
        if not data:
            self.logger.log("Data Load (mutations.json): No mutation data loaded. Mutations will never occur.", "WARNING")
            return []

        def build(m_dict: Dict[str, Any]) -> MutationRecipe:
            ingredients = tuple(m_dict.get('ingredients', []))
            if len(ingredients) != 2:
                raise ValueError("a mutation recipe needs exactly two ingredients")
            m_dict['ingredients'] = ingredients
            return MutationRecipe(**m_dict)

        return self._build_entries("mutations.json", data, build)

    def _load_achievements_data(self) -> List[Achievement]:
        data = self._load_json_file("achievements.json", [])
        return self._build_entries("achievements.json", data, lambda a_dict: Achievement(**a_dict))

    def _validate_references(self):
        """Cross-checks ids between tables. Problems are logged, never raised."""

        for seed in self.seeds.values():
            if seed.category not in self.categories:
                self.logger.log(f"Seed '{seed.id}' references unknown category '{seed.category}'.", "WARNING")

        for mutation in self.mutations:
            for ingredient in mutation.ingredients:
                if ingredient not in self.seeds:
                    self.logger.log(
                        f"Mutation '{mutation.id}' references unknown seed '{ingredient}'. It can never trigger.",
                        "WARNING")

        if "common" not in {r.id for r in self.rarities}:
            self.logger.log("CRITICAL: No 'common' rarity defined. Rarity rolls will fall back to the first tier.",
                            "CRITICAL")

        if "sunny" not in self.weather:
            self.logger.log("CRITICAL: No 'sunny' weather defined. Weather fallback will be unavailable.", "CRITICAL")

        for track_id in ("watering_can", "garden_size", "sell_bonus", "lucky_seeds"):
            if track_id not in self.upgrades:
                self.logger.log(f"CRITICAL: Upgrade track '{track_id}' is missing.", "CRITICAL")
