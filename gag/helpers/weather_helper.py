import random
from typing import Dict, List, Optional

from ..models import GameSettings, WeatherType


class WeatherHelper:
    """Weather lookups, the weighted weather roll and the change rule applied when a spell runs out."""

    DEFAULT_WEATHER = "sunny"

    def __init__(self, weather: Dict[str, WeatherType], settings: GameSettings):
        self.weather_by_id: Dict[str, WeatherType] = dict(weather)
        self.weather_list: List[WeatherType] = list(weather.values())
        self.settings = settings

    def get_weather_by_id(self, weather_id: str) -> WeatherType:
        """Unknown ids resolve to the default weather so a stale save never breaks a tick."""
        weather = self.weather_by_id.get(weather_id)
        if weather is None:
            weather = self.weather_by_id.get(self.DEFAULT_WEATHER) or self.weather_list[0]
        return weather

    def roll_weather(self, rng: Optional[random.Random] = None) -> str:
        rng = rng or random
        total_weight = sum(w.weight for w in self.weather_list)
        remainder = rng.random() * total_weight

        for weather in self.weather_list:
            remainder -= weather.weight
            if remainder <= 0:
                return weather.id

        return self.DEFAULT_WEATHER

    def pick_next_weather(self, current_id: str, rng: Optional[random.Random] = None) -> str:
        """
        Rolls the next weather. A repeat of the current weather is re-rolled unless a uniform draw
        lands at or under weather_repeat_accept, so repeats stay possible but uncommon.
        """
        rng = rng or random
        while True:
            candidate = self.roll_weather(rng)
            if candidate != current_id or rng.random() <= self.settings.weather_repeat_accept:
                return candidate

    def roll_duration(self, rng: Optional[random.Random] = None) -> float:
        rng = rng or random
        low = self.settings.weather_min_duration_ms
        high = self.settings.weather_max_duration_ms
        return low + rng.random() * (high - low)
