from typing import Callable, List, Optional

from ..models import (
    AchievementUnlocked,
    AutoWatered,
    GameEvent,
    MutationFound,
    StormDamage,
    UiRefresh,
    WeatherChanged,
)
from .logging_helper import LoggingHelper

EventCallback = Callable[[GameEvent], None]


class GardenObserver:
    """
    Convenience subscriber. Override the on_* hooks you care about and subscribe the instance;
    every hook is a no-op by default.
    """

    def __call__(self, event: GameEvent):
        if isinstance(event, WeatherChanged):
            self.on_weather_changed(event.weather_id)
        elif isinstance(event, MutationFound):
            self.on_mutation_found(event.plot_index, event.mutation)
        elif isinstance(event, StormDamage):
            self.on_storm_damage(list(event.plot_indices))
        elif isinstance(event, AutoWatered):
            self.on_auto_watered(event.count)
        elif isinstance(event, AchievementUnlocked):
            self.on_achievement_unlocked(event.achievement)
        elif isinstance(event, UiRefresh):
            self.on_ui_refresh()

    def on_weather_changed(self, weather_id):
        pass

    def on_mutation_found(self, plot_index, mutation):
        pass

    def on_storm_damage(self, plot_indices):
        pass

    def on_auto_watered(self, count):
        pass

    def on_achievement_unlocked(self, achievement):
        pass

    def on_ui_refresh(self):
        pass


class EventHelper:
    """A synchronous publish/subscribe channel for game events. Subscribers run in subscription order."""

    def __init__(self, logger: Optional[LoggingHelper] = None):
        self.logger = logger
        self._subscribers: List[EventCallback] = []

    def subscribe(self, callback: EventCallback) -> EventCallback:
        if callback not in self._subscribers:
            self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: EventCallback):
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: GameEvent):
        """Delivers an event to every subscriber. A failing subscriber is logged and skipped."""
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                if self.logger:
                    self.logger.log(f"Event subscriber {callback!r} failed on {type(event).__name__}: {e}", "ERROR")
