import asyncio
import time
import traceback
from typing import Any, Callable, Dict, Optional

from .garden import Garden
from .helpers import EventHelper, LoggingHelper
from .models import AutoWatered, GameSettings, MutationFound, StormDamage, UiRefresh, WeatherChanged

SaveHandler = Callable[[Dict[str, Any]], None]


class Engine:
    """
    Drives a Garden on a fixed interval. Every tick runs the garden's tick steps in a fixed order and
    forwards what happened as events; auto-watering and saving are throttled by their own counters.
    """

    def __init__(
        self,
        garden: Garden,
        events: Optional[EventHelper] = None,
        logger: Optional[LoggingHelper] = None,
        settings: Optional[GameSettings] = None,
        save_handler: Optional[SaveHandler] = None,
    ):
        self.garden = garden
        self.events = events or garden.events
        self.logger = logger or garden.logger
        self.settings = settings or garden.settings
        self.save_handler = save_handler

        self.tick_count = 0
        self._auto_water_counter = 0
        self._save_counter = 0
        self._task: Optional[asyncio.Task] = None
        self._stopping: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        """Schedules the tick loop on the running event loop. Does nothing if it is already running."""

        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        self._task.add_done_callback(self._on_task_done)
        self.logger.log(f"Engine: Online. Ticking every {self.settings.tick_ms} ms.", "INFO")

    def stop(self):
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        self._stopping = task
        self.logger.log(f"Engine: Offline after {self.tick_count} ticks.", "INFO")

    async def wait_stopped(self):
        """Waits for a stopped tick loop to finish unwinding."""

        task, self._stopping = self._stopping, None
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def _on_task_done(self, task: asyncio.Task):
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.logger.log(f"Engine: Tick loop exited unexpectedly: {error!r}", "CRITICAL")

    async def _run(self):
        interval = self.settings.tick_ms / 1000
        while True:
            await asyncio.sleep(interval)
            try:
                self.tick()
            except Exception as e:
                self.logger.log(
                    f"Engine: CRITICAL Anomaly in tick {self.tick_count}: {e}\n{traceback.format_exc()}", "CRITICAL")

    def tick(self, dt_ms: Optional[float] = None):
        """One simulation step. Callable directly to advance the game without the loop."""

        tick_start_time = time.monotonic()
        dt_ms = self.settings.tick_ms if dt_ms is None else dt_ms
        garden = self.garden
        self.tick_count += 1

        garden.tick_growth(dt_ms)

        if garden.tick_weather(dt_ms):
            self.events.publish(WeatherChanged(weather_id=garden.state.weather.current))

        damaged = garden.tick_storm_damage()
        if damaged:
            self.events.publish(StormDamage(plot_indices=tuple(damaged)))

        garden.tick_drought()

        for mutation_event in garden.tick_mutations(dt_ms):
            self.events.publish(MutationFound(plot_index=mutation_event.plot_index, mutation=mutation_event.mutation))

        self._auto_water_counter += 1
        if self._auto_water_counter >= self.settings.auto_water_ticks:
            self._auto_water_counter = 0
            watered = garden.tick_auto_water()
            if watered:
                self.events.publish(AutoWatered(count=watered))

        self._save_counter += 1
        if self._save_counter >= self.settings.auto_save_ticks:
            self._save_counter = 0
            self.save_now()

        self.events.publish(UiRefresh())

        self.logger.log(f"Engine: Tick {self.tick_count} completed in {time.monotonic() - tick_start_time:.4f}s.",
                        "DEBUG")

    def save_now(self) -> bool:
        """Snapshots the garden and hands it to the save handler. False when no handler is set."""

        if self.save_handler is None:
            return False
        self.save_handler(self.garden.snapshot_for_save())
        return True
