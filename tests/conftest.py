import random
from datetime import datetime, timezone

import pytest

from gag.garden import Garden
from gag.helpers import DataHelper, EventHelper, LoggingHelper

# Noon US/Eastern on 2024-06-15: outside every seasonal window.
JUNE_NOON_MS = int(datetime(2024, 6, 15, 16, 0, tzinfo=timezone.utc).timestamp() * 1000)


class FakeClock:
    def __init__(self, now_ms: int):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int):
        self.now_ms += ms


class FixedRandom(random.Random):
    """Every random() draw returns the same value; used to force rolls one way."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def logger():
    return LoggingHelper(min_level="DEBUG", console=False)


@pytest.fixture
def data(logger):
    return DataHelper(logger=logger).load_all_data()


@pytest.fixture
def events(logger):
    return EventHelper(logger)


@pytest.fixture
def clock():
    return FakeClock(JUNE_NOON_MS)


@pytest.fixture
def make_garden(data, events, logger, clock):
    def _make(rng=None, state=None):
        return Garden(data, events=events, state=state, logger=logger, rng=rng or random.Random(1234), clock=clock)

    return _make


@pytest.fixture
def garden(make_garden):
    """A garden whose rolls always land on common rarity and never trigger chance events."""
    return make_garden(rng=FixedRandom(0.99))


def grow_ready(garden, plot_index, seed_id="daisy"):
    """Plants, fully waters and grows a plot until it is harvestable."""

    garden.add_seed(seed_id)
    garden.plant(plot_index, seed_id)
    while garden.water(plot_index):
        pass
    garden.tick_growth(garden.state.plots[plot_index].growth_total)
