import random

import pytest

from conftest import FixedRandom, grow_ready
from gag.models import Plot, PlotState


def _fill_growing(garden, seed_id="daisy"):
    for i in range(len(garden.state.plots)):
        garden.state.plots[i] = Plot(state=PlotState.GROWING, seed_type=seed_id, rarity="common",
                                     growth_total=30000, water_needed=2)


def test_growth_scales_with_weather(garden):
    garden.plant(0, "daisy")
    garden.water(0)
    garden.water(0)

    garden.state.weather.current = "rainy"
    garden.tick_growth(1000)
    assert garden.get_plot(0).growth_progress == 1250

    garden.state.weather.current = "drought"
    garden.tick_growth(1000)
    assert garden.get_plot(0).growth_progress == pytest.approx(1950)


def test_unknown_weather_grows_like_sunny(garden):
    garden.state.weather.current = "acid_rain"
    grow_ready(garden, 0)
    assert garden.get_plot(0).state == PlotState.HARVESTABLE


def test_weather_changes_when_time_runs_out(make_garden):
    garden = make_garden(rng=random.Random(7))
    assert not garden.tick_weather(1000)
    assert garden.get_weather_time_remaining() == 179000

    garden.state.weather.time_remaining = 500
    assert garden.tick_weather(1000)
    assert garden.state.weather.current in garden.weather_helper.weather_by_id
    assert 120000 <= garden.get_weather_time_remaining() <= 300000


def test_change_weather_can_repeat_sometimes(make_garden):
    garden = make_garden(rng=random.Random(3))
    repeats = 0
    for _ in range(2000):
        garden.state.weather.current = "sunny"
        if garden.change_weather() == "sunny":
            repeats += 1
    # P(repeat) = 0.35 * 0.3 / (1 - 0.35 * 0.7) ~= 0.139
    assert 0.10 < repeats / 2000 < 0.18


def test_no_storm_damage_outside_stormy_weather(make_garden):
    garden = make_garden(rng=FixedRandom(0.0))
    _fill_growing(garden)
    for weather_id in ("sunny", "rainy", "drought", "foggy"):
        garden.state.weather.current = weather_id
        assert garden.tick_storm_damage() == []
    assert all(plot.state == PlotState.GROWING for plot in garden.state.plots)
    assert garden.state.stats.storms_weathered == 0


def test_storm_damage_rate_matches_damage_chance(make_garden):
    garden = make_garden(rng=random.Random(2024))
    garden.state.weather.current = "stormy"
    _fill_growing(garden)

    deaths = 0
    trials = 0
    for _ in range(20000):
        damaged = garden.tick_storm_damage()
        deaths += len(damaged)
        trials += len(garden.state.plots)
        for i in damaged:
            garden.state.plots[i].state = PlotState.GROWING

    assert 0.008 < deaths / trials < 0.012


def test_storm_counts_survivors_only(make_garden):
    garden = make_garden(rng=FixedRandom(0.5))
    garden.state.weather.current = "stormy"
    garden.state.plots[0] = Plot(state=PlotState.GROWING, seed_type="daisy", rarity="common", growth_total=1)
    garden.state.plots[1] = Plot(state=PlotState.HARVESTABLE, seed_type="daisy", rarity="common", growth_total=1)
    garden.state.plots[2] = Plot(state=PlotState.DEAD, seed_type="daisy", rarity="common")

    assert garden.tick_storm_damage() == []
    assert garden.state.stats.storms_weathered == 2


def test_storm_kills_only_growing_plots(make_garden):
    garden = make_garden(rng=FixedRandom(0.0))
    garden.state.weather.current = "stormy"
    garden.state.plots[0] = Plot(state=PlotState.GROWING, seed_type="daisy", rarity="common", growth_total=1)
    garden.state.plots[1] = Plot(state=PlotState.HARVESTABLE, seed_type="daisy", rarity="common", growth_total=1)

    assert garden.tick_storm_damage() == [0]
    assert garden.get_plot(0).state == PlotState.DEAD
    assert garden.get_plot(1).state == PlotState.HARVESTABLE


def test_drought_drains_water(make_garden):
    garden = make_garden(rng=FixedRandom(0.0))
    garden.plant(0, "daisy")
    garden.water(0)
    garden.water(0)

    garden.tick_drought()
    assert garden.get_plot(0).watered is True

    garden.state.weather.current = "drought"
    garden.tick_drought()
    assert garden.get_plot(0).water_level == 1
    assert garden.get_plot(0).watered is False

    garden.tick_growth(1000)
    assert garden.get_plot(0).growth_progress == 0


def test_drought_ignores_unwatered_plots(make_garden):
    garden = make_garden(rng=FixedRandom(0.0))
    garden.state.weather.current = "drought"
    garden.plant(0, "daisy")
    garden.water(0)
    garden.tick_drought()
    assert garden.get_plot(0).water_level == 1


def _plant_pair(garden, first, second):
    garden.add_seed(first)
    garden.add_seed(second)
    garden.plant(0, first)
    garden.plant(1, second)


def test_mutation_pairing_is_order_independent(make_garden):
    found = []
    for first, second in (("sunflower", "rose"), ("rose", "sunflower")):
        garden = make_garden(rng=FixedRandom(0.0))
        _plant_pair(garden, first, second)
        events = garden.tick_mutations()
        found.append([(event.plot_index, event.mutation.id) for event in events])

    assert found[0] == found[1] == [(0, "sunrose")]


def test_mutation_result(make_garden):
    garden = make_garden(rng=FixedRandom(0.0))
    _plant_pair(garden, "sunflower", "rose")
    garden.state.plots[0].rarity = "common"

    garden.tick_mutations()
    plot = garden.get_plot(0)
    assert plot.is_mutation
    assert plot.mutation_id == "sunrose"
    assert plot.state == PlotState.HARVESTABLE
    assert plot.rarity == "epic"
    assert garden.state.discovered_mutations == ["sunrose"]
    assert garden.state.stats.mutations_found == 1
    assert "first_mutation" in garden.state.completed_achievements

    harvest = garden.harvest(0)
    assert harvest.is_mutation
    assert harvest.sell_price == 80
    assert harvest.name == "Sunrose"


def test_mutation_needs_recipe_and_adjacency(make_garden):
    garden = make_garden(rng=FixedRandom(0.0))
    garden.add_seed("daisy", 2)
    garden.plant(0, "daisy")
    garden.plant(1, "daisy")
    assert garden.tick_mutations() == []

    garden = make_garden(rng=FixedRandom(0.0))
    garden.add_seed("rose")
    garden.plant(0, "sunflower")
    garden.plant(5, "rose")  # row 1, column 2: not adjacent to plot 0 in a 3-wide grid
    assert garden.tick_mutations() == []


def test_mutation_skips_dead_neighbours(make_garden):
    garden = make_garden(rng=FixedRandom(0.0))
    _plant_pair(garden, "sunflower", "rose")
    garden.state.plots[1].state = PlotState.DEAD
    assert garden.tick_mutations() == []


def test_mutation_chance_scales_with_tick_length(make_garden):
    garden = make_garden(rng=FixedRandom(0.05))
    _plant_pair(garden, "sunflower", "rose")

    # 0.1 * 1.0 * 1000 / 60000 is well under the draw
    assert garden.tick_mutations() == []
    # 0.1 * 1.0 * 60000 / 60000 = 0.1 beats it
    assert len(garden.tick_mutations(tick_ms=60000)) == 1


def test_auto_water_requires_max_watering_can(garden):
    garden.add_seed("daisy", 2)
    for i in range(3):
        garden.plant(i, "daisy")

    assert garden.tick_auto_water() == 0
    garden.state.upgrades["watering_can"] = 4
    assert garden.tick_auto_water() == 3
    assert garden.tick_auto_water() == 3
    assert garden.tick_auto_water() == 0
    assert all(garden.get_plot(i).watered for i in range(3))
