import json

import pytest

from conftest import FixedRandom, JUNE_NOON_MS, grow_ready
from gag.engine import Engine
from gag.helpers import FileStorage, MemoryStorage, ProfileHelper
from gag.models import GameSettings, Plot, PlotState


@pytest.fixture
def state_helper(garden):
    return garden.game_state_helper


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def profiles(storage, state_helper, logger, clock):
    return ProfileHelper(storage, state_helper, GameSettings(), logger, clock)


def test_round_trip_preserves_state(make_garden, state_helper):
    garden = make_garden(rng=FixedRandom(0.0))
    garden.state.coins = 10 ** 4
    garden.buy_upgrade("garden_size")
    garden.buy_upgrade("lucky_seeds")
    garden.buy_seed("rose")
    garden.plant(0, "daisy")
    garden.water(0)
    garden.add_seed("rose")
    garden.plant(1, "rose")
    garden.tick_growth(1500)
    garden.state.plots[2] = Plot(state=PlotState.DEAD, seed_type="tulip", rarity="rare")
    garden.state.weather.current = "foggy"
    garden.state.weather.time_remaining = 1234.5
    garden.snapshot_for_save()

    restored = state_helper.loads(state_helper.dumps(garden.state), now_ms=0)

    assert restored == garden.state


def test_missing_fields_merge_over_defaults(state_helper):
    state = state_helper.from_dict({"coins": 42, "stats": {"totalHarvested": 7}, "weather": {"current": "rainy"}},
                                   now_ms=JUNE_NOON_MS)

    assert state.coins == 42
    assert state.stats.total_harvested == 7
    assert state.stats.total_earned == 0
    assert state.weather.current == "rainy"
    assert state.weather.time_remaining == 180000
    assert state.inventory == {"daisy": 3, "sunflower": 1}
    assert state.upgrades["lucky_seeds"] == 0
    assert len(state.plots) == 6
    assert state.last_save_time == JUNE_NOON_MS


def test_load_pads_short_plot_list_and_cleans_entries(state_helper, logger):
    logger.clear_history()
    raw = {
        "upgrades": {"garden_size": 1},
        "inventory": {"daisy": 0, "rose": 2, "tulip": -1},
        "plots": [
            {"state": "growing", "seedType": "daisy", "waterNeeded": 2},
            "garbage",
            {"state": "exploded", "seedType": "rose"},
            {"state": "harvestable"},
        ],
    }
    state = state_helper.from_dict(raw)

    assert len(state.plots) == 9
    assert state.plots[0].state == PlotState.GROWING
    assert state.plots[0].water_needed == 2
    assert state.plots[0].growth_progress == 0.0
    assert all(plot.state == PlotState.EMPTY for plot in state.plots[1:])
    assert state.inventory == {"rose": 2}
    assert any("Padded" in message for _, _, message in logger.get_history("WARNING"))


def test_load_never_truncates_extra_plots(state_helper):
    state = state_helper.from_dict({"plots": [{"state": "empty"}] * 12})
    assert len(state.plots) == 12


def test_wrong_typed_fields_fall_back_to_defaults(make_garden, state_helper):
    raw = {
        "coins": True,
        "stats": {"totalWatered": None, "totalHarvested": "many", "stormsWeathered": 4},
        "weather": {"current": 7, "timeRemaining": None},
        "plots": [
            {"state": "growing", "seedType": "daisy", "growthProgress": None, "growthTotal": "soon",
             "waterLevel": None, "waterNeeded": None, "watered": "yes"},
            {"state": "harvestable", "seedType": "daisy", "rarity": 5, "growthProgress": "x", "isMutation": None},
        ],
    }
    state = state_helper.from_dict(raw, now_ms=JUNE_NOON_MS)

    assert state.coins == 100
    assert state.stats.total_watered == 0
    assert state.stats.total_harvested == 0
    assert state.stats.storms_weathered == 4
    assert state.weather.current == "sunny"
    assert state.weather.time_remaining == 180000
    growing = state.plots[0]
    assert (growing.growth_progress, growing.growth_total) == (0.0, 30000)
    assert (growing.water_level, growing.water_needed, growing.watered) == (0, 2, False)
    assert state.plots[1].rarity is None
    assert state.plots[1].is_mutation is False

    garden = make_garden(rng=FixedRandom(0.99), state=state)
    assert garden.water(0)
    assert garden.water(0)
    assert garden.harvest(1).sell_price == 5

    Engine(garden).tick()

    assert garden.state.plots[0].growth_progress == 1000
    assert garden.get_weather_time_remaining() == 179000


def test_corrupt_save_counts_as_no_save(state_helper, logger):
    logger.clear_history()
    assert state_helper.loads("{not json") is None
    assert state_helper.loads("[1, 2, 3]") is None
    assert state_helper.loads("") is None
    assert len(logger.get_history("WARNING")) == 2


def test_saved_layout_uses_camel_case_keys(garden, state_helper):
    grow_ready(garden, 0)
    data = state_helper.to_dict(garden.state)

    assert set(data) == {"coins", "plots", "inventory", "upgrades", "discoveredMutations",
                         "completedAchievements", "stats", "weather", "lastSaveTime"}
    assert data["plots"][0]["seedType"] == "daisy"
    assert data["plots"][0]["growthProgress"] == 30000
    assert data["stats"]["totalWatered"] == 2
    assert data["stats"]["typesGrown"] == ["daisy"]
    assert data["weather"] == {"current": "sunny", "timeRemaining": 180000.0}
    json.dumps(data)


# --- Storage ---

def test_memory_storage():
    storage = MemoryStorage({"a": "1"})
    assert storage.get_item("a") == "1"
    storage.set_item("b", "2")
    storage.remove_item("a")
    storage.remove_item("missing")
    assert storage.get_item("a") is None
    assert storage.keys() == ["b"]


def test_file_storage(tmp_path):
    storage = FileStorage(tmp_path / "saves")
    assert storage.get_item("growAGarden_profiles") is None

    storage.set_item("growAGarden_profiles", '[{"name": "Ñandú 🌻"}]')
    assert storage.get_item("growAGarden_profiles") == '[{"name": "Ñandú 🌻"}]'
    assert (tmp_path / "saves" / "growAGarden_profiles.json").exists()
    assert storage.keys() == ["growAGarden_profiles"]

    storage.remove_item("growAGarden_profiles")
    storage.remove_item("growAGarden_profiles")
    assert storage.keys() == []


def test_file_storage_rejects_path_like_keys(tmp_path):
    storage = FileStorage(tmp_path)
    with pytest.raises(ValueError):
        storage.set_item("../escape", "x")


# --- Profiles ---

def test_create_profile(profiles, clock):
    profile = profiles.create_profile("  Alice  ")
    assert profile.name == "Alice"
    assert profile.id == f"p_{clock.now_ms}"
    assert profile.avatar == ProfileHelper.PROFILE_AVATARS[0]

    second = profiles.create_profile("Bob", avatar="🐸")
    assert second.id != profile.id
    assert second.avatar == "🐸"
    assert [p.name for p in profiles.get_profiles()] == ["Alice", "Bob"]


def test_profile_names_are_trimmed_and_capped(profiles):
    assert profiles.create_profile("   ") is None
    assert profiles.create_profile("") is None
    assert profiles.create_profile("A very long gardener name").name == "A very long "


def test_profile_limit(profiles):
    for i in range(10):
        assert profiles.create_profile(f"P{i}") is not None
    assert profiles.create_profile("Eleven") is None
    assert len(profiles.get_profiles()) == 10


def test_rename_and_delete_profile(profiles, state_helper, storage):
    profile = profiles.create_profile("Alice")
    profiles.save_state(profile.id, state_helper.create_default_state())
    assert profiles.has_save(profile.id)

    assert profiles.rename_profile(profile.id, "Alicia")
    assert profiles.get_profile(profile.id).name == "Alicia"
    assert not profiles.rename_profile("p_missing", "Nobody")
    assert not profiles.rename_profile(profile.id, "  ")

    assert profiles.delete_profile(profile.id)
    assert profiles.get_profiles() == []
    assert storage.get_item(profiles.get_save_key(profile.id)) is None
    assert not profiles.delete_profile(profile.id)


def test_save_and_load_state(profiles, make_garden):
    garden = make_garden()
    garden.state.coins = 77
    profile = profiles.create_profile("Alice")

    profiles.save_data(profile.id, garden.snapshot_for_save())
    loaded = profiles.load_state(profile.id)
    assert loaded.coins == 77
    assert profiles.load_state("p_nobody") is None


def test_corrupt_registry_reads_as_empty(profiles, storage):
    storage.set_item(ProfileHelper.PROFILES_KEY, "{{{")
    assert profiles.get_profiles() == []


def test_corrupt_profile_save_loads_as_none(profiles, storage):
    profile = profiles.create_profile("Alice")
    storage.set_item(profiles.get_save_key(profile.id), "not json")
    assert profiles.load_state(profile.id) is None


# --- Legacy migration ---

def _legacy_save(coins=321):
    return json.dumps({"coins": coins, "plots": [], "inventory": {"rose": 1}})


def test_legacy_save_becomes_first_profile(profiles, storage):
    storage.set_item(ProfileHelper.LEGACY_SAVE_KEY, _legacy_save())

    profile = profiles.migrate_legacy_save()

    assert profile.name == "Player 1"
    assert [p.id for p in profiles.get_profiles()] == [profile.id]
    assert storage.get_item(ProfileHelper.LEGACY_SAVE_KEY) is None
    state = profiles.load_state(profile.id)
    assert state.coins == 321
    assert state.inventory == {"rose": 1}
    assert len(state.plots) == 6


def test_legacy_save_imported_next_to_existing_profiles(profiles, storage):
    profiles.create_profile("Alice")
    storage.set_item(ProfileHelper.LEGACY_SAVE_KEY, _legacy_save())

    profile = profiles.migrate_legacy_save()

    assert profile.name == "Imported"
    assert len(profiles.get_profiles()) == 2
    assert storage.get_item(ProfileHelper.LEGACY_SAVE_KEY) is None


def test_legacy_save_left_alone_when_registry_is_full(profiles, storage):
    for i in range(10):
        profiles.create_profile(f"P{i}")
    storage.set_item(ProfileHelper.LEGACY_SAVE_KEY, _legacy_save())

    assert profiles.migrate_legacy_save() is None
    assert storage.get_item(ProfileHelper.LEGACY_SAVE_KEY) == _legacy_save()


def test_no_legacy_save(profiles):
    assert profiles.migrate_legacy_save() is None
    assert profiles.get_profiles() == []
