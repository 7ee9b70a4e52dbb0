import pathlib
import random
from typing import List, Optional

from .engine import Engine
from .garden import Garden
from .helpers import (
    DataHelper,
    EventHelper,
    GameStateHelper,
    LoggingHelper,
    MemoryStorage,
    PlantHelper,
    ProfileHelper,
    ShopHelper,
    StorageHelper,
    TimeHelper,
)
from .models import OfflineReport, Profile


class GAG:
    """
    Grow A Garden session. Loads the game data, wires storage, profiles, the active Garden and its Engine,
    and keeps them pointing at the selected profile.
    """

    def __init__(
        self,
        storage: Optional[StorageHelper] = None,
        data_path: Optional[pathlib.Path] = None,
        logger: Optional[LoggingHelper] = None,
        rng: Optional[random.Random] = None,
        clock=TimeHelper.get_current_timestamp_ms,
    ):
        self.logger = logger or LoggingHelper()
        self.data_loader = DataHelper(data_path, self.logger).load_all_data()
        self.settings = self.data_loader.settings
        self.events = EventHelper(self.logger)
        self.storage = storage or MemoryStorage()
        self.rng = rng or random.Random()
        self.clock = clock

        plant_helper = PlantHelper(self.data_loader.seeds, self.data_loader.rarities, self.data_loader.categories)
        self.game_state_helper = GameStateHelper(ShopHelper(plant_helper, self.data_loader.upgrades), self.logger)
        self.profile_helper = ProfileHelper(self.storage, self.game_state_helper, self.settings, self.logger, clock)

        self.garden: Optional[Garden] = None
        self.engine: Optional[Engine] = None
        self.active_profile: Optional[Profile] = None
        self.offline_report: Optional[OfflineReport] = None

        self.profile_helper.migrate_legacy_save()

    # --- Profiles ---

    def get_profiles(self) -> List[Profile]:
        return self.profile_helper.get_profiles()

    def create_profile(self, name: str, avatar: Optional[str] = None) -> Optional[Profile]:
        return self.profile_helper.create_profile(name, avatar)

    def rename_profile(self, profile_id: str, name: str) -> bool:
        return self.profile_helper.rename_profile(profile_id, name)

    def delete_profile(self, profile_id: str) -> bool:
        """Deletes a profile. The active profile cannot be deleted while it is selected."""

        if self.active_profile and self.active_profile.id == profile_id:
            return False
        return self.profile_helper.delete_profile(profile_id)

    def select_profile(self, profile_id: str) -> bool:
        """
        Makes a profile the active one. The previous garden is saved and its engine stopped. A saved game is
        caught up for the time spent away; a profile without a usable save starts from the default state.
        """

        profile = self.profile_helper.get_profile(profile_id)
        if profile is None:
            return False

        was_running = self.engine is not None and self.engine.is_running
        self.close()

        state = self.profile_helper.load_state(profile.id)
        self.garden = Garden(self.data_loader, events=self.events, state=state, logger=self.logger,
                             rng=self.rng, clock=self.clock, settings=self.settings)
        self.offline_report = self.garden.apply_offline_progress() if state is not None else None

        self.engine = Engine(self.garden, self.events, self.logger, self.settings,
                             save_handler=lambda data: self.profile_helper.save_data(profile.id, data))
        self.active_profile = profile
        self.save()

        self.logger.log(f"Session: Profile '{profile.name}' ({profile.id}) is now active.", "INFO")
        if was_running:
            self.engine.start()
        return True

    # --- Lifecycle ---

    def start(self) -> bool:
        """Starts ticking the active garden. Must be called from inside a running event loop."""

        if self.engine is None:
            return False
        self.engine.start()
        return True

    def stop(self):
        if self.engine is not None:
            self.engine.stop()
            self.engine.save_now()

    def save(self) -> bool:
        return self.engine.save_now() if self.engine is not None else False

    def close(self):
        """Saves and detaches the active profile."""

        self.stop()
        self.garden = None
        self.engine = None
        self.active_profile = None
        self.offline_report = None

    def new_game(self) -> bool:
        """Resets the active profile to a fresh default state and saves it."""

        if self.garden is None:
            return False
        self.garden.reset()
        return self.save()
