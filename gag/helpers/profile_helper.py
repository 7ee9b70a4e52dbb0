import json
from typing import Any, Callable, Dict, List, Optional

from ..models import GameSettings, GameState, Profile
from .game_state_helper import GameStateHelper
from .logging_helper import LoggingHelper
from .storage_helper import StorageHelper
from .time_helper import TimeHelper


class ProfileHelper:
    """
    Manages the profile registry and each profile's save slot on a StorageHelper.
    Also migrates a single pre-profile save into the registry.
    """

    PROFILES_KEY = "growAGarden_profiles"
    SAVE_PREFIX = "growAGarden_save_"
    LEGACY_SAVE_KEY = "growAGarden_save"
    PROFILE_AVATARS = ("🌻", "🌵", "🍄", "🌸", "🌲", "🦊", "🐸", "🌈", "🍀", "🔥",
                       "🐝", "🦋", "🌺", "🍉", "⭐", "🐢", "🎮", "🧑‍🌾")

    def __init__(
        self,
        storage: StorageHelper,
        game_state_helper: GameStateHelper,
        settings: Optional[GameSettings] = None,
        logger: Optional[LoggingHelper] = None,
        clock: Callable[[], int] = TimeHelper.get_current_timestamp_ms,
    ):
        self.storage = storage
        self.game_state_helper = game_state_helper
        self.settings = settings or GameSettings()
        self.logger = logger or LoggingHelper()
        self.clock = clock

    def get_save_key(self, profile_id: str) -> str:
        return self.SAVE_PREFIX + profile_id

    # --- Registry ---

    def get_profiles(self) -> List[Profile]:
        raw = self.storage.get_item(self.PROFILES_KEY)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except ValueError as e:
            self.logger.log(f"Profiles: Registry is unreadable ({e}). Treating it as empty.", "WARNING")
            return []

        if not isinstance(entries, list):
            return []

        profiles = []
        for entry in entries:
            if isinstance(entry, dict) and entry.get("id"):
                profiles.append(Profile(
                    id=str(entry["id"]),
                    name=str(entry.get("name", "Gardener")),
                    avatar=str(entry.get("avatar", self.PROFILE_AVATARS[0])),
                ))
        return profiles

    def _save_profiles(self, profiles: List[Profile]):
        payload: List[Dict[str, Any]] = [{"id": p.id, "name": p.name, "avatar": p.avatar} for p in profiles]
        self.storage.set_item(self.PROFILES_KEY, json.dumps(payload, ensure_ascii=False))

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        return next((p for p in self.get_profiles() if p.id == profile_id), None)

    def _clean_name(self, name: str) -> str:
        return (name or "").strip()[:self.settings.profile_name_max_length]

    def _new_profile_id(self, existing: List[Profile]) -> str:
        taken = {p.id for p in existing}
        stamp = self.clock()
        profile_id = f"p_{stamp}"
        while profile_id in taken:
            stamp += 1
            profile_id = f"p_{stamp}"
        return profile_id

    def create_profile(self, name: str, avatar: Optional[str] = None) -> Optional[Profile]:
        """Adds a profile. Fails (None) on a blank name or when the registry is full."""

        clean_name = self._clean_name(name)
        if not clean_name:
            return None

        profiles = self.get_profiles()
        if len(profiles) >= self.settings.max_profiles:
            self.logger.log(f"Profiles: Limit of {self.settings.max_profiles} reached. '{clean_name}' not created.",
                            "INFO")
            return None

        profile = Profile(
            id=self._new_profile_id(profiles),
            name=clean_name,
            avatar=avatar or self.PROFILE_AVATARS[len(profiles) % len(self.PROFILE_AVATARS)],
        )
        profiles.append(profile)
        self._save_profiles(profiles)
        self.logger.log(f"Profiles: Created '{profile.name}' ({profile.id}).", "INFO")
        return profile

    def rename_profile(self, profile_id: str, name: str) -> bool:
        clean_name = self._clean_name(name)
        profiles = self.get_profiles()
        if not clean_name or not any(p.id == profile_id for p in profiles):
            return False

        profiles = [Profile(p.id, clean_name, p.avatar) if p.id == profile_id else p for p in profiles]
        self._save_profiles(profiles)
        return True

    def delete_profile(self, profile_id: str) -> bool:
        """Removes a profile from the registry along with its save."""

        profiles = self.get_profiles()
        remaining = [p for p in profiles if p.id != profile_id]
        if len(remaining) == len(profiles):
            return False

        self._save_profiles(remaining)
        self.storage.remove_item(self.get_save_key(profile_id))
        self.logger.log(f"Profiles: Deleted profile {profile_id}.", "INFO")
        return True

    # --- Saves ---

    def save_data(self, profile_id: str, data: Dict[str, Any]):
        self.storage.set_item(self.get_save_key(profile_id), json.dumps(data, ensure_ascii=False))

    def save_state(self, profile_id: str, state: GameState):
        self.storage.set_item(self.get_save_key(profile_id), self.game_state_helper.dumps(state))

    def load_state(self, profile_id: str) -> Optional[GameState]:
        """The profile's saved state merged over defaults, or None when there is no usable save."""

        raw = self.storage.get_item(self.get_save_key(profile_id))
        if raw is None:
            return None
        state = self.game_state_helper.loads(raw, now_ms=self.clock())
        if state is None:
            self.logger.log(f"Profiles: Save for {profile_id} could not be read. Starting fresh.", "WARNING")
        return state

    def has_save(self, profile_id: str) -> bool:
        return self.storage.get_item(self.get_save_key(profile_id)) is not None

    # --- Legacy migration ---

    def migrate_legacy_save(self) -> Optional[Profile]:
        """
        Moves a save stored under the old unkeyed slot into the registry. With no profiles yet it becomes
        'Player 1'; otherwise it is added as 'Imported'. The old slot is removed only after the new save
        and the registry have both been written, and is left alone when the registry is full.
        """

        legacy = self.storage.get_item(self.LEGACY_SAVE_KEY)
        if legacy is None:
            return None

        profiles = self.get_profiles()
        if len(profiles) >= self.settings.max_profiles:
            self.logger.log("Migration: Profile limit reached. Legacy save left in place.", "WARNING")
            return None

        profile = Profile(
            id=self._new_profile_id(profiles),
            name="Player 1" if not profiles else "Imported",
            avatar=self.PROFILE_AVATARS[0],
        )

        self.storage.set_item(self.get_save_key(profile.id), legacy)
        profiles.append(profile)
        self._save_profiles(profiles)
        self.storage.remove_item(self.LEGACY_SAVE_KEY)

        self.logger.log(f"Migration: Legacy save moved into profile '{profile.name}' ({profile.id}).", "INFO")
        return profile
