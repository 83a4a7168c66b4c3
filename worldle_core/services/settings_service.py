"""
Settings Service

Loads and saves user preferences. Settings only affect display formatting.
"""

import json

from ..errors import CorruptPersistedState
from ..models.settings import DistanceUnit, SettingsData, Theme
from ..utils.game_logger import game_logger
from .storage import KeyValueStore

SETTINGS_KEY = "worldle:settings"


def decode_settings(raw: str) -> SettingsData:
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("settings must be an object")
        return SettingsData.from_dict(data)
    except (ValueError, TypeError) as e:
        raise CorruptPersistedState(SETTINGS_KEY, str(e))


class SettingsStore:
    """Persisted user preferences with defaults for anything missing or unreadable."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_settings(self) -> SettingsData:
        raw = self.store.get(SETTINGS_KEY)
        if raw is None:
            return SettingsData()
        try:
            return decode_settings(raw)
        except CorruptPersistedState as e:
            game_logger.log_corrupt_state(e.key, e.reason)
            return SettingsData()

    def update_settings(self, **changes) -> SettingsData:
        """
        Change one or more preferences and persist the result.

        Args:
            **changes: distance_unit, theme, no_image_mode and/or rotation_mode.
                Enum fields accept the enum member or its string value.

        Returns:
            SettingsData: The saved settings

        Raises:
            ValueError: If a field is unknown or a value is invalid
        """
        current = self.get_settings().to_dict()

        for name, value in changes.items():
            if name not in current:
                raise ValueError(f"Unknown setting: {name}")
            if isinstance(value, (DistanceUnit, Theme)):
                value = value.value
            current[name] = value

        # from_dict raises ValueError for unknown enum values
        updated = SettingsData.from_dict(current)
        self.store.set(SETTINGS_KEY, json.dumps(updated.to_dict()))
        return updated
