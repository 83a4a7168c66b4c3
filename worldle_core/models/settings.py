"""
Settings Data Models

User preferences. They change how results are displayed, never how they are scored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


def _flag(data: Dict[str, Any], name: str, default: bool) -> bool:
    value = data.get(name, default)
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


class DistanceUnit(Enum):
    KM = "km"
    MILES = "miles"


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class SettingsData:
    """Persisted user preferences."""
    distance_unit: DistanceUnit = DistanceUnit.KM
    theme: Theme = Theme.LIGHT
    no_image_mode: bool = False
    rotation_mode: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance_unit": self.distance_unit.value,
            "theme": self.theme.value,
            "no_image_mode": self.no_image_mode,
            "rotation_mode": self.rotation_mode,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SettingsData":
        defaults = cls()
        return cls(
            distance_unit=DistanceUnit(data.get("distance_unit", defaults.distance_unit.value)),
            theme=Theme(data.get("theme", defaults.theme.value)),
            no_image_mode=_flag(data, "no_image_mode", defaults.no_image_mode),
            rotation_mode=_flag(data, "rotation_mode", defaults.rotation_mode),
        )
