"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class GameMode(Enum):
    """Daily puzzles count toward statistics, free play never does."""
    DAILY = "daily"
    FREE = "free"


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.IN_PROGRESS


class Direction(Enum):
    """16-point compass rose, clockwise from north."""
    N = "N"
    NNE = "NNE"
    NE = "NE"
    ENE = "ENE"
    E = "E"
    ESE = "ESE"
    SE = "SE"
    SSE = "SSE"
    S = "S"
    SSW = "SSW"
    SW = "SW"
    WSW = "WSW"
    W = "W"
    WNW = "WNW"
    NW = "NW"
    NNW = "NNW"

    @property
    def arrow(self) -> str:
        return _DIRECTION_ARROWS[self]


_DIRECTION_ARROWS = {
    Direction.N: "⬆️",
    Direction.NNE: "↗️",
    Direction.NE: "↗️",
    Direction.ENE: "↗️",
    Direction.E: "➡️",
    Direction.ESE: "↘️",
    Direction.SE: "↘️",
    Direction.SSE: "↘️",
    Direction.S: "⬇️",
    Direction.SSW: "↙️",
    Direction.SW: "↙️",
    Direction.WSW: "↙️",
    Direction.W: "⬅️",
    Direction.WNW: "↖️",
    Direction.NW: "↖️",
    Direction.NNW: "↖️",
}


@dataclass(frozen=True)
class GuessEvaluation:
    """Result of scoring one guessed country against the target."""
    distance_km: float
    bearing_degrees: float
    proximity_percent: int
    direction: Optional[Direction] = None  # None when the guess is the target


@dataclass(frozen=True)
class Guess:
    """One submitted guess. Created once per submission and never changed."""
    country_code: str
    country_name: str
    distance_km: float
    bearing_degrees: float
    proximity_percent: int
    direction: Optional[Direction] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "country_code": self.country_code,
            "country_name": self.country_name,
            "distance_km": self.distance_km,
            "bearing_degrees": self.bearing_degrees,
            "proximity_percent": self.proximity_percent,
            "direction": self.direction.value if self.direction else None,
        }


@dataclass
class GameState:
    """Read-only snapshot of a session handed to the presentation layer."""
    mode: str
    status: str
    target_code: str
    target_name: str
    current_round: int
    max_rounds: int
    game_over: bool
    won: bool
    guesses: List[Dict[str, Any]] = field(default_factory=list)
    day_index: Optional[int] = None  # Only set for daily games
