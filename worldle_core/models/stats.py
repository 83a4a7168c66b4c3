"""
Statistics Data Models

Contains the persisted per-day results and the aggregate derived from them.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DailyRecord:
    """Result of one daily puzzle. Written once per day."""
    day_index: int
    completed: bool
    won: bool
    guess_count: int
    best_distance_km: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day_index": self.day_index,
            "completed": self.completed,
            "won": self.won,
            "guess_count": self.guess_count,
            "best_distance_km": self.best_distance_km,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyRecord":
        best = data.get("best_distance_km")
        return cls(
            day_index=int(data["day_index"]),
            completed=bool(data["completed"]),
            won=bool(data["won"]),
            guess_count=int(data["guess_count"]),
            best_distance_km=float(best) if best is not None else None,
        )


@dataclass
class StatsAggregate:
    """
    Totals over every recorded daily game.

    Losses are not part of guess_distribution; they are
    games_played - games_won. version is the history version this aggregate
    was computed from.
    """
    games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    max_streak: int = 0
    guess_distribution: Dict[int, int] = field(default_factory=dict)
    average_best_distance_km: Optional[float] = None
    version: int = 0

    @property
    def win_rate(self) -> int:
        """Percentage of games won, rounded."""
        if not self.games_played:
            return 0
        return round(self.games_won / self.games_played * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "games_played": self.games_played,
            "games_won": self.games_won,
            "current_streak": self.current_streak,
            "max_streak": self.max_streak,
            # JSON object keys must be strings
            "guess_distribution": {str(k): v for k, v in self.guess_distribution.items()},
            "average_best_distance_km": self.average_best_distance_km,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatsAggregate":
        average = data.get("average_best_distance_km")
        return cls(
            games_played=int(data["games_played"]),
            games_won=int(data["games_won"]),
            current_streak=int(data["current_streak"]),
            max_streak=int(data["max_streak"]),
            guess_distribution={int(k): int(v) for k, v in data["guess_distribution"].items()},
            average_best_distance_km=float(average) if average is not None else None,
            version=int(data.get("version", 0)),
        )
