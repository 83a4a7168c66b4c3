"""
Statistics Service

Persists one DailyRecord per day and the StatsAggregate derived from them.
A day can only be scored once, which keeps replays from inflating streaks.

History writes go through compare_and_set on the stored history value. The
aggregate remembers which history version it was computed from and is
rebuilt from history whenever the two disagree.
"""

import json
from typing import Dict, List, Optional, Tuple

from ..errors import AlreadyRecorded, CorruptPersistedState, WriteConflict
from ..models.game import GameMode, GameStatus
from ..models.stats import DailyRecord, StatsAggregate
from ..utils.game_logger import game_logger
from .storage import KeyValueStore

HISTORY_KEY = "worldle:daily:history"
STATS_KEY = "worldle:daily:stats"

MAX_WRITE_ATTEMPTS = 5


def encode_history(version: int, records: Dict[int, DailyRecord]) -> str:
    ordered = [records[day].to_dict() for day in sorted(records)]
    return json.dumps({"version": version, "records": ordered})


def decode_history(raw: str) -> Tuple[int, Dict[int, DailyRecord]]:
    """
    Parse a stored history value.

    Raises:
        CorruptPersistedState: If the value is not a valid history document
    """
    try:
        data = json.loads(raw)
        version = int(data["version"])
        records = {}
        for item in data["records"]:
            record = DailyRecord.from_dict(item)
            if record.day_index in records:
                raise ValueError(f"duplicate day {record.day_index}")
            records[record.day_index] = record
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise CorruptPersistedState(HISTORY_KEY, str(e))
    return version, records


def decode_aggregate(raw: str) -> StatsAggregate:
    try:
        return StatsAggregate.from_dict(json.loads(raw))
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise CorruptPersistedState(STATS_KEY, str(e))


def apply_record(aggregate: StatsAggregate, record: DailyRecord,
                 previous: Optional[DailyRecord]) -> StatsAggregate:
    """Return a new aggregate that also counts `record`."""
    games_played = aggregate.games_played + 1
    distribution = dict(aggregate.guess_distribution)

    if record.won:
        if previous is not None and previous.won:
            current_streak = aggregate.current_streak + 1
        else:
            current_streak = 1
        distribution[record.guess_count] = distribution.get(record.guess_count, 0) + 1
    else:
        current_streak = 0

    average = aggregate.average_best_distance_km
    if record.best_distance_km is not None:
        # Every recorded game has at least one guess, so every game has a best distance
        previous_total = (average or 0.0) * aggregate.games_played
        average = (previous_total + record.best_distance_km) / games_played

    return StatsAggregate(
        games_played=games_played,
        games_won=aggregate.games_won + (1 if record.won else 0),
        current_streak=current_streak,
        max_streak=max(aggregate.max_streak, current_streak),
        guess_distribution=distribution,
        average_best_distance_km=average,
        version=aggregate.version,
    )


def compute_aggregate(records: Dict[int, DailyRecord], version: int) -> StatsAggregate:
    """Rebuild the aggregate from scratch, replaying days in order."""
    aggregate = StatsAggregate()
    for day in sorted(records):
        aggregate = apply_record(aggregate, records[day], records.get(day - 1))
    aggregate.version = version
    return aggregate


class StatsStore:
    """
    Daily statistics backed by a KeyValueStore.

    Unreadable stored values never raise out of this class: they are logged
    and treated as an empty history.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _read_history(self) -> Tuple[Optional[str], int, Dict[int, DailyRecord]]:
        raw = self.store.get(HISTORY_KEY)
        if raw is None:
            return None, 0, {}
        try:
            version, records = decode_history(raw)
        except CorruptPersistedState as e:
            game_logger.log_corrupt_state(e.key, e.reason)
            # Skip past any aggregate computed from the lost history
            stale = self._read_aggregate()
            return raw, (stale.version + 1 if stale else 0), {}
        return raw, version, records

    def _read_aggregate(self) -> Optional[StatsAggregate]:
        raw = self.store.get(STATS_KEY)
        if raw is None:
            return None
        try:
            return decode_aggregate(raw)
        except CorruptPersistedState as e:
            game_logger.log_corrupt_state(e.key, e.reason)
            return None

    def has_record(self, day_index: int) -> bool:
        _, _, records = self._read_history()
        return day_index in records

    def get_history(self) -> List[DailyRecord]:
        _, _, records = self._read_history()
        return [records[day] for day in sorted(records)]

    def record(self, session) -> StatsAggregate:
        """
        Score a finished daily session.

        Args:
            session: A GuessSession in daily mode whose status is terminal

        Returns:
            StatsAggregate: The updated aggregate

        Raises:
            AlreadyRecorded: If this day already has a record, or the session
                is not a finished daily game. Nothing is written.
            WriteConflict: If other writers kept changing the history
        """
        if session.mode != GameMode.DAILY or session.day_index is None:
            raise AlreadyRecorded(session.day_index, "Only daily sessions are recorded in statistics")
        if not session.status.is_terminal:
            raise AlreadyRecorded(session.day_index, "Cannot record a session that is still in progress")

        day_index = session.day_index
        distances = [guess.distance_km for guess in session.guesses]
        new_record = DailyRecord(
            day_index=day_index,
            completed=True,
            won=session.status == GameStatus.WON,
            guess_count=len(session.guesses),
            best_distance_km=min(distances) if distances else None,
        )

        for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
            raw, version, records = self._read_history()
            if day_index in records:
                game_logger.log_stats_event('already_recorded', day_index=day_index)
                raise AlreadyRecorded(day_index)

            new_records = dict(records)
            new_records[day_index] = new_record
            new_version = version + 1

            if self.store.compare_and_set(HISTORY_KEY, raw, encode_history(new_version, new_records)):
                break

            game_logger.log_stats_event('write_conflict', day_index=day_index, attempt=attempt)
        else:
            raise WriteConflict(HISTORY_KEY, MAX_WRITE_ATTEMPTS)

        aggregate = self._read_aggregate()
        # current_streak belongs to the latest day, so only a newer day can extend it
        appends = not records or day_index > max(records)
        if appends and aggregate is not None and aggregate.version == version:
            aggregate = apply_record(aggregate, new_record, records.get(day_index - 1))
            aggregate.version = new_version
        else:
            aggregate = compute_aggregate(new_records, new_version)

        self.store.set(STATS_KEY, json.dumps(aggregate.to_dict()))

        game_logger.log_stats_event(
            'recorded', day_index=day_index, won=new_record.won,
            guess_count=new_record.guess_count, current_streak=aggregate.current_streak
        )
        return aggregate

    def get_aggregate(self) -> StatsAggregate:
        """Current aggregate, all zeros when nothing has been recorded."""
        _, version, records = self._read_history()
        aggregate = self._read_aggregate()

        if aggregate is not None and aggregate.version == version:
            return aggregate

        if not records:
            return StatsAggregate(version=version)

        # Missing, unreadable, or computed from an older history
        aggregate = compute_aggregate(records, version)
        self.store.set(STATS_KEY, json.dumps(aggregate.to_dict()))
        game_logger.log_stats_event('aggregate_rebuilt', version=version, games_played=aggregate.games_played)
        return aggregate
