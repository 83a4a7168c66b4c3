import json
import logging

import pytest

from worldle_core.errors import AlreadyRecorded, WriteConflict
from worldle_core.models.game import GameMode, GameStatus
from worldle_core.models.stats import DailyRecord, StatsAggregate
from worldle_core.services.game_service import GuessSession
from worldle_core.services.stats_service import (
    HISTORY_KEY,
    STATS_KEY,
    StatsStore,
    compute_aggregate,
    encode_history,
)
from worldle_core.services.storage import MemoryStore

from .conftest import FRANCE

WRONG = ["US", "DE", "JP", "BR", "AU", "CI"]


def finished_session(catalog, day_index, guesses, mode=GameMode.DAILY):
    session = GuessSession(mode, FRANCE, catalog, day_index=day_index)
    for code in guesses:
        session.submit_guess(code)
    return session


def won(catalog, day_index, wrong_first=0):
    return finished_session(catalog, day_index, WRONG[:wrong_first] + ["FR"])


def lost(catalog, day_index):
    return finished_session(catalog, day_index, WRONG)


class FlakyStore(MemoryStore):
    """Rejects the first `failures` compare-and-set calls, like a concurrent writer would."""

    def __init__(self, failures):
        super().__init__()
        self.failures = failures

    def compare_and_set(self, key, expected, value):
        if self.failures > 0:
            self.failures -= 1
            return False
        return super().compare_and_set(key, expected, value)


@pytest.fixture
def stats(store):
    return StatsStore(store)


def test_empty_history_gives_zero_aggregate(stats):
    aggregate = stats.get_aggregate()

    assert aggregate.games_played == 0
    assert aggregate.games_won == 0
    assert aggregate.current_streak == 0
    assert aggregate.max_streak == 0
    assert aggregate.guess_distribution == {}
    assert aggregate.win_rate == 0
    assert stats.get_history() == []


def test_record_win(stats, catalog):
    aggregate = stats.record(won(catalog, 0, wrong_first=2))

    assert aggregate.games_played == 1
    assert aggregate.games_won == 1
    assert aggregate.current_streak == 1
    assert aggregate.max_streak == 1
    assert aggregate.guess_distribution == {3: 1}
    assert aggregate.win_rate == 100
    assert stats.get_aggregate() == aggregate


def test_record_same_day_twice(stats, catalog):
    stats.record(won(catalog, 5))

    with pytest.raises(AlreadyRecorded) as excinfo:
        stats.record(lost(catalog, 5))

    assert excinfo.value.day_index == 5
    aggregate = stats.get_aggregate()
    assert aggregate.games_played == 1
    assert aggregate.games_won == 1
    assert stats.has_record(5)


def test_loss_resets_streak(stats, catalog):
    stats.record(won(catalog, 0))
    stats.record(won(catalog, 1))
    aggregate = stats.record(lost(catalog, 2))

    assert aggregate.games_played == 3
    assert aggregate.games_won == 2
    assert aggregate.current_streak == 0
    assert aggregate.max_streak == 2
    assert aggregate.guess_distribution == {1: 2}


def test_streak_restarts_after_missed_day(stats, catalog):
    stats.record(won(catalog, 0))
    stats.record(won(catalog, 1))
    aggregate = stats.record(won(catalog, 3))

    assert aggregate.current_streak == 1
    assert aggregate.max_streak == 2


def test_streak_after_a_loss_starts_at_one(stats, catalog):
    stats.record(lost(catalog, 0))
    aggregate = stats.record(won(catalog, 1))

    assert aggregate.current_streak == 1


def test_average_best_distance(stats, catalog):
    stats.record(won(catalog, 0))
    aggregate = stats.record(lost(catalog, 1))

    best_loss = min(g.distance_km for g in lost(catalog, 1).guesses)
    assert aggregate.average_best_distance_km == pytest.approx(best_loss / 2)


def test_only_finished_daily_sessions_are_recorded(store, stats, catalog):
    in_progress = finished_session(catalog, 0, ["US"])
    free_game = finished_session(catalog, None, ["FR"], mode=GameMode.FREE)

    with pytest.raises(AlreadyRecorded) as excinfo:
        stats.record(in_progress)
    assert excinfo.value.day_index == 0
    assert "in progress" in excinfo.value.message

    with pytest.raises(AlreadyRecorded) as excinfo:
        stats.record(free_game)
    assert excinfo.value.day_index is None

    assert store.keys() == []
    assert stats.get_aggregate().games_played == 0


def test_history_is_ordered(stats, catalog):
    stats.record(won(catalog, 4))
    stats.record(lost(catalog, 2))

    history = stats.get_history()

    assert [r.day_index for r in history] == [2, 4]
    assert history[0] == DailyRecord(
        day_index=2, completed=True, won=False, guess_count=6,
        best_distance_km=history[0].best_distance_km,
    )


def test_corrupt_history_is_treated_as_empty(store, catalog, caplog):
    store.set(HISTORY_KEY, "][")
    stats = StatsStore(store)

    with caplog.at_level(logging.WARNING, logger="worldle_game"):
        aggregate = stats.get_aggregate()

    assert aggregate.games_played == 0
    assert "CORRUPT_STATE" in caplog.text

    recorded = stats.record(won(catalog, 0))
    assert recorded.games_played == 1
    assert len(stats.get_history()) == 1


def test_stale_aggregate_is_not_trusted_after_history_loss(store, catalog):
    stats = StatsStore(store)
    stats.record(won(catalog, 0))
    stats.record(won(catalog, 1))
    store.set(HISTORY_KEY, json.dumps({"records": "oops"}))

    assert stats.get_aggregate().games_played == 0
    assert stats.record(won(catalog, 2)).games_played == 1


def test_corrupt_aggregate_is_rebuilt_from_history(store, catalog):
    stats = StatsStore(store)
    stats.record(won(catalog, 0))
    stats.record(lost(catalog, 1))
    store.set(STATS_KEY, '{"games_played": "many"}')

    aggregate = stats.get_aggregate()

    assert aggregate.games_played == 2
    assert aggregate.games_won == 1
    assert json.loads(store.get(STATS_KEY))["games_played"] == 2


def test_aggregate_from_older_history_is_rebuilt(store):
    records = {
        0: DailyRecord(0, True, True, 2, 100.0),
        1: DailyRecord(1, True, True, 4, 300.0),
    }
    store.set(HISTORY_KEY, encode_history(2, records))
    # Written by a writer that had only seen day 0
    store.set(STATS_KEY, json.dumps(compute_aggregate({0: records[0]}, 1).to_dict()))

    aggregate = StatsStore(store).get_aggregate()

    assert aggregate.games_played == 2
    assert aggregate.current_streak == 2
    assert aggregate.guess_distribution == {2: 1, 4: 1}
    assert aggregate.average_best_distance_km == pytest.approx(200.0)
    assert aggregate.version == 2


def test_compare_and_set_conflict_is_retried(catalog):
    stats = StatsStore(FlakyStore(failures=2))

    aggregate = stats.record(won(catalog, 0))

    assert aggregate.games_played == 1


def test_persistent_conflict_gives_up(catalog):
    stats = StatsStore(FlakyStore(failures=100))

    with pytest.raises(WriteConflict):
        stats.record(won(catalog, 0))
    assert stats.get_history() == []


def test_aggregate_serialization_uses_string_keys():
    aggregate = StatsAggregate(games_played=3, games_won=2, guess_distribution={1: 1, 4: 1})

    data = aggregate.to_dict()

    assert data["guess_distribution"] == {"1": 1, "4": 1}
    assert StatsAggregate.from_dict(json.loads(json.dumps(data))) == aggregate
    assert aggregate.win_rate == 67


def test_session_status_is_reported(catalog):
    assert won(catalog, 0).status == GameStatus.WON
    assert lost(catalog, 0).status == GameStatus.LOST


def test_out_of_order_days_match_rebuilt_aggregate(store, catalog):
    stats = StatsStore(store)
    for day in (5, 7, 6):
        incremental = stats.record(won(catalog, day))

    store.delete(STATS_KEY)
    rebuilt = stats.get_aggregate()

    assert incremental.current_streak == rebuilt.current_streak == 3
    assert incremental.max_streak == rebuilt.max_streak == 3
    assert incremental == rebuilt


def test_earlier_loss_breaks_later_streak(stats, catalog):
    stats.record(won(catalog, 1))
    stats.record(won(catalog, 3))
    aggregate = stats.record(lost(catalog, 2))

    # Days in order: win, loss, win
    assert aggregate.current_streak == 1
    assert aggregate.max_streak == 1
