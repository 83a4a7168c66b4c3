"""
Game Service

Contains the guess-session state machine and the service that owns the live
session of each game mode.
"""

import json
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..config.app_config import Config
from ..config.game_settings import MAX_GUESSES, load_country_data
from ..errors import AlreadyRecorded, CorruptPersistedState, InvalidGuess, ModeError, WriteConflict
from ..models.country import CountryCatalog, CountryRecord
from ..models.game import GameMode, GameState, GameStatus, Guess
from ..models.settings import SettingsData
from ..models.stats import StatsAggregate
from ..utils.game_logger import game_logger
from ..utils.helpers import utc_now
from .daily_seed import DailySeed
from .distance_service import DistanceEngine, format_distance
from .settings_service import SettingsStore
from .share_service import build_share_text
from .stats_service import StatsStore
from .storage import KeyValueStore, create_store

DAILY_GUESSES_KEY = "worldle:daily:guesses:{day_index}"


class GuessSession:
    """
    One game: a target country and the guesses made against it.

    Guesses are append-only. The session is won when the latest guess is the
    target, lost when max_guesses wrong guesses have been made, and accepts
    nothing once either happens.
    """

    def __init__(self, mode: GameMode, target: CountryRecord, catalog: CountryCatalog,
                 distance_engine: Optional[DistanceEngine] = None,
                 max_guesses: int = MAX_GUESSES, day_index: Optional[int] = None,
                 allow_duplicates: bool = True):
        self.mode = mode
        self.target = target
        self.catalog = catalog
        self.distance_engine = distance_engine or DistanceEngine()
        self.max_guesses = max_guesses
        self.day_index = day_index
        self.allow_duplicates = allow_duplicates
        self.status = GameStatus.IN_PROGRESS
        self._guesses: List[Guess] = []

    @property
    def guesses(self) -> Tuple[Guess, ...]:
        return tuple(self._guesses)

    @property
    def game_over(self) -> bool:
        return self.status.is_terminal

    def _check_guess(self, text: str) -> Tuple[Optional[CountryRecord], str]:
        if self.status.is_terminal:
            return None, "Game is already over"

        if not text or not isinstance(text, str) or not text.strip():
            return None, "Guess must be a country code or name"

        country = self.catalog.resolve(text)
        if country is None:
            return None, "Unknown country"

        if not self.allow_duplicates and any(g.country_code == country.code for g in self._guesses):
            return None, "Country already guessed"

        return country, ""

    def is_valid_guess(self, text: str) -> Tuple[bool, str]:
        """
        Validates a guess without submitting it.

        Returns:
            Tuple of (is_valid, error_message)
        """
        country, error = self._check_guess(text)
        return country is not None, error

    def submit_guess(self, text: str) -> Guess:
        """
        Score a guess and append it.

        Args:
            text: ISO code or name of the guessed country

        Returns:
            Guess: The recorded guess

        Raises:
            InvalidGuess: If the session is over or the country is unknown
                (or already guessed when duplicates are disallowed).
                The session is left unchanged.
        """
        country, error = self._check_guess(text)
        if country is None:
            raise InvalidGuess(error, {"guess": text, "status": self.status.value})

        evaluation = self.distance_engine.evaluate(self.target, country)
        guess = Guess(
            country_code=country.code,
            country_name=country.name,
            distance_km=evaluation.distance_km,
            bearing_degrees=evaluation.bearing_degrees,
            proximity_percent=evaluation.proximity_percent,
            direction=evaluation.direction,
        )
        self._guesses.append(guess)

        # Exact match wins even on the last allowed guess
        if country.code == self.target.code:
            self.status = GameStatus.WON
        elif len(self._guesses) >= self.max_guesses:
            self.status = GameStatus.LOST

        return guess

    def to_state(self) -> GameState:
        return GameState(
            mode=self.mode.value,
            status=self.status.value,
            target_code=self.target.code,
            target_name=self.target.name,
            current_round=len(self._guesses),
            max_rounds=self.max_guesses,
            game_over=self.game_over,
            won=self.status == GameStatus.WON,
            guesses=[guess.to_dict() for guess in self._guesses],
            day_index=self.day_index,
        )


class GameService:
    """
    Core game service managing one live session per game mode.

    This class handles:
    - Daily target selection from the calendar date, free-play random targets
    - Guess validation and evaluation
    - Saving today's guesses so a reload restores the board
    - Recording finished daily games in the statistics store
    """

    def __init__(self, catalog: CountryCatalog, store: KeyValueStore,
                 seed: Optional[DailySeed] = None,
                 distance_engine: Optional[DistanceEngine] = None,
                 max_guesses: int = MAX_GUESSES,
                 allow_duplicates: bool = True,
                 clock: Callable[[], datetime] = utc_now):
        self.catalog = catalog
        self.store = store
        self.seed = seed or DailySeed()
        self.distance_engine = distance_engine or DistanceEngine()
        self.max_guesses = max_guesses
        self.allow_duplicates = allow_duplicates
        self.clock = clock
        self.stats = StatsStore(store)
        self.settings = SettingsStore(store)
        self.sessions: Dict[GameMode, GuessSession] = {}

    def current_day_index(self) -> int:
        return self.seed.daily_index(self.clock())

    def _new_session(self, mode: GameMode, target: CountryRecord,
                     day_index: Optional[int] = None) -> GuessSession:
        return GuessSession(
            mode, target, self.catalog,
            distance_engine=self.distance_engine,
            max_guesses=self.max_guesses,
            day_index=day_index,
            allow_duplicates=self.allow_duplicates,
        )

    def start(self, mode: Union[GameMode, str] = GameMode.DAILY,
              target: Optional[CountryRecord] = None) -> GuessSession:
        """
        Start (or restart) the session for a mode, replacing the previous one.

        A daily session restores any guesses already saved for today.

        Args:
            mode: GameMode or its value ("daily" or "free")
            target: Country to use instead of the seeded/random choice

        Returns:
            GuessSession: The new live session
        """
        mode = GameMode(mode)

        if mode == GameMode.DAILY:
            day_index = self.current_day_index()
            target = target or self.seed.select_country(day_index, self.catalog)
            session = self._restore_daily_guesses(self._new_session(mode, target, day_index))
        else:
            target = target or self.seed.select_random_country(self.catalog)
            session = self._new_session(mode, target)

        self.sessions[mode] = session
        game_logger.log_game_event(
            'game_started', mode.value, day_index=session.day_index,
            restored_guesses=len(session.guesses)
        )
        return session

    def get_session(self, mode: Union[GameMode, str] = GameMode.DAILY) -> GuessSession:
        """Live session for the mode. A daily session from a previous day is replaced."""
        mode = GameMode(mode)
        session = self.sessions.get(mode)

        if session is None:
            return self.start(mode)
        if mode == GameMode.DAILY and session.day_index != self.current_day_index():
            return self.start(mode)
        return session

    def get_game_state(self, mode: Union[GameMode, str] = GameMode.DAILY) -> GameState:
        return self.get_session(mode).to_state()

    def is_valid_guess(self, mode: Union[GameMode, str], text: str) -> Tuple[bool, str]:
        return self.get_session(mode).is_valid_guess(text)

    def submit_guess(self, mode: Union[GameMode, str], text: str) -> Guess:
        """
        Processes a guess for the live session of a mode.

        Raises:
            InvalidGuess: If the guess is rejected; nothing is changed
        """
        session = self.get_session(mode)

        try:
            guess = session.submit_guess(text)
        except InvalidGuess as e:
            game_logger.log_game_event('guess_rejected', session.mode.value, guess=text, reason=e.message)
            raise

        game_logger.log_guess(
            session.mode.value, guess.country_code, guess.proximity_percent,
            round=len(session.guesses), distance_km=round(guess.distance_km)
        )

        if session.mode == GameMode.DAILY:
            self._save_daily_guesses(session)

        if session.game_over:
            self._finish(session)

        return guess

    def generate_new_country(self) -> GuessSession:
        """
        Replace the free-play session with a new random target.

        Returns:
            GuessSession: The new free-play session
        """
        current = self.sessions.get(GameMode.FREE)
        excluding = current.target.code if current else None
        target = self.seed.select_random_country(self.catalog, excluding=excluding)
        return self.start(GameMode.FREE, target)

    def clear_guesses(self, mode: Union[GameMode, str] = GameMode.FREE) -> GuessSession:
        """
        Restart the free-play session against the same target.

        Raises:
            ModeError: For daily mode, where guesses cannot be discarded
        """
        mode = GameMode(mode)
        if mode != GameMode.FREE:
            raise ModeError("Daily guesses cannot be cleared", {"mode": mode.value})

        current = self.sessions.get(GameMode.FREE)
        if current is None:
            return self.start(GameMode.FREE)
        return self.start(GameMode.FREE, current.target)

    def get_stats(self) -> StatsAggregate:
        return self.stats.get_aggregate()

    def get_settings(self) -> SettingsData:
        return self.settings.get_settings()

    def update_settings(self, **changes) -> SettingsData:
        return self.settings.update_settings(**changes)

    def format_distance(self, guess: Guess) -> str:
        """Distance of a guess in the player's preferred unit."""
        return format_distance(guess.distance_km, self.get_settings().distance_unit)

    def share_text(self, mode: Union[GameMode, str] = GameMode.DAILY) -> str:
        return build_share_text(self.get_game_state(mode), self.get_settings().theme)

    def day_string(self) -> str:
        return self.seed.day_string(self.current_day_index())

    def _finish(self, session: GuessSession) -> None:
        event = 'game_won' if session.status == GameStatus.WON else 'game_lost'
        game_logger.log_game_event(
            event, session.mode.value, day_index=session.day_index,
            target=session.target.code, guesses=len(session.guesses)
        )

        if session.mode != GameMode.DAILY:
            return

        try:
            self.stats.record(session)
        except AlreadyRecorded:
            # Replays of a scored day are allowed but never counted twice
            pass
        except WriteConflict as e:
            # Left unscored; the next daily start for this day records it again
            game_logger.log_error(e, "record_stats", day_index=session.day_index)

    def _save_daily_guesses(self, session: GuessSession) -> None:
        key = DAILY_GUESSES_KEY.format(day_index=session.day_index)
        self.store.set(key, json.dumps([guess.country_code for guess in session.guesses]))

    def _restore_daily_guesses(self, session: GuessSession) -> GuessSession:
        """
        Replay the guesses saved for the session's day.

        Returns the replayed session, or an empty one when the saved value
        cannot be replayed.
        """
        key = DAILY_GUESSES_KEY.format(day_index=session.day_index)
        raw = self.store.get(key)
        if raw is None:
            return session

        try:
            codes = json.loads(raw)
            if not isinstance(codes, list):
                raise CorruptPersistedState(key, "expected a list of country codes")
            for code in codes:
                session.submit_guess(code)
        except CorruptPersistedState as e:
            game_logger.log_corrupt_state(key, e.reason)
            return self._new_session(session.mode, session.target, session.day_index)
        except (ValueError, TypeError, InvalidGuess) as e:
            game_logger.log_corrupt_state(key, str(e))
            return self._new_session(session.mode, session.target, session.day_index)

        # A finished game that was never scored, e.g. after a crash mid-record
        if session.game_over and not self.stats.has_record(session.day_index):
            self._finish(session)
        return session


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(config_class=Config,
                            catalog: Optional[CountryCatalog] = None,
                            store: Optional[KeyValueStore] = None,
                            clock: Callable[[], datetime] = utc_now) -> GameService:
    """
    Initialize the global game service instance from a configuration class.

    Args:
        config_class: Configuration class to use
        catalog: Countries to play with, the configured dataset by default
        store: Storage backend, built from the configuration by default
        clock: Returns the current time, used to pick the daily puzzle
    """
    global _game_service

    game_logger.configure(config_class.LOG_DIR, config_class.LOG_LEVEL)

    if catalog is None:
        catalog = CountryCatalog.from_dicts(load_country_data(config_class.COUNTRIES_FILE))
    if store is None:
        store = create_store(config_class)

    _game_service = GameService(
        catalog,
        store,
        seed=DailySeed(epoch=date.fromisoformat(config_class.EPOCH_DATE)),
        max_guesses=config_class.MAX_GUESSES,
        allow_duplicates=config_class.ALLOW_DUPLICATE_GUESSES,
        clock=clock,
    )
    return _game_service
