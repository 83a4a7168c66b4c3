"""
Worldle Core Package

The game-session engine of a daily country-guessing game: daily puzzle
selection, distance and proximity scoring, the guess-session state machine,
and persisted statistics and settings. A presentation layer embeds it via
create_game().
"""

from .config import Config
from .errors import AlreadyRecorded, CorruptPersistedState, InvalidGuess, ModeError, WorldleError, WriteConflict
from .models import GameMode, GameStatus


def create_game(config_class=Config, **overrides):
    """
    Factory for a fully wired game service.

    Args:
        config_class: Configuration class to use
        **overrides: catalog, store and/or clock to use instead of the configured ones

    Returns:
        GameService instance, also registered as the process-wide service
    """
    from .services.game_service import initialize_game_service

    return initialize_game_service(config_class, **overrides)


__all__ = [
    'create_game', 'Config', 'GameMode', 'GameStatus',
    'WorldleError', 'InvalidGuess', 'AlreadyRecorded', 'CorruptPersistedState', 'ModeError', 'WriteConflict'
]
