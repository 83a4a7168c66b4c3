"""
Utilities Package

Contains utility functions and the game logger.
"""

from .helpers import sanitize_country_name, to_utc_date, utc_now
from .game_logger import GameLogger, game_logger

__all__ = ['sanitize_country_name', 'to_utc_date', 'utc_now', 'GameLogger', 'game_logger']
