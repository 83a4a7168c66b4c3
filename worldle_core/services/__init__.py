"""
Services Package

Contains all game logic and persistence services.
"""

from .daily_seed import DailySeed
from .distance_service import DistanceEngine, format_distance
from .game_service import GameService, GuessSession, get_game_service, initialize_game_service
from .settings_service import SettingsStore
from .share_service import build_share_text
from .stats_service import StatsStore
from .storage import JsonFileStore, KeyValueStore, MemoryStore, MongoStore, create_store

__all__ = [
    'DailySeed', 'DistanceEngine', 'format_distance',
    'GameService', 'GuessSession', 'get_game_service', 'initialize_game_service',
    'SettingsStore', 'build_share_text', 'StatsStore',
    'KeyValueStore', 'MemoryStore', 'JsonFileStore', 'MongoStore', 'create_store'
]
