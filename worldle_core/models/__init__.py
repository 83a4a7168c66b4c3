"""
Data Models Package

Contains all data models used throughout the engine.
"""

from .country import CountryCatalog, CountryRecord
from .game import Direction, GameMode, GameState, GameStatus, Guess, GuessEvaluation
from .settings import DistanceUnit, SettingsData, Theme
from .stats import DailyRecord, StatsAggregate

__all__ = [
    'CountryCatalog', 'CountryRecord',
    'Direction', 'GameMode', 'GameState', 'GameStatus', 'Guess', 'GuessEvaluation',
    'DistanceUnit', 'SettingsData', 'Theme',
    'DailyRecord', 'StatsAggregate'
]
