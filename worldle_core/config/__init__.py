"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: engine configuration (environment-based)
- game_settings.py: game rules, constants and the country dataset
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    MAX_GUESSES, EPOCH_DATE, EARTH_RADIUS_KM, MAX_DISTANCE_ON_EARTH_KM, KM_TO_MILES,
    load_country_data, validate_catalog_integrity, get_catalog_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'MAX_GUESSES', 'EPOCH_DATE', 'EARTH_RADIUS_KM', 'MAX_DISTANCE_ON_EARTH_KM', 'KM_TO_MILES',
    'load_country_data', 'validate_catalog_integrity', 'get_catalog_statistics'
]
