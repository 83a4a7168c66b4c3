"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('true', '1', 'yes')


class Config:
    """Base configuration class with all settings."""

    DEBUG = _env_bool('DEBUG', 'False')

    # Game Settings
    MAX_GUESSES = int(os.getenv('MAX_GUESSES', 6))
    EPOCH_DATE = os.getenv('EPOCH_DATE', '2022-01-21')
    ALLOW_DUPLICATE_GUESSES = _env_bool('ALLOW_DUPLICATE_GUESSES', 'True')
    COUNTRIES_FILE = os.getenv('COUNTRIES_FILE')  # None means the bundled countries.json

    # Storage Settings
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'memory')  # "memory", "json" or "mongo"
    STORAGE_PATH = os.getenv('STORAGE_PATH', 'worldle_state.json')
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB = os.getenv('MONGO_DB', 'worldle')

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'json')


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    STORAGE_BACKEND = 'memory'
    LOG_DIR = None
    ALLOW_DUPLICATE_GUESSES = True


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
