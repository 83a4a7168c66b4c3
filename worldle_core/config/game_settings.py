"""
Game Configuration Constants Module

This module defines the game rules and the bundled country dataset.
All game parameters are centralized here to enable easy modification.

The order of countries.json is part of the deployed game: the daily answer
for a given day is the country at (day index mod catalog size), so reordering
or resizing the list changes the answers of days already played.
"""

import json
import math
import os
from datetime import date
from typing import Any, Dict, List, Final, Optional

# Core Game Configuration Constants
MAX_GUESSES: Final[int] = 6
"""
Maximum number of guess attempts allowed per game.
Type: Final[int] - Immutable to prevent accidental modification
"""

EPOCH_DATE: Final[date] = date(2022, 1, 21)
"""Launch day of the game. Day index 0."""

EARTH_RADIUS_KM: Final[float] = 6371.0

MAX_DISTANCE_ON_EARTH_KM: Final[float] = math.pi * EARTH_RADIUS_KM
"""Half the circumference of the mean Earth sphere (about 20015 km)."""

KM_TO_MILES: Final[float] = 0.621371

DEFAULT_COUNTRIES_FILE: Final[str] = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'countries.json'
)


def load_country_data(json_file_path: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Load the country dataset from a JSON file.

    Args:
        json_file_path: Path to the dataset, the bundled countries.json by default

    Returns:
        List[Dict]: Country entries with code, name, latitude and longitude

    Raises:
        FileNotFoundError: If the dataset file is not found
        ValueError: If the JSON is malformed or an entry is invalid
    """
    json_file_path = json_file_path or DEFAULT_COUNTRIES_FILE

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            countries = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Country dataset not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {json_file_path}: {e}")

    if not isinstance(countries, list):
        raise ValueError("Country dataset must contain an array of countries")

    validate_catalog_integrity(countries)
    return countries


def validate_catalog_integrity(countries: List[Dict[str, Any]]) -> bool:
    """
    Validates the integrity and consistency of the country dataset.

    This function performs validation to ensure:
    1. The dataset is not empty
    2. Every entry has a code, a name and numeric coordinates
    3. Coordinates are within geographic bounds
    4. Country codes are unique

    Returns:
        bool: True if the dataset passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not countries:
        raise ValueError("Country dataset cannot be empty")

    seen_codes = set()
    for index, entry in enumerate(countries):
        if not isinstance(entry, dict):
            raise ValueError(f"Entry at index {index} is not an object")

        code = entry.get('code')
        name = entry.get('name')
        if not code or not isinstance(code, str):
            raise ValueError(f"Entry at index {index} has no country code")
        if not name or not isinstance(name, str):
            raise ValueError(f"Entry at index {index} '{code}' has no name")

        try:
            latitude = float(entry['latitude'])
            longitude = float(entry['longitude'])
        except (KeyError, TypeError, ValueError):
            raise ValueError(f"Entry at index {index} '{code}' has invalid coordinates")

        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f"Entry at index {index} '{code}' latitude out of range: {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise ValueError(f"Entry at index {index} '{code}' longitude out of range: {longitude}")

        if code.upper() in seen_codes:
            raise ValueError(f"Duplicate country code found in dataset: {code}")
        seen_codes.add(code.upper())

    return True


def get_catalog_statistics(countries: List[Dict[str, Any]]) -> dict:
    """
    Summarizes the dataset for diagnostics.

    Returns:
        dict: total_countries, northernmost/southernmost codes, and the
        number of countries per hemisphere
    """
    if not countries:
        return {"error": "Country dataset is empty"}

    northernmost = max(countries, key=lambda c: c['latitude'])
    southernmost = min(countries, key=lambda c: c['latitude'])

    return {
        "total_countries": len(countries),
        "northernmost": northernmost['code'],
        "southernmost": southernmost['code'],
        "northern_hemisphere": len([c for c in countries if c['latitude'] >= 0]),
        "southern_hemisphere": len([c for c in countries if c['latitude'] < 0]),
    }


if __name__ == "__main__":

    try:
        data = load_country_data()
        print(" Country dataset validation passed")
        print(f" Catalog statistics: {get_catalog_statistics(data)}")
    except (FileNotFoundError, ValueError) as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
