import math

import pytest

from worldle_core.config.game_settings import MAX_DISTANCE_ON_EARTH_KM
from worldle_core.models.country import CountryRecord
from worldle_core.models.game import Direction
from worldle_core.models.settings import DistanceUnit
from worldle_core.services.distance_service import (
    DistanceEngine,
    bearing_degrees,
    direction_from_bearing,
    format_distance,
    haversine_km,
    proximity_percent,
)

from .conftest import AUSTRALIA, FRANCE, GERMANY, JAPAN, UNITED_STATES


@pytest.fixture
def engine():
    return DistanceEngine()


@pytest.mark.parametrize("country", [FRANCE, UNITED_STATES, JAPAN, AUSTRALIA])
def test_same_country_is_exact(engine, country):
    result = engine.evaluate(country, country)

    assert result.distance_km == 0
    assert result.proximity_percent == 100
    assert result.bearing_degrees == 0
    assert result.direction is None


def test_distance_is_symmetric(engine):
    there = engine.evaluate(FRANCE, JAPAN).distance_km
    back = engine.evaluate(JAPAN, FRANCE).distance_km

    assert there == pytest.approx(back, rel=1e-12)


def test_france_united_states(engine):
    result = engine.evaluate(FRANCE, UNITED_STATES)

    assert result.distance_km == pytest.approx(7644, abs=15)
    assert result.proximity_percent < 40
    assert result.direction == Direction.NE


def test_proximity_decreases_with_distance(engine):
    near = engine.evaluate(FRANCE, GERMANY)
    middle = engine.evaluate(FRANCE, UNITED_STATES)
    far = engine.evaluate(FRANCE, AUSTRALIA)

    assert near.distance_km < middle.distance_km < far.distance_km
    assert near.proximity_percent > middle.proximity_percent > far.proximity_percent


def test_antipodes_do_not_produce_nan():
    a = CountryRecord("AA", "Point A", 0.0, 0.0)
    b = CountryRecord("BB", "Point B", 0.0, 180.0)

    result = DistanceEngine().evaluate(a, b)

    assert result.distance_km == pytest.approx(MAX_DISTANCE_ON_EARTH_KM)
    assert result.proximity_percent == 0
    assert not math.isnan(result.bearing_degrees)
    assert 0 <= result.bearing_degrees < 360


def test_proximity_bounds():
    assert proximity_percent(0) == 100
    assert proximity_percent(0.001) == 99
    assert proximity_percent(MAX_DISTANCE_ON_EARTH_KM) == 0
    assert proximity_percent(MAX_DISTANCE_ON_EARTH_KM * 2) == 0


def test_proximity_never_increases():
    scores = [proximity_percent(d) for d in range(0, 21000, 250)]

    assert all(a >= b for a, b in zip(scores, scores[1:]))
    assert all(0 <= s <= 100 for s in scores)


def test_haversine_one_degree_of_latitude():
    assert haversine_km(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)


@pytest.mark.parametrize("lat2, lon2, expected", [
    (10, 0, 0),
    (0, 10, 90),
    (-10, 0, 180),
    (0, -10, 270),
])
def test_bearing_cardinal_points(lat2, lon2, expected):
    assert bearing_degrees(0, 0, lat2, lon2) == pytest.approx(expected, abs=1e-9)


def test_bearing_of_coincident_points_is_zero():
    assert bearing_degrees(12.5, 40.0, 12.5, 40.0) == 0.0


@pytest.mark.parametrize("bearing, expected", [
    (0, Direction.N),
    (11.2, Direction.N),
    (11.25, Direction.NNE),
    (45, Direction.NE),
    (90, Direction.E),
    (200, Direction.SSW),
    (270, Direction.W),
    (348.75, Direction.N),
    (359.9, Direction.N),
])
def test_direction_from_bearing(bearing, expected):
    assert direction_from_bearing(bearing) == expected


def test_direction_arrows():
    assert Direction.N.arrow == "⬆️"
    assert Direction.SW.arrow == "↙️"
    assert Direction.E.arrow == "➡️"


def test_format_distance():
    assert format_distance(7644.4) == "7644km"
    assert format_distance(1000, DistanceUnit.MILES) == "621mi"
    assert format_distance(0, DistanceUnit.MILES) == "0mi"
