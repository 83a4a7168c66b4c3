import random
from datetime import date, datetime, timedelta, timezone

import pytest

from worldle_core.config.game_settings import EPOCH_DATE
from worldle_core.models.country import CountryCatalog
from worldle_core.services.daily_seed import DailySeed

from .conftest import FRANCE, UNITED_STATES


def test_epoch_is_day_zero():
    seed = DailySeed()

    assert seed.daily_index(EPOCH_DATE) == 0
    assert seed.daily_index(EPOCH_DATE + timedelta(days=41)) == 41


def test_daily_index_ignores_time_of_day():
    seed = DailySeed()
    morning = datetime(2022, 3, 1, 0, 0, 1, tzinfo=timezone.utc)
    night = datetime(2022, 3, 1, 23, 59, 59, tzinfo=timezone.utc)

    assert seed.daily_index(morning) == seed.daily_index(night) == seed.daily_index(date(2022, 3, 1))


def test_daily_index_uses_utc_date():
    seed = DailySeed()
    # 23:30 in New York on Feb 28 is already Mar 1 in UTC
    new_york = timezone(timedelta(hours=-5))
    late_evening = datetime(2022, 2, 28, 23, 30, tzinfo=new_york)

    assert seed.daily_index(late_evening) == seed.daily_index(date(2022, 3, 1))


def test_daily_index_before_epoch_raises():
    with pytest.raises(ValueError):
        DailySeed().daily_index(EPOCH_DATE - timedelta(days=1))


def test_select_country_wraps_around(two_country_catalog):
    seed = DailySeed()

    assert seed.select_country(0, two_country_catalog) == FRANCE
    assert seed.select_country(1, two_country_catalog) == UNITED_STATES
    assert seed.select_country(2, two_country_catalog) == FRANCE


def test_same_date_same_country_across_instances(catalog):
    """A fresh seed object behaves like a restarted process."""
    when = date(2023, 7, 14)

    first = DailySeed().todays_country(when, catalog)
    second = DailySeed(rng=random.Random(99)).todays_country(when, catalog)

    assert first == second


def test_every_country_before_repeat(catalog):
    seed = DailySeed()

    codes = [seed.select_country(day, catalog).code for day in range(len(catalog))]

    assert sorted(codes) == sorted(catalog.codes)


def test_day_string_round_trip():
    seed = DailySeed()

    assert seed.day_string(0) == "2022-01-21"
    assert seed.daily_index(seed.date_for_index(300)) == 300


def test_select_random_country_excluding(two_country_catalog):
    seed = DailySeed(rng=random.Random(7))

    for _ in range(20):
        assert seed.select_random_country(two_country_catalog, excluding="FR") == UNITED_STATES


def test_select_random_country_single_entry_ignores_exclusion():
    seed = DailySeed()
    only_france = CountryCatalog([FRANCE])

    assert seed.select_random_country(only_france, excluding="FR") == FRANCE


def test_custom_epoch():
    seed = DailySeed(epoch=date(2024, 1, 1))

    assert seed.daily_index(date(2024, 1, 11)) == 10
