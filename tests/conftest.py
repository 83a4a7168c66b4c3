from datetime import date, datetime, timedelta, timezone

import pytest

from worldle_core.config.game_settings import EPOCH_DATE
from worldle_core.models.country import CountryCatalog, CountryRecord
from worldle_core.services.game_service import GameService
from worldle_core.services.storage import MemoryStore

FRANCE = CountryRecord("FR", "France", 46.2, 2.2)
UNITED_STATES = CountryRecord("US", "United States", 39.8, -98.6)
GERMANY = CountryRecord("DE", "Germany", 51.17, 10.45)
JAPAN = CountryRecord("JP", "Japan", 36.2, 138.25)
BRAZIL = CountryRecord("BR", "Brazil", -14.24, -51.93)
AUSTRALIA = CountryRecord("AU", "Australia", -25.27, 133.78)
IVORY_COAST = CountryRecord("CI", "Côte d'Ivoire", 7.54, -5.55)


class FakeClock:
    """Clock that stays on a chosen moment until moved."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def advance(self, days: int = 1):
        self.moment += timedelta(days=days)


def epoch_datetime(day_index: int = 0, hour: int = 12) -> datetime:
    day = EPOCH_DATE + timedelta(days=day_index)
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


@pytest.fixture
def two_country_catalog():
    return CountryCatalog([FRANCE, UNITED_STATES])


@pytest.fixture
def catalog():
    return CountryCatalog([FRANCE, UNITED_STATES, GERMANY, JAPAN, BRAZIL, AUSTRALIA, IVORY_COAST])


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    return FakeClock(epoch_datetime(0))


@pytest.fixture
def game_service(catalog, store, clock):
    return GameService(catalog, store, clock=clock)


@pytest.fixture
def epoch() -> date:
    return EPOCH_DATE
