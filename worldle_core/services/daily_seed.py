"""
Daily Seed

Maps calendar days to puzzle answers. The daily answer is recomputed from
the date and the catalog every time it is needed and is never stored.
"""

import random
from datetime import date, datetime, timedelta
from typing import Optional, Union

from ..config.game_settings import EPOCH_DATE
from ..models.country import CountryCatalog, CountryRecord
from ..utils.helpers import to_utc_date


class DailySeed:
    """
    Deterministic daily selection and random free-play selection.

    Day 0 is the epoch date. The answer for day n is catalog[n mod len(catalog)],
    so every country comes up once before any repeats.
    """

    def __init__(self, epoch: date = EPOCH_DATE, rng: Optional[random.Random] = None):
        self.epoch = epoch
        self._rng = rng or random.Random()

    def daily_index(self, when: Union[date, datetime]) -> int:
        """
        Number of whole days between the epoch and the UTC calendar date of `when`.

        Raises:
            ValueError: If the date is before the epoch
        """
        day = to_utc_date(when)
        index = (day - self.epoch).days
        if index < 0:
            raise ValueError(f"{day.isoformat()} is before the game epoch {self.epoch.isoformat()}")
        return index

    def date_for_index(self, day_index: int) -> date:
        return self.epoch + timedelta(days=day_index)

    def day_string(self, day_index: int) -> str:
        return self.date_for_index(day_index).isoformat()

    def select_country(self, day_index: int, catalog: CountryCatalog) -> CountryRecord:
        return catalog[day_index % len(catalog)]

    def todays_country(self, now: Union[date, datetime], catalog: CountryCatalog) -> CountryRecord:
        return self.select_country(self.daily_index(now), catalog)

    def select_random_country(self, catalog: CountryCatalog,
                              excluding: Optional[str] = None) -> CountryRecord:
        """
        Pick a uniformly random country for free play.

        Args:
            catalog: Countries to choose from
            excluding: Code to leave out, ignored when it is the only country

        Returns:
            CountryRecord: The chosen country
        """
        candidates = [c for c in catalog if c.code != excluding] if excluding else list(catalog)
        if not candidates:
            candidates = list(catalog)
        return self._rng.choice(candidates)
