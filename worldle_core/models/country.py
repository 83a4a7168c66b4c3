"""
Country Data Models

Contains the country record and the ordered, read-only catalog of countries.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..utils.helpers import sanitize_country_name


@dataclass(frozen=True)
class CountryRecord:
    """A country and the latitude/longitude of its centroid, in decimal degrees."""
    code: str
    name: str
    latitude: float
    longitude: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CountryRecord":
        return cls(
            code=str(data['code']).upper(),
            name=str(data['name']),
            latitude=float(data['latitude']),
            longitude=float(data['longitude']),
        )


class CountryCatalog:
    """
    Immutable ordered list of countries.

    Supports lookup by ISO code and by name. Name lookups ignore case,
    accents, spaces and punctuation, so "cote d ivoire" finds "Côte d'Ivoire".
    """

    def __init__(self, countries: Sequence[CountryRecord]):
        if not countries:
            raise ValueError("Country catalog cannot be empty")

        self._countries = tuple(countries)
        self._by_code: Dict[str, CountryRecord] = {}
        self._by_name: Dict[str, CountryRecord] = {}

        for country in self._countries:
            if country.code in self._by_code:
                raise ValueError(f"Duplicate country code in catalog: {country.code}")
            self._by_code[country.code] = country

            name_key = sanitize_country_name(country.name)
            if name_key in self._by_name:
                raise ValueError(
                    f"Country names collide after normalization: "
                    f"{self._by_name[name_key].name!r} and {country.name!r}"
                )
            self._by_name[name_key] = country

    @classmethod
    def from_dicts(cls, entries: List[Dict[str, Any]]) -> "CountryCatalog":
        return cls([CountryRecord.from_dict(entry) for entry in entries])

    def __len__(self) -> int:
        return len(self._countries)

    def __getitem__(self, index: int) -> CountryRecord:
        return self._countries[index]

    def __iter__(self) -> Iterator[CountryRecord]:
        return iter(self._countries)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip().upper() in self._by_code

    def get(self, code: str) -> Optional[CountryRecord]:
        """Return the country with this ISO code, or None."""
        if not code or not isinstance(code, str):
            return None
        return self._by_code.get(code.strip().upper())

    def find_by_name(self, name: str) -> Optional[CountryRecord]:
        if not name or not isinstance(name, str):
            return None
        return self._by_name.get(sanitize_country_name(name))

    def resolve(self, text: str) -> Optional[CountryRecord]:
        """Resolve player input, trying the ISO code first and then the name."""
        return self.get(text) or self.find_by_name(text)

    @property
    def codes(self) -> List[str]:
        return [country.code for country in self._countries]
