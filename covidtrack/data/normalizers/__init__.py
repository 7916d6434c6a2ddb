"""
CovidTrack Normalizers

国家名称标准化
"""

from .country_reference import DEFAULT_POPULATION, population_for
from .country_resolver import CountryProfile, CountryResolver, ProvincePolicy

__all__ = [
    "CountryProfile",
    "CountryResolver",
    "ProvincePolicy",
    "DEFAULT_POPULATION",
    "population_for",
]
