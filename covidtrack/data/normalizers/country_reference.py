"""
CovidTrack Country Reference Tables

国家别名、代码、大洲和人口的静态对照表
"""
from typing import Dict, FrozenSet, Optional

from covidtrack.domain import Region

# 上游名称 -> 标准名称
COUNTRY_ALIASES: Dict[str, str] = {
    "US": "United States",
    "Korea, South": "South Korea",
    "Korea, North": "North Korea",
    "Taiwan*": "Taiwan",
    "Burma": "Myanmar",
    "Czechia": "Czech Republic",
    "Congo (Kinshasa)": "Democratic Republic of the Congo",
    "Congo (Brazzaville)": "Republic of the Congo",
    "Cote d'Ivoire": "Ivory Coast",
    "Holy See": "Vatican City",
    "West Bank and Gaza": "Palestine",
}

# 标准名称 -> 国家代码；未收录的国家取名称前两个字母
COUNTRY_CODES: Dict[str, str] = {
    "United States": "US",
    "China": "CN",
    "India": "IN",
    "Brazil": "BR",
    "Russia": "RU",
    "France": "FR",
    "United Kingdom": "GB",
    "Turkey": "TR",
    "Iran": "IR",
    "Germany": "DE",
    "Italy": "IT",
    "Indonesia": "ID",
    "Pakistan": "PK",
    "Ukraine": "UA",
    "Poland": "PL",
    "South Africa": "ZA",
    "Netherlands": "NL",
    "Morocco": "MA",
    "Saudi Arabia": "SA",
    "Spain": "ES",
    "Canada": "CA",
    "Argentina": "AR",
    "Mexico": "MX",
    "Philippines": "PH",
    "Malaysia": "MY",
    "Vietnam": "VN",
    "Thailand": "TH",
    "Japan": "JP",
    "South Korea": "KR",
    "Switzerland": "CH",
    "Belgium": "BE",
    "Austria": "AT",
    "Portugal": "PT",
    "Australia": "AU",
    "Peru": "PE",
    "Colombia": "CO",
}

UNKNOWN_CODE = "UN"

REGION_MEMBERS: Dict[Region, FrozenSet[str]] = {
    Region.ASIA: frozenset({
        "China", "India", "Indonesia", "Pakistan", "Turkey", "Iran", "Philippines",
        "Malaysia", "Vietnam", "Thailand", "Japan", "Saudi Arabia", "South Korea",
    }),
    Region.EUROPE: frozenset({
        "Russia", "France", "United Kingdom", "Germany", "Italy", "Ukraine", "Poland",
        "Netherlands", "Spain", "Switzerland", "Belgium", "Austria", "Portugal",
    }),
    Region.AMERICAS: frozenset({
        "United States", "Brazil", "Canada", "Argentina", "Mexico", "Peru", "Colombia",
    }),
    Region.AFRICA: frozenset({
        "South Africa", "Morocco",
    }),
}

POPULATION: Dict[str, int] = {
    "China": 1_400_000_000,
    "India": 1_380_000_000,
    "United States": 331_000_000,
    "Indonesia": 274_000_000,
    "Pakistan": 221_000_000,
    "Brazil": 212_000_000,
    "Russia": 146_000_000,
    "Mexico": 129_000_000,
    "Japan": 125_000_000,
    "Philippines": 110_000_000,
    "Vietnam": 97_000_000,
    "Turkey": 84_000_000,
    "Iran": 84_000_000,
    "Germany": 83_000_000,
    "Thailand": 70_000_000,
    "United Kingdom": 67_000_000,
    "France": 65_000_000,
    "Italy": 60_000_000,
    "South Africa": 59_000_000,
    "Spain": 47_000_000,
    "Argentina": 45_000_000,
    "Ukraine": 44_000_000,
    "Poland": 38_000_000,
    "Canada": 38_000_000,
    "Morocco": 37_000_000,
    "Saudi Arabia": 35_000_000,
    "Malaysia": 32_000_000,
    "Netherlands": 17_000_000,
}

# 对照表中没有的国家使用的默认人口
DEFAULT_POPULATION = 10_000_000


def population_for(name: str) -> Optional[int]:
    """
    人口查询（纯函数）

    Args:
        name: 标准国家名称

    Returns:
        人口；未收录的国家返回 DEFAULT_POPULATION
    """
    return POPULATION.get(name, DEFAULT_POPULATION)
