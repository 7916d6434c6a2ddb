"""
CovidTrack Country Resolver

将上游的 Country/Region + Province/State 标签解析为标准国家名称，
并派生国家代码、大洲和人口
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from covidtrack.core import get_logger
from covidtrack.domain import Region

from .country_reference import (
    COUNTRY_ALIASES,
    COUNTRY_CODES,
    REGION_MEMBERS,
    UNKNOWN_CODE,
    population_for,
)

logger = get_logger(__name__)

# 别名查找忽略大小写
_ALIAS_LOOKUP = {alias.casefold(): name for alias, name in COUNTRY_ALIASES.items()}


class ProvincePolicy(str, Enum):
    """
    省/州行处理策略

    US_ONLY: 只有美国的州级行汇总到国家，其他国家的省级行丢弃
    AGGREGATE_ALL: 所有省级行都汇总到所属国家
    """

    US_ONLY = "us_only"
    AGGREGATE_ALL = "aggregate_all"


@dataclass(frozen=True)
class CountryProfile:
    """创建国家时需要的派生信息"""

    code: str
    region: Region
    population: Optional[int]


class CountryResolver:
    """
    国家名称解析器

    使用示例：
        resolver = CountryResolver()
        resolver.resolve("US", "California")   # -> "United States"
        resolver.resolve("France", "Corsica")  # -> None（跳过）
        resolver.country_code("South Korea")   # -> "KR"
    """

    def __init__(
        self,
        province_policy: ProvincePolicy = ProvincePolicy.US_ONLY,
        population_lookup: Callable[[str], Optional[int]] = population_for,
    ):
        """
        初始化解析器

        Args:
            province_policy: 省/州行处理策略
            population_lookup: 标准名称 -> 人口
        """
        self.province_policy = ProvincePolicy(province_policy)
        self.population_lookup = population_lookup

    def resolve(self, country_label: str, province_label: Optional[str] = None) -> Optional[str]:
        """
        决定一行数据是否计入国家，以及计入哪个国家

        Args:
            country_label: Country/Region 原始值
            province_label: Province/State 原始值

        Returns:
            标准国家名称；None 表示跳过该行
        """
        country = (country_label or "").strip()
        province = (province_label or "").strip()

        if not country:
            return None

        if province and self.province_policy is ProvincePolicy.US_ONLY:
            if country.upper() != "US":
                return None

        return self.normalize_name(country)

    @staticmethod
    def normalize_name(label: str) -> str:
        """应用别名表（忽略大小写）"""
        name = label.strip()
        return _ALIAS_LOOKUP.get(name.casefold(), name)

    @staticmethod
    def country_code(name: str) -> str:
        """
        国家代码

        对照表优先；否则取前两个字母大写；不足两个字符返回 "UN"
        """
        code = COUNTRY_CODES.get(name)
        if code:
            return code
        stripped = name.strip()
        return stripped[:2].upper() if len(stripped) >= 2 else UNKNOWN_CODE

    @staticmethod
    def region_for(name: str) -> Region:
        for region, members in REGION_MEMBERS.items():
            if name in members:
                return region
        return Region.OTHER

    def describe(self, name: str) -> CountryProfile:
        """生成创建国家所需的信息"""
        try:
            population = self.population_lookup(name)
        except Exception as e:
            logger.warning(f"Population lookup failed for {name}: {e}")
            population = None
        return CountryProfile(
            code=self.country_code(name),
            region=self.region_for(name),
            population=population,
        )
