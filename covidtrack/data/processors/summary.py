"""
CovidTrack Summaries

按日期统计全球汇总和树图数据
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from covidtrack.core import DatasetStore
from covidtrack.domain import CaseRecord


def _rate(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


@dataclass
class CountrySnapshot:
    """某日某国的简要数据"""

    country_name: str
    country_code: str
    confirmed: int
    deaths: int
    active: int


@dataclass
class GlobalSummary:
    """某一天的全球汇总"""

    report_date: date
    total_confirmed: int
    total_deaths: int
    total_recovered: int
    total_active: int
    countries_reporting: int
    top_countries: List[CountrySnapshot] = field(default_factory=list)

    @property
    def mortality_rate(self) -> float:
        """死亡率（%）"""
        return _rate(self.total_deaths, self.total_confirmed)

    @property
    def recovery_rate(self) -> float:
        """康复率（%）"""
        return _rate(self.total_recovered, self.total_confirmed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_date": self.report_date.isoformat(),
            "total_confirmed": self.total_confirmed,
            "total_deaths": self.total_deaths,
            "total_recovered": self.total_recovered,
            "total_active": self.total_active,
            "countries_reporting": self.countries_reporting,
            "mortality_rate": round(self.mortality_rate, 4),
            "recovery_rate": round(self.recovery_rate, 4),
            "top_countries": [vars(c) for c in self.top_countries],
        }


@dataclass
class TreemapEntry:
    """树图条目"""

    country_name: str
    country_code: str
    region: str
    confirmed: int
    deaths: int
    recovered: int
    active: int
    percent_of_global: float
    mortality_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return dict(vars(self))


def global_summary(
    store: DatasetStore,
    on_date: Optional[Union[date, datetime]] = None,
    top: int = 10,
) -> Optional[GlobalSummary]:
    """
    全球汇总

    Args:
        store: 数据集
        on_date: 统计日期，默认最新报告日期
        top: 返回确诊数最多的前 N 个国家

    Returns:
        GlobalSummary；该日期没有数据时返回 None
    """
    target = on_date or store.latest_report_date()
    if target is None:
        return None
    if isinstance(target, datetime):
        target = target.date()

    cases = store.list_cases_by_date(target)
    if not cases:
        return None

    ranked = sorted(cases, key=lambda c: c.confirmed, reverse=True)[:max(0, top)]
    return GlobalSummary(
        report_date=target,
        total_confirmed=sum(c.confirmed for c in cases),
        total_deaths=sum(c.deaths for c in cases),
        total_recovered=sum(c.recovered for c in cases),
        total_active=sum(c.active for c in cases),
        countries_reporting=len(cases),
        top_countries=[_snapshot(store, c) for c in ranked],
    )


def treemap(store: DatasetStore, on_date: Union[date, datetime], top: int = 20) -> List[TreemapEntry]:
    """
    树图数据：确诊数最多的前 N 个国家及其占全球比例

    Returns:
        条目列表；该日期没有数据时为空
    """
    cases = store.list_cases_by_date(on_date)
    total_confirmed = sum(c.confirmed for c in cases)

    entries = []
    for case in sorted((c for c in cases if c.confirmed > 0), key=lambda c: c.confirmed, reverse=True)[:top]:
        country = store.get_country(case.country_id)
        entries.append(TreemapEntry(
            country_name=country.name if country else "Unknown",
            country_code=country.code if country else "UN",
            region=country.region.value if country else "Unknown",
            confirmed=case.confirmed,
            deaths=case.deaths,
            recovered=case.recovered,
            active=case.active,
            percent_of_global=_rate(case.confirmed, total_confirmed),
            mortality_rate=_rate(case.deaths, case.confirmed),
        ))
    return entries


def _snapshot(store: DatasetStore, case: CaseRecord) -> CountrySnapshot:
    country = store.get_country(case.country_id)
    return CountrySnapshot(
        country_name=country.name if country else "Unknown",
        country_code=country.code if country else "UN",
        confirmed=case.confirmed,
        deaths=case.deaths,
        active=case.active,
    )
