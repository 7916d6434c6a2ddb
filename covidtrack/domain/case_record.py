"""
CovidTrack Case Record Model

病例记录模型：每个国家每个报告日期一条记录
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict


class Metric(str, Enum):
    """时间序列指标类型"""

    CONFIRMED = "confirmed"
    DEATHS = "deaths"
    RECOVERED = "recovered"

    @property
    def field_name(self) -> str:
        """该指标写入的 CaseRecord 字段"""
        return METRIC_FIELDS[self]


# 指标 -> CaseRecord 计数字段
METRIC_FIELDS: Dict[Metric, str] = {
    Metric.CONFIRMED: "confirmed",
    Metric.DEATHS: "deaths",
    Metric.RECOVERED: "recovered",
}


@dataclass
class CaseRecord:
    """
    病例记录

    (country_id, report_date) 唯一。三个累计计数各自由对应的数据文件写入，
    active 在每次写入后重新计算，daily_* 只在合并后的增量计算中设置
    """

    id: int
    country_id: int
    report_date: date
    confirmed: int = 0
    deaths: int = 0
    recovered: int = 0
    active: int = 0
    daily_confirmed: int = 0
    daily_deaths: int = 0

    @property
    def key(self) -> tuple:
        return (self.country_id, self.report_date)

    def set_counter(self, metric: Metric, value: int) -> None:
        """
        覆盖写入某个指标的计数（不累加），并重新计算 active

        Args:
            metric: 指标类型
            value: 新的累计值（非负）
        """
        if value < 0:
            raise ValueError(f"{metric.value} must be non-negative, got {value}")
        setattr(self, metric.field_name, value)
        self.recompute_active()

    def get_counter(self, metric: Metric) -> int:
        return getattr(self, metric.field_name)

    def recompute_active(self) -> None:
        self.active = max(0, self.confirmed - self.deaths - self.recovered)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "id": self.id,
            "country_id": self.country_id,
            "report_date": self.report_date.isoformat(),
            "confirmed": self.confirmed,
            "deaths": self.deaths,
            "recovered": self.recovered,
            "active": self.active,
            "daily_confirmed": self.daily_confirmed,
            "daily_deaths": self.daily_deaths,
        }

    def __repr__(self) -> str:
        return (
            f"<CaseRecord(id={self.id}, country_id={self.country_id}, "
            f"report_date={self.report_date}, confirmed={self.confirmed})>"
        )
