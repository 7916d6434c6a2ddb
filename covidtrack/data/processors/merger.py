"""
CovidTrack Dataset Merger

将多个指标的汇总结果合并为每国每日一条的病例记录，并计算日增量
"""
from typing import Dict, Mapping, Optional

from covidtrack.core import DatasetStore, get_logger
from covidtrack.data.normalizers import CountryResolver
from covidtrack.domain import CaseRecord, Metric

from .aggregator import MetricAggregate

logger = get_logger(__name__)


class DatasetMerger:
    """
    数据集合并器

    处理流程：
    1. 按 confirmed -> deaths -> recovered 顺序合并（缺失的指标直接跳过）
    2. 国家不存在则创建，记录按 (country_id, report_date) upsert
    3. 覆盖写入对应的计数字段（重复导入结果不变）
    4. 全部合并后重新计算所有国家的日增量
    """

    def __init__(self, store: DatasetStore, resolver: Optional[CountryResolver] = None):
        self.store = store
        self.resolver = resolver or CountryResolver()

    def merge(self, aggregates: Mapping[Metric, Optional[MetricAggregate]]) -> Dict[str, int]:
        """
        合并并计算日增量

        Args:
            aggregates: 指标 -> 汇总结果，可缺少任意指标

        Returns:
            每个指标写入的记录数
        """
        written: Dict[str, int] = {}
        with self.store.writing():
            for metric in Metric:
                aggregate = aggregates.get(metric)
                if aggregate is None:
                    logger.info(f"No {metric.value} data to merge")
                    continue
                written[metric.value] = self.merge_metric(aggregate)

            self.apply_daily_deltas()
            self.store.check_invariants()

        logger.info(f"Merge completed: {written}, store={self.store.stats()}")
        return written

    def merge_metric(self, aggregate: MetricAggregate) -> int:
        """合并单个指标，返回写入的记录数"""
        count = 0
        with self.store.writing():
            for name, series in aggregate.values.items():
                country = self.store.get_or_create_country(name, self.resolver.describe)
                for report_date, value in series.items():
                    record = self.store.upsert_case(country.id, report_date)
                    record.set_counter(aggregate.metric, value)
                    count += 1
        return count

    def apply_daily_deltas(self) -> None:
        """
        重新计算所有记录的日增量

        每个国家按日期升序；第一条记录没有前一天，增量等于自身累计值
        """
        with self.store.writing():
            for records in self.store.cases_by_country().values():
                records.sort(key=lambda r: r.report_date)
                previous: Optional[CaseRecord] = None
                for record in records:
                    if previous is None:
                        record.daily_confirmed = record.confirmed
                        record.daily_deaths = record.deaths
                    else:
                        record.daily_confirmed = max(0, record.confirmed - previous.confirmed)
                        record.daily_deaths = max(0, record.deaths - previous.deaths)
                    previous = record
