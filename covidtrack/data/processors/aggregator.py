"""
CovidTrack Metric Aggregator

单个指标、单个文件的汇总：同一国家同一日期的所有行求和
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from covidtrack.core import get_logger
from covidtrack.core.exceptions import RowProcessingError
from covidtrack.data.normalizers import CountryResolver
from covidtrack.data.parsers import DateColumn, SourceTable
from covidtrack.domain import Metric

logger = get_logger(__name__)

COUNTRY_COLUMN = "Country/Region"
PROVINCE_COLUMN = "Province/State"


@dataclass
class MetricAggregate:
    """汇总结果：标准国家名称 -> 日期 -> 合计值"""

    metric: Metric
    dates: List[date] = field(default_factory=list)
    values: Dict[str, Dict[date, int]] = field(default_factory=dict)

    # 行统计
    rows_processed: int = 0
    rows_included: int = 0
    rows_skipped: int = 0
    rows_failed: int = 0
    values_ignored: int = 0

    @property
    def countries(self) -> int:
        return len(self.values)

    @property
    def is_empty(self) -> bool:
        return not self.values

    def total(self, on_date: date) -> int:
        return sum(series.get(on_date, 0) for series in self.values.values())


def aggregate_metric(
    table: SourceTable,
    date_columns: List[DateColumn],
    metric: Metric,
    resolver: CountryResolver,
    max_rows: Optional[int] = None,
) -> MetricAggregate:
    """
    汇总一个指标文件

    无法解析为非负整数的值按 0 计入；单行失败记录后跳过

    Args:
        table: 已解析的宽表
        date_columns: 选中的日期列
        metric: 指标类型
        resolver: 国家解析器
        max_rows: 最多处理的数据行数

    Returns:
        MetricAggregate
    """
    result = MetricAggregate(metric=metric, dates=[c.date for c in date_columns])

    for row in table.rows():
        if max_rows is not None and result.rows_processed >= max_rows:
            logger.info(f"{table.name}: row limit {max_rows} reached")
            break
        result.rows_processed += 1

        try:
            province = row.get(PROVINCE_COLUMN) if PROVINCE_COLUMN in row else ""
            name = resolver.resolve(row.get(COUNTRY_COLUMN), province)
            if name is None:
                result.rows_skipped += 1
                continue

            counts = [(column.date, row.get_count(column.name)) for column in date_columns]
        except RowProcessingError as e:
            result.rows_failed += 1
            logger.warning(f"Error processing record in {metric.value} ({table.name}): {e}")
            continue

        series = result.values.get(name)
        if series is None:
            series = result.values[name] = {column.date: 0 for column in date_columns}

        for report_date, value in counts:
            if value is None:
                result.values_ignored += 1
                continue
            series[report_date] += value

        result.rows_included += 1

    logger.info(
        f"Aggregated {metric.value}: {result.rows_included}/{result.rows_processed} rows into "
        f"{result.countries} countries x {len(date_columns)} dates "
        f"(skipped {result.rows_skipped}, failed {result.rows_failed})"
    )
    return result
