"""
CovidTrack Time Series Importer

完整导入流程：获取 → 解析 → 日期列 → 国家解析 + 汇总（各指标并发）→ 合并
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from covidtrack.core import AppSettings, DatasetStore, get_config, get_logger
from covidtrack.core.exceptions import MalformedSourceError, SourceFetchError
from covidtrack.data.crawlers import BaseFetcher, TimeSeriesFetcher
from covidtrack.data.normalizers import CountryResolver, ProvincePolicy
from covidtrack.data.parsers import read_source, resolve_date_columns
from covidtrack.domain import Metric

from .aggregator import MetricAggregate, aggregate_metric
from .merger import DatasetMerger

logger = get_logger(__name__)


@dataclass
class MetricImportResult:
    """单个指标的导入结果"""

    metric: Metric
    locator: str = ""
    success: bool = False
    skipped: bool = False
    error: Optional[str] = None
    rows_processed: int = 0
    rows_included: int = 0
    rows_failed: int = 0
    countries: int = 0
    dates: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "metric": self.metric.value,
            "locator": self.locator,
            "success": self.success,
            "skipped": self.skipped,
            "error": self.error,
            "rows_processed": self.rows_processed,
            "rows_included": self.rows_included,
            "rows_failed": self.rows_failed,
            "countries": self.countries,
            "dates": self.dates,
        }


@dataclass
class ImportSummary:
    """一次完整导入的汇总"""

    results: Dict[Metric, MetricImportResult] = field(default_factory=dict)
    countries: int = 0
    cases: int = 0
    error: Optional[str] = None
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def success(self) -> bool:
        """至少一个指标导入成功即视为成功"""
        return self.error is None and any(r.success for r in self.results.values())

    @property
    def message(self) -> str:
        return "Data imported successfully" if self.success else "Import failed - check logs"

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "success": self.success,
            "message": self.message,
            "countries": self.countries,
            "cases": self.cases,
            "error": self.error,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "metrics": {m.value: r.to_dict() for m, r in self.results.items()},
        }


class TimeSeriesImporter:
    """
    时间序列导入器

    各指标的获取和汇总互不依赖，在线程中并发执行；
    合并和日增量计算在全部汇总完成后顺序执行
    """

    def __init__(
        self,
        fetcher: BaseFetcher,
        sources: Mapping[Metric, str],
        resolver: Optional[CountryResolver] = None,
        max_days: Optional[int] = 10,
        max_rows: Optional[int] = None,
    ):
        """
        初始化导入器

        Args:
            fetcher: 数据源获取器
            sources: 指标 -> URL/路径（空字符串表示未配置）
            resolver: 国家解析器
            max_days: 保留最近的日期数
            max_rows: 单文件最多处理的数据行
        """
        self.fetcher = fetcher
        self.sources = dict(sources)
        self.resolver = resolver or CountryResolver()
        self.max_days = max_days
        self.max_rows = max_rows

    @classmethod
    def from_config(
        cls,
        config: Optional[AppSettings] = None,
        fetcher: Optional[BaseFetcher] = None,
    ) -> "TimeSeriesImporter":
        """根据配置创建导入器"""
        config = config or get_config()
        return cls(
            fetcher=fetcher or TimeSeriesFetcher(),
            sources={
                Metric.CONFIRMED: config.sources.confirmed_url,
                Metric.DEATHS: config.sources.deaths_url,
                Metric.RECOVERED: config.sources.recovered_url,
            },
            resolver=CountryResolver(ProvincePolicy(config.importer.province_policy)),
            max_days=config.importer.max_days_to_import,
            max_rows=config.importer.max_rows_per_source,
        )

    async def import_into(self, store: DatasetStore) -> ImportSummary:
        """
        执行完整导入

        Args:
            store: 目标数据集

        Returns:
            ImportSummary
        """
        summary = ImportSummary()
        logger.info(f"Starting COVID-19 data import for {len(self.sources)} metrics...")

        outcomes = await asyncio.gather(
            *(asyncio.to_thread(self.import_metric, metric, locator)
              for metric, locator in self.sources.items())
        )

        aggregates: Dict[Metric, MetricAggregate] = {}
        for result, aggregate in outcomes:
            summary.results[result.metric] = result
            if aggregate is not None:
                aggregates[result.metric] = aggregate

        if aggregates:
            DatasetMerger(store, self.resolver).merge(aggregates)
        else:
            logger.error("No metric imported successfully, nothing to merge")

        stats = store.stats()
        summary.countries = stats["countries"]
        summary.cases = stats["cases"]
        summary.finished_at = datetime.now()

        for result in summary.results.values():
            if not result.success and not result.skipped:
                logger.warning(f"Metric {result.metric.value} failed: {result.error}")

        logger.info(
            f"Import completed (success={summary.success}). "
            f"Countries: {summary.countries}, Cases: {summary.cases}"
        )
        return summary

    def import_metric(self, metric: Metric, locator: str) -> Tuple[MetricImportResult, Optional[MetricAggregate]]:
        """
        获取并汇总单个指标（阻塞，在线程中执行）

        获取失败或表头缺失只影响当前指标
        """
        result = MetricImportResult(metric=metric, locator=locator)
        if not locator:
            result.skipped = True
            logger.info(f"No source configured for {metric.value}, skipping")
            return result, None

        logger.info(f"Importing {metric.value} from: {locator}")
        try:
            text = self.fetcher.fetch(locator)
            table = read_source(text, name=f"{metric.value}:{locator}")
        except (SourceFetchError, MalformedSourceError) as e:
            result.error = str(e)
            logger.error(f"Error importing {metric.value} from {locator}: {e}")
            return result, None

        date_columns = resolve_date_columns(table.header, self.max_days)
        logger.info(f"Processing {len(date_columns)} date columns for {metric.value}")

        aggregate = aggregate_metric(table, date_columns, metric, self.resolver, self.max_rows)

        result.success = True
        result.rows_processed = aggregate.rows_processed
        result.rows_included = aggregate.rows_included
        result.rows_failed = aggregate.rows_failed
        result.countries = aggregate.countries
        result.dates = len(date_columns)

        if aggregate.is_empty:
            logger.warning(f"{metric.value}: source contained no usable rows")
        else:
            logger.info(f"Successfully imported {metric.value}: {aggregate.countries} countries processed")
        return result, aggregate

    def failed_summary(self, error: BaseException) -> ImportSummary:
        """导入过程中抛出异常时使用的失败结果"""
        return ImportSummary(error=f"{type(error).__name__}: {error}", finished_at=datetime.now())


def build_dataset_store(
    config: Optional[AppSettings] = None,
    fetcher: Optional[BaseFetcher] = None,
) -> DatasetStore:
    """
    根据配置创建数据集及其导入器

    Args:
        config: 应用配置，默认读取环境变量
        fetcher: 自定义获取器（测试或离线数据）

    Returns:
        DatasetStore
    """
    config = config or get_config()
    importer = TimeSeriesImporter.from_config(config, fetcher)
    return DatasetStore(loader=importer, retry_failed_load=config.importer.retry_failed_load)


async def preload(store: DatasetStore, config: Optional[AppSettings] = None) -> bool:
    """
    启动时预加载

    auto_import_on_startup 关闭时直接返回 False，不触发导入
    """
    config = config or get_config()
    if not config.importer.auto_import_on_startup:
        logger.info("Auto import on startup disabled")
        return False
    return await store.ensure_loaded()
