"""
CovidTrack Demo Dataset

离线演示数据：按人口比例生成固定随机种子的合成数据，
通过正常的合并流程写入，保证不变量和日增量一致
"""
import random
from datetime import date, timedelta
from typing import Dict, Optional

from covidtrack.core import DatasetStore, get_logger
from covidtrack.data.normalizers import CountryResolver
from covidtrack.data.normalizers.country_reference import POPULATION
from covidtrack.domain import Metric

from .aggregator import MetricAggregate
from .merger import DatasetMerger

logger = get_logger(__name__)


def generate_demo_aggregates(
    resolver: CountryResolver,
    days: int = 30,
    seed: int = 42,
    today: Optional[date] = None,
) -> Dict[Metric, MetricAggregate]:
    """
    生成合成的三指标汇总

    Args:
        resolver: 用于人口查询
        days: 生成的天数
        seed: 随机种子
        today: 最后一天，默认今天

    Returns:
        指标 -> MetricAggregate
    """
    rng = random.Random(seed)
    end = today or date.today()
    dates = [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    aggregates = {metric: MetricAggregate(metric=metric, dates=list(dates)) for metric in Metric}

    for name in POPULATION:
        population = resolver.describe(name).population or 1_000_000
        factor = population / 1_000_000
        base_cases = int(factor * rng.randint(50_000, 500_000))
        mortality = rng.random() * 0.02 + 0.005
        recovery = rng.random() * 0.3 + 0.7

        confirmed = base_cases
        for report_date in dates:
            # 累计值只增不减
            confirmed += int(base_cases * rng.random() * 0.01)
            deaths = int(confirmed * mortality)
            recovered = min(int(confirmed * recovery), int(confirmed * 0.9))

            aggregates[Metric.CONFIRMED].values.setdefault(name, {})[report_date] = confirmed
            aggregates[Metric.DEATHS].values.setdefault(name, {})[report_date] = deaths
            aggregates[Metric.RECOVERED].values.setdefault(name, {})[report_date] = recovered

    return aggregates


def load_demo_dataset(
    store: DatasetStore,
    resolver: Optional[CountryResolver] = None,
    days: int = 30,
    seed: int = 42,
    today: Optional[date] = None,
) -> int:
    """
    向数据集写入演示数据

    Returns:
        写入后的记录总数
    """
    resolver = resolver or CountryResolver()
    aggregates = generate_demo_aggregates(resolver, days=days, seed=seed, today=today)
    DatasetMerger(store, resolver).merge(aggregates)

    stats = store.stats()
    logger.info(f"Loaded {stats['countries']} countries and {stats['cases']} demo cases")
    return stats["cases"]
