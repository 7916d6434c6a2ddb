"""
CovidTrack Data Processors

数据处理器，协调获取、解析、国家解析、汇总和合并
"""

from .aggregator import MetricAggregate, aggregate_metric
from .demo import generate_demo_aggregates, load_demo_dataset
from .importer import ImportSummary, MetricImportResult, TimeSeriesImporter, build_dataset_store, preload
from .merger import DatasetMerger
from .summary import GlobalSummary, TreemapEntry, global_summary, treemap

__all__ = [
    "MetricAggregate",
    "aggregate_metric",
    "DatasetMerger",
    "ImportSummary",
    "MetricImportResult",
    "TimeSeriesImporter",
    "build_dataset_store",
    "preload",
    "GlobalSummary",
    "TreemapEntry",
    "global_summary",
    "treemap",
    "generate_demo_aggregates",
    "load_demo_dataset",
]
