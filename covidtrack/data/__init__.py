"""
CovidTrack Data Pipeline

数据获取、解析、标准化和处理模块
"""
from .crawlers import BaseFetcher, TimeSeriesFetcher
from .processors import TimeSeriesImporter, build_dataset_store

__all__ = [
    "BaseFetcher",
    "TimeSeriesFetcher",
    "TimeSeriesImporter",
    "build_dataset_store",
]
