"""
CovidTrack Data Fetchers

数据源获取器导出
"""
from .base import BaseFetcher
from .jhu_csse import TimeSeriesFetcher

__all__ = [
    "BaseFetcher",
    "TimeSeriesFetcher",
]
