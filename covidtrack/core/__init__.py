"""核心服务模块"""

from .config import AppSettings, get_config
from .logging import setup_logging, get_logger
from .exceptions import (
    CovidTrackError,
    DatasetInvariantViolation,
    MalformedSourceError,
    RowProcessingError,
    SourceFetchError,
)
from .single_flight import FlightState, SingleFlight
from .dataset_store import DatasetStore

__all__ = [
    "AppSettings",
    "get_config",
    "setup_logging",
    "get_logger",
    "CovidTrackError",
    "DatasetInvariantViolation",
    "MalformedSourceError",
    "RowProcessingError",
    "SourceFetchError",
    "FlightState",
    "SingleFlight",
    "DatasetStore",
]
