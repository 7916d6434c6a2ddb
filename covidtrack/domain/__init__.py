"""
CovidTrack Domain Models

领域模型导出
"""
from .case_record import METRIC_FIELDS, CaseRecord, Metric
from .country import Country, Region

__all__ = [
    # Models
    "Country",
    "CaseRecord",
    # Enums
    "Region",
    "Metric",
    "METRIC_FIELDS",
]
