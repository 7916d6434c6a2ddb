"""
CovidTrack Parsers

宽表 CSV 读取和日期列识别
"""
from .csv_reader import SourceRow, SourceTable, parse_count, read_source
from .date_columns import DateColumn, parse_date_header, resolve_date_columns

__all__ = [
    "SourceRow",
    "SourceTable",
    "parse_count",
    "read_source",
    "DateColumn",
    "parse_date_header",
    "resolve_date_columns",
]
