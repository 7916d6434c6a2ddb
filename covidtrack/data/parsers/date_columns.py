"""
CovidTrack Date Column Resolver

从表头中识别日期列（M/d/yy），只保留最近的 N 个日期
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

from covidtrack.core import get_logger

logger = get_logger(__name__)

DATE_COLUMN_FORMAT = "%m/%d/%y"
DEFAULT_MAX_DAYS = 10


@dataclass(frozen=True)
class DateColumn:
    """日期列：原始列名 + 解析后的日期"""

    name: str
    date: date


def parse_date_header(header: str) -> Optional[date]:
    """
    解析日期列名，例如 "3/14/23"

    Returns:
        日期；不是日期列时返回 None
    """
    try:
        return datetime.strptime(header.strip(), DATE_COLUMN_FORMAT).date()
    except (ValueError, AttributeError):
        return None


def resolve_date_columns(
    header: Iterable[str],
    max_days: Optional[int] = DEFAULT_MAX_DAYS,
) -> List[DateColumn]:
    """
    选出最近的日期列

    Args:
        header: 表头列名
        max_days: 最多保留的日期数，None 表示不限制

    Returns:
        按日期降序排列的日期列（同一天只保留第一次出现的列）
    """
    columns: List[DateColumn] = []
    seen = set()
    for name in header:
        parsed = parse_date_header(name)
        if parsed is None or parsed in seen:
            continue
        seen.add(parsed)
        columns.append(DateColumn(name=name, date=parsed))

    columns.sort(key=lambda c: c.date, reverse=True)
    if max_days is not None:
        columns = columns[:max(0, max_days)]

    if columns:
        logger.debug(f"Selected {len(columns)} date columns: {columns[-1].date} .. {columns[0].date}")
    else:
        logger.warning("No date columns found in header")
    return columns
