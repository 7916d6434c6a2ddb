"""
CovidTrack Wide-Format CSV Reader

读取宽表 CSV（每行一个地理单元，每列一个日期），按列名访问每一行
"""
import io
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import pandas as pd

from covidtrack.core import get_logger
from covidtrack.core.exceptions import MalformedSourceError, RowProcessingError

logger = get_logger(__name__)


def parse_count(raw: str) -> Optional[int]:
    """
    解析非负整数计数

    Args:
        raw: 原始字符串

    Returns:
        非负整数；空值、非整数或负数返回 None
    """
    text = raw.strip() if raw else ""
    if not text:
        return None
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value >= 0 else None


class SourceRow:
    """
    单行数据访问器

    get() 返回原始字符串，get_count() 在其上做非负整数解析
    """

    __slots__ = ("_columns", "_values", "row_number")

    def __init__(self, columns: Dict[str, int], values: Tuple, row_number: int):
        self._columns = columns
        self._values = values
        self.row_number = row_number

    def __contains__(self, column: str) -> bool:
        return column in self._columns

    def get(self, column: str) -> str:
        """
        获取某列的原始字符串（空单元格返回空字符串）

        Raises:
            RowProcessingError: 列不存在
        """
        index = self._columns.get(column)
        if index is None or index >= len(self._values):
            raise RowProcessingError(f"missing column '{column}'", self.row_number)
        value = self._values[index]
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            return ""
        return str(value).strip()

    def get_count(self, column: str) -> Optional[int]:
        """获取某列的非负整数，无法解析时返回 None"""
        return parse_count(self.get(column))

    def to_dict(self) -> Dict[str, str]:
        return {name: self.get(name) for name in self._columns}

    def __repr__(self) -> str:
        return f"<SourceRow(row={self.row_number}, columns={len(self._columns)})>"


@dataclass
class SourceTable:
    """解析后的宽表"""

    name: str
    frame: pd.DataFrame
    skipped_lines: List[List[str]] = field(default_factory=list)

    @property
    def header(self) -> List[str]:
        return list(self.frame.columns)

    @property
    def row_count(self) -> int:
        return len(self.frame)

    @property
    def is_empty(self) -> bool:
        """是否没有可用数据行（不视为错误，由调用方决定）"""
        return self.frame.empty

    def rows(self) -> Iterator[SourceRow]:
        """逐行惰性迭代"""
        columns: Dict[str, int] = {}
        for i, name in enumerate(self.frame.columns):
            # 重复列名以第一次出现为准
            columns.setdefault(name, i)
        for position, values in enumerate(self.frame.itertuples(index=False, name=None)):
            # 第1行是表头
            yield SourceRow(columns, values, row_number=position + 2)


def read_source(text: str, name: str = "<memory>") -> SourceTable:
    """
    解析宽表 CSV 文本

    字段数不匹配的行会被记录并跳过，不影响其他行

    Args:
        text: CSV 文本
        name: 数据源名称（用于日志）

    Returns:
        SourceTable

    Raises:
        MalformedSourceError: 没有表头
    """
    if text is None or not text.strip():
        raise MalformedSourceError(f"{name}: source is empty, no header row")

    skipped: List[List[str]] = []

    def on_bad_line(fields: List[str]) -> None:
        skipped.append(fields)
        logger.warning(f"{name}: skipping malformed line with {len(fields)} fields: {fields[:2]}")
        return None

    # header=None: 表头按普通行读入，避免首个数据行字段过多时被推断为索引列
    try:
        frame = pd.read_csv(
            io.StringIO(text.lstrip("\ufeff")),
            header=None,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=on_bad_line,
        )
    except pd.errors.EmptyDataError as e:
        raise MalformedSourceError(f"{name}: no header row") from e
    except pd.errors.ParserError as e:
        raise MalformedSourceError(f"{name}: unreadable CSV: {e}") from e

    if frame.empty:
        raise MalformedSourceError(f"{name}: no header row")
    header = [str(column).strip() for column in frame.iloc[0]]
    frame = frame.iloc[1:].reset_index(drop=True)
    frame.columns = header
    if not len(frame.columns):
        raise MalformedSourceError(f"{name}: no header row")

    if frame.empty:
        logger.warning(f"{name}: header found but no data rows")
    else:
        logger.debug(f"{name}: {len(frame)} rows, {len(frame.columns)} columns")

    return SourceTable(name=name, frame=frame, skipped_lines=skipped)
