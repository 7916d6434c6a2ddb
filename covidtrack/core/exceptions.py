"""
CovidTrack 异常定义

导入流程中的错误分类：
- SourceFetchError: 下载失败，仅影响当前指标
- MalformedSourceError: 文件缺少表头，仅中止当前文件
- RowProcessingError: 单行解析失败，记录日志后跳过
- DatasetInvariantViolation: 数据集不变量被破坏，不可恢复
"""
from typing import Optional


class CovidTrackError(Exception):
    """所有 CovidTrack 异常的基类"""


class SourceFetchError(CovidTrackError):
    """获取数据源失败（网络、超时、文件不存在）"""

    def __init__(self, locator: str, reason: str):
        self.locator = locator
        self.reason = reason
        super().__init__(f"Failed to fetch {locator}: {reason}")


class MalformedSourceError(CovidTrackError):
    """数据源无法读取表头"""


class RowProcessingError(CovidTrackError):
    """单行数据处理失败"""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class DatasetInvariantViolation(CovidTrackError):
    """数据集内部一致性被破坏（正常运行时不应出现）"""
