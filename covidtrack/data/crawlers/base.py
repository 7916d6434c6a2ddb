"""
CovidTrack Base Fetcher

数据源获取接口：给定定位符（URL 或文件路径），返回原始文本
"""
from abc import ABC, abstractmethod


class BaseFetcher(ABC):
    """
    基础获取器

    子类只需实现 fetch()；任何失败都应抛出 SourceFetchError
    """

    @abstractmethod
    def fetch(self, locator: str) -> str:
        """
        获取原始文本内容

        Args:
            locator: URL 或本地路径

        Returns:
            文本内容

        Raises:
            SourceFetchError: 网络错误、超时或文件不存在
        """
        pass

    def close(self) -> None:
        """释放资源"""

    def __enter__(self):
        """上下文管理器进入"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """上下文管理器退出"""
        self.close()
