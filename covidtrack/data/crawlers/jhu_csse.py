"""
CovidTrack JHU CSSE Fetcher

下载 JHU CSSE 时间序列 CSV，支持 http(s)、file:// 和本地路径
"""
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from covidtrack.core import get_config, get_logger
from covidtrack.core.exceptions import SourceFetchError

from .base import BaseFetcher

logger = get_logger(__name__)


class TimeSeriesFetcher(BaseFetcher):
    """
    时间序列获取器

    提供重试、超时和统一的错误转换；超时视为普通的获取失败
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ):
        """
        初始化获取器

        Args:
            user_agent: User-Agent字符串
            timeout: 请求超时时间（秒），默认从配置读取
            max_retries: 最大重试次数，默认从配置读取
        """
        self.config = get_config()
        self.timeout = timeout if timeout is not None else self.config.importer.fetch_timeout
        retries = max_retries if max_retries is not None else self.config.importer.max_retries

        # 配置Session
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent or f"Mozilla/5.0 (compatible; CovidTrack/{self.config.version})",
        })

        # 配置重试策略
        retry_strategy = Retry(
            total=retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        logger.info(f"{self.__class__.__name__} initialized (timeout={self.timeout}s, retries={retries})")

    def fetch(self, locator: str) -> str:
        if not locator:
            raise SourceFetchError(locator, "empty locator")

        scheme = urlparse(locator).scheme.lower()
        if scheme in ("http", "https"):
            return self._get(locator)
        if scheme == "file":
            return self._read(Path(unquote(urlparse(locator).path)))
        return self._read(Path(locator))

    def _get(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as e:
            logger.error(f"GET {url} timed out after {self.timeout}s")
            raise SourceFetchError(url, f"timeout after {self.timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"GET request failed for {url}: {e}")
            raise SourceFetchError(url, str(e)) from e

        logger.debug(f"GET {url} - Status: {response.status_code}, {len(response.content)} bytes")
        response.encoding = response.encoding or "utf-8"
        return response.text

    def _read(self, path: Path) -> str:
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as e:
            logger.error(f"Cannot read {path}: {e}")
            raise SourceFetchError(str(path), str(e)) from e
        logger.debug(f"Read {path} ({len(text)} chars)")
        return text

    def close(self) -> None:
        self.session.close()
