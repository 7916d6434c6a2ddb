"""
CovidTrack Dataset Store

内存数据集：持有国家和病例记录，提供查询接口和单次加载门控
"""

import threading
from contextlib import contextmanager
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from covidtrack.domain import CaseRecord, Country, Region

from .exceptions import DatasetInvariantViolation
from .logging import get_logger
from .single_flight import SingleFlight

if TYPE_CHECKING:
    from covidtrack.data.processors.importer import ImportSummary

logger = get_logger(__name__)


class DatasetStore:
    """
    内存数据集

    国家按标准名称唯一，病例记录按 (country_id, report_date) 唯一。
    所有写操作由合并器在 writing() 中完成；读操作随时可调用，
    返回的是加锁后的快照，不会看到合并到一半的数据。
    """

    def __init__(self, loader=None, retry_failed_load: bool = True):
        """
        初始化数据集

        Args:
            loader: 导入器，需提供 async import_into(store) -> ImportSummary
            retry_failed_load: 加载失败后下一次调用是否重试
        """
        self.loader = loader
        self._lock = threading.RLock()

        self._countries: Dict[str, Country] = {}
        self._countries_by_id: Dict[int, Country] = {}
        self._cases: Dict[Tuple[int, date], CaseRecord] = {}
        self._cases_by_id: Dict[int, CaseRecord] = {}
        self._next_country_id = 1
        self._next_case_id = 1

        self.gate = SingleFlight(
            "dataset-load",
            retry_on_failure=retry_failed_load,
            is_success=lambda summary: summary is not None and summary.success,
        )

    # ------------------------------------------------------------------
    # 加载
    # ------------------------------------------------------------------

    async def ensure_loaded(self) -> bool:
        """
        确保数据已导入（整个进程生命周期内只执行一次）

        Returns:
            导入是否成功
        """
        summary = await self.import_all()
        return summary is not None and summary.success

    async def import_all(self, force: bool = False) -> Optional["ImportSummary"]:
        """
        执行导入并返回每个指标的导入详情

        Args:
            force: 已完成时是否重新导入（用于扩大日期窗口回填）

        Returns:
            ImportSummary，未配置导入器时返回 None
        """
        if self.loader is None:
            logger.warning("No loader configured, dataset stays empty")
            return None

        if force and self.gate.reset():
            logger.info("Forced re-import requested")

        return await self.gate.run(
            lambda: self.loader.import_into(self),
            on_error=getattr(self.loader, "failed_summary", None),
        )

    @property
    def is_loaded(self) -> bool:
        summary = self.gate.result
        return summary is not None and summary.success

    # ------------------------------------------------------------------
    # 写操作（仅供合并器使用）
    # ------------------------------------------------------------------

    @contextmanager
    def writing(self) -> Iterator["DatasetStore"]:
        """写锁：合并和增量计算在同一个临界区内完成"""
        with self._lock:
            yield self

    def get_or_create_country(
        self,
        name: str,
        describe: Callable[[str], Any],
    ) -> Country:
        """
        按标准名称查找国家，不存在则创建

        Args:
            name: 标准化后的国家名称
            describe: name -> CountryProfile(code, region, population)

        Returns:
            Country（已存在时返回原对象，首次出现者优先）
        """
        with self._lock:
            country = self._countries.get(name)
            if country is not None:
                return country

            profile = describe(name)
            country = Country(
                id=self._next_country_id,
                code=profile.code,
                name=name,
                region=profile.region,
                population=profile.population,
            )
            self._next_country_id += 1
            self._countries[name] = country
            self._countries_by_id[country.id] = country
            logger.debug(f"Created country {country!r}")
            return country

    def upsert_case(self, country_id: int, report_date: date) -> CaseRecord:
        """
        获取或创建 (country_id, report_date) 对应的病例记录

        新记录的所有计数为 0
        """
        report_date = _as_date(report_date)
        key = (country_id, report_date)
        with self._lock:
            record = self._cases.get(key)
            if record is None:
                record = CaseRecord(
                    id=self._next_case_id,
                    country_id=country_id,
                    report_date=report_date,
                )
                self._next_case_id += 1
                self._cases[key] = record
                self._cases_by_id[record.id] = record
            return record

    def cases_by_country(self) -> Dict[int, List[CaseRecord]]:
        """按国家分组的病例记录（组内未排序）"""
        with self._lock:
            groups: Dict[int, List[CaseRecord]] = {}
            for record in self._cases.values():
                groups.setdefault(record.country_id, []).append(record)
            return groups

    def check_invariants(self) -> None:
        """
        校验数据集不变量

        Raises:
            DatasetInvariantViolation: 出现重复记录、悬空引用或负数 active
        """
        with self._lock:
            if len(self._countries) != len(self._countries_by_id):
                raise DatasetInvariantViolation("Country name and id indexes disagree")
            if len(self._cases) != len(self._cases_by_id):
                raise DatasetInvariantViolation("Case key and id indexes disagree")

            seen = set()
            for key, record in self._cases.items():
                if record.key != key or record.key in seen:
                    raise DatasetInvariantViolation(f"Duplicate case record for {record.key}")
                seen.add(record.key)
                if record.country_id not in self._countries_by_id:
                    raise DatasetInvariantViolation(
                        f"Case {record.id} references unknown country {record.country_id}"
                    )
                if record.active < 0:
                    raise DatasetInvariantViolation(f"Case {record.id} has negative active count")

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def list_countries(self) -> List[Country]:
        with self._lock:
            return sorted(self._countries_by_id.values(), key=lambda c: c.id)

    def get_country(self, country_id: int) -> Optional[Country]:
        with self._lock:
            return self._countries_by_id.get(country_id)

    def get_country_by_code(self, code: str) -> Optional[Country]:
        """
        按国家代码查找（忽略大小写）

        代码不保证唯一，重复时返回 id 最小的国家
        """
        if not code:
            return None
        target = code.strip().upper()
        for country in self.list_countries():
            if country.code.upper() == target:
                return country
        return None

    def list_countries_by_region(self, region: Union[str, Region]) -> List[Country]:
        """按大洲筛选国家（忽略大小写）"""
        if isinstance(region, str):
            region = Region.parse(region)
            if region is None:
                return []
        return [c for c in self.list_countries() if c.region is region]

    def list_cases(self, skip: int = 0, limit: int = 50) -> List[CaseRecord]:
        """
        分页获取病例记录

        排序：报告日期降序，确诊数降序，id 升序（保证分页稳定）
        """
        skip = max(0, skip)
        if limit <= 0:
            return []
        with self._lock:
            records = sorted(
                self._cases.values(),
                key=lambda c: (-c.report_date.toordinal(), -c.confirmed, c.id),
            )
        return records[skip:skip + limit]

    def get_case(self, case_id: int) -> Optional[CaseRecord]:
        with self._lock:
            return self._cases_by_id.get(case_id)

    def list_cases_by_country_code(self, code: str) -> List[CaseRecord]:
        """获取某个国家的全部记录，按日期降序"""
        country = self.get_country_by_code(code)
        if country is None:
            return []
        with self._lock:
            records = [c for c in self._cases.values() if c.country_id == country.id]
        return sorted(records, key=lambda c: c.report_date, reverse=True)

    def list_cases_by_date(self, on_date: Union[date, datetime]) -> List[CaseRecord]:
        """获取某一天的全部记录（忽略时间部分）"""
        target = _as_date(on_date)
        with self._lock:
            return [c for c in self._cases.values() if c.report_date == target]

    def latest_report_date(self) -> Optional[date]:
        with self._lock:
            if not self._cases:
                return None
            return max(c.report_date for c in self._cases.values())

    def list_latest_cases(self) -> List[CaseRecord]:
        """最新报告日期的全部记录"""
        latest = self.latest_report_date()
        return self.list_cases_by_date(latest) if latest else []

    def stats(self) -> Dict[str, Any]:
        """
        获取统计信息

        Returns:
            包含当前状态的字典
        """
        with self._lock:
            dates = {c.report_date for c in self._cases.values()}
            return {
                "countries": len(self._countries),
                "cases": len(self._cases),
                "dates": len(dates),
                "first_date": min(dates).isoformat() if dates else None,
                "last_date": max(dates).isoformat() if dates else None,
                "load_state": self.gate.state.value,
                "load_runs": self.gate.runs,
            }


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
