"""
CovidTrack Single-Flight Gate

保证同一时间只有一次导入在执行，并发调用者共享同一结果
"""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from .logging import get_logger

logger = get_logger(__name__)


class FlightState(str, Enum):
    """门控状态"""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class SingleFlight:
    """
    单次执行门控

    三态：NOT_STARTED -> IN_PROGRESS -> DONE
    - 第一个调用者执行任务，其余调用者等待同一个 future
    - DONE 之后直接返回已缓存的结果
    - retry_on_failure=True 时，失败的结果不会被锁定，下次调用重新执行；
      False 时失败结果同样被锁定（预加载模式）

    使用方式：
        gate = SingleFlight("dataset", is_success=lambda r: r.success)
        result = await gate.run(load)
    """

    def __init__(
        self,
        name: str,
        retry_on_failure: bool = True,
        is_success: Optional[Callable[[Any], bool]] = None,
    ):
        """
        初始化门控

        Args:
            name: 名称（用于日志）
            retry_on_failure: 失败后是否允许重新执行
            is_success: 判断结果是否成功的函数，默认使用 bool(result)
        """
        self.name = name
        self.retry_on_failure = retry_on_failure
        self.is_success = is_success or bool
        self.state = FlightState.NOT_STARTED
        self.runs = 0
        self._result: Any = None
        self._inflight: Optional[asyncio.Future] = None

    @property
    def result(self) -> Any:
        """最近一次完成的结果（未完成时为 None）"""
        return self._result

    async def run(
        self,
        work: Callable[[], Awaitable[Any]],
        on_error: Optional[Callable[[BaseException], Any]] = None,
    ) -> Any:
        """
        执行或等待任务

        Args:
            work: 无参协程函数
            on_error: 任务抛出异常时用于构造失败结果的函数，默认返回 None

        Returns:
            任务结果（所有并发调用者拿到同一个对象）
        """
        if self.state is FlightState.DONE:
            return self._result

        if self.state is FlightState.IN_PROGRESS:
            logger.debug(f"{self.name}: waiting for in-flight run")
            return await asyncio.shield(self._inflight)

        self.state = FlightState.IN_PROGRESS
        self._inflight = asyncio.get_running_loop().create_future()
        self.runs += 1
        logger.info(f"{self.name}: starting run #{self.runs}")

        try:
            result = await work()
        except asyncio.CancelledError:
            self.state = FlightState.NOT_STARTED
            self._inflight.cancel()
            raise
        except Exception as e:
            logger.error(f"{self.name}: run #{self.runs} raised {type(e).__name__}: {e}")
            result = on_error(e) if on_error else None

        succeeded = self.is_success(result)
        self._result = result
        if succeeded or not self.retry_on_failure:
            self.state = FlightState.DONE
        else:
            self.state = FlightState.NOT_STARTED

        logger.info(f"{self.name}: run #{self.runs} finished (success={succeeded}, state={self.state.value})")
        self._inflight.set_result(result)
        return result

    def reset(self) -> bool:
        """
        重置已完成的门控，使下一次调用重新执行

        Returns:
            是否成功重置（执行中不能重置）
        """
        if self.state is FlightState.IN_PROGRESS:
            return False
        self.state = FlightState.NOT_STARTED
        return True
