"""
防抖调度
连续输入只在最后一次输入静默 delay 秒后触发一次
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Set

from clipcatalog.core.log_messages import log_messages
from clipcatalog.core.log_utils import get_logger

logger = get_logger(__name__)


class Debouncer:
    """
    基于 asyncio 任务的防抖器

    每次 call() 取消尚未到期的上一次计时，只有最后一次计时到期后执行回调。
    回调在独立任务中运行，已开始执行的回调不会被后续 call() 或 cancel() 打断。
    """

    def __init__(self, delay: float, callback: Callable[..., Awaitable[Any]]):
        self.delay = delay
        self.callback = callback
        self._timer: Optional[asyncio.Task] = None
        self._running: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """是否有尚未到期的计时"""
        return self._timer is not None and not self._timer.done()

    def call(self, *args: Any) -> asyncio.Task:
        """重新开始计时，返回本次计时任务"""
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_fire(*args))
        return self._timer

    async def _wait_then_fire(self, *args: Any) -> None:
        await asyncio.sleep(self.delay)
        task = asyncio.get_running_loop().create_task(self._run(*args))
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    async def _run(self, *args: Any) -> None:
        try:
            await self.callback(*args)
        except Exception as e:
            logger.error(log_messages.DEBOUNCE_CALLBACK_FAILED, exception=e)

    def cancel(self) -> None:
        """取消尚未到期的计时，已在执行的回调不受影响"""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def flush(self) -> None:
        """等待当前计时及已触发的回调完成（测试与关闭时使用）"""
        if self._timer is not None:
            await asyncio.wait({self._timer})
        while self._running:
            await asyncio.wait(set(self._running))
