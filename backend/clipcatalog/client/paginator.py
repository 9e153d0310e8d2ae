"""
目录分页器
无限滚动 + 防抖搜索的客户端状态机：idle -> loading -> idle | exhausted | error
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from clipcatalog.client.debounce import Debouncer
from clipcatalog.core.config import settings
from clipcatalog.core.log_messages import log_messages
from clipcatalog.core.log_utils import get_logger
from clipcatalog.schemas.catalog import CatalogPageResponse

logger = get_logger(__name__)

PageFetcher = Callable[[int, int, Optional[str]], Awaitable[CatalogPageResponse]]


class PaginatorStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    EXHAUSTED = "exhausted"
    ERROR = "error"


@dataclass
class PaginatorState:
    """
    分页器状态

    Attributes:
        items: 已加载的素材，按页顺序追加
        page: 下一次要请求的页码
        has_more: 服务端是否还有后续页
        loading: 是否有请求在途
        search_term: 当前生效的搜索词（已去除首尾空白）
        generation: 搜索代次，每次重置加一，用于丢弃过期响应
        status: 当前状态
        error: 最近一次失败的错误信息
    """
    items: List[Any] = field(default_factory=list)
    page: int = 1
    has_more: bool = True
    loading: bool = False
    search_term: str = ""
    generation: int = 0
    status: PaginatorStatus = PaginatorStatus.IDLE
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """加载结束且没有任何结果（显示空状态）"""
        return not self.loading and not self.has_more and not self.items

    @property
    def reached_end(self) -> bool:
        """有结果且已到最后一页"""
        return not self.has_more and bool(self.items)


class ClientPaginator:
    """
    客户端分页器

    fetch_page(page, limit, search_term) 负责实际请求，通常是
    CatalogApiClient.list_assets。同一时刻最多一个分页请求在途；
    搜索词变化后，旧代次的响应到达时直接丢弃。
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        page_size: Optional[int] = None,
        debounce_delay: Optional[float] = None
    ):
        self._fetch_page = fetch_page
        self.page_size = page_size or settings.client_page_size
        self.state = PaginatorState()
        self._debouncer = Debouncer(
            settings.client_debounce_seconds if debounce_delay is None else debounce_delay,
            self._apply_search
        )

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    async def start(self) -> bool:
        """视图挂载时加载首页"""
        if self.state.items or self.state.page != 1:
            return False
        return await self.load_next_page()

    async def load_next_page(self) -> bool:
        """
        加载下一页

        正在加载、没有更多或处于错误状态时不发起请求。

        Returns:
            bool: 本次结果是否被应用到状态
        """
        state = self.state
        if state.loading or not state.has_more or state.status == PaginatorStatus.ERROR:
            return False

        generation = state.generation
        page = state.page
        search_term = state.search_term or None

        state.loading = True
        state.status = PaginatorStatus.LOADING
        logger.debug(log_messages.PAGE_FETCH_START, page=page, search_term=search_term)

        try:
            result = await self._fetch_page(page, self.page_size, search_term)
        except asyncio.CancelledError:
            # 被取消的请求不能让当前代次停在 loading
            if generation == self.state.generation:
                state.loading = False
                state.status = PaginatorStatus.IDLE
            raise
        except Exception as e:
            if generation != self.state.generation:
                logger.debug(log_messages.PAGE_FETCH_DISCARDED, page=page, generation=generation)
                return False
            logger.error(log_messages.PAGE_FETCH_FAILED, exception=e, page=page)
            state.loading = False
            state.status = PaginatorStatus.ERROR
            state.error = getattr(e, "message", None) or str(e)
            return False

        if generation != self.state.generation:
            logger.debug(log_messages.PAGE_FETCH_DISCARDED, page=page, generation=generation)
            return False

        state.items.extend(result.items)
        state.page = page + 1
        state.has_more = result.has_more
        state.loading = False
        state.error = None
        state.status = PaginatorStatus.IDLE if result.has_more else PaginatorStatus.EXHAUSTED
        return True

    def reset(self, search_term: str = "") -> None:
        """清空结果并开启新的搜索代次"""
        self.state.items = []
        self.state.page = 1
        self.state.has_more = True
        self.state.loading = False
        self.state.search_term = search_term
        self.state.generation += 1
        self.state.status = PaginatorStatus.IDLE
        self.state.error = None

    def set_search_input(self, raw: str) -> None:
        """输入框内容变化，防抖后生效"""
        self._debouncer.call(raw)

    async def _apply_search(self, raw: str) -> None:
        term = (raw or "").strip()
        if term == self.state.search_term:
            return
        self.reset(term)
        await self.load_next_page()

    async def on_sentinel_visibility(self, is_intersecting: bool) -> bool:
        """列表底部哨兵进入视口时加载下一页"""
        if not is_intersecting:
            return False
        return await self.load_next_page()

    async def retry(self) -> bool:
        """从错误状态恢复并重新请求失败的那一页"""
        if self.state.status != PaginatorStatus.ERROR:
            return False
        self.state.status = PaginatorStatus.IDLE
        self.state.error = None
        return await self.load_next_page()

    def close(self) -> None:
        """取消尚未触发的搜索"""
        self._debouncer.cancel()
