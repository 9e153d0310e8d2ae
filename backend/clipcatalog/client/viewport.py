"""
视口可见性观察
以矩形求交模拟浏览器的 IntersectionObserver，支持 rootMargin 预加载边距
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional

from clipcatalog.core.config import settings

VisibilityCallback = Callable[[bool], object]


@dataclass(frozen=True)
class Rect:
    """轴对齐矩形，坐标向下向右增长"""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def expand(self, margin: float) -> "Rect":
        """四边各向外扩展 margin"""
        return Rect(
            self.left - margin,
            self.top - margin,
            self.width + 2 * margin,
            self.height + 2 * margin
        )

    def intersects(self, other: "Rect") -> bool:
        """边缘相接也视为相交"""
        return (
            self.left <= other.right and other.left <= self.right
            and self.top <= other.bottom and other.top <= self.bottom
        )


class ViewportObserver:
    """
    视口观察器

    observe() 注册目标，update() 传入当前视口与各目标位置，
    仅在目标的可见状态发生变化时回调。异步回调会被调度为任务。
    """

    def __init__(self, root_margin: Optional[float] = None):
        self.root_margin = settings.client_root_margin if root_margin is None else root_margin
        self._callbacks: Dict[str, VisibilityCallback] = {}
        self._visible: Dict[str, bool] = {}

    def observe(self, key: str, callback: VisibilityCallback) -> None:
        self._callbacks[key] = callback
        self._visible.pop(key, None)

    def unobserve(self, key: str) -> None:
        self._callbacks.pop(key, None)
        self._visible.pop(key, None)

    def is_visible(self, key: str) -> bool:
        return self._visible.get(key, False)

    def update(self, viewport: Rect, positions: Mapping[str, Rect]) -> List[asyncio.Task]:
        """
        根据最新布局计算可见性

        Args:
            viewport: 当前视口
            positions: 目标键 -> 目标矩形；未出现的目标视为不可见

        Returns:
            List[asyncio.Task]: 本次由异步回调产生的任务
        """
        area = viewport.expand(self.root_margin)
        tasks = []
        for key, callback in list(self._callbacks.items()):
            rect = positions.get(key)
            visible = rect is not None and area.intersects(rect)
            if self._visible.get(key) == visible:
                continue
            # 首次计算且不可见时不回调
            if key not in self._visible and not visible:
                self._visible[key] = False
                continue
            self._visible[key] = visible
            result = callback(visible)
            if inspect.isawaitable(result):
                tasks.append(asyncio.ensure_future(result))
        return tasks
