"""
播放与声音控制
共享的声音偏好 + 可替换的媒体元素接口
"""

from typing import Callable, List, Optional, Protocol

SoundListener = Callable[[bool], None]


class PlaybackRejected(Exception):
    """播放被拒绝（例如未经用户交互的有声自动播放）"""


class SoundContext:
    """
    页面级声音偏好

    默认静音。页面上的第一次点击开启声音（只生效一次），
    并通知所有已绑定的条目各自重新应用到自己的媒体元素。
    """

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self._clicked = False
        self._listeners: List[SoundListener] = []

    def bind(self, listener: SoundListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unbind(self, listener: SoundListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def page_clicked(self) -> bool:
        """页面点击；仅第一次生效，返回本次是否生效"""
        if self._clicked:
            return False
        self._clicked = True
        self.enabled = True
        for listener in list(self._listeners):
            listener(True)
        return True

    def set_default(self, enabled: bool) -> None:
        """修改之后绑定的条目使用的默认值，不通知已绑定的条目"""
        self.enabled = enabled


class MediaElement(Protocol):
    """媒体元素接口（浏览器 <video> 或其他播放器的适配）"""

    src: Optional[str]
    muted: bool
    paused: bool
    current_time: float

    async def play(self) -> None:
        ...

    def pause(self) -> None:
        ...


class HeadlessMediaElement:
    """
    无界面的媒体元素

    只记录播放状态；autoplay_allowed 为 False 时有声播放会被拒绝，
    模拟浏览器的自动播放策略。
    """

    def __init__(self, autoplay_allowed: bool = True):
        self.src: Optional[str] = None
        self.muted = True
        self.paused = True
        self.current_time = 0.0
        self.autoplay_allowed = autoplay_allowed

    async def play(self) -> None:
        if not self.src:
            raise PlaybackRejected("no source")
        if not self.muted and not self.autoplay_allowed:
            raise PlaybackRejected("unmuted autoplay is not allowed")
        self.paused = False

    def pause(self) -> None:
        self.paused = True
