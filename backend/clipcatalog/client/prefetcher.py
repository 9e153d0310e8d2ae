"""
预览预取
每个列表条目首次进入视口时签发预览URL并截取海报帧，
之后负责悬停/点击播放、声音切换与下载
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from clipcatalog.client.playback import (
    HeadlessMediaElement,
    MediaElement,
    PlaybackRejected,
    SoundContext,
)
from clipcatalog.client.poster import PosterCapture
from clipcatalog.core.log_messages import log_messages
from clipcatalog.core.log_utils import get_logger
from clipcatalog.schemas.catalog import DownloadLinkResponse

logger = get_logger(__name__)

LinkFetcher = Callable[[str], Awaitable[DownloadLinkResponse]]

DEFAULT_DOWNLOAD_FILENAME = "video"


@dataclass
class PreviewState:
    """单个条目的预览状态"""
    preview_url: Optional[str] = None
    poster: Optional[str] = None
    prefetched: bool = False
    loading: bool = False
    downloading: bool = False
    playing: bool = False
    muted: bool = True
    unmounted: bool = False
    error: Optional[str] = None


class PreviewPrefetcher:
    """
    条目预览预取器

    预取只执行一次；预览URL在并发调用间共享同一个在途请求，
    失败后允许再次触发。卸载后到达的结果一律丢弃。
    """

    def __init__(
        self,
        asset_id: str,
        link_fetcher: LinkFetcher,
        poster_capture: Optional[PosterCapture] = None,
        sound_context: Optional[SoundContext] = None,
        element: Optional[MediaElement] = None
    ):
        self.asset_id = asset_id
        self._link_fetcher = link_fetcher
        self._poster_capture = poster_capture or PosterCapture()
        self.sound = sound_context or SoundContext()
        self.element = element or HeadlessMediaElement()

        self.state = PreviewState(muted=not self.sound.enabled)
        self.element.muted = self.state.muted
        self.sound.bind(self._apply_sound)

        self._url_task: Optional[asyncio.Task] = None
        self._poster_task: Optional[asyncio.Task] = None

    async def on_visibility(self, is_intersecting: bool) -> bool:
        """首次进入视口时预取，之后的可见性变化忽略"""
        if not is_intersecting or self.state.prefetched or self.state.unmounted:
            return False
        self.state.prefetched = True
        await self.prefetch()
        return True

    async def prefetch(self) -> None:
        """签发预览URL，再尽力截取海报帧"""
        url = await self.ensure_preview_url()
        if url is None or self.state.unmounted:
            return

        self._poster_task = asyncio.ensure_future(self._poster_capture.capture(url))
        await asyncio.wait({self._poster_task})
        if self._poster_task.cancelled() or self.state.unmounted:
            return
        error = self._poster_task.exception()
        if error is not None:
            logger.warning(log_messages.POSTER_CAPTURE_SKIPPED, asset_id=self.asset_id, reason=str(error))
            return
        self.state.poster = self._poster_task.result()

    async def _resolve_url(self) -> str:
        link = await self._link_fetcher(self.asset_id)
        return link.url

    async def ensure_preview_url(self) -> Optional[str]:
        """
        获取预览URL

        已有URL时直接返回；并发调用共享同一个在途请求。
        失败时记录错误并返回 None，之后可以重新触发。
        """
        if self.state.preview_url:
            return self.state.preview_url

        if self._url_task is None:
            self._url_task = asyncio.ensure_future(self._resolve_url())
        task = self._url_task
        self.state.loading = True

        try:
            url = await task
        except Exception as e:
            if self._url_task is task:
                self._url_task = None
                logger.error(log_messages.PREFETCH_FAILED, exception=e, asset_id=self.asset_id)
            self.state.error = getattr(e, "message", None) or str(e)
            return None
        finally:
            if self._url_task is None or self._url_task.done():
                self.state.loading = False

        if self.state.unmounted:
            return None
        self.state.preview_url = url
        self.state.error = None
        return url

    async def _play(self, url: str) -> bool:
        if self.element.src != url:
            self.element.src = url
        self.element.muted = self.state.muted
        try:
            await self.element.play()
        except PlaybackRejected as e:
            logger.debug("播放被拒绝", asset_id=self.asset_id, reason=str(e))
            return False
        self.state.playing = True
        return True

    async def hover_start(self) -> bool:
        """悬停开始播放"""
        url = await self.ensure_preview_url()
        if url is None or self.state.unmounted:
            return False
        return await self._play(url)

    def hover_end(self) -> None:
        """悬停结束：暂停并回到开头"""
        self.element.pause()
        self.element.current_time = 0.0
        self.state.playing = False

    async def tap(self) -> bool:
        """点击切换播放/暂停，首次点击时先获取URL"""
        url = await self.ensure_preview_url()
        if url is None or self.state.unmounted:
            return False
        if self.element.paused:
            return await self._play(url)
        self.element.pause()
        self.state.playing = False
        return True

    def _apply_sound(self, enabled: bool) -> None:
        self.state.muted = not enabled
        self.element.muted = self.state.muted

    async def toggle_sound(self) -> bool:
        """切换本条目的声音，并作为之后绑定条目的默认值；开启声音时尝试播放"""
        self.state.muted = not self.state.muted
        self.element.muted = self.state.muted
        self.sound.set_default(not self.state.muted)

        if not self.state.muted and self.state.preview_url and not self.state.unmounted:
            await self._play(self.state.preview_url)
        return not self.state.muted

    async def download(self) -> Optional[DownloadLinkResponse]:
        """
        获取新的下载链接

        文件名为空时使用 "video"。失败记录在 error 中并返回 None。
        """
        self.state.downloading = True
        try:
            link = await self._link_fetcher(self.asset_id)
        except Exception as e:
            logger.error("下载链接获取失败", exception=e, asset_id=self.asset_id)
            self.state.error = getattr(e, "message", None) or str(e)
            return None
        finally:
            self.state.downloading = False

        if not link.filename:
            link = link.model_copy(update={"filename": DEFAULT_DOWNLOAD_FILENAME})
        return link

    def unmount(self) -> None:
        """卸载条目：取消在途的海报截取，之后到达的结果全部丢弃"""
        self.state.unmounted = True
        if self._poster_task is not None and not self._poster_task.done():
            self._poster_task.cancel()
        self.sound.unbind(self._apply_sound)
