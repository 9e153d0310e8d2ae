"""
海报帧截取
用 ffmpeg 从签名URL读取靠前的一帧，再用 Pillow 编码为 JPEG data URL
"""

import asyncio
import base64
import io
import os
from contextlib import suppress
from typing import List, Optional

from PIL import Image

from clipcatalog.core.config import settings
from clipcatalog.core.log_messages import log_messages
from clipcatalog.core.log_utils import get_logger

logger = get_logger(__name__)


class PosterCaptureError(Exception):
    """帧读取失败（进程异常退出、超时或没有输出）"""


class FrameGrabber:
    """通过 ffmpeg 子进程读取单帧，输出 PNG 字节"""

    def __init__(
        self,
        binary: Optional[str] = None,
        timeout: Optional[float] = None,
        seek_seconds: Optional[float] = None
    ):
        self.binary = binary or settings.client_ffmpeg_binary
        self.timeout = timeout or settings.client_ffmpeg_timeout
        self.seek_seconds = settings.client_poster_seek_seconds if seek_seconds is None else seek_seconds

    def build_command(self, url: str, seek_seconds: float = 0.0) -> List[str]:
        cmd = [self.binary, "-hide_banner", "-loglevel", "error"]
        if seek_seconds > 0:
            cmd += ["-ss", f"{seek_seconds:g}"]
        cmd += ["-i", url, "-frames:v", "1", "-f", "image2pipe", "-vcodec", "png", "-"]
        return cmd

    async def _run(self, cmd: List[str]) -> bytes:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            close_fds=os.name != "nt",
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            with suppress(ProcessLookupError):
                process.kill()
            raise PosterCaptureError(f"ffmpeg timeout after {self.timeout}s") from e
        except asyncio.CancelledError:
            with suppress(ProcessLookupError):
                process.kill()
            raise

        if process.returncode != 0:
            message = (stderr or b"").decode("utf-8", errors="replace").strip()
            raise PosterCaptureError(message or f"ffmpeg exited with {process.returncode}")
        return stdout or b""

    async def grab(self, url: str) -> bytes:
        """
        读取一帧

        先向后跳 seek_seconds 秒取帧；素材短于该时长时没有输出，
        再从开头取第一帧。
        """
        frame = await self._run(self.build_command(url, self.seek_seconds))
        if not frame and self.seek_seconds > 0:
            frame = await self._run(self.build_command(url))
        if not frame:
            raise PosterCaptureError("no frame decoded")
        return frame


def encode_poster(
    frame: bytes,
    quality: Optional[int] = None,
    max_size: Optional[tuple] = None
) -> str:
    """
    把帧图像编码为 JPEG data URL

    Raises:
        PIL.UnidentifiedImageError: 帧数据无法识别
    """
    quality = quality or settings.client_poster_quality
    max_size = max_size or settings.poster_max_dimensions

    with Image.open(io.BytesIO(frame)) as image:
        rgb = image.convert("RGB")
    if max_size:
        rgb.thumbnail(max_size)

    buffer = io.BytesIO()
    rgb.save(buffer, format="JPEG", quality=quality)
    return "data:image/jpeg;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


class PosterCapture:
    """尽力而为的海报帧截取，任何失败都返回 None"""

    def __init__(self, grabber: Optional[FrameGrabber] = None, quality: Optional[int] = None):
        self.grabber = grabber or FrameGrabber()
        self.quality = quality

    async def capture(self, url: str) -> Optional[str]:
        try:
            frame = await self.grabber.grab(url)
            return encode_poster(frame, quality=self.quality)
        except (PosterCaptureError, OSError, ValueError, Image.DecompressionBombError) as e:
            logger.warning(log_messages.POSTER_CAPTURE_SKIPPED, reason=str(e))
            return None
