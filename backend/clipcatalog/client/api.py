"""
素材目录API客户端
基于 httpx.AsyncClient，负责兼容模式响应归一化与上传前置校验
"""

import io
from typing import Callable, List, Optional

import httpx
from pydantic import TypeAdapter

from clipcatalog.core.config import settings
from clipcatalog.core.exceptions import ValidationError
from clipcatalog.core.log_utils import get_logger
from clipcatalog.schemas.catalog import AssetRead, CatalogPageResponse, DownloadLinkResponse
from clipcatalog.utils.file_utils import format_file_size, resolve_media_type

logger = get_logger(__name__)

ProgressCallback = Callable[[int], None]

_asset_list_adapter = TypeAdapter(List[AssetRead])


class CatalogApiError(Exception):
    """
    API调用失败

    Attributes:
        message: 错误消息（优先取服务端的 detail）
        status_code: HTTP状态码，网络错误或本地校验失败时为 None
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class _ProgressReader(io.BytesIO):
    """读取时按百分比上报进度的字节流"""

    def __init__(self, data: bytes, on_progress: Optional[ProgressCallback]):
        super().__init__(data)
        self._total = len(data)
        self._on_progress = on_progress
        self._last_percent = -1

    def read(self, size: Optional[int] = -1) -> bytes:
        chunk = super().read(size)
        if self._on_progress and self._total:
            percent = round(self.tell() * 100 / self._total)
            if percent != self._last_percent:
                self._last_percent = percent
                self._on_progress(percent)
        return chunk


class CatalogApiClient:
    """
    素材目录API客户端

    可传入已有的 httpx.AsyncClient（测试中配合 MockTransport 使用），
    否则按配置创建并在 close() 时关闭。
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        self.base_url = (base_url or settings.client_base_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.client_timeout
        )

    async def __aenter__(self) -> "CatalogApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        """非2xx响应转换为 CatalogApiError"""
        if response.is_success:
            return
        message = f"Request failed with status {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("detail") or body.get("error") or message
        raise CatalogApiError(str(message), status_code=response.status_code)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, self._url(path), **kwargs)
        except httpx.HTTPError as e:
            logger.error("目录API请求失败", exception=e, method=method, path=path)
            raise CatalogApiError(f"Network error: {e}") from e
        self._raise_for_status(response)
        return response

    async def list_assets(
        self,
        page: int,
        limit: int,
        query: Optional[str] = None
    ) -> CatalogPageResponse:
        """
        获取一页素材

        服务端返回兼容模式的数组时，归一化为单页结果：
        page=1，limit=total=数组长度，has_more=False。
        """
        params = {"page": page, "limit": limit}
        if query:
            params["query"] = query

        response = await self._request("GET", "/catalog", params=params)
        body = response.json()

        if isinstance(body, list):
            items = _asset_list_adapter.validate_python(body)
            return CatalogPageResponse(
                items=items,
                page=1,
                limit=len(items),
                total=len(items),
                has_more=False
            )
        return CatalogPageResponse.model_validate(body)

    async def get_download_link(self, asset_id: str) -> DownloadLinkResponse:
        """获取素材的限时下载链接"""
        response = await self._request("GET", f"/catalog/{asset_id}/download")
        return DownloadLinkResponse.model_validate(response.json())

    async def upload_asset(
        self,
        name: str,
        data: Optional[bytes],
        filename: str = "video",
        content_type: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None
    ) -> AssetRead:
        """
        上传素材

        名称为空、未选择文件或文件超过客户端上限时直接拒绝，不发起网络请求。

        Raises:
            ValidationError: 本地校验失败
            CatalogApiError: 服务端返回错误或网络错误
        """
        if not (name or "").strip():
            raise ValidationError("Please provide a video name")
        if not data:
            raise ValidationError("Please select a video file")
        if len(data) > settings.client_max_upload_size:
            raise ValidationError(
                "File exceeds the maximum upload size of {}".format(
                    format_file_size(settings.client_max_upload_size)
                )
            )

        files = {
            "video": (
                filename,
                _ProgressReader(data, on_progress),
                resolve_media_type(content_type)
            )
        }
        response = await self._request("POST", "/catalog", data={"name": name.strip()}, files=files)
        return AssetRead.model_validate(response.json())
