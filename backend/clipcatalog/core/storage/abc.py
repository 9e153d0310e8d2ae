"""
存储抽象基类
定义素材目录依赖的对象存储接口（上传、签名URL、存在性与元数据查询）
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from clipcatalog.core.storage.models import MetadataResult, UploadResult


class BaseStorage(ABC):
    """存储抽象基类"""

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        key: str,
        mime_type: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> UploadResult:
        """
        上传文件

        Args:
            data: 文件数据
            key: 存储键
            mime_type: MIME类型
            metadata: 可选的元数据

        Returns:
            UploadResult: 上传结果

        Raises:
            UploadError: 上传失败时抛出
        """

    @abstractmethod
    async def generate_url(
        self,
        key: str,
        expires: int = 600,
        operation: str = "get"
    ) -> str:
        """
        生成限时访问URL

        Args:
            key: 存储键
            expires: 过期时间（秒），由存储服务执行
            operation: 操作类型（get/put）

        Returns:
            str: 预签名URL

        Raises:
            URLError: 生成URL失败时抛出
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """检查对象是否存在"""

    @abstractmethod
    async def get_metadata(self, key: str) -> MetadataResult:
        """
        获取对象元数据

        Raises:
            MetadataError: 获取元数据失败时抛出
        """
