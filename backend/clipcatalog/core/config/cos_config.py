"""
腾讯云COS配置模块
素材对象所在存储桶的连接参数，取自全局配置中的 COS_* 环境变量
"""

from typing import List, Optional

from pydantic import BaseModel

from clipcatalog.core.config.config import Settings, settings

# 缺少任一项时存储不可用（接口返回503）
_REQUIRED_ENV = {
    "secret_id": "COS_SECRET_ID",
    "secret_key": "COS_SECRET_KEY",
    "bucket": "COS_BUCKET",
}


class COSConfig(BaseModel):
    """素材存储桶连接参数"""

    secret_id: str = ""
    secret_key: str = ""
    region: str = "ap-beijing"
    bucket: str = ""
    scheme: str = "https"

    timeout: int = 30
    max_retries: int = 3
    retry_delay_base: int = 1

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "COSConfig":
        """按字段名读取 cos_<field> 配置项"""
        source = source or settings
        return cls(**{name: getattr(source, f"cos_{name}") for name in cls.model_fields})

    @property
    def missing_env(self) -> List[str]:
        """未配置的必填环境变量名"""
        return [env for name, env in _REQUIRED_ENV.items() if not getattr(self, name)]

    @property
    def is_complete(self) -> bool:
        return not self.missing_env


__all__ = ['COSConfig']
