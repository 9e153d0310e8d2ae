"""
应用配置管理模块
统一管理所有配置信息，包括环境变量和文件配置
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator, ConfigDict

from clipcatalog.utils.config_utils import (
    get_workspace_path, get_config_path, parse_json_config
)


class Settings(BaseSettings):
    """应用配置类 - 统一管理所有配置信息"""

    # ==================== 基础配置 ====================
    app_name: str = "Clip Catalog"
    app_version: str = "1.0.0"
    app_debug: bool = True
    app_env: str = "development"

    # ==================== API配置 ====================
    api_v1_str: str = "/api/v1"
    project_name: str = "Clip Catalog API"

    # ==================== 数据库配置 ====================
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "clip_catalog_dev"
    POSTGRES_PASSWORD: str = "dev_password"
    POSTGRES_DB: str = "clip_catalog_dev"
    db_echo: bool = False
    db_create_tables: bool = True

    # ==================== 目录配置 ====================
    log_dir: str = "log"

    # ==================== 素材目录配置 ====================
    max_upload_size: int = 100 * 1024 * 1024  # 100MB，服务端上传上限
    catalog_url_ttl: int = 600  # 预签名下载链接有效期（秒）
    catalog_key_prefix: str = "videos"
    catalog_max_page_size: int = 100
    catalog_search_language: str = "english"  # PostgreSQL全文检索配置

    # ==================== COS存储配置 ====================
    cos_secret_id: str = ""
    cos_secret_key: str = ""
    cos_region: str = "ap-beijing"
    cos_bucket: str = ""
    cos_scheme: str = "https"

    cos_timeout: int = 30
    cos_max_retries: int = 3
    cos_retry_delay_base: int = 1

    # ==================== 客户端配置 ====================
    client_base_url: str = "http://localhost:8080/api/v1"
    client_timeout: float = 30.0
    client_page_size: int = 12
    client_debounce_seconds: float = 0.4
    client_root_margin: int = 200  # 视口预加载边距（像素）
    client_max_upload_size: int = 10 * 1024 * 1024  # 10MB，客户端预检上限
    client_poster_seek_seconds: float = 0.1
    client_poster_quality: int = 70
    client_poster_max_size: str = "640x360"  # 海报帧最大尺寸，超出按比例缩小
    client_ffmpeg_binary: str = "ffmpeg"
    client_ffmpeg_timeout: float = 20.0

    # ==================== 日志配置 ====================
    log_level: str = "INFO"
    log_file: str = "backend.log"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_requests: bool = True

    # ==================== 应用服务配置 ====================
    app_port: int = 8080
    app_host: str = "127.0.0.1"

    # ==================== CORS配置 ====================
    cors_origins: str = '["*"]'

    # ==================== 验证器 ====================
    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, value: str) -> List[str]:
        """解析CORS origins配置"""
        return parse_json_config(value)

    @field_validator("max_upload_size", "client_max_upload_size", "catalog_url_ttl")
    @classmethod
    def ensure_positive(cls, value: int) -> int:
        """上限与有效期必须为正数"""
        if value <= 0:
            raise ValueError("必须为正整数")
        return value

    # ==================== 计算属性 ====================
    @property
    def database_url(self) -> str:
        """构建数据库连接URL"""
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def async_database_url(self) -> str:
        """构建异步数据库连接URL"""
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def absolute_log_dir(self) -> str:
        """获取绝对日志目录路径"""
        return str(get_workspace_path(self.log_dir))

    @property
    def absolute_log_file(self) -> str:
        """获取绝对日志文件路径"""
        return str(get_workspace_path(self.log_dir) / self.log_file)

    @property
    def cos_enabled(self) -> bool:
        """检查COS是否启用"""
        return bool(self.cos_secret_id and self.cos_secret_key and self.cos_bucket)

    @property
    def poster_max_dimensions(self) -> Optional[tuple]:
        """解析海报帧最大尺寸，如 640x360"""
        try:
            width, height = self.client_poster_max_size.lower().split("x", 1)
            return int(width), int(height)
        except ValueError:
            return None

    model_config = ConfigDict(
        env_file=get_config_path(".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        validate_default=True
    )


def get_settings() -> Settings:
    """获取应用配置实例"""
    # 环境变量文件加载由外部环境控制（Docker Compose、launch.json等）
    return Settings()


# 全局配置实例
settings = get_settings()
