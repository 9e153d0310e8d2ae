"""
腾讯云COS存储适配器单元测试
SDK客户端全部mock，不访问网络
"""

import pytest
from unittest.mock import MagicMock, patch

from qcloud_cos import CosClientError, CosServiceError

from clipcatalog.core.config.cos_config import COSConfig
from clipcatalog.core.storage import (
    ConfigurationError,
    MetadataError,
    TencentCosAdapter,
    URLError,
    UploadError,
    get_storage_service,
)


@pytest.mark.unit
@pytest.mark.storage
class TestTencentCosAdapter:
    """TencentCosAdapter 单元测试类"""

    @pytest.fixture
    def cos_config(self):
        """创建测试COS配置"""
        return COSConfig(
            secret_id="test-secret-id",
            secret_key="test-secret-key",
            region="ap-beijing",
            bucket="test-bucket-1250000000",
            max_retries=2,
            retry_delay_base=0
        )

    @pytest.fixture
    def sdk_client(self):
        with patch("clipcatalog.core.storage.adapters.tencent_cos.CosS3Client") as client_cls:
            yield client_cls.return_value

    @pytest.fixture
    def adapter(self, cos_config, sdk_client):
        return TencentCosAdapter(cos_config)

    def test_init_with_incomplete_config(self):
        """测试配置不完整时抛出 ConfigurationError"""
        with pytest.raises(ConfigurationError):
            TencentCosAdapter(COSConfig(secret_id="id"))

    @pytest.mark.asyncio
    async def test_upload(self, adapter, sdk_client):
        """测试上传成功返回结果"""
        sdk_client.put_object.return_value = {"ETag": '"abc123"'}

        result = await adapter.upload(b"video-bytes", "videos/a.mp4", "video/mp4")

        assert result.key == "videos/a.mp4"
        assert result.size == len(b"video-bytes")
        assert result.etag == "abc123"
        assert result.bucket == "test-bucket-1250000000"
        sdk_client.put_object.assert_called_once_with(
            Bucket="test-bucket-1250000000",
            Key="videos/a.mp4",
            Body=b"video-bytes",
            ContentType="video/mp4"
        )

    @pytest.mark.asyncio
    async def test_upload_retries_transient_errors(self, adapter, sdk_client):
        """测试SDK瞬时错误时重试"""
        sdk_client.put_object.side_effect = [CosClientError("timeout"), {"ETag": '"e"'}]

        result = await adapter.upload(b"x", "videos/a.mp4", "video/mp4")

        assert result.etag == "e"
        assert sdk_client.put_object.call_count == 2

    @pytest.mark.asyncio
    async def test_upload_gives_up_after_retries(self, adapter, sdk_client):
        """测试重试耗尽后抛出 UploadError"""
        sdk_client.put_object.side_effect = CosClientError("timeout")

        with pytest.raises(UploadError) as exc_info:
            await adapter.upload(b"x", "videos/a.mp4", "video/mp4")

        assert exc_info.value.key == "videos/a.mp4"
        assert exc_info.value.details["key"] == "videos/a.mp4"
        assert sdk_client.put_object.call_count == 3

    @pytest.mark.asyncio
    async def test_generate_download_url(self, adapter, sdk_client):
        """测试生成GET预签名URL"""
        sdk_client.get_presigned_url.return_value = "https://signed/get"

        url = await adapter.generate_url("videos/a.mp4", expires=600)

        assert url == "https://signed/get"
        sdk_client.get_presigned_url.assert_called_once_with(
            Method="GET",
            Bucket="test-bucket-1250000000",
            Key="videos/a.mp4",
            Expired=600
        )

    @pytest.mark.asyncio
    async def test_generate_upload_url(self, adapter, sdk_client):
        """测试生成PUT预签名URL"""
        sdk_client.get_presigned_url.return_value = "https://signed/put"

        await adapter.generate_url("videos/a.mp4", expires=300, operation="put")

        assert sdk_client.get_presigned_url.call_args.kwargs["Method"] == "PUT"

    @pytest.mark.asyncio
    async def test_generate_url_rejects_unknown_operation(self, adapter, sdk_client):
        """测试不支持的操作类型"""
        with pytest.raises(URLError):
            await adapter.generate_url("videos/a.mp4", operation="delete")

        sdk_client.get_presigned_url.assert_not_called()

    @pytest.mark.asyncio
    async def test_generate_url_sdk_failure(self, adapter, sdk_client):
        """测试SDK签名失败时抛出 URLError"""
        sdk_client.get_presigned_url.side_effect = CosClientError("bad credentials")

        with pytest.raises(URLError):
            await adapter.generate_url("videos/a.mp4")

    @pytest.mark.asyncio
    async def test_exists(self, adapter, sdk_client):
        """测试对象存在"""
        sdk_client.head_object.return_value = {"Content-Length": "10"}

        assert await adapter.exists("videos/a.mp4") is True

    @pytest.mark.asyncio
    async def test_exists_not_found(self, adapter, sdk_client):
        """测试404视为不存在"""
        sdk_client.head_object.side_effect = CosServiceError(
            "HEAD", {"code": "NoSuchResource", "message": "not found"}, 404
        )

        assert await adapter.exists("videos/missing.mp4") is False

    @pytest.mark.asyncio
    async def test_exists_other_errors_raise(self, adapter, sdk_client):
        """测试其他错误向上抛出"""
        sdk_client.head_object.side_effect = CosServiceError(
            "HEAD", {"code": "AccessDenied", "message": "denied"}, 403
        )

        with pytest.raises(MetadataError):
            await adapter.exists("videos/a.mp4")

    @pytest.mark.asyncio
    async def test_get_metadata(self, adapter, sdk_client):
        """测试读取对象元数据"""
        sdk_client.head_object.return_value = {
            "Content-Type": "video/mp4",
            "Content-Length": "2048",
            "ETag": '"tag"',
            "Last-Modified": "Mon, 01 Jan 2024 00:00:00 GMT",
            "x-cos-meta-origin": "direct"
        }

        metadata = await adapter.get_metadata("videos/a.mp4")

        assert metadata.content_type == "video/mp4"
        assert metadata.content_length == 2048
        assert metadata.etag == "tag"
        assert metadata.metadata == {"x-cos-meta-origin": "direct"}


@pytest.mark.unit
@pytest.mark.storage
class TestStorageService:
    """共享存储适配器的获取"""

    @pytest.fixture(autouse=True)
    def clear_cache(self):
        get_storage_service.cache_clear()
        yield
        get_storage_service.cache_clear()

    def test_missing_config_names_env_vars(self):
        """测试未配置COS时报出缺少的环境变量"""
        with patch("clipcatalog.core.storage.COSConfig.from_settings",
                   return_value=COSConfig(secret_id="id")):
            with pytest.raises(ConfigurationError) as exc_info:
                get_storage_service()

        assert exc_info.value.details["missing"] == ["COS_SECRET_KEY", "COS_BUCKET"]
        assert "COS_BUCKET" in exc_info.value.message

    def test_adapter_is_shared(self):
        """测试配置完整时多次获取返回同一个适配器"""
        config = COSConfig(secret_id="a", secret_key="b", bucket="c")
        with patch("clipcatalog.core.storage.COSConfig.from_settings", return_value=config), \
                patch("clipcatalog.core.storage.adapters.tencent_cos.CosS3Client"):
            first = get_storage_service()
            second = get_storage_service()

        assert isinstance(first, TencentCosAdapter)
        assert first is second

    def test_failure_is_not_cached(self):
        """测试补齐配置后可以重新获取"""
        with patch("clipcatalog.core.storage.COSConfig.from_settings", return_value=COSConfig()):
            with pytest.raises(ConfigurationError):
                get_storage_service()

        config = COSConfig(secret_id="a", secret_key="b", bucket="c")
        with patch("clipcatalog.core.storage.COSConfig.from_settings", return_value=config), \
                patch("clipcatalog.core.storage.adapters.tencent_cos.CosS3Client"):
            assert isinstance(get_storage_service(), TencentCosAdapter)


@pytest.mark.unit
@pytest.mark.storage
class TestCOSConfig:
    """COS配置派生"""

    def test_from_settings(self):
        """测试从全局配置读取 cos_* 配置项"""
        source = MagicMock(
            cos_secret_id="id", cos_secret_key="key", cos_region="ap-shanghai",
            cos_bucket="clips-1250000000", cos_scheme="https",
            cos_timeout=10, cos_max_retries=1, cos_retry_delay_base=0
        )

        config = COSConfig.from_settings(source)

        assert config.region == "ap-shanghai"
        assert config.bucket == "clips-1250000000"
        assert config.is_complete

    def test_missing_env(self):
        """测试缺少必填项时列出对应环境变量"""
        assert COSConfig().missing_env == ["COS_SECRET_ID", "COS_SECRET_KEY", "COS_BUCKET"]
        assert not COSConfig(secret_id="a", secret_key="b").is_complete
