"""
工具函数单元测试
覆盖查询参数解析、存储键生成与文件工具
"""

import pytest

from clipcatalog.utils.config_utils import parse_json_config
from clipcatalog.utils.file_utils import format_file_size, get_file_extension, resolve_media_type
from clipcatalog.utils.id_utils import generate_storage_key, generate_uuid, is_valid_uuid
from clipcatalog.utils.validation_utils import clamp, normalize_search_term, parse_int_param


@pytest.mark.unit
class TestParseIntParam:
    """宽松整数解析"""

    @pytest.mark.parametrize("raw,expected", [
        ("2", 2),
        (" 10", 10),
        ("3abc", 3),
        ("-1", -1),
        ("0", 0),
        (7, 7),
    ])
    def test_parses_leading_integer(self, raw, expected):
        """测试取开头的整数部分"""
        assert parse_int_param(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "NaN", "  ", True])
    def test_invalid_values_are_treated_as_missing(self, raw):
        """测试无法解析时返回None"""
        assert parse_int_param(raw) is None

    def test_clamp(self):
        """测试区间限制"""
        assert clamp(0, 1, 100) == 1
        assert clamp(500, 1, 100) == 100
        assert clamp(12, 1, 100) == 12

    def test_normalize_search_term(self):
        """测试搜索词去空白，空白串视为未提供"""
        assert normalize_search_term("  sunset ") == "sunset"
        assert normalize_search_term("   ") is None
        assert normalize_search_term(None) is None


@pytest.mark.unit
class TestIdUtils:
    """ID与存储键生成"""

    def test_generate_uuid(self):
        """测试生成的UUID有效且不重复"""
        first, second = generate_uuid(), generate_uuid()
        assert is_valid_uuid(first)
        assert first != second

    def test_is_valid_uuid_rejects_garbage(self):
        """测试无效UUID"""
        assert not is_valid_uuid("not-a-uuid")
        assert not is_valid_uuid(None)

    def test_storage_key_keeps_extension(self):
        """测试存储键保留原始扩展名（小写）"""
        key = generate_storage_key("videos", "Clip.MP4")

        assert key.startswith("videos/")
        assert key.endswith(".mp4")
        assert is_valid_uuid(key[len("videos/"):-len(".mp4")])

    def test_storage_key_without_filename(self):
        """测试没有文件名时只有UUID"""
        key = generate_storage_key("/videos/")

        assert key.startswith("videos/")
        assert is_valid_uuid(key[len("videos/"):])

    def test_storage_keys_are_unique(self):
        """测试同名文件生成不同的存储键"""
        keys = {generate_storage_key("videos", "clip.mp4") for _ in range(50)}
        assert len(keys) == 50


@pytest.mark.unit
class TestFileAndConfigUtils:
    """文件与配置工具"""

    def test_resolve_media_type(self):
        """测试空内容类型回退为二进制流"""
        assert resolve_media_type("video/mp4") == "video/mp4"
        assert resolve_media_type("") == "application/octet-stream"
        assert resolve_media_type(None) == "application/octet-stream"

    def test_get_file_extension(self):
        """测试扩展名提取"""
        assert get_file_extension("a/b/Clip.MOV") == ".mov"
        assert get_file_extension("noext") == ""

    def test_format_file_size(self):
        """测试文件大小格式化"""
        assert format_file_size(512) == "512 B"
        assert format_file_size(10 * 1024 * 1024) == "10.0 MB"

    def test_parse_json_config(self):
        """测试JSON与逗号分隔两种写法"""
        assert parse_json_config('["http://a.com", "http://b.com"]') == ["http://a.com", "http://b.com"]
        assert parse_json_config("http://a.com, http://b.com") == ["http://a.com", "http://b.com"]
        assert parse_json_config('"*"') == ["*"]
        assert parse_json_config("") == []
