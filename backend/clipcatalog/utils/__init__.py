"""
通用工具模块包
提供项目通用的工具函数和辅助类
"""

from .config_utils import (
    get_project_root,
    get_workspace_path,
    get_config_path,
    parse_json_config,
)

from .id_utils import (
    generate_uuid,
    is_valid_uuid,
    generate_storage_key,
)

from .file_utils import (
    get_file_extension,
    resolve_media_type,
    format_file_size,
)

from .validation_utils import (
    parse_int_param,
    clamp,
    normalize_search_term,
)

__all__ = [
    'get_project_root',
    'get_workspace_path',
    'get_config_path',
    'parse_json_config',
    'generate_uuid',
    'is_valid_uuid',
    'generate_storage_key',
    'get_file_extension',
    'resolve_media_type',
    'format_file_size',
    'parse_int_param',
    'clamp',
    'normalize_search_term',
]
