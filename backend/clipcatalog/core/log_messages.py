"""
日志消息模板模块
统一管理所有业务日志消息模板，便于维护和国际化
"""

from typing import Dict, Any


class LogMessages:
    """日志消息模板类"""

    # ==================== 通用日志消息 ====================
    START_OPERATION = "开始执行操作: {operation_name}"
    OPERATION_SUCCESS = "操作成功完成: {operation_name}"
    OPERATION_FAILED = "操作执行失败: {operation_name}"

    # ==================== 素材目录相关 ====================
    CATALOG_QUERY_START = "开始查询素材目录"
    CATALOG_QUERY_SUCCESS = "素材目录查询成功"
    CATALOG_QUERY_FAILED = "素材目录查询失败"
    ASSET_NOT_FOUND = "素材不存在"

    # ==================== 签名URL相关 ====================
    SIGNED_URL_ISSUED = "签名URL签发成功"
    SIGNED_URL_FAILED = "签名URL签发失败"

    # ==================== 文件上传相关 ====================
    FILE_UPLOAD_START = "开始文件上传"
    FILE_UPLOAD_SUCCESS = "文件上传成功"
    FILE_UPLOAD_FAILED = "文件上传失败"
    FILE_VALIDATION_FAILED = "文件验证失败"
    ORPHANED_BLOB = "元数据写入失败，存储对象已成为孤儿对象"

    # ==================== 数据库操作相关 ====================
    DB_QUERY_START = "开始数据库查询"
    DB_QUERY_SUCCESS = "数据库查询成功"
    DB_QUERY_FAILED = "数据库查询失败"
    DB_UPDATE_START = "开始数据库更新"
    DB_UPDATE_SUCCESS = "数据库更新成功"
    DB_UPDATE_FAILED = "数据库更新失败"

    # ==================== 客户端相关 ====================
    PAGE_FETCH_START = "开始加载目录分页"
    PAGE_FETCH_DISCARDED = "丢弃过期的分页结果"
    PAGE_FETCH_FAILED = "目录分页加载失败"
    PREFETCH_FAILED = "预览预取失败"
    POSTER_CAPTURE_SKIPPED = "海报帧截取失败，跳过"
    DEBOUNCE_CALLBACK_FAILED = "防抖回调执行失败"

    # ==================== HTTP请求相关 ====================
    HTTP_REQUEST = "{method} {path} {status_code} {elapsed_ms}ms"

    @classmethod
    def format_message(cls, message_template: str, **kwargs: Any) -> str:
        """格式化日志消息模板"""
        return message_template.format(**kwargs)

    @classmethod
    def get_structured_data(cls, **kwargs: Any) -> Dict[str, Any]:
        """获取结构化日志数据"""
        return kwargs


# 全局实例
log_messages = LogMessages()
