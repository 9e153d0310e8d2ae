"""
Clip Catalog - 短视频素材目录服务
"""

__version__ = "1.0.0"
