"""
Repository模块
包含所有数据访问层的Repository类
"""

from .base import BaseRepository
from .asset import AssetRepository

__all__ = [
    'BaseRepository',
    'AssetRepository'
]
