"""
测试工具包
提供统一的测试工具和辅助函数
"""

from .mock_utils import InMemoryAssetRepository, MockBuilder, mock_settings
from .test_data_utils import TestDataGenerator

__all__ = [
    'InMemoryAssetRepository',
    'MockBuilder',
    'mock_settings',
    'TestDataGenerator',
]
