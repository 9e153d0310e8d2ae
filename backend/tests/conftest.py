"""
测试配置和fixtures
为所有测试提供共享的配置和fixtures

接口测试在进程内运行FastAPI应用（httpx.ASGITransport），
数据库与对象存储通过依赖覆盖和内存实现替换，不需要外部服务
"""

from datetime import datetime, timedelta
from unittest.mock import patch

import httpx
import pytest

from tests.utils import InMemoryAssetRepository, MockBuilder, TestDataGenerator

REPOSITORY_TARGETS = (
    "clipcatalog.services.catalog.query.service.AssetRepository",
    "clipcatalog.services.catalog.signed_url.service.AssetRepository",
    "clipcatalog.services.catalog.upload.service.AssetRepository",
)


@pytest.fixture(scope="function")
def mock_db_session():
    """数据库会话mock"""
    return MockBuilder.create_mock_db_session()


@pytest.fixture(scope="function")
def mock_storage():
    """对象存储mock"""
    return MockBuilder.create_mock_storage()


@pytest.fixture(scope="function")
def asset_repository():
    """内存素材仓库，替换所有服务中的 AssetRepository"""
    repository = InMemoryAssetRepository()
    patchers = [patch(target, return_value=repository) for target in REPOSITORY_TARGETS]
    for patcher in patchers:
        patcher.start()
    yield repository
    for patcher in patchers:
        patcher.stop()


@pytest.fixture(scope="function")
def seeded_assets(asset_repository):
    """25个素材，创建时间依次递增"""
    base_time = datetime(2024, 1, 1, 12, 0, 0)
    assets = TestDataGenerator.generate_assets(25, base_time=base_time, step=timedelta(minutes=1))
    asset_repository.extend(assets)
    return assets


@pytest.fixture(scope="function")
def same_time_assets(asset_repository):
    """创建时间相同的素材：3个 11:00，随后插入5个 12:00"""
    older = TestDataGenerator.generate_assets(
        3, base_time=datetime(2024, 1, 1, 11, 0, 0), step=timedelta(0), name_prefix="Old"
    )
    newer = TestDataGenerator.generate_assets(
        5, base_time=datetime(2024, 1, 1, 12, 0, 0), step=timedelta(0), name_prefix="Same"
    )
    asset_repository.extend(older)
    asset_repository.extend(newer)
    return older + newer


@pytest.fixture(scope="function")
def app(mock_db_session, mock_storage):
    """覆盖数据库与存储依赖的应用实例"""
    from clipcatalog.api.deps import get_storage
    from clipcatalog.db.database import get_db
    from clipcatalog.main import app as application

    async def override_get_db():
        yield mock_db_session

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_storage] = lambda: mock_storage
    yield application
    application.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app):
    """进程内HTTP测试客户端"""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver/api/v1") as http_client:
        yield http_client


# 测试标记配置
def pytest_configure(config):
    """配置pytest标记"""
    config.addinivalue_line("markers", "unit: 单元测试")
    config.addinivalue_line("markers", "interface: 接口测试")
    config.addinivalue_line("markers", "logging: 日志相关测试")
    config.addinivalue_line("markers", "catalog: 素材目录相关测试")
    config.addinivalue_line("markers", "storage: 对象存储相关测试")
    config.addinivalue_line("markers", "client: 客户端相关测试")
