"""
素材Repository单元测试
检查生成的SQL语句与会话提交/回滚行为
"""

import pytest
from unittest.mock import MagicMock
from sqlalchemy.dialects import postgresql

from clipcatalog.models.asset import Asset
from clipcatalog.repositories.asset import AssetRepository


def compile_sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))


@pytest.mark.unit
@pytest.mark.catalog
class TestAssetRepository:
    """AssetRepository 单元测试类"""

    @pytest.fixture
    def repository(self, mock_db_session):
        return AssetRepository(mock_db_session)

    def _set_scalars(self, session, values):
        result = MagicMock()
        result.scalars.return_value.all.return_value = values
        result.scalars.return_value.first.return_value = values[0] if values else None
        result.scalar.return_value = len(values)
        session.execute.return_value = result

    @pytest.mark.asyncio
    async def test_list_assets_orders_newest_first(self, repository, mock_db_session):
        """测试按创建时间倒序、插入顺序倒序"""
        self._set_scalars(mock_db_session, [])

        await repository.list_assets(offset=10, limit=10)

        sql = compile_sql(mock_db_session.execute.await_args.args[0])
        assert "ORDER BY assets.created_at DESC, assets.seq DESC" in sql
        assert "LIMIT 10" in sql
        assert "OFFSET 10" in sql

    @pytest.mark.asyncio
    async def test_list_assets_without_limit(self, repository, mock_db_session):
        """测试兼容模式不截断"""
        self._set_scalars(mock_db_session, [])

        await repository.list_assets()

        sql = compile_sql(mock_db_session.execute.await_args.args[0])
        assert "LIMIT" not in sql
        assert "WHERE" not in sql

    @pytest.mark.asyncio
    async def test_search_uses_full_text_match(self, repository, mock_db_session):
        """测试搜索使用全文检索而非子串匹配"""
        self._set_scalars(mock_db_session, [])

        await repository.list_assets(search_term="sunset beach", limit=5)

        sql = compile_sql(mock_db_session.execute.await_args.args[0])
        assert "to_tsvector('english', assets.name) @@ plainto_tsquery('english', 'sunset beach')" in sql
        assert "LIKE" not in sql

    @pytest.mark.asyncio
    async def test_count_uses_same_filter(self, repository, mock_db_session):
        """测试计数使用同一过滤条件"""
        self._set_scalars(mock_db_session, [1, 2, 3])

        total = await repository.count_assets(search_term="sunset")

        sql = compile_sql(mock_db_session.execute.await_args.args[0])
        assert total == 3
        assert "count(assets.id)" in sql
        assert "plainto_tsquery('english', 'sunset')" in sql

    @pytest.mark.asyncio
    async def test_create_asset_commits(self, repository, mock_db_session):
        """测试创建记录时生成ID并提交"""
        asset = await repository.create_asset(
            name="Intro",
            storage_key="videos/a.mp4",
            size=10,
            media_type="video/mp4"
        )

        assert isinstance(asset, Asset)
        assert asset.id
        mock_db_session.add.assert_called_once_with(asset)
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.refresh.assert_awaited_once_with(asset)

    @pytest.mark.asyncio
    async def test_create_asset_rolls_back_on_error(self, repository, mock_db_session):
        """测试提交失败时回滚并重新抛出"""
        mock_db_session.commit.side_effect = RuntimeError("unique violation")

        with pytest.raises(RuntimeError):
            await repository.create_asset(
                name="Intro",
                storage_key="videos/a.mp4",
                size=10,
                media_type="video/mp4"
            )

        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_asset_by_id_missing(self, repository, mock_db_session):
        """测试记录不存在时返回None"""
        self._set_scalars(mock_db_session, [])

        assert await repository.get_asset_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_get_asset_by_storage_key(self, repository, mock_db_session):
        """测试按存储键查询素材"""
        asset = Asset(id="a1", name="Intro", storage_key="videos/a.mp4", size=10, media_type="video/mp4")
        self._set_scalars(mock_db_session, [asset])

        assert await repository.get_asset_by_storage_key("videos/a.mp4") is asset

        sql = compile_sql(mock_db_session.execute.await_args.args[0])
        assert "WHERE assets.storage_key = 'videos/a.mp4'" in sql

    @pytest.mark.asyncio
    async def test_query_error_propagates(self, repository, mock_db_session):
        """测试查询失败时直接抛出"""
        mock_db_session.execute.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError):
            await repository.get_asset_by_id("a1")
