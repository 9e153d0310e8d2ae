"""
素材数据访问层
全文检索与按创建时间排序都交给数据库完成
"""

from typing import List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.sql import Select

from clipcatalog.models.asset import Asset, name_search_vector, search_config
from .base import BaseRepository


class AssetRepository(BaseRepository):
    """素材Repository"""

    @property
    def model(self):
        return Asset

    @staticmethod
    def _apply_search(stmt: Select, search_term: Optional[str]) -> Select:
        """追加全文检索条件（分词匹配，非子串匹配）"""
        if not search_term:
            return stmt
        tsquery = func.plainto_tsquery(search_config(), search_term)
        return stmt.where(name_search_vector(Asset.name).op("@@")(tsquery))

    async def list_assets(
        self,
        search_term: Optional[str] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Asset]:
        """
        按创建时间倒序获取素材

        创建时间相同时按插入顺序倒序，保证分页切片稳定。
        offset/limit 为空时返回全部匹配结果。
        """
        stmt = self._apply_search(select(Asset), search_term)
        stmt = stmt.order_by(desc(Asset.created_at), desc(Asset.seq))
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_assets(self, search_term: Optional[str] = None) -> int:
        """统计匹配素材总数，与分页查询使用同一过滤条件"""
        stmt = self._apply_search(select(func.count(Asset.id)), search_term)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def get_asset_by_id(self, asset_id: str) -> Optional[Asset]:
        """根据ID获取素材"""
        return await self.get_by_id(asset_id)

    async def get_asset_by_storage_key(self, storage_key: str) -> Optional[Asset]:
        """根据存储键获取素材"""
        return await self.first(select(Asset).where(Asset.storage_key == storage_key))

    async def create_asset(
        self,
        name: str,
        storage_key: str,
        size: int,
        media_type: str
    ) -> Asset:
        """创建素材记录，调用前对象必须已写入存储"""
        return await self.save(Asset(
            name=name,
            storage_key=storage_key,
            size=size,
            media_type=media_type
        ))
