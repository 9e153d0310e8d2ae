"""
素材目录查询服务
把 (搜索词, 页码, 每页数量) 转换为有界、有序、无重复的一页结果
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from clipcatalog.core.config import settings
from clipcatalog.core.log_messages import log_messages
from clipcatalog.core.log_utils import get_logger
from clipcatalog.models.asset import Asset
from clipcatalog.repositories.asset import AssetRepository
from clipcatalog.utils.validation_utils import clamp, normalize_search_term

logger = get_logger(__name__)

MIN_PAGE_SIZE = 1


@dataclass
class CatalogPage:
    """
    一页查询结果

    Attributes:
        items: 按创建时间倒序的素材
        page: 实际使用的页码（≥1）
        limit: 实际使用的每页数量（[1, 100]）
        total: 同一过滤条件下的匹配总数
        has_more: page * limit < total
    """
    items: List[Asset] = field(default_factory=list)
    page: int = 1
    limit: int = 1
    total: int = 0
    has_more: bool = False


def normalize_page(page: int) -> int:
    """页码下限为1"""
    return max(1, page)


def normalize_limit(limit: int) -> int:
    """每页数量限制在 [1, catalog_max_page_size]"""
    return clamp(limit, MIN_PAGE_SIZE, settings.catalog_max_page_size)


class CatalogQueryService:
    """素材目录查询服务"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = AssetRepository(db)

    async def query(
        self,
        search_term: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> Union[CatalogPage, List[Asset]]:
        """
        查询素材目录

        page 或 limit 任一缺失时走兼容模式：返回全部匹配素材的列表，
        不截断；否则返回 CatalogPage。存储层错误直接抛出，不做重试。

        Args:
            search_term: 搜索词，空白视为未提供
            page: 页码
            limit: 每页数量

        Returns:
            Union[CatalogPage, List[Asset]]: 分页结果或兼容模式的完整列表
        """
        term = normalize_search_term(search_term)

        if page is None or limit is None:
            items = await self.repository.list_assets(search_term=term)
            logger.info(log_messages.CATALOG_QUERY_SUCCESS,
                        mode="legacy",
                        search_term=term,
                        count=len(items))
            return items

        safe_page = normalize_page(page)
        safe_limit = normalize_limit(limit)

        total = await self.repository.count_assets(search_term=term)
        items = await self.repository.list_assets(
            search_term=term,
            offset=(safe_page - 1) * safe_limit,
            limit=safe_limit
        )

        result = CatalogPage(
            items=items,
            page=safe_page,
            limit=safe_limit,
            total=total,
            has_more=safe_page * safe_limit < total
        )

        logger.info(log_messages.CATALOG_QUERY_SUCCESS,
                    mode="paginated",
                    search_term=term,
                    page=safe_page,
                    limit=safe_limit,
                    total=total,
                    count=len(items))
        return result
