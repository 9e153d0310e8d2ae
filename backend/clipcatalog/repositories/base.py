"""
Repository基础类
封装会话上的单条查询与新记录写入，写入失败时回滚
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from clipcatalog.core.log_utils import get_logger
from clipcatalog.core.log_messages import log_messages
from clipcatalog.utils.id_utils import generate_uuid

logger = get_logger(__name__)


class BaseRepository(ABC):
    """Repository基础类，子类通过 model 指定ORM模型"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @property
    @abstractmethod
    def model(self) -> Type[Any]:
        """Repository对应的模型类"""

    async def first(self, stmt: Select) -> Optional[Any]:
        """执行查询并返回第一条记录，没有时返回None"""
        try:
            result = await self.db.execute(stmt)
        except Exception as e:
            logger.error(log_messages.DB_QUERY_FAILED, exception=e, model_name=self.model.__name__)
            raise
        return result.scalars().first()

    async def get_by_id(self, record_id: str) -> Optional[Any]:
        return await self.first(select(self.model).where(self.model.id == record_id))

    async def save(self, instance: Any) -> Any:
        """
        写入一条新记录

        未设置id时生成UUID；提交或刷新失败时回滚会话并重新抛出。
        """
        if not getattr(instance, "id", None):
            instance.id = generate_uuid()

        self.db.add(instance)
        try:
            await self.db.commit()
            await self.db.refresh(instance)
        except Exception as e:
            await self.db.rollback()
            logger.error(log_messages.DB_UPDATE_FAILED, exception=e,
                         model_name=self.model.__name__, record_id=instance.id)
            raise

        logger.info(log_messages.DB_UPDATE_SUCCESS, model_name=self.model.__name__, record_id=instance.id)
        return instance
