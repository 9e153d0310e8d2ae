"""
素材数据模型
一条记录对应对象存储中一个已成功写入的媒体文件
"""

from datetime import datetime, timezone
from typing import Dict, Any

from sqlalchemy import BigInteger, Column, Identity, Index, String, Text, func, literal_column
from sqlalchemy.dialects.postgresql import TIMESTAMP

from clipcatalog.core.config import settings
from clipcatalog.db.database import Base


def search_config():
    """全文检索配置名，以SQL字面量内联，保证查询表达式与索引表达式一致"""
    language = settings.catalog_search_language.replace("'", "''")
    return literal_column(f"'{language}'")


def name_search_vector(column):
    """名称全文检索向量表达式，索引与查询共用"""
    return func.to_tsvector(search_config(), column)


class Asset(Base):
    """媒体素材模型"""

    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, index=True)

    # 展示名称（已去除首尾空白）
    name = Column(String(255), nullable=False)

    # 对象存储键，写入后不可变更
    storage_key = Column(Text, nullable=False, unique=True)

    size = Column(BigInteger, nullable=False)  # 文件大小（字节）
    media_type = Column(String(100), nullable=False)  # MIME类型

    created_at = Column(
        TIMESTAMP,
        default=lambda: datetime.now(timezone.utc).replace(tzinfo=None),
        nullable=False
    )
    # 插入顺序，用于创建时间相同时的稳定排序
    seq = Column(BigInteger, Identity(always=False), nullable=False, unique=True)

    __table_args__ = (
        Index("ix_assets_created_at_seq", created_at.desc(), seq.desc()),
        Index("ix_assets_name_search", name_search_vector(name), postgresql_using="gin"),
    )

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, name={self.name}, storage_key={self.storage_key})>"

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            'id': self.id,
            'name': self.name,
            'storage_key': self.storage_key,
            'size': self.size,
            'media_type': self.media_type,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
