"""Tag 标签模型."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class Tag(SQLModel, table=True):
    """标签（名称精确匹配，大小写敏感）."""

    __tablename__ = "tags"  # type: ignore[assignment]

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(unique=True, index=True, description="去除首尾空白后的名称")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class ArticleTag(SQLModel, table=True):
    """文章与标签的关联."""

    __tablename__ = "article_tags"  # type: ignore[assignment]
    __table_args__ = (UniqueConstraint("article_id", "tag_id"),)

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    article_id: str = Field(foreign_key="articles.id", index=True)
    tag_id: str = Field(foreign_key="tags.id", index=True)
