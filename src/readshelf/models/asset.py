"""Asset 本地缓存资源模型."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, LargeBinary
from sqlmodel import Field, SQLModel


class Asset(SQLModel, table=True):
    """文章引用的本地缓存图片."""

    __tablename__ = "assets"  # type: ignore[assignment]

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    article_id: str = Field(foreign_key="articles.id", index=True, description="所属文章")
    url: str = Field(index=True, description="图片原始 URL")
    content_type: str = Field(default="application/octet-stream")
    blob: bytes = Field(sa_column=Column(LargeBinary, nullable=False))
    created_at: datetime = Field(default_factory=datetime.utcnow)
