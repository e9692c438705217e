"""Article 文章模型."""

from datetime import datetime
from uuid import uuid4

from sqlmodel import Field, SQLModel


class ParseStatus:
    """正文解析质量."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class Article(SQLModel, table=True):
    """离线保存的文章."""

    __tablename__ = "articles"  # type: ignore[assignment]

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    url: str = Field(index=True, description="原文链接")
    title: str = Field(description="标题")
    content_html: str = Field(default="", description="可读正文 HTML")
    content_text: str = Field(default="", description="纯文本正文")
    parse_status: str = Field(
        default=ParseStatus.SUCCESS,
        index=True,
        description="解析状态: success|partial|failed",
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    saved_at: datetime = Field(
        default_factory=datetime.utcnow, index=True, description="保存时间"
    )
    is_archived: bool = Field(default=False, index=True, description="是否归档")
    is_read: bool = Field(default=False, index=True, description="是否已读")
