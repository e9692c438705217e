"""文章存储."""

from datetime import datetime
from typing import Any

from sqlmodel import select

from readshelf.models.article import Article
from readshelf.models.database import Database

# 允许通过 update_article 修改的字段
UPDATABLE_FIELDS = frozenset(
    {
        "url",
        "title",
        "content_html",
        "content_text",
        "parse_status",
        "saved_at",
        "is_archived",
        "is_read",
    }
)


async def create_article(
    db: Database,
    *,
    url: str,
    title: str,
    content_html: str,
    content_text: str,
    parse_status: str,
    saved_at: datetime | None = None,
) -> Article:
    """创建文章."""
    now = datetime.utcnow()
    article = Article(
        url=url,
        title=title,
        content_html=content_html,
        content_text=content_text,
        parse_status=parse_status,
        created_at=now,
        updated_at=now,
        saved_at=saved_at or now,
    )
    async with db.transaction() as session:
        session.add(article)
    return article


async def update_article(
    db: Database, article_id: str, **updates: Any
) -> Article | None:
    """
    部分更新文章，自动刷新 updated_at.

    Returns:
        更新后的文章；文章不存在时返回 None
    """
    unknown = set(updates) - UPDATABLE_FIELDS
    if unknown:
        msg = f"不支持更新的字段: {', '.join(sorted(unknown))}"
        raise ValueError(msg)

    async with db.transaction() as session:
        article = await session.get(Article, article_id)
        if article is None:
            return None
        for key, value in updates.items():
            setattr(article, key, value)
        article.updated_at = datetime.utcnow()
    return article


async def get_article_by_id(db: Database, article_id: str) -> Article | None:
    """按 ID 获取文章."""
    async with db.session() as session:
        return await session.get(Article, article_id)


async def list_articles(
    db: Database, include_archived: bool = False
) -> list[Article]:
    """获取文章列表，按保存时间倒序."""
    stmt = select(Article)
    if not include_archived:
        stmt = stmt.where(Article.is_archived == False)  # noqa: E712
    stmt = stmt.order_by(Article.saved_at.desc())  # type: ignore[attr-defined]

    async with db.session() as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def mark_read(db: Database, article_id: str, read: bool = True) -> Article | None:
    """标记已读/未读."""
    return await update_article(db, article_id, is_read=read)


async def archive_article(
    db: Database, article_id: str, archived: bool = True
) -> Article | None:
    """归档/取消归档."""
    return await update_article(db, article_id, is_archived=archived)
