"""标签存储与文章标签关联.

标签名只做去除首尾空白的规范化，比较是精确匹配（大小写敏感），
"Design" 与 "design" 是两个不同的标签。

涉及多行或多表的写入都在一个 Database.transaction() 中完成，
外部永远观察不到"标签已创建但关联缺失"这类中间状态。
"""

import logging

from sqlalchemy import delete
from sqlmodel import select

from readshelf.models.database import Database
from readshelf.models.tag import ArticleTag, Tag

logger = logging.getLogger(__name__)


def normalize_tag_name(name: str) -> str:
    """规范化标签名（只去除首尾空白）."""
    return name.strip()


def normalize_tag_names(names: list[str]) -> list[str]:
    """规范化并去重，丢弃空名称，保持首次出现的顺序."""
    normalized = (normalize_tag_name(name) for name in names)
    return list(dict.fromkeys(name for name in normalized if name))


async def get_or_create_tag(db: Database, name: str) -> Tag:
    """按名称查找标签，不存在时创建."""
    normalized = normalize_tag_name(name)
    if not normalized:
        msg = "标签名不能为空"
        raise ValueError(msg)

    async with db.transaction() as session:
        result = await session.execute(select(Tag).where(Tag.name == normalized))
        existing = result.scalars().first()
        if existing:
            return existing

        tag = Tag(name=normalized)
        session.add(tag)

    logger.info(f"创建标签: {normalized}")
    return tag


async def create_tag(db: Database, name: str) -> Tag | None:
    """创建标签，名称为空时返回 None."""
    if not normalize_tag_name(name):
        return None
    return await get_or_create_tag(db, name)


async def list_tags(db: Database) -> list[Tag]:
    """获取所有标签，按名称排序."""
    async with db.session() as session:
        result = await session.execute(select(Tag).order_by(Tag.name))
        return list(result.scalars().all())


async def delete_tag(db: Database, tag_id: str) -> None:
    """删除标签及其所有关联，文章本身不受影响."""
    async with db.transaction() as session:
        await session.execute(delete(ArticleTag).where(ArticleTag.tag_id == tag_id))
        await session.execute(delete(Tag).where(Tag.id == tag_id))


async def get_tags_for_article(db: Database, article_id: str) -> list[Tag]:
    """获取文章的标签，按名称排序."""
    stmt = (
        select(Tag)
        .join(ArticleTag, ArticleTag.tag_id == Tag.id)
        .where(ArticleTag.article_id == article_id)
        .order_by(Tag.name)
    )
    async with db.session() as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def list_article_tags_for_articles(
    db: Database, article_ids: list[str]
) -> list[ArticleTag]:
    """批量获取多篇文章的标签关联."""
    if not article_ids:
        return []

    stmt = select(ArticleTag).where(
        ArticleTag.article_id.in_(article_ids)  # type: ignore[attr-defined]
    )
    async with db.session() as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def set_tags_for_article(
    db: Database, article_id: str, tag_ids: list[str]
) -> None:
    """
    用给定集合整体替换文章的标签.

    只删除移除的关联、只插入新增的关联；没有变化时不产生任何写入。
    """
    next_ids = list(dict.fromkeys(tag_ids))
    wanted = set(next_ids)

    async with db.transaction() as session:
        result = await session.execute(
            select(ArticleTag).where(ArticleTag.article_id == article_id)
        )
        existing = result.scalars().all()
        existing_ids = {link.tag_id for link in existing}

        remove_ids = [link.id for link in existing if link.tag_id not in wanted]
        if remove_ids:
            await session.execute(
                delete(ArticleTag).where(
                    ArticleTag.id.in_(remove_ids)  # type: ignore[attr-defined]
                )
            )

        to_add = [tag_id for tag_id in next_ids if tag_id not in existing_ids]
        if to_add:
            session.add_all(
                [ArticleTag(article_id=article_id, tag_id=tag_id) for tag_id in to_add]
            )


async def add_tags_to_article(
    db: Database, article_id: str, names: list[str]
) -> list[ArticleTag]:
    """
    按名称给文章追加标签（导入流程使用）.

    缺失的标签在同一事务内批量创建；已存在的关联会被跳过。

    Returns:
        新插入的关联
    """
    normalized = normalize_tag_names(names)
    if not normalized:
        return []

    async with db.transaction() as session:
        result = await session.execute(
            select(Tag).where(Tag.name.in_(normalized))  # type: ignore[attr-defined]
        )
        tags_by_name = {tag.name: tag for tag in result.scalars().all()}

        created = [Tag(name=name) for name in normalized if name not in tags_by_name]
        if created:
            session.add_all(created)
            tags_by_name.update((tag.name, tag) for tag in created)

        linked_result = await session.execute(
            select(ArticleTag.tag_id).where(ArticleTag.article_id == article_id)
        )
        linked = set(linked_result.scalars().all())

        links = [
            ArticleTag(article_id=article_id, tag_id=tags_by_name[name].id)
            for name in normalized
            if tags_by_name[name].id not in linked
        ]
        session.add_all(links)

    if created:
        logger.info(f"导入时新建 {len(created)} 个标签: article={article_id}")
    return links
