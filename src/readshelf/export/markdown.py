"""Markdown 导出."""

import io
import re
import zipfile
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

import yaml

from readshelf.models.article import Article
from readshelf.models.database import Database
from readshelf.storage.articles import list_articles
from readshelf.storage.tags import list_article_tags_for_articles, list_tags


@dataclass
class MarkdownExport:
    """单篇文章的 Markdown 文档."""

    article_id: str
    filename: str
    content: str


def sanitize_filename(value: str) -> str:
    """替换文件名中的非法字符并压缩空白."""
    sanitized = re.sub(r'[\\/:*?"<>|]', "-", value)
    sanitized = re.sub(r"\s+", " ", sanitized).strip()
    return sanitized or "article"


def _single_line(value: str) -> str:
    return re.sub(r"\s*\r?\n\s*", " ", value).strip()


def build_frontmatter(article: Article, tags: list[str]) -> str:
    """生成 YAML frontmatter."""
    data = {
        "title": _single_line(article.title or "") or "Untitled",
        "url": article.url or "",
        "tags": [_single_line(tag) for tag in tags],
        "saved_at": article.saved_at.isoformat(),
    }
    body = yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=4096,
    )
    return f"---\n{body}---"


def build_markdown(article: Article, tags: list[str]) -> str:
    """生成文章的 Markdown 内容（frontmatter + 纯文本正文）."""
    body = (article.content_text or "").strip()
    return f"{build_frontmatter(article, tags)}\n\n{body}".rstrip() + "\n"


def build_filename(article: Article) -> str:
    """生成 title-id.md 文件名."""
    title = (article.title or "").strip() or "untitled"
    return f"{sanitize_filename(f'{title}-{article.id}')}.md"


async def create_markdown_exports(db: Database) -> list[MarkdownExport]:
    """为所有文章（含归档）生成 Markdown 文档."""
    articles = await list_articles(db, include_archived=True)
    tag_names = {tag.id: tag.name for tag in await list_tags(db)}
    links = await list_article_tags_for_articles(db, [a.id for a in articles])

    tags_by_article: dict[str, list[str]] = {}
    for link in links:
        name = tag_names.get(link.tag_id)
        if name is not None:
            tags_by_article.setdefault(link.article_id, []).append(name)

    return [
        MarkdownExport(
            article_id=article.id,
            filename=build_filename(article),
            content=build_markdown(article, sorted(tags_by_article.get(article.id, []))),
        )
        for article in articles
    ]


def build_zip_filename(today: date | None = None) -> str:
    """生成 ZIP 文件名."""
    return f"readshelf-export-{(today or date.today()).isoformat()}.zip"


async def build_markdown_zip(
    db: Database,
    on_progress: Callable[[int, int], None] | None = None,
) -> tuple[str, bytes]:
    """
    把所有文章打包为 ZIP.

    Returns:
        (文件名, ZIP 内容)
    """
    exports = await create_markdown_exports(db)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for index, item in enumerate(exports, 1):
            archive.writestr(item.filename, item.content)
            if on_progress is not None:
                on_progress(index, len(exports))

    return build_zip_filename(), buffer.getvalue()
