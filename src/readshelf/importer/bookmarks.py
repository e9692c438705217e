"""书签导出文件解析."""

import logging
from pathlib import PurePath

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from readshelf.errors import ImportValidationError

logger = logging.getLogger(__name__)

# 导出文件的固定文件名
EXPORT_FILENAME = "ril_export.html"


class BookmarkCandidate(BaseModel):
    """一条待导入的书签."""

    url: str
    title: str
    tags: list[str] = Field(default_factory=list)


def split_tags(raw_tags: str | None) -> list[str]:
    """按逗号拆分标签，去除空白并丢弃空项."""
    if not raw_tags:
        return []
    return [tag.strip() for tag in raw_tags.split(",") if tag.strip()]


def parse_bookmark_export(document: str) -> list[BookmarkCandidate]:
    """
    解析书签导出文档.

    每个带 href 的 <a> 是一条书签：href 为 URL（为空则丢弃），
    链接文本为标题（为空时退回 URL），tags 属性为逗号分隔的标签。
    """
    soup = BeautifulSoup(document, "lxml")
    candidates: list[BookmarkCandidate] = []

    for link in soup.find_all("a", href=True):
        href = link.get("href")
        url = href.strip() if isinstance(href, str) else ""
        if not url:
            continue

        title = link.get_text().strip() or url
        raw_tags = link.get("tags")
        tags = split_tags(raw_tags if isinstance(raw_tags, str) else None)

        candidates.append(BookmarkCandidate(url=url, title=title, tags=tags))

    return candidates


def validate_bookmark_export(
    filename: str, candidates: list[BookmarkCandidate]
) -> None:
    """
    检查导出文件（在开始抓取前调用）.

    Raises:
        ImportValidationError: 文件名不对或没有任何链接
    """
    name = PurePath(filename).name
    if not name.lower().endswith(".html"):
        msg = "只支持 HTML 格式的导出文件"
        raise ImportValidationError(msg)

    if name != EXPORT_FILENAME:
        msg = f"请选择原始的 {EXPORT_FILENAME} 导出文件"
        raise ImportValidationError(msg)

    if not candidates:
        msg = "文件中没有找到任何保存的链接，请确认这是有效的导出文件"
        raise ImportValidationError(msg)


def load_bookmark_export(filename: str, document: str) -> list[BookmarkCandidate]:
    """解析并校验导出文件."""
    candidates = parse_bookmark_export(document)
    validate_bookmark_export(filename, candidates)
    logger.info(f"解析导出文件 {filename}: {len(candidates)} 条书签")
    return candidates
