"""正文提取适配器."""

import logging
import re
from collections.abc import Callable

from pydantic import BaseModel
from trafilatura import extract

from readshelf.errors import ExtractionFailure
from readshelf.models.article import ParseStatus
from readshelf.utils.html_parser import extract_body_html, extract_title, html_to_text

logger = logging.getLogger(__name__)


class ExtractedArticle(BaseModel):
    """正文提取结果."""

    title: str | None = None
    content_html: str = ""
    content_text: str = ""
    parse_status: str = ParseStatus.SUCCESS


# 输入原始 HTML 与页面 URL，输出提取结果
Extractor = Callable[[str, str], ExtractedArticle]


def _clean_html(html: str) -> str:
    """清理 HTML 内容."""
    # 移除多余空白
    html = re.sub(r"\n\s*\n", "\n\n", html)
    # 移除空标签
    html = re.sub(r"<(\w+)>\s*</\1>", "", html)
    return html.strip()


def _clean_text(text: str) -> str:
    """清理纯文本内容."""
    text = re.sub(r"\n{3,}", "\n\n", text)
    lines = [line.strip() for line in text.split("\n")]
    text = "\n".join(lines)
    # 移除控制字符
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f]", "", text)
    return text.strip()


def _readable(html: str, url: str) -> tuple[str, str]:
    """
    用 trafilatura 提取可读正文.

    Raises:
        ExtractionFailure: 无法得到正文
    """
    try:
        html_content = extract(
            html,
            url=url,
            include_comments=False,
            include_tables=True,
            include_images=True,
            include_links=True,
            output_format="html",
            favor_precision=False,
        )
        text_content = extract(
            html,
            url=url,
            include_comments=False,
            include_tables=True,
            output_format="txt",
            favor_precision=False,
        )
    except Exception as e:
        raise ExtractionFailure(str(e)) from e

    if not html_content or not text_content:
        msg = "无法从页面内容中提取正文"
        raise ExtractionFailure(msg)

    return _clean_html(html_content), _clean_text(text_content)


def extract_article(html: str, url: str) -> ExtractedArticle:
    """
    从原始 HTML 提取文章.

    提取成功为 success；提取失败但页面有文字时保存清理后的原始 body，
    状态为 partial；连文字都没有时为 failed。任何情况都不抛出异常。
    """
    title = extract_title(html)

    try:
        content_html, content_text = _readable(html, url)
    except ExtractionFailure as e:
        logger.warning(f"正文提取失败，退回原始 HTML: {url} - {e}")
    else:
        return ExtractedArticle(
            title=title,
            content_html=content_html,
            content_text=content_text,
            parse_status=ParseStatus.SUCCESS,
        )

    raw_text = _clean_text(html_to_text(html))
    if not raw_text:
        return ExtractedArticle(title=title, parse_status=ParseStatus.FAILED)

    return ExtractedArticle(
        title=title,
        content_html=extract_body_html(html),
        content_text=raw_text,
        parse_status=ParseStatus.PARTIAL,
    )
