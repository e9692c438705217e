"""HTML 解析工具."""

import re

from bs4 import BeautifulSoup


def html_to_text(html: str) -> str:
    """
    将 HTML 转换为纯文本.

    Args:
        html: HTML 内容

    Returns:
        提取的纯文本内容
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")

    # 移除 script 和 style 标签
    for element in soup(["script", "style", "noscript", "nav", "footer", "header"]):
        element.decompose()

    text = soup.get_text(separator="\n")

    # 清理多余空白
    lines = [line.strip() for line in text.split("\n")]
    text = "\n".join(line for line in lines if line)

    return text.strip()


def extract_body_html(html: str) -> str:
    """
    取出页面 body 内的 HTML，去掉脚本和样式.

    Returns:
        body 内部 HTML；没有 body 时返回整个文档
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")
    for element in soup(["script", "style", "noscript"]):
        element.decompose()

    container = soup.body or soup
    body = container.decode_contents()
    return re.sub(r"\n\s*\n", "\n\n", body).strip()


def extract_title(html: str) -> str | None:
    """提取页面 <title>."""
    if not html:
        return None

    soup = BeautifulSoup(html, "lxml")
    if soup.title and soup.title.string:
        title = soup.title.string.strip()
        return title or None
    return None
