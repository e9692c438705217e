"""测试正文提取与 HTML 工具."""

from unittest.mock import patch

from readshelf.importer.extractor import extract_article
from readshelf.models import ParseStatus
from readshelf.utils.asset_url import (
    build_asset_url,
    get_asset_id_from_url,
    render_asset_urls,
)
from readshelf.utils.html_parser import extract_body_html, extract_title, html_to_text

PAGE = """
<html>
<head><title> My Page </title><style>p {color: red}</style></head>
<body>
<script>alert(1)</script>
<p>First paragraph.</p>
<p>Second paragraph.</p>
</body>
</html>
"""


class TestExtractArticle:
    """测试 extract_article."""

    def test_success(self) -> None:
        """提取成功时为 success."""
        with patch(
            "readshelf.importer.extractor.extract",
            side_effect=["<p>Clean</p>\n\n\n<p></p>", "Clean\n\n\n\ntext"],
        ):
            result = extract_article(PAGE, "https://example.com/")

        assert result.parse_status == ParseStatus.SUCCESS
        assert result.title == "My Page"
        assert result.content_html == "<p>Clean</p>"
        assert result.content_text == "Clean\n\ntext"

    def test_partial_falls_back_to_body(self) -> None:
        """提取不到正文时保存清理后的 body，状态为 partial."""
        with patch("readshelf.importer.extractor.extract", return_value=None):
            result = extract_article(PAGE, "https://example.com/")

        assert result.parse_status == ParseStatus.PARTIAL
        assert "First paragraph." in result.content_html
        assert "<script>" not in result.content_html
        assert result.content_text == "My Page\nFirst paragraph.\nSecond paragraph."

    def test_extractor_error_is_partial(self) -> None:
        """提取库抛出异常时同样退回 partial."""
        with patch(
            "readshelf.importer.extractor.extract", side_effect=ValueError("bad")
        ):
            result = extract_article(PAGE, "https://example.com/")

        assert result.parse_status == ParseStatus.PARTIAL

    def test_failed_when_no_text(self) -> None:
        """页面没有文字时为 failed."""
        with patch("readshelf.importer.extractor.extract", return_value=None):
            result = extract_article("<html><body><img src='a.png'></body></html>", "u")

        assert result.parse_status == ParseStatus.FAILED
        assert result.content_html == ""
        assert result.content_text == ""


class TestHtmlParser:
    """测试 HTML 工具."""

    def test_html_to_text(self) -> None:
        """移除脚本样式并压缩空行."""
        assert html_to_text(PAGE) == "My Page\nFirst paragraph.\nSecond paragraph."

    def test_extract_title(self) -> None:
        """提取并去除首尾空白."""
        assert extract_title(PAGE) == "My Page"
        assert extract_title("<p>no title</p>") is None
        assert extract_title("") is None

    def test_extract_body_html(self) -> None:
        """只保留 body 内容."""
        body = extract_body_html(PAGE)
        assert body.startswith("<p>First paragraph.</p>")
        assert "alert" not in body


class TestAssetUrl:
    """测试 asset:// 引用."""

    def test_build_and_parse(self) -> None:
        """生成与解析互逆，非本地引用返回 None."""
        assert build_asset_url("abc") == "asset://abc"
        assert get_asset_id_from_url("asset://abc") == "abc"
        assert get_asset_id_from_url("asset://") is None
        assert get_asset_id_from_url("https://example.com/a.png") is None

    def test_render(self) -> None:
        """只改写本地引用."""
        html = '<p><img src="asset://abc"><img src="https://cdn/x.png"></p>'
        rendered = render_asset_urls(html, "/api/assets/")
        assert 'src="/api/assets/abc"' in rendered
        assert 'src="https://cdn/x.png"' in rendered

    def test_render_without_refs(self) -> None:
        """没有本地引用时原样返回."""
        html = "<p>plain</p>"
        assert render_asset_urls(html, "/api/assets/") == html
