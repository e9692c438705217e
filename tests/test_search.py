"""测试全文搜索."""

from readshelf.models import Article, ParseStatus
from readshelf.search import build_article_search_index, search_articles, tokenize
from readshelf.storage.articles import create_article


def article(article_id: str, text: str) -> Article:
    return Article(
        id=article_id,
        url=f"https://example.com/{article_id}",
        title=article_id,
        content_text=text,
        parse_status=ParseStatus.SUCCESS,
    )


class TestSearchIndex:
    """测试内存索引."""

    def test_tokenize(self) -> None:
        """按词切分并转小写."""
        assert tokenize("Hello, World! async-IO") == ["hello", "world", "async", "io"]

    def test_prefix_and_case_insensitive(self) -> None:
        """前缀匹配且不区分大小写."""
        index = build_article_search_index(
            [article("a", "Python concurrency"), article("b", "Rust ownership")]
        )
        assert search_articles(index, "PYTH", 10) == ["a"]
        assert search_articles(index, "own", 10) == ["b"]

    def test_all_terms_must_match(self) -> None:
        """多个词需要同时命中."""
        index = build_article_search_index(
            [article("a", "python web"), article("b", "python data")]
        )
        assert search_articles(index, "python", 10) == ["a", "b"]
        assert search_articles(index, "python data", 10) == ["b"]
        assert search_articles(index, "python golang", 10) == []

    def test_stopwords_and_single_letters_are_indexed(self) -> None:
        """常见停用词和单字母前缀同样可以搜索."""
        index = build_article_search_index(
            [article("a", "The art of reading"), article("b", "Zen garden")]
        )
        assert search_articles(index, "the of", 10) == ["a"]
        assert search_articles(index, "z", 10) == ["b"]

    def test_limit_and_empty_query(self) -> None:
        """限制条数，空查询返回空."""
        index = build_article_search_index(
            [article(str(i), "shared words") for i in range(5)]
        )
        assert search_articles(index, "shared", 2) == ["0", "1"]
        assert search_articles(index, "   ", 10) == []

    def test_articles_without_text_skipped(self) -> None:
        """没有正文的文章不入索引."""
        index = build_article_search_index([article("a", ""), article("b", "text")])
        assert len(index) == 1


class TestSearchApi:
    """测试搜索 API."""

    async def test_search_endpoint(self, client, db) -> None:
        """返回匹配文章摘要."""
        saved = await create_article(
            db,
            url="https://example.com/s",
            title="Searchable",
            content_html="",
            content_text="Offline reading library",
            parse_status=ParseStatus.SUCCESS,
        )

        response = await client.get("/api/articles/search", params={"q": "offl"})
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == saved.id

        empty = (await client.get("/api/articles/search", params={"q": "nothing"})).json()
        assert empty == {"total": 0, "items": []}
