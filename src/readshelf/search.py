"""文章全文搜索.

用 Whoosh 在内存中为文章纯文本建索引，词按前缀匹配、大小写不敏感；
多个查询词之间为"与"关系。索引随用随建，不持久化。
"""

from collections.abc import Iterable

from whoosh.analysis import LowercaseFilter, RegexTokenizer
from whoosh.fields import ID, NUMERIC, TEXT, Schema
from whoosh.filedb.filestore import RamStorage
from whoosh.query import And, Prefix

from readshelf.models.article import Article

# 不做停用词过滤和词干化，保证任意前缀都能命中
_ANALYZER = RegexTokenizer() | LowercaseFilter()

_SCHEMA = Schema(
    article_id=ID(stored=True, unique=True),
    position=NUMERIC(stored=True, sortable=True),
    content=TEXT(analyzer=_ANALYZER),
)


def tokenize(text: str) -> list[str]:
    """切分为小写词."""
    return [token.text for token in _ANALYZER(text)]


class ArticleSearchIndex:
    """内存中的 Whoosh 索引."""

    def __init__(self) -> None:
        self.ix = RamStorage().create_index(_SCHEMA)

    def __len__(self) -> int:
        return self.ix.doc_count()

    def add_articles(self, articles: Iterable[tuple[str, str]]) -> None:
        """批量加入 (文章 ID, 正文)，加入顺序即搜索结果顺序."""
        offset = len(self)
        writer = self.ix.writer()
        for position, (article_id, text) in enumerate(articles, offset):
            writer.add_document(article_id=article_id, position=position, content=text)
        writer.commit()

    def search(self, query: str, limit: int) -> list[str]:
        """返回同时匹配所有查询词的文章 ID."""
        tokens = tokenize(query)
        if not tokens or limit < 1:
            return []

        q = And([Prefix("content", token) for token in tokens])
        with self.ix.searcher() as searcher:
            results = searcher.search(q, limit=limit, sortedby="position")
            return [hit["article_id"] for hit in results]


def build_article_search_index(articles: Iterable[Article]) -> ArticleSearchIndex:
    """用文章纯文本建立索引，没有正文的文章不入索引."""
    index = ArticleSearchIndex()
    index.add_articles(
        (article.id, article.content_text) for article in articles if article.content_text
    )
    return index


def search_articles(index: ArticleSearchIndex, query: str, limit: int) -> list[str]:
    """搜索文章，空查询返回空列表."""
    if not query.strip():
        return []
    return index.search(query, limit)
