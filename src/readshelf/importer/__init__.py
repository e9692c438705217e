"""书签导入模块."""

from readshelf.importer.assets import CacheAssetsResult, cache_article_assets
from readshelf.importer.bookmarks import (
    BookmarkCandidate,
    load_bookmark_export,
    parse_bookmark_export,
    validate_bookmark_export,
)
from readshelf.importer.extractor import ExtractedArticle, extract_article
from readshelf.importer.fetcher import FetchResult, fetch_many, fetch_one
from readshelf.importer.pipeline import (
    ImportReport,
    ImportRunner,
    create_import,
    run_import,
)

__all__ = [
    "BookmarkCandidate",
    "CacheAssetsResult",
    "ExtractedArticle",
    "FetchResult",
    "ImportReport",
    "ImportRunner",
    "cache_article_assets",
    "create_import",
    "extract_article",
    "fetch_many",
    "fetch_one",
    "load_bookmark_export",
    "parse_bookmark_export",
    "run_import",
    "validate_bookmark_export",
]
