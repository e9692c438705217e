"""数据模型."""

from readshelf.models.article import Article, ParseStatus
from readshelf.models.asset import Asset
from readshelf.models.database import Database, close_db, get_database, init_db
from readshelf.models.import_job import ImportFailure, ImportJob, ImportJobStatus
from readshelf.models.settings import SettingItem
from readshelf.models.tag import ArticleTag, Tag

__all__ = [
    "Article",
    "ArticleTag",
    "Asset",
    "Database",
    "ImportFailure",
    "ImportJob",
    "ImportJobStatus",
    "ParseStatus",
    "SettingItem",
    "Tag",
    "close_db",
    "get_database",
    "init_db",
]
