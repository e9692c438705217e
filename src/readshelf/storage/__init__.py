"""存储层."""

from readshelf.storage.articles import (
    archive_article,
    create_article,
    get_article_by_id,
    list_articles,
    mark_read,
    update_article,
)
from readshelf.storage.assets import (
    create_asset,
    get_asset_by_id,
    list_assets_for_article,
)
from readshelf.storage.import_jobs import (
    complete_import_job,
    create_import_job,
    get_import_job,
    list_import_failures,
    record_import_job_result,
    start_import_job,
    update_import_job,
)
from readshelf.storage.maintenance import clear_all_data
from readshelf.storage.settings import (
    ReaderPreferences,
    get_reader_preferences,
    get_storage_persistence_state,
    set_reader_preferences,
    set_storage_persistence_state,
)
from readshelf.storage.tags import (
    add_tags_to_article,
    create_tag,
    delete_tag,
    get_or_create_tag,
    get_tags_for_article,
    list_article_tags_for_articles,
    list_tags,
    set_tags_for_article,
)

__all__ = [
    "ReaderPreferences",
    "add_tags_to_article",
    "archive_article",
    "clear_all_data",
    "complete_import_job",
    "create_article",
    "create_asset",
    "create_import_job",
    "create_tag",
    "delete_tag",
    "get_article_by_id",
    "get_asset_by_id",
    "get_import_job",
    "get_or_create_tag",
    "get_reader_preferences",
    "get_storage_persistence_state",
    "get_tags_for_article",
    "list_article_tags_for_articles",
    "list_articles",
    "list_assets_for_article",
    "list_import_failures",
    "list_tags",
    "mark_read",
    "record_import_job_result",
    "set_reader_preferences",
    "set_storage_persistence_state",
    "set_tags_for_article",
    "start_import_job",
    "update_article",
    "update_import_job",
]
