"""导出模块."""

from readshelf.export.markdown import (
    MarkdownExport,
    build_markdown_zip,
    create_markdown_exports,
)

__all__ = [
    "MarkdownExport",
    "build_markdown_zip",
    "create_markdown_exports",
]
