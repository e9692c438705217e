"""导出 API."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from readshelf.export.markdown import build_markdown_zip, create_markdown_exports
from readshelf.models.database import Database, get_database

router = APIRouter(prefix="/api/export", tags=["export"])


@router.get("/markdown")
async def export_markdown(db: Database = Depends(get_database)) -> dict:
    """逐篇导出 Markdown."""
    exports = await create_markdown_exports(db)
    return {
        "total": len(exports),
        "items": [
            {
                "article_id": item.article_id,
                "filename": item.filename,
                "content": item.content,
            }
            for item in exports
        ],
    }


@router.get("/zip")
async def export_zip(db: Database = Depends(get_database)) -> Response:
    """下载全部 Markdown 的 ZIP 包."""
    filename, content = await build_markdown_zip(db)
    return Response(
        content=content,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
