"""Static game page and the word catalog."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

router = APIRouter(tags=["pages"])


@router.get("/", include_in_schema=False)
async def index(request: Request):
    return FileResponse(request.app.state.settings.assets_dir / "verboten.html", media_type="text/html")


@router.get("/words.json")
async def words(request: Request):
    """The word catalog, keyed by language code."""
    return request.app.state.catalog.to_file_layout()
