"""
Routes serving the site's named HTML pages from the pages directory.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from qaboard.config import Settings, get_settings

router = APIRouter()

# URL path -> file name inside the pages directory.
PAGES = {
    "/": "index.html",
    "/nn.html": "nn.html",
    "/about": "hom.html",
    "/answers.html": "answers.html",
    "/contact.html": "contact.html",
    "/another_page.html": "another_page.html",
}


def _page_endpoint(filename: str):
    def serve_page(settings: Settings = Depends(get_settings)):
        path = Path(settings.pages_dir) / filename
        if not path.is_file():
            raise HTTPException(status_code=404, detail="Page not found")
        return FileResponse(path)

    return serve_page


for _route_path, _filename in PAGES.items():
    router.add_api_route(
        _route_path,
        _page_endpoint(_filename),
        methods=["GET"],
        name=f"page:{_filename}",
        include_in_schema=False,
    )
