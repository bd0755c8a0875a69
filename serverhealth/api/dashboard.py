import os

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from serverhealth.config import get_settings

router = APIRouter()


@router.get("/", include_in_schema=False)
def dashboard() -> Response:
    """Serve <WEB_ROOT>/index.html, or a plain-text 404 if it is missing."""
    index_path = os.path.join(get_settings().web_root, "index.html")
    try:
        with open(index_path, "r", encoding="utf-8") as handle:
            html = handle.read()
    except OSError:
        html = ""

    if not html:
        return PlainTextResponse("index.html not found", status_code=404)
    return HTMLResponse(content=html)
