from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from .. import database
from ..services.sitemap import build_sitemap

router = APIRouter(tags=["sitemap"])


@router.get("/sitemap.xml", response_class=Response)
def sitemap(request: Request, db: Session = Depends(database.get_db)):
    """Storefront sitemap, rebuilt at most once per SITEMAP_TTL_SECONDS."""
    frontend_url = request.app.state.settings.frontend_url
    xml = request.app.state.sitemap_cache.get(lambda: build_sitemap(db, frontend_url))
    return Response(content=xml, media_type="application/xml")
