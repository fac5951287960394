import time
from xml.etree import ElementTree

from sqlalchemy.orm import Session

from .. import models

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def build_sitemap(db: Session, frontend_url: str) -> str:
    urlset = ElementTree.Element("urlset", xmlns=SITEMAP_NS)

    def add(path, lastmod=None):
        url = ElementTree.SubElement(urlset, "url")
        ElementTree.SubElement(url, "loc").text = f"{frontend_url}{path}"
        if lastmod is not None:
            ElementTree.SubElement(url, "lastmod").text = lastmod.date().isoformat()

    add("/")
    add("/collections")
    for series in db.query(models.AnimeSeries).order_by(models.AnimeSeries.slug):
        add(f"/collections/{series.slug}")
    for product in db.query(models.Product).order_by(models.Product.created_at.desc(), models.Product.id):
        add(f"/product/{product.id}", product.updated_at)

    return '<?xml version="1.0" encoding="UTF-8"?>' + ElementTree.tostring(urlset, encoding="unicode")


class SitemapCache:
    """Holds the last rendered sitemap for `ttl_seconds`. Not a source of truth."""

    def __init__(self, ttl_seconds: int = 3600, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._xml = None
        self._expires_at = 0.0

    def get(self, build):
        now = self.clock()
        if self._xml is None or now >= self._expires_at:
            self._xml = build()
            self._expires_at = now + self.ttl_seconds
        return self._xml

    def invalidate(self):
        self._xml = None
