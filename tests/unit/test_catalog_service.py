"""Unit tests for product restocks and the sitemap."""
from datetime import datetime

from shonenmart import crud, schemas
from shonenmart.services import catalog as catalog_service
from shonenmart.services.sitemap import SitemapCache, build_sitemap


class TestRestockAlerts:
    def test_restock_from_zero_emails_subscribers(self, db, make_product, mailer, email_client, notifier):
        product = make_product(name="Tanjiro Earrings", stock=0)
        crud.subscribe(db, "user_a", product.id, "a@example.com")
        crud.subscribe(db, "user_b", product.id, "b@example.com")

        updated = catalog_service.update_product(
            db, product.id, schemas.ProductUpdate(stock=5), True, mailer, notifier
        )

        assert updated.stock == 5
        assert sorted(m["to"] for m in email_client.sent) == ["a@example.com", "b@example.com"]
        assert crud.is_subscribed(db, "user_a", product.id) is False

    def test_restock_emails_each_alert_once(self, db, make_product, mailer, email_client, notifier):
        product = make_product(stock=0)
        crud.subscribe(db, "user_a", product.id, "a@example.com")

        catalog_service.update_product(db, product.id, schemas.ProductUpdate(stock=5), True, mailer, notifier)
        catalog_service.update_product(db, product.id, schemas.ProductUpdate(stock=0), True, mailer, notifier)
        catalog_service.update_product(db, product.id, schemas.ProductUpdate(stock=3), True, mailer, notifier)

        assert len(email_client.sent) == 1

    def test_stock_change_while_in_stock_sends_nothing(self, db, make_product, mailer, email_client, notifier):
        product = make_product(stock=2)
        crud.subscribe(db, "user_a", product.id, "a@example.com")

        catalog_service.update_product(db, product.id, schemas.ProductUpdate(stock=9), True, mailer, notifier)

        assert email_client.sent == []

    def test_full_update_restock(self, db, make_product, mailer, email_client, notifier):
        product = make_product(slug="figure", name="Figure", stock=0)
        crud.subscribe(db, "user_a", product.id, "a@example.com")

        catalog_service.update_product(
            db, product.id, schemas.ProductCreate(slug="figure", name="Figure", price=30, stock=4), False, mailer, notifier
        )

        assert len(email_client.sent) == 1

    def test_unknown_product(self, db, mailer, notifier):
        assert catalog_service.update_product(db, "missing", schemas.ProductUpdate(stock=1), True, mailer, notifier) is None


class TestSitemap:
    def test_lists_home_series_and_products(self, db, make_product):
        crud.create_series(db, schemas.AnimeSeriesCreate(name="Naruto", slug="naruto"))
        product = make_product()

        xml = build_sitemap(db, "https://shop.example.com")

        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<loc>https://shop.example.com/</loc>" in xml
        assert "<loc>https://shop.example.com/collections/naruto</loc>" in xml
        assert f"<loc>https://shop.example.com/product/{product.id}</loc>" in xml
        assert f"<lastmod>{datetime.now().date().isoformat()}</lastmod>" in xml

    def test_cache_reuses_until_ttl(self):
        now = [100.0]
        builds = []
        cache = SitemapCache(ttl_seconds=60, clock=lambda: now[0])

        def build():
            builds.append(1)
            return f"<urlset n='{len(builds)}'/>"

        assert cache.get(build) == "<urlset n='1'/>"
        now[0] = 159.0
        assert cache.get(build) == "<urlset n='1'/>"
        now[0] = 160.0
        assert cache.get(build) == "<urlset n='2'/>"

    def test_invalidate_forces_rebuild(self):
        cache = SitemapCache(ttl_seconds=3600, clock=lambda: 0.0)
        cache.get(lambda: "old")
        cache.invalidate()
        assert cache.get(lambda: "new") == "new"
