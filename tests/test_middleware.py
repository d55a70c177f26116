"""
End-to-end tests for StorefrontTenantMiddleware.

Requests go through the full middleware stack in tests/settings.py and
land on the echo views in tests/urls.py.
"""

import pytest
from django.contrib.auth import get_user_model
from django.test import Client, RequestFactory

from storefront_tenancy.cache import get_default_cache
from storefront_tenancy.conf import ResolverConfig
from storefront_tenancy.decisions import Rewrite
from storefront_tenancy.middleware import StorefrontTenantMiddleware, meta_key
from storefront_tenancy.models import Organization, Store
from storefront_tenancy.resolver import TenantResolver
from tests.fakes import ACME, FakeDirectory, FakeIdentityProvider


@pytest.fixture(autouse=True)
def clear_cache():
    get_default_cache().invalidate()
    yield
    get_default_cache().invalidate()


@pytest.fixture
def client():
    return Client()


@pytest.fixture
def organization(db):
    return Organization.objects.create(name="Acme Holdings", slug="acme-holdings")


@pytest.fixture
def acme(organization):
    return Store.objects.create(
        organization=organization,
        name="Acme & Co. Café",
        slug="acme-store",
        subdomain="acme",
    )


@pytest.fixture
def vendor(organization):
    return Store.objects.create(
        organization=organization,
        name="Vendor",
        slug="vendor",
        custom_domain="vendor.com",
    )


@pytest.fixture
def user(db):
    User = get_user_model()
    return User.objects.create_user(username="alice", password="testpass123")


class TestStorefrontRewrite:
    """Tenant hosts are served from the canonical store path."""

    def test_subdomain_with_path_and_query(self, client, acme):
        response = client.get("/products", {"page": "2"}, HTTP_HOST="acme.platform.test")

        assert response.status_code == 200
        data = response.json()
        assert data["path"] == "/store/acme-store/products"
        assert data["query"] == "page=2"
        assert data["kwargs"] == {"slug": "acme-store", "rest": "products"}
        assert data["tenant_slug"] == "acme-store"
        assert data["original_path"] == "/products"

    def test_root_path(self, client, acme):
        response = client.get("/", HTTP_HOST="acme.platform.test")

        assert response.status_code == 200
        assert response.json()["path"] == "/store/acme-store"

    def test_tenant_headers(self, client, acme):
        response = client.get("/", HTTP_HOST="acme.platform.test")

        headers = response.json()["headers"]
        assert headers["X-Store-Id"] == str(acme.pk)
        assert headers["X-Store-Slug"] == "acme-store"
        assert headers["X-Store-Name"] == "Acme%20%26%20Co.%20Caf%C3%A9"
        assert headers["X-Store-Organization-Id"] == str(acme.organization_id)

    def test_custom_domain(self, client, vendor):
        response = client.get("/", HTTP_HOST="vendor.com")

        assert response.status_code == 200
        assert response.json()["path"] == "/store/vendor"

    def test_dev_host_with_port(self, client, acme):
        response = client.get("/cart", HTTP_HOST="acme.localhost:3000")

        assert response.status_code == 200
        assert response.json()["path"] == "/store/acme-store/cart"

    def test_mixed_case_host(self, client, acme):
        response = client.get("/", HTTP_HOST="ACME.Platform.Test")

        assert response.json()["tenant_slug"] == "acme-store"

    def test_second_request_served_from_cache(self, client, acme, django_assert_num_queries):
        client.get("/", HTTP_HOST="acme.platform.test")

        with django_assert_num_queries(0):
            response = client.get("/", HTTP_HOST="acme.platform.test")

        assert response.json()["tenant_slug"] == "acme-store"


class TestStoreNotFound:
    """Unknown tenant hosts render the not-found page at the original URL."""

    def test_unknown_subdomain(self, client, db):
        response = client.get("/", HTTP_HOST="unknown.platform.test")

        assert response.status_code == 404
        assert b"Store Not Found" in response.content
        assert b"unknown.platform.test" in response.content

    def test_soft_deleted_store(self, client, acme):
        acme.soft_delete()

        response = client.get("/", HTTP_HOST="acme.platform.test")

        assert response.status_code == 404
        assert b"acme.platform.test" in response.content

    def test_domain_is_escaped(self, client, db):
        response = client.get("/store-not-found", {"domain": "<script>"}, HTTP_HOST="platform.test")

        assert response.status_code == 404
        assert b"<script>" not in response.content
        assert b"&lt;script&gt;" in response.content


class TestPassThrough:
    """Requests the middleware leaves alone."""

    def test_platform_root_domain(self, client, acme):
        response = client.get("/about", HTTP_HOST="platform.test")

        assert response.status_code == 200
        data = response.json()
        assert data["path"] == "/about"
        assert data["tenant_slug"] is None

    def test_reserved_www(self, client, db):
        response = client.get("/", HTTP_HOST="www.platform.test")

        assert response.status_code == 200
        assert response.content == b"platform home"

    def test_exempt_path_on_tenant_host(self, client, acme):
        response = client.get("/checkout", HTTP_HOST="acme.platform.test")

        assert response.status_code == 200
        assert response.json()["path"] == "/checkout"
        assert response.json()["tenant_slug"] is None

    def test_static_asset_not_resolved(self, client, db, django_assert_num_queries):
        with django_assert_num_queries(0):
            response = client.get("/static/app.js", HTTP_HOST="unknown.platform.test")

        assert b"Store Not Found" not in response.content

    def test_spoofed_tenant_headers_stripped(self, client, db):
        response = client.get(
            "/about",
            HTTP_HOST="platform.test",
            HTTP_X_STORE_SLUG="evil",
            HTTP_X_STORE_ID="1",
        )

        data = response.json()
        assert data["headers"] == {}
        assert data["tenant_slug"] is None

    def test_unlisted_host_rejected(self, settings, db):
        settings.ALLOWED_HOSTS = [".platform.test"]

        response = Client().get("/", HTTP_HOST="vendor.com")

        assert response.status_code == 400

    def test_excluded_path_pattern(self, settings, db):
        settings.STOREFRONT_TENANCY_EXCLUDED_PATH_PATTERN = r"^/about"
        client = Client()

        response = client.get("/about", HTTP_HOST="unknown.platform.test")

        assert response.status_code == 200
        assert response.json()["path"] == "/about"


class TestProtectedPaths:
    """Dashboard paths require a session."""

    def test_anonymous_redirected_to_login(self, client, db):
        response = client.get("/dashboard/settings", HTTP_HOST="platform.test")

        assert response.status_code == 302
        assert response["Location"] == "/login?callbackUrl=%2Fdashboard%2Fsettings"

    def test_anonymous_redirected_on_tenant_host(self, client, acme):
        response = client.get("/dashboard/settings", HTTP_HOST="acme.platform.test")

        assert response.status_code == 302
        assert response["Location"].startswith("/login?callbackUrl=")

    def test_authenticated_passes(self, client, user):
        client.force_login(user)

        response = client.get("/dashboard/settings", HTTP_HOST="platform.test")

        assert response.status_code == 200
        assert response.json()["path"] == "/dashboard/settings"

    def test_login_page_reachable(self, client, db):
        response = client.get("/login", {"callbackUrl": "/dashboard"}, HTTP_HOST="platform.test")

        assert response.status_code == 200


class TestMiddlewareUnit:
    """The middleware with an injected resolver."""

    @pytest.fixture
    def middleware(self):
        resolver = TenantResolver(
            config=ResolverConfig(),
            directory=FakeDirectory([ACME]),
            identity_provider=FakeIdentityProvider(),
        )
        seen = []

        def get_response(request):
            seen.append(request)
            return "response"

        middleware = StorefrontTenantMiddleware(get_response, resolver=resolver)
        middleware.seen = seen
        return middleware

    def test_rewrite_applied_before_view(self, middleware):
        request = RequestFactory().get("/products?page=2", HTTP_HOST="acme.platform.test")

        assert middleware(request) == "response"

        handled = middleware.seen[0]
        assert handled.path_info == "/store/acme-store/products"
        assert handled.META["PATH_INFO"] == "/store/acme-store/products"
        assert handled.GET["page"] == "2"
        assert handled.tenant == ACME
        assert handled.headers["X-Store-Slug"] == "acme-store"

    def test_tenant_none_without_rewrite(self, middleware):
        request = RequestFactory().get("/about", HTTP_HOST="platform.test")

        middleware(request)

        assert middleware.seen[0].tenant is None

    def test_apply_not_found_rewrite(self, middleware):
        request = RequestFactory().get("/", HTTP_HOST="missing.platform.test")
        middleware._apply_rewrite(request, Rewrite(path="/store-not-found", query_string="domain=x.com"))

        assert request.path_info == "/store-not-found"
        assert request.GET["domain"] == "x.com"
        assert meta_key("X-Store-Slug") not in request.META


def test_meta_key():
    assert meta_key("X-Store-Organization-Id") == "HTTP_X_STORE_ORGANIZATION_ID"
