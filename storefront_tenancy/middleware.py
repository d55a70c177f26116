"""
Middleware for django-storefront-tenancy.

Provides StorefrontTenantMiddleware, which asks the TenantResolver what
to do with each request and applies the answer: a redirect response,
an internal rewrite of the request path, or nothing at all.
"""

from typing import Callable

from django.http import HttpRequest, HttpResponse, HttpResponseRedirect, QueryDict

from storefront_tenancy.cache import get_default_cache
from storefront_tenancy.conf import ResolverConfig, storefront_settings
from storefront_tenancy.decisions import Redirect, Rewrite
from storefront_tenancy.directory import get_directory
from storefront_tenancy.identity import get_identity_provider
from storefront_tenancy.resolver import TENANT_HEADER_NAMES, TenantResolver
from storefront_tenancy.routing import compile_matcher


def meta_key(header: str) -> str:
    """Convert a header name to Django's META key format."""
    return f"HTTP_{header.upper().replace('-', '_')}"


class StorefrontTenantMiddleware:
    """
    Middleware that routes storefront requests to their tenant.

    Place it after AuthenticationMiddleware so the session identity
    provider can read request.user. On a resolved tenant, request.tenant
    holds the TenantRecord and the X-Store-* headers are available via
    request.headers; otherwise request.tenant is None.

    Hosts are read with request.get_host(), so every custom domain must be
    admitted by ALLOWED_HOSTS. Unlisted hosts fail with DisallowedHost (a
    400 response) before they can reach the tenant-not-found page.

    Configuration:
        STOREFRONT_TENANCY_EXCLUDED_PATH_PATTERN: Paths never intercepted
        STOREFRONT_TENANCY_DIRECTORY_CLASS: Tenant Directory implementation
        STOREFRONT_TENANCY_IDENTITY_PROVIDER_CLASS: Session verifier
    """

    def __init__(
        self,
        get_response: Callable[[HttpRequest], HttpResponse],
        resolver: TenantResolver = None,
    ):
        """
        Initialize the middleware.

        Args:
            get_response: The next middleware/view in the chain
            resolver: Prebuilt resolver (built from settings if omitted)
        """
        self.get_response = get_response
        self._resolver = resolver
        self._excluded = compile_matcher(storefront_settings.EXCLUDED_PATH_PATTERN)

    @property
    def resolver(self) -> TenantResolver:
        """Lazy-load the resolver to avoid errors during startup."""
        if self._resolver is None:
            self._resolver = TenantResolver(
                config=ResolverConfig.from_settings(),
                directory=get_directory(),
                identity_provider=get_identity_provider(),
                cache=get_default_cache(),
            )
        return self._resolver

    def _is_excluded(self, path: str) -> bool:
        return self._excluded is not None and self._excluded.match(path) is not None

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request.tenant = None

        # Tenant metadata is only ever set by this middleware
        self._strip_tenant_headers(request)

        if self._is_excluded(request.path_info):
            return self.get_response(request)

        decision = self.resolver.decide(
            host=request.get_host(),
            path=request.path_info,
            query_string=request.META.get("QUERY_STRING", ""),
            request=request,
        )

        if isinstance(decision, Redirect):
            return HttpResponseRedirect(decision.to)

        if isinstance(decision, Rewrite):
            self._apply_rewrite(request, decision)

        return self.get_response(request)

    def _strip_tenant_headers(self, request: HttpRequest) -> None:
        for header in TENANT_HEADER_NAMES:
            request.META.pop(meta_key(header), None)
        request.__dict__.pop("headers", None)

    def _apply_rewrite(self, request: HttpRequest, decision: Rewrite) -> None:
        """Point the request at the rewritten path before URL resolution."""
        request.original_path = request.path
        script_name = request.META.get("SCRIPT_NAME", "")

        request.path_info = decision.path
        request.path = f"{script_name.rstrip('/')}{decision.path}"
        request.META["PATH_INFO"] = decision.path
        request.META["QUERY_STRING"] = decision.query_string
        request.GET = QueryDict(decision.query_string)

        for header, value in decision.headers.items():
            request.META[meta_key(header)] = value
        # request.headers is cached from META on first access
        request.__dict__.pop("headers", None)

        request.tenant = decision.tenant
