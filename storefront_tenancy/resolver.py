"""
Tenant resolution for storefront requests.

TenantResolver turns (host, path, query string) into a Decision:

1. Static assets and auth callbacks pass through untouched.
2. Protected dashboard paths require a session; without one the client
   is redirected to the sign-in page with the path as callback.
3. Exempt paths, the platform's own hosts and the reserved 'www'
   subdomain pass through.
4. Anything else is resolved to a store through the cache and the
   Tenant Directory and rewritten to /store/<slug>/..., or to the
   tenant-not-found page when nothing matches.

The resolver owns no transport; see StorefrontTenantMiddleware.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urlencode

from django.http import HttpRequest

from storefront_tenancy.cache import TenantCache
from storefront_tenancy.conf import ResolverConfig
from storefront_tenancy.decisions import Decision, PassThrough, Redirect, Rewrite
from storefront_tenancy.directory import BaseTenantDirectory
from storefront_tenancy.hosts import HostInfo, classify_host
from storefront_tenancy.identity import BaseIdentityProvider, Principal
from storefront_tenancy.records import TenantRecord
from storefront_tenancy.routing import RouteKind, classify_path
from storefront_tenancy.utils import audit_log, encode_header_value


logger = logging.getLogger(__name__)

# Request metadata injected for downstream handlers
STORE_ID_HEADER = "X-Store-Id"
STORE_SLUG_HEADER = "X-Store-Slug"
STORE_NAME_HEADER = "X-Store-Name"
STORE_ORGANIZATION_HEADER = "X-Store-Organization-Id"

TENANT_HEADER_NAMES = (
    STORE_ID_HEADER,
    STORE_SLUG_HEADER,
    STORE_NAME_HEADER,
    STORE_ORGANIZATION_HEADER,
)


def tenant_headers(tenant: TenantRecord) -> Dict[str, str]:
    """Build the metadata headers describing a resolved tenant."""
    return {
        STORE_ID_HEADER: tenant.id,
        STORE_SLUG_HEADER: tenant.slug,
        STORE_NAME_HEADER: encode_header_value(tenant.name),
        STORE_ORGANIZATION_HEADER: tenant.organization_id,
    }


class TenantResolver:
    """
    Decides what happens to each inbound storefront request.

    Safe to share between threads: the only mutable state is the cache,
    which synchronizes itself.

    Args:
        config: Routing configuration
        directory: Tenant Directory used on cache misses
        identity_provider: Session verifier for protected paths
        cache: Resolution cache (a private one is created if omitted)
    """

    def __init__(
        self,
        config: ResolverConfig,
        directory: BaseTenantDirectory,
        identity_provider: BaseIdentityProvider,
        cache: TenantCache = None,
    ):
        self.config = config
        self.directory = directory
        self.identity_provider = identity_provider
        self.cache = cache if cache is not None else TenantCache()

    def decide(
        self,
        host: str,
        path: str,
        query_string: str = "",
        request: Optional[HttpRequest] = None,
    ) -> Decision:
        """
        Decide how to route a request.

        Args:
            host: The Host header, possibly with a port
            path: The request path
            query_string: The raw query string, without '?'
            request: The live request, handed to the Identity Provider

        Returns:
            PassThrough, Redirect or Rewrite
        """
        route = classify_path(path, self.config)

        if route in (RouteKind.STATIC_ASSET, RouteKind.AUTH_ROUTE):
            return PassThrough(reason="bypass", route=route)

        if route is RouteKind.PROTECTED_ADMIN_ROUTE:
            principal = self._verify_identity(request)
            if principal is None:
                audit_log(
                    event="login_required",
                    request=request,
                    success=False,
                    extra={"requested_path": path},
                )
                return Redirect(to=self.login_redirect_url(path))
            return PassThrough(reason="authenticated", route=route)

        if route is RouteKind.EXEMPT_PATH:
            return PassThrough(reason="exempt", route=route)

        host_info = classify_host(host, self.config.root_domains, self.config.dev_host_suffix)

        if not host_info.is_candidate:
            return PassThrough(reason="platform_host", route=route)

        if host_info.subdomain == self.config.reserved_subdomain:
            return PassThrough(reason="reserved_subdomain", route=route)

        tenant = self.resolve_host(host_info, request=request)

        if tenant is None:
            return self.not_found_rewrite(host_info.hostname)

        audit_log(
            event="tenant_resolved",
            tenant=tenant,
            hostname=host_info.hostname,
            request=request,
        )
        return Rewrite(
            path=self.store_path(tenant, path),
            query_string=query_string,
            headers=tenant_headers(tenant),
            tenant=tenant,
        )

    def resolve_host(
        self,
        host_info: HostInfo,
        request: Optional[HttpRequest] = None,
    ) -> Optional[TenantRecord]:
        """
        Resolve a classified host to a tenant, consulting the cache first.

        Directory failures are logged and treated as "not found".

        Returns:
            The TenantRecord, or None if no active store matches
        """
        hostname = host_info.hostname

        entry = self.cache.lookup(hostname)
        if entry is not None:
            logger.debug("Cache hit for %s", hostname)
            return entry.record

        try:
            tenant = self.directory.lookup(host_info.subdomain, hostname)
        except Exception as exc:
            audit_log(
                event="directory_lookup_failed",
                hostname=hostname,
                request=request,
                success=False,
                extra={"error": repr(exc)},
                exc_info=True,
            )
            return None

        if tenant is None:
            self.cache.set_missing(hostname, self.config.negative_cache_ttl)
            audit_log(
                event="tenant_not_found",
                hostname=hostname,
                request=request,
                success=False,
                extra={"subdomain": host_info.subdomain},
            )
            return None

        self.cache.set(hostname, tenant)
        return tenant

    def store_path(self, tenant: TenantRecord, path: str) -> str:
        """Build the canonical store path; '/' contributes no suffix."""
        suffix = "" if path == "/" else path
        return f"{self.config.store_path_prefix}/{tenant.slug}{suffix}"

    def not_found_rewrite(self, hostname: str) -> Rewrite:
        query = urlencode({self.config.not_found_query_param: hostname})
        return Rewrite(path=self.config.not_found_path, query_string=query)

    def login_redirect_url(self, path: str) -> str:
        query = urlencode({self.config.redirect_field_name: path})
        return f"{self.config.login_url}?{query}"

    def _verify_identity(self, request: Optional[HttpRequest]) -> Optional[Principal]:
        if request is None:
            return None
        try:
            return self.identity_provider.verify(request)
        except Exception as exc:
            audit_log(
                event="identity_verification_failed",
                request=request,
                success=False,
                extra={"error": repr(exc)},
                exc_info=True,
            )
            return None
