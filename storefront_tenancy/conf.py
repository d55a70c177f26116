"""
Configuration settings for django-storefront-tenancy.

Provides default settings, a Settings accessor class that allows
per-project customization via Django settings, and the immutable
ResolverConfig snapshot handed to the tenant resolver.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from django.conf import settings


# Default configuration values
STOREFRONT_TENANCY_DEFAULTS = {
    # Root domains owned by the platform itself (never custom domains)
    "ROOT_DOMAINS": ["platform.test", "localhost"],

    # Hostname suffix used in local development (vendor1.localhost)
    "DEV_HOST_SUFFIX": ".localhost",

    # Subdomain label that addresses the platform's own site
    "RESERVED_SUBDOMAIN": "www",

    # Framework internal asset prefixes that bypass tenant logic
    "ASSET_PREFIXES": ["/static/", "/media/"],

    "FAVICON_PATH": "/favicon.ico",

    # Authentication callback routes bypass tenant logic
    "AUTH_CALLBACK_PREFIX": "/api/auth",

    # Administrative sections that require a valid session
    "PROTECTED_PATHS": ["/dashboard", "/settings", "/team", "/projects"],

    # Path prefixes that never go through tenant resolution
    "EXEMPT_PATHS": [
        "/login",
        "/signup",
        "/verify-email",
        "/api",
        "/store",
        "/store-not-found",
        "/onboarding",
        "/checkout",
    ],

    # Paths matching this regex are never intercepted by the middleware
    "EXCLUDED_PATH_PATTERN": (
        r"^/(?:static/|media/|_image/|favicon\.ico$|sitemap\.xml$|robots\.txt$"
        r"|.*\.(?:svg|png|jpg|jpeg|gif|webp|ico)$)"
    ),

    # Canonical tenant route: /store/<slug>/...
    "STORE_PATH_PREFIX": "/store",

    # Internal rewrite target when no tenant matches the host
    "NOT_FOUND_PATH": "/store-not-found",
    "NOT_FOUND_QUERY_PARAM": "domain",

    # Sign-in redirect for protected paths
    "LOGIN_URL": "/login",
    "REDIRECT_FIELD_NAME": "callbackUrl",

    # Resolution cache time-to-live (seconds)
    "CACHE_TTL": 600,

    # Time-to-live for unknown hostnames (seconds), 0 to disable
    "NEGATIVE_CACHE_TTL": 0,

    # Tenant Directory implementation (dotted path)
    "DIRECTORY_CLASS": "storefront_tenancy.directory.ModelTenantDirectory",

    # Identity Provider implementation (dotted path)
    "IDENTITY_PROVIDER_CLASS": "storefront_tenancy.identity.SessionIdentityProvider",

    # Base URL of the internal store lookup endpoint (HttpTenantDirectory)
    "LOOKUP_URL": None,
    "LOOKUP_TIMEOUT": 5.0,

    # Header marking internal lookup calls, and an optional shared secret
    "INTERNAL_REQUEST_HEADER": "X-Internal-Request",
    "INTERNAL_REQUEST_TOKEN": None,

    # Enable audit logging for resolution events
    "AUDIT_ENABLED": True,

    # Audit logger name
    "AUDIT_LOGGER": "storefront_tenancy.audit",
}


class Settings:
    """
    Settings accessor that reads from Django settings with fallback to defaults.

    Usage:
        from storefront_tenancy.conf import storefront_settings
        ttl = storefront_settings.CACHE_TTL
    """

    def __getattr__(self, name: str):
        """
        Get a setting value.

        First checks Django settings for STOREFRONT_TENANCY_{name},
        then falls back to default value.

        Raises:
            AttributeError: If setting name is not valid
        """
        if name not in STOREFRONT_TENANCY_DEFAULTS:
            raise AttributeError(f"Invalid storefront_tenancy setting: '{name}'")

        django_setting_name = f"STOREFRONT_TENANCY_{name}"
        return getattr(
            settings,
            django_setting_name,
            STOREFRONT_TENANCY_DEFAULTS[name]
        )

    def __dir__(self):
        """Return list of available settings."""
        return list(STOREFRONT_TENANCY_DEFAULTS.keys())


# Singleton instance for easy access
storefront_settings = Settings()


@dataclass(frozen=True)
class ResolverConfig:
    """
    Immutable snapshot of everything the tenant resolver needs to decide.

    The resolver never reads Django settings directly; build one with
    from_settings() in production or construct it by hand in tests.
    """

    root_domains: Tuple[str, ...] = ("platform.test", "localhost")
    dev_host_suffix: Optional[str] = ".localhost"
    reserved_subdomain: str = "www"
    asset_prefixes: Tuple[str, ...] = ("/static/", "/media/")
    favicon_path: str = "/favicon.ico"
    auth_callback_prefix: str = "/api/auth"
    protected_paths: Tuple[str, ...] = ("/dashboard", "/settings", "/team", "/projects")
    exempt_paths: Tuple[str, ...] = (
        "/login",
        "/signup",
        "/verify-email",
        "/api",
        "/store",
        "/store-not-found",
        "/onboarding",
        "/checkout",
    )
    store_path_prefix: str = "/store"
    not_found_path: str = "/store-not-found"
    not_found_query_param: str = "domain"
    login_url: str = "/login"
    redirect_field_name: str = "callbackUrl"
    negative_cache_ttl: float = 0

    @classmethod
    def from_settings(cls, source: Settings = None) -> "ResolverConfig":
        """Snapshot the STOREFRONT_TENANCY_* settings."""
        source = source or storefront_settings
        return cls(
            root_domains=tuple(d.lower() for d in source.ROOT_DOMAINS),
            dev_host_suffix=source.DEV_HOST_SUFFIX or None,
            reserved_subdomain=source.RESERVED_SUBDOMAIN,
            asset_prefixes=tuple(source.ASSET_PREFIXES),
            favicon_path=source.FAVICON_PATH,
            auth_callback_prefix=source.AUTH_CALLBACK_PREFIX,
            protected_paths=tuple(source.PROTECTED_PATHS),
            exempt_paths=tuple(source.EXEMPT_PATHS),
            store_path_prefix=source.STORE_PATH_PREFIX.rstrip("/"),
            not_found_path=source.NOT_FOUND_PATH,
            not_found_query_param=source.NOT_FOUND_QUERY_PARAM,
            login_url=source.LOGIN_URL,
            redirect_field_name=source.REDIRECT_FIELD_NAME,
            negative_cache_ttl=source.NEGATIVE_CACHE_TTL,
        )
