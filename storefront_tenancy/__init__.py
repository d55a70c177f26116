"""
django-storefront-tenancy

A Django library that routes storefront requests to the right store
of a multi-tenant e-commerce platform by subdomain or custom domain.
"""

__version__ = "0.1.0"

# Public API exports
from storefront_tenancy.cache import TenantCache
from storefront_tenancy.decisions import PassThrough, Redirect, Rewrite
from storefront_tenancy.exceptions import (
    StorefrontTenancyError,
    DirectoryLookupError,
    IdentityVerificationError,
)
from storefront_tenancy.hosts import HostInfo, classify_host
from storefront_tenancy.records import TenantRecord

__all__ = [
    "__version__",
    "TenantCache",
    "TenantRecord",
    "HostInfo",
    "classify_host",
    "PassThrough",
    "Redirect",
    "Rewrite",
    "StorefrontTenancyError",
    "DirectoryLookupError",
    "IdentityVerificationError",
]
