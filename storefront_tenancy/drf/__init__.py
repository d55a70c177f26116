"""
Django REST Framework integration for django-storefront-tenancy.

Provides the internal store lookup endpoint together with its
authentication and permission classes.
"""

from storefront_tenancy.drf.authentication import InternalRequestAuthentication
from storefront_tenancy.drf.permissions import HasResolvedTenant, IsInternalRequest

__all__ = [
    # Authentication
    "InternalRequestAuthentication",
    # Permissions
    "IsInternalRequest",
    "HasResolvedTenant",
]
