"""
DRF permission classes for django-storefront-tenancy.
"""

from rest_framework.permissions import BasePermission
from rest_framework.request import Request
from rest_framework.views import APIView

from storefront_tenancy.drf.authentication import INTERNAL_AUTH


class IsInternalRequest(BasePermission):
    """
    Allows only requests verified by InternalRequestAuthentication.

    Usage:
        class StoreLookupView(APIView):
            authentication_classes = [InternalRequestAuthentication]
            permission_classes = [IsInternalRequest]
    """

    message = "Unauthorized"

    def has_permission(self, request: Request, view: APIView) -> bool:
        return request.auth == INTERNAL_AUTH


class HasResolvedTenant(BasePermission):
    """
    Requires the storefront middleware to have resolved a tenant.

    For tenant-scoped API views mounted under the canonical store route.
    """

    message = "No store could be resolved for this host."

    def has_permission(self, request: Request, view: APIView) -> bool:
        return getattr(request, "tenant", None) is not None
