"""
DRF authentication for the internal store lookup endpoint.

Calls from the tenant middleware (HttpTenantDirectory) carry an
internal-request header. When INTERNAL_REQUEST_TOKEN is set the header
must hold that token; otherwise it must be the literal 'true'.
"""

from typing import Optional, Tuple

from django.contrib.auth.models import AnonymousUser
from django.utils.crypto import constant_time_compare
from django.utils.translation import gettext_lazy as _

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.request import Request

from storefront_tenancy.conf import storefront_settings
from storefront_tenancy.utils import audit_log


# Value placed in request.auth for verified internal calls
INTERNAL_AUTH = "internal"


class InternalRequestAuthentication(BaseAuthentication):
    """
    Authenticates server-to-server lookups by the internal-request header.

    Returns None when the header is absent so DRF answers 401, and
    raises AuthenticationFailed when it is present but wrong.
    """

    @property
    def header_key(self) -> str:
        header_name = storefront_settings.INTERNAL_REQUEST_HEADER
        # Convert to Django's META key format
        return f"HTTP_{header_name.upper().replace('-', '_')}"

    def authenticate(self, request: Request) -> Optional[Tuple[AnonymousUser, str]]:
        value = request.META.get(self.header_key)
        if not value:
            return None

        expected = storefront_settings.INTERNAL_REQUEST_TOKEN or "true"
        if not constant_time_compare(value, expected):
            audit_log(
                event="internal_request_rejected",
                request=request,
                success=False,
                extra={"reason": "bad_internal_header"},
            )
            raise exceptions.AuthenticationFailed(_("Invalid internal request header."))

        return AnonymousUser(), INTERNAL_AUTH

    def authenticate_header(self, request: Request) -> str:
        return storefront_settings.INTERNAL_REQUEST_HEADER
