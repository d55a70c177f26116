"""
REST endpoint used by HttpTenantDirectory to look stores up.

GET /api/stores/lookup?subdomain=vendor1&host=vendor1.platform.test
"""

import logging

from django.db import DatabaseError

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from storefront_tenancy.drf.authentication import InternalRequestAuthentication
from storefront_tenancy.drf.permissions import IsInternalRequest
from storefront_tenancy.drf.serializers import (
    StoreLookupQuerySerializer,
    StoreLookupSerializer,
)
from storefront_tenancy.models import Store
from storefront_tenancy.utils import audit_log


logger = logging.getLogger(__name__)


class StoreLookupView(APIView):
    """
    Find the active store matching a subdomain or a custom domain.

    Responses:
        200: The store's public-safe fields
        400: Neither subdomain nor host given
        401: Missing internal-request header
        404: No active store matches
        500: Database failure
    """

    authentication_classes = [InternalRequestAuthentication]
    permission_classes = [IsInternalRequest]

    def get(self, request: Request) -> Response:
        query = StoreLookupQuerySerializer(data=request.query_params)
        if not query.is_valid():
            errors = query.errors.get("non_field_errors") or query.errors
            return Response({"error": errors}, status=status.HTTP_400_BAD_REQUEST)

        subdomain = query.validated_data["subdomain"]
        host = query.validated_data["host"]

        try:
            store = Store.objects.matching_host(subdomain, host).first()
        except DatabaseError:
            logger.exception("Store lookup error for subdomain=%r host=%r", subdomain, host)
            return Response(
                {"error": "Internal server error"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        audit_log(
            event="store_lookup",
            tenant=store,
            hostname=host,
            request=request,
            success=store is not None,
            extra={"subdomain": subdomain},
        )

        if store is None:
            return Response({"error": "Store not found"}, status=status.HTTP_404_NOT_FOUND)

        return Response(StoreLookupSerializer(store).data)
