"""
Serializers for the internal store lookup endpoint.
"""

from django.utils.translation import gettext_lazy as _

from rest_framework import serializers

from storefront_tenancy.models import Store


class StoreLookupQuerySerializer(serializers.Serializer):
    """Validates ?subdomain=&host= (at least one is required)."""

    subdomain = serializers.CharField(required=False, allow_blank=True, max_length=63)
    host = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate(self, attrs):
        subdomain = (attrs.get("subdomain") or "").strip().lower()
        host = (attrs.get("host") or "").strip().lower()
        if not subdomain and not host:
            raise serializers.ValidationError(
                _("subdomain or host parameter required")
            )
        return {"subdomain": subdomain or None, "host": host or None}


class StoreLookupSerializer(serializers.ModelSerializer):
    """The public-safe store fields returned to the middleware."""

    id = serializers.CharField(read_only=True)
    customDomain = serializers.CharField(source="custom_domain", read_only=True, allow_null=True)
    organizationId = serializers.CharField(source="organization_id", read_only=True)

    class Meta:
        model = Store
        fields = ["id", "slug", "name", "subdomain", "customDomain", "organizationId"]
        read_only_fields = fields
