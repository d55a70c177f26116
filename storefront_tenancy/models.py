"""
Core data models for django-storefront-tenancy.

Defines the Organization and Store models backing the ORM tenant
directory and the internal store lookup endpoint.
"""

import re
import uuid
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


# A single DNS label: letters, digits and inner hyphens
SUBDOMAIN_REGEX = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


class Organization(models.Model):
    """
    The merchant account that owns one or more stores.

    Attributes:
        id: UUID primary key
        name: Human-readable display name
        slug: URL-friendly unique identifier
        created_at: Timestamp of creation
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    name = models.CharField(
        max_length=255,
        help_text=_("Display name of the organization")
    )

    slug = models.SlugField(
        max_length=100,
        unique=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "storefront_tenancy_organization"
        ordering = ["name"]
        verbose_name = _("Organization")
        verbose_name_plural = _("Organizations")

    def __str__(self) -> str:
        return self.name


class StoreQuerySet(models.QuerySet):
    """QuerySet helpers for storefront resolution."""

    def active(self):
        """Stores that have not been soft-deleted."""
        return self.filter(deleted_at__isnull=True)

    def matching_host(self, subdomain: Optional[str], hostname: Optional[str]):
        """
        Active stores addressed by a subdomain label or a custom domain.

        Matches subdomain equality OR custom_domain equality. Ordered by
        creation so the first match is stable.
        """
        conditions = Q()
        if subdomain:
            conditions |= Q(subdomain=subdomain.lower())
        if hostname:
            conditions |= Q(custom_domain=hostname.lower())

        if not conditions:
            return self.none()

        return self.active().filter(conditions).order_by("created_at")


class Store(models.Model):
    """
    One merchant storefront, addressed by subdomain or custom domain.

    Attributes:
        id: UUID primary key
        organization: Owning organization
        name: Display name
        slug: Unique identifier used in the canonical /store/<slug> path
        subdomain: Optional label under the platform's root domains
        custom_domain: Optional fully-qualified hostname
        deleted_at: Soft-delete marker; deleted stores never resolve
        created_at: Timestamp of creation
        updated_at: Timestamp of last update
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text=_("Unique identifier for the store")
    )

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="stores",
    )

    name = models.CharField(
        max_length=255,
        help_text=_("Display name of the store")
    )

    slug = models.SlugField(
        max_length=100,
        unique=True,
        help_text=_("URL-friendly identifier (must be unique)")
    )

    subdomain = models.CharField(
        max_length=63,
        unique=True,
        null=True,
        blank=True,
        help_text=_("Subdomain label, e.g. 'acme' for acme.platform.test")
    )

    custom_domain = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        help_text=_("Custom domain for the store (optional)")
    )

    deleted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    updated_at = models.DateTimeField(auto_now=True)

    objects = StoreQuerySet.as_manager()

    class Meta:
        db_table = "storefront_tenancy_store"
        ordering = ["name"]
        verbose_name = _("Store")
        verbose_name_plural = _("Stores")

    def __str__(self) -> str:
        return self.name

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def clean(self):
        """Validate the store before saving."""
        super().clean()
        self._normalize()

        if self.subdomain and not SUBDOMAIN_REGEX.match(self.subdomain):
            raise ValidationError({
                "subdomain": _("Enter a single DNS label (letters, digits, hyphens).")
            })

        if self.custom_domain and "." not in self.custom_domain:
            raise ValidationError({
                "custom_domain": _("Enter a fully-qualified domain name.")
            })

    def save(self, *args, **kwargs):
        self._normalize()
        super().save(*args, **kwargs)

    def _normalize(self):
        # Blank values are stored as NULL so uniqueness ignores them
        self.subdomain = (self.subdomain or "").strip().lower() or None
        self.custom_domain = (self.custom_domain or "").strip().lower() or None
        if self.slug:
            self.slug = self.slug.lower()

    def soft_delete(self):
        """Mark the store deleted; it stops resolving immediately."""
        self.deleted_at = timezone.now()
        self.save(update_fields=["deleted_at", "updated_at"])
