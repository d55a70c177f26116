"""
Django app configuration for storefront_tenancy.
"""

from django.apps import AppConfig


class StorefrontTenancyConfig(AppConfig):
    """
    App configuration for django-storefront-tenancy.

    Routes storefront requests to their store by subdomain or
    custom domain.
    """

    name = "storefront_tenancy"
    verbose_name = "Storefront Tenancy"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        """Connect the cache invalidation signal handlers."""
        from storefront_tenancy import signals  # noqa: F401
