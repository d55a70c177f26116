"""
Django admin integration for django-storefront-tenancy.

Provides admin classes for managing Organizations and Stores.
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from storefront_tenancy.models import Organization, Store


class StoreInline(admin.TabularInline):
    """Inline for viewing an organization's stores."""
    model = Store
    fields = ["name", "slug", "subdomain", "custom_domain", "deleted_at"]
    extra = 0
    show_change_link = True


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """
    Admin interface for Organization model.
    """

    list_display = ["name", "slug", "store_count", "created_at"]
    search_fields = ["name", "slug"]
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ["id", "created_at"]
    inlines = [StoreInline]

    def store_count(self, obj):
        """Display the number of live stores in this organization."""
        return obj.stores.filter(deleted_at__isnull=True).count()
    store_count.short_description = _("Stores")


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    """
    Admin interface for Store model.

    Saving a store evicts its cached hostnames (see signals.py), so
    domain changes take effect on the next request.
    """

    list_display = [
        "name",
        "slug",
        "subdomain",
        "custom_domain",
        "organization",
        "is_live",
        "created_at",
    ]
    list_filter = ["deleted_at", "created_at"]
    search_fields = ["name", "slug", "subdomain", "custom_domain", "organization__name"]
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ["id", "created_at", "updated_at"]
    raw_id_fields = ["organization"]
    ordering = ["-created_at"]
    actions = ["soft_delete_stores"]

    fieldsets = (
        (None, {
            "fields": ("organization", "name", "slug")
        }),
        (_("Domain Configuration"), {
            "fields": ("subdomain", "custom_domain"),
        }),
        (_("System Information"), {
            "fields": ("id", "deleted_at", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("organization")

    def is_live(self, obj):
        return not obj.is_deleted
    is_live.boolean = True
    is_live.short_description = _("Live")

    @admin.action(description=_("Soft-delete selected stores"))
    def soft_delete_stores(self, request, queryset):
        # Per-instance so the cache eviction signal fires for each store
        for store in queryset.active():
            store.soft_delete()
