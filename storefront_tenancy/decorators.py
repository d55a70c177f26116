"""
View helpers for django-storefront-tenancy.

Downstream views read the tenant the middleware resolved instead of
looking the store up again.
"""

from functools import wraps
from typing import Callable, Optional
from urllib.parse import unquote

from django.http import Http404, HttpRequest, HttpResponse

from storefront_tenancy.records import TenantRecord
from storefront_tenancy.resolver import (
    STORE_ID_HEADER,
    STORE_NAME_HEADER,
    STORE_ORGANIZATION_HEADER,
    STORE_SLUG_HEADER,
)
from storefront_tenancy.utils import audit_log


def get_current_tenant(request: HttpRequest) -> Optional[TenantRecord]:
    """
    Return the tenant resolved for this request, or None.

    Prefers request.tenant; falls back to the X-Store-* request headers,
    which carry id, slug, name and organization only.
    """
    tenant = getattr(request, "tenant", None)
    if tenant is not None:
        return tenant

    headers = request.headers
    tenant_id = headers.get(STORE_ID_HEADER)
    slug = headers.get(STORE_SLUG_HEADER)
    if not tenant_id or not slug:
        return None

    return TenantRecord(
        id=tenant_id,
        slug=slug,
        name=unquote(headers.get(STORE_NAME_HEADER, "")),
        organization_id=headers.get(STORE_ORGANIZATION_HEADER, ""),
    )


def tenant_required(view_func: Callable = None, slug_kwarg: str = "slug"):
    """
    Decorator that requires a resolved storefront tenant.

    Raises Http404 when the request was not routed through a tenant
    host, or when the view's slug URL kwarg names a different store
    than the one the host resolved to.

    Usage:
        @tenant_required
        def storefront_home(request, slug):
            ...

        @tenant_required(slug_kwarg="store_slug")
        def product_list(request, store_slug):
            ...

    Args:
        view_func: The view function to wrap
        slug_kwarg: URL kwarg holding the store slug (ignored if absent)
    """
    def decorator(view_func: Callable) -> Callable:
        @wraps(view_func)
        def _wrapped_view(request: HttpRequest, *args, **kwargs) -> HttpResponse:
            tenant = get_current_tenant(request)
            if tenant is None:
                raise Http404("No store for this host")

            slug = kwargs.get(slug_kwarg)
            if slug is not None and slug != tenant.slug:
                audit_log(
                    event="store_slug_mismatch",
                    tenant=tenant,
                    request=request,
                    success=False,
                    extra={"requested_slug": slug},
                )
                raise Http404("No store for this host")

            return view_func(request, *args, **kwargs)

        return _wrapped_view

    if view_func:
        return decorator(view_func)
    return decorator
