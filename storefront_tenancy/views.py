"""
Plain Django views for storefront tenancy.
"""

from django.http import HttpRequest, HttpResponseNotFound
from django.utils.html import format_html

from storefront_tenancy.conf import storefront_settings


def store_not_found(request: HttpRequest) -> HttpResponseNotFound:
    """
    Page shown when a storefront host matches no active store.

    The middleware rewrites to this view internally, so the browser
    still shows the original URL. The bare hostname arrives in the
    NOT_FOUND_QUERY_PARAM query parameter.
    """
    domain = request.GET.get(storefront_settings.NOT_FOUND_QUERY_PARAM, "")
    body = format_html(
        "<h1>Store Not Found</h1>"
        "<p>The store you are looking for does not exist, has been removed, "
        "or the subdomain is incorrect.</p>"
        "<p><code>{}</code></p>",
        domain,
    )
    return HttpResponseNotFound(body)
