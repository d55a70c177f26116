"""
URL configuration for storefront tenancy.

Include from the project's root URLconf:

    path("", include("storefront_tenancy.urls")),
"""

from django.urls import path

from storefront_tenancy import views
from storefront_tenancy.drf.views import StoreLookupView

app_name = "storefront_tenancy"

urlpatterns = [
    path("api/stores/lookup", StoreLookupView.as_view(), name="store_lookup"),
    path("store-not-found", views.store_not_found, name="store_not_found"),
]
