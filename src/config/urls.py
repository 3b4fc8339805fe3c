from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("modules.core.urls")),
    # Domain modules: versioned API
    path("api/v1/", include("modules.accounts.urls")),
    path("api/v1/", include("modules.stores.urls")),
    path("api/v1/", include("modules.products.urls")),
    path("api/v1/", include("modules.delivery.urls")),
    path("api/v1/", include("modules.orders.urls")),
    path("api/v1/", include("modules.invitations.urls")),
    path("api/v1/", include("modules.metrics.urls")),
    # OpenAPI schema & docs (public)
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
