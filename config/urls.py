"""
URL configuration for the Florastock project.

Versioned API routes live under ``/api/v1/``; the OpenAPI schema and Swagger
UI are served from ``/api/schema/`` and ``/api/docs/``.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .health import health

admin.site.site_header = "Florastock Admin"
admin.site.index_title = "Admin"

urlpatterns = [
    path("admin/", admin.site.urls),
    # API schema and Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="api-schema"), name="api-docs"),
    # Healthcheck
    path("health/", health, name="health"),
    # Versioned v1 routes only
    path("api/v1/catalog/", include("catalog.urls")),
    path("api/v1/inventory/", include("inventory.urls")),
    path("api/v1/analytics/", include("analytics.urls")),
]
