"""URL routes for the catalog app."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import FlowerViewSet

router = SimpleRouter()
router.register(r"flowers", FlowerViewSet, basename="flower")

urlpatterns = [path("", include(router.urls))]
