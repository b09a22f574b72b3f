"""Read-only viewsets for catalog resources."""

from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import filters as drf_filters
from rest_framework import viewsets

from . import selectors
from .models import Flower
from .serializers import FlowerSerializer


class FlowerFilterSet(filters.FilterSet):
    class Meta:
        model = Flower
        fields = ["category", "abc_class"]


@extend_schema_view(
    list=extend_schema(
        summary="List flowers",
        description=(
            "Returns stocked flowers with their replenishment attributes and current stock (ledger sum). "
            "Supports filtering by `category` and `abc_class`, ordering by `name`, `price` or "
            "`lead_time_days`, and search via `search`."
        ),
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category"),
            OpenApiParameter("abc_class", OpenApiTypes.STR, location="query", description="Filter by ABC tag"),
        ],
        examples=[
            OpenApiExample(
                "Flower list",
                value={
                    "count": 1,
                    "next": None,
                    "previous": None,
                    "results": [
                        {
                            "id": 1,
                            "name": "Rose",
                            "variety": "Red Naomi",
                            "category": "popular",
                            "abc_class": "A",
                            "shelf_life_days": 10,
                            "price": "3.50",
                            "seasonal_factor": "1.00",
                            "inspection_pass_rate": "0.85",
                            "lead_time_days": 5,
                            "review_cycle_weeks": 1,
                            "current_stock": 120,
                        }
                    ],
                },
                response_only=True,
            )
        ],
    ),
    retrieve=extend_schema(
        summary="Get flower",
        description="Returns a single flower with its current stock",
        tags=["Catalog Endpoints"],
    ),
)
class FlowerViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = FlowerSerializer
    filterset_class = FlowerFilterSet
    throttle_scope = "catalog"
    filter_backends = [filters.DjangoFilterBackend, drf_filters.OrderingFilter, drf_filters.SearchFilter]
    ordering_fields = ["name", "price", "lead_time_days"]
    search_fields = ["name", "variety"]

    def get_queryset(self):
        return selectors.list_flowers()
