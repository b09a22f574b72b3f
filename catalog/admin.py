"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Flower


@admin.register(Flower)
class FlowerAdmin(admin.ModelAdmin):
    list_display = ("name", "variety", "category", "abc_class", "price", "inspection_pass_rate", "lead_time_days")
    search_fields = ("name", "variety")
    list_filter = ("category", "abc_class")
