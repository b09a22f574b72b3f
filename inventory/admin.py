"""Admin registrations for inventory app."""

from django.contrib import admin

from .models import Batch, LedgerEntry


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = ("id", "batch_no", "flower", "quantity_received", "quantity_passed", "state", "expiry_date")
    list_filter = ("state",)
    search_fields = ("batch_no", "flower__name")


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    """Ledger is append-only: entries are written through the services, never edited here."""

    list_display = ("id", "flower", "batch", "kind", "delta_qty", "reason", "occurred_at")
    list_filter = ("kind",)
    search_fields = ("flower__name", "reason")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# EOF
