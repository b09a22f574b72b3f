"""Inventory models (single-location, batch-tracked).

Stock is never stored as a counter: the append-only ledger is the source of
truth and current stock is the clamped sum of its signed deltas.
"""

from catalog.models import TimeStampedModel
from common.choices import BatchState, LedgerKind
from django.db import models
from django.utils import timezone

from .exceptions import LedgerImmutableError


class Batch(TimeStampedModel):
    STATE_RECEIVED = BatchState.RECEIVED
    STATE_INSPECTED = BatchState.INSPECTED
    STATE_ACTIVE = BatchState.ACTIVE
    STATE_EXPIRED = BatchState.EXPIRED
    STATE_DISCARDED = BatchState.DISCARDED
    STATE_CHOICES = BatchState.choices

    # Batches whose passed quantity is on the shelf
    SHELF_STATES = (BatchState.INSPECTED, BatchState.ACTIVE)

    flower = models.ForeignKey("catalog.Flower", on_delete=models.PROTECT, related_name="batches")
    batch_no = models.CharField(max_length=40, unique=True)
    quantity_received = models.PositiveIntegerField()
    quantity_passed = models.PositiveIntegerField(default=0)
    received_date = models.DateField(default=timezone.localdate)
    expiry_date = models.DateField(null=True, blank=True)
    inspection_note = models.CharField(max_length=500, blank=True)
    inspected_at = models.DateTimeField(null=True, blank=True)
    state = models.CharField(max_length=16, choices=STATE_CHOICES, default=STATE_RECEIVED)

    class Meta:
        ordering = ["-received_date", "-id"]
        constraints = [
            models.CheckConstraint(name="batch_received_positive", condition=models.Q(quantity_received__gt=0)),
            models.CheckConstraint(
                name="batch_passed_le_received",
                condition=models.Q(quantity_passed__lte=models.F("quantity_received")),
            ),
        ]
        indexes = [
            models.Index(fields=["flower", "state"], name="batch_flower_state_idx"),
            models.Index(fields=["expiry_date"], name="batch_expiry_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Batch<{self.batch_no}> {self.quantity_passed}/{self.quantity_received} {self.state}"

    @property
    def quantity_failed(self) -> int:
        return int(self.quantity_received) - int(self.quantity_passed)

    @property
    def pass_rate(self) -> float:
        if not self.quantity_received:
            return 0.0
        return int(self.quantity_passed) / int(self.quantity_received)


class LedgerEntry(models.Model):
    """Immutable stock-changing event. ``delta_qty`` is signed: +in, -out, either for adjust."""

    KIND_INBOUND = LedgerKind.INBOUND
    KIND_OUTBOUND = LedgerKind.OUTBOUND
    KIND_ADJUST = LedgerKind.ADJUST
    KIND_CHOICES = LedgerKind.choices

    flower = models.ForeignKey("catalog.Flower", on_delete=models.PROTECT, related_name="ledger_entries")
    batch = models.ForeignKey(Batch, null=True, blank=True, on_delete=models.PROTECT, related_name="ledger_entries")
    kind = models.CharField(max_length=8, choices=KIND_CHOICES)
    delta_qty = models.IntegerField()
    reason = models.CharField(max_length=400, blank=True)
    occurred_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["occurred_at", "id"]
        verbose_name_plural = "ledger entries"
        constraints = [
            models.CheckConstraint(
                name="ledger_sign_matches_kind",
                condition=(
                    models.Q(kind=LedgerKind.INBOUND, delta_qty__gt=0)
                    | models.Q(kind=LedgerKind.OUTBOUND, delta_qty__lt=0)
                    | (models.Q(kind=LedgerKind.ADJUST) & ~models.Q(delta_qty=0))
                ),
            ),
        ]
        indexes = [
            models.Index(fields=["flower", "kind", "occurred_at"], name="ledger_flower_kind_at_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.kind} {self.delta_qty:+d} for {self.flower_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise LedgerImmutableError("Ledger entries cannot be modified")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise LedgerImmutableError("Ledger entries cannot be deleted")


# EOF
