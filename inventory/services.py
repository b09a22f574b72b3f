"""Inventory services: goods receipt, inspection, adjustments and shipments.

Every stock effect is an appended ledger entry; batches and flowers are only
mutated for lifecycle state and the observed inspection pass rate.
"""

import datetime as dt
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from catalog.models import Flower
from common.choices import LedgerKind
from django.db import DatabaseError, transaction
from django.utils import timezone

from .exceptions import InvalidInputError, InventoryError, NotFoundError, StorageFailureError
from .models import Batch, LedgerEntry
from .results import InspectionResult, ShipmentResult, StockAdjustmentResult
from .selectors import current_stock_for_flower

logger = logging.getLogger("florastock.inventory")

MIN_BATCH_QUANTITY = 1
MAX_BATCH_QUANTITY = 10000


def _require_reason(value: str, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidInputError(f"{field.capitalize()} is required", field=field)
    return value


def _get_flower(flower_id: int, *, for_update: bool = False) -> Flower:
    qs = Flower.objects.select_for_update() if for_update else Flower.objects.all()
    try:
        return qs.get(id=flower_id)
    except Flower.DoesNotExist:
        raise NotFoundError(f"Flower {flower_id} not found", field="flower_id")


def append_ledger_entry(
    *,
    flower_id: int,
    kind: str,
    delta_qty: int,
    reason: str = "",
    batch_id: Optional[int] = None,
    occurred_at: Optional[dt.datetime] = None,
) -> LedgerEntry:
    """Append one signed entry to the flower's ledger.

    Inbound deltas must be positive, outbound negative; adjustments may carry
    either sign but never zero.
    """

    if kind not in LedgerKind.values:
        raise InvalidInputError(f"Unknown ledger kind: {kind}", field="kind")
    delta_qty = int(delta_qty)
    if delta_qty == 0:
        raise InvalidInputError("Quantity must be non-zero", field="delta_qty")
    if kind == LedgerEntry.KIND_INBOUND and delta_qty < 0:
        raise InvalidInputError("Inbound entries must be positive", field="delta_qty")
    if kind == LedgerEntry.KIND_OUTBOUND and delta_qty > 0:
        raise InvalidInputError("Outbound entries must be negative", field="delta_qty")
    entry = LedgerEntry.objects.create(
        flower_id=flower_id,
        batch_id=batch_id,
        kind=kind,
        delta_qty=delta_qty,
        reason=(reason or "")[:400],
        occurred_at=occurred_at or timezone.now(),
    )
    logger.info(
        "inventory.ledger_appended",
        extra={
            "event": "inventory.ledger_appended",
            "flower_id": flower_id,
            "batch_id": batch_id,
            "kind": kind,
            "delta_qty": delta_qty,
        },
    )
    return entry


def _next_batch_no(flower: Flower, received: dt.date) -> str:
    prefix = f"F{flower.id:04d}-{received:%Y%m%d}"
    seq = Batch.objects.filter(batch_no__startswith=prefix).count() + 1
    return f"{prefix}-{seq:03d}"


@transaction.atomic
def receive_batch(
    *,
    flower_id: int,
    quantity_received: int,
    received_date: Optional[dt.date] = None,
    expiry_date: Optional[dt.date] = None,
    batch_no: str = "",
) -> Batch:
    """Register goods receipt. Stock only enters the ledger at inspection."""

    if not MIN_BATCH_QUANTITY <= int(quantity_received) <= MAX_BATCH_QUANTITY:
        raise InvalidInputError(
            f"Quantity must be between {MIN_BATCH_QUANTITY} and {MAX_BATCH_QUANTITY}", field="quantity_received"
        )
    flower = _get_flower(flower_id)
    received_date = received_date or timezone.localdate()
    if expiry_date is None and flower.shelf_life_days:
        expiry_date = received_date + dt.timedelta(days=int(flower.shelf_life_days))
    if expiry_date is not None and expiry_date < received_date:
        raise InvalidInputError("Expiry date cannot precede the received date", field="expiry_date")

    batch = Batch.objects.create(
        flower=flower,
        batch_no=batch_no.strip() or _next_batch_no(flower, received_date),
        quantity_received=int(quantity_received),
        quantity_passed=0,
        received_date=received_date,
        expiry_date=expiry_date,
        state=Batch.STATE_RECEIVED,
    )
    logger.info(
        "inventory.batch_received",
        extra={
            "event": "inventory.batch_received",
            "flower_id": flower.id,
            "batch_id": batch.id,
            "batch_no": batch.batch_no,
            "quantity": batch.quantity_received,
        },
    )
    return batch


@transaction.atomic
def inspect_batch(*, batch_id: int, passed_qty: int, note: str) -> Batch:
    """Apply an inspection outcome to a received batch.

    Moves the batch to ``inspected``, records the observed pass rate on the
    flower and appends an inbound entry for the passed quantity.
    """

    if int(passed_qty) < 0:
        raise InvalidInputError("Passed quantity cannot be negative", field="passed_qty")
    note = _require_reason(note, "note")
    try:
        batch = Batch.objects.select_for_update().select_related("flower").get(id=batch_id)
    except Batch.DoesNotExist:
        raise NotFoundError(f"Batch {batch_id} not found", field="batch_id")
    if batch.state != Batch.STATE_RECEIVED:
        raise InvalidInputError(f"Batch is already {batch.state}", field="batch_id")
    if int(passed_qty) > int(batch.quantity_received):
        raise InvalidInputError("Passed quantity cannot exceed the received quantity", field="passed_qty")

    batch.quantity_passed = int(passed_qty)
    batch.inspection_note = note[:500]
    batch.state = Batch.STATE_INSPECTED
    batch.inspected_at = timezone.now()
    batch.save(update_fields=["quantity_passed", "inspection_note", "state", "inspected_at", "updated_at"])

    flower = batch.flower
    flower.inspection_pass_rate = Decimal(str(batch.pass_rate)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    flower.save(update_fields=["inspection_pass_rate", "updated_at"])

    if batch.quantity_passed > 0:
        append_ledger_entry(
            flower_id=flower.id,
            batch_id=batch.id,
            kind=LedgerEntry.KIND_INBOUND,
            delta_qty=batch.quantity_passed,
            reason=f"Inspection passed {batch.quantity_passed}/{batch.quantity_received}: {note}",
            occurred_at=batch.inspected_at,
        )
    return batch


def record_inspection(*, batch_id: int, passed_qty: int, note: str) -> InspectionResult:
    try:
        batch = inspect_batch(batch_id=batch_id, passed_qty=passed_qty, note=note)
    except InventoryError as exc:
        logger.warning(
            "inventory.inspection_rejected",
            extra={"event": "inventory.inspection_rejected", "batch_id": batch_id, "error_code": exc.code},
        )
        return InspectionResult.failure(exc, batch_id=batch_id, passed_qty=int(passed_qty or 0))
    except DatabaseError:
        logger.exception(
            "inventory.inspection_failed", extra={"event": "inventory.inspection_failed", "batch_id": batch_id}
        )
        return InspectionResult.failure(
            StorageFailureError("Inventory storage is unavailable, inspection was not recorded"), batch_id=batch_id
        )
    pass_rate = Decimal(str(batch.pass_rate)).quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP)
    return InspectionResult(
        message=(
            f"Inspection completed: {batch.quantity_passed}/{batch.quantity_received} passed "
            f"({pass_rate * 100:.1f}%)"
        ),
        batch_id=batch.id,
        batch_no=batch.batch_no,
        flower_name=batch.flower.name,
        received_qty=batch.quantity_received,
        passed_qty=batch.quantity_passed,
        pass_rate=pass_rate,
        inspected_at=batch.inspected_at,
    )


@transaction.atomic
def activate_batch(*, batch_id: int) -> Batch:
    """Shelve an inspected batch."""

    try:
        batch = Batch.objects.select_for_update().get(id=batch_id)
    except Batch.DoesNotExist:
        raise NotFoundError(f"Batch {batch_id} not found", field="batch_id")
    if batch.state != Batch.STATE_INSPECTED:
        raise InvalidInputError(f"Only inspected batches can be activated (batch is {batch.state})", field="batch_id")
    batch.state = Batch.STATE_ACTIVE
    batch.save(update_fields=["state", "updated_at"])
    return batch


@transaction.atomic
def adjust_stock(*, flower_id: int, delta_qty: int, reason: str) -> tuple[Flower, int, int]:
    """Append an adjustment entry; returns the flower and stock before/after."""

    reason = _require_reason(reason, "reason")
    if int(delta_qty) == 0:
        raise InvalidInputError("Adjustment quantity must be non-zero", field="delta_qty")
    flower = _get_flower(flower_id, for_update=True)
    old_stock = current_stock_for_flower(flower.id)
    append_ledger_entry(
        flower_id=flower.id,
        kind=LedgerEntry.KIND_ADJUST,
        delta_qty=int(delta_qty),
        reason=f"Stock adjustment {int(delta_qty):+d}: {reason}",
    )
    return flower, old_stock, current_stock_for_flower(flower.id)


def record_stock_adjustment(*, flower_id: int, delta_qty: int, reason: str) -> StockAdjustmentResult:
    try:
        flower, old_stock, new_stock = adjust_stock(flower_id=flower_id, delta_qty=delta_qty, reason=reason)
    except InventoryError as exc:
        return StockAdjustmentResult.failure(
            exc, flower_id=flower_id, adjustment_qty=int(delta_qty or 0), reason=reason
        )
    except DatabaseError:
        logger.exception(
            "inventory.adjustment_failed", extra={"event": "inventory.adjustment_failed", "flower_id": flower_id}
        )
        return StockAdjustmentResult.failure(
            StorageFailureError("Inventory storage is unavailable, adjustment was not recorded"),
            flower_id=flower_id,
            adjustment_qty=int(delta_qty or 0),
            reason=reason,
        )
    return StockAdjustmentResult(
        message=f"Stock adjusted: {old_stock} -> {new_stock}",
        flower_id=flower.id,
        flower_name=flower.name,
        old_stock=old_stock,
        new_stock=new_stock,
        adjustment_qty=int(delta_qty),
        reason=reason.strip(),
        adjusted_at=timezone.now(),
    )


@transaction.atomic
def ship_goods(*, flower_id: int, quantity: int, reason: str = "sale", customer_name: str = "") -> tuple[Flower, int]:
    """Append an outbound entry after checking current stock covers it."""

    if int(quantity) <= 0:
        raise InvalidInputError("Shipment quantity must be positive", field="quantity")
    reason = _require_reason(reason, "reason")
    flower = _get_flower(flower_id, for_update=True)
    available = current_stock_for_flower(flower.id)
    if int(quantity) > available:
        raise InvalidInputError(f"Insufficient stock: {available} on hand, {quantity} requested", field="quantity")
    note = f"Shipment {quantity}: {reason}"
    if customer_name:
        note += f" (customer: {customer_name})"
    append_ledger_entry(flower_id=flower.id, kind=LedgerEntry.KIND_OUTBOUND, delta_qty=-int(quantity), reason=note)
    return flower, available - int(quantity)


def record_shipment(*, flower_id: int, quantity: int, reason: str = "sale", customer_name: str = "") -> ShipmentResult:
    from analytics.services import get_recommendation

    try:
        flower, remaining = ship_goods(
            flower_id=flower_id, quantity=quantity, reason=reason, customer_name=customer_name
        )
    except InventoryError as exc:
        return ShipmentResult.failure(exc, flower_id=flower_id, quantity=int(quantity or 0))
    except DatabaseError:
        logger.exception(
            "inventory.shipment_failed", extra={"event": "inventory.shipment_failed", "flower_id": flower_id}
        )
        return ShipmentResult.failure(
            StorageFailureError("Inventory storage is unavailable, shipment was not recorded"),
            flower_id=flower_id,
            quantity=int(quantity or 0),
        )
    recommendation = get_recommendation(flower.id)
    return ShipmentResult(
        message=f"Shipped {quantity}",
        flower_id=flower.id,
        flower_name=flower.name,
        quantity=int(quantity),
        remaining_stock=remaining,
        shipped_at=timezone.now(),
        recommendation=recommendation if recommendation.success else None,
    )


@transaction.atomic
def expire_batches(*, today: Optional[dt.date] = None) -> int:
    """Mark live batches past their expiry date as expired. Returns the count."""

    today = today or timezone.localdate()
    live = (Batch.STATE_RECEIVED, Batch.STATE_INSPECTED, Batch.STATE_ACTIVE)
    count = 0
    for batch in Batch.objects.select_for_update(skip_locked=True).filter(state__in=live, expiry_date__lt=today):
        batch.state = Batch.STATE_EXPIRED
        batch.save(update_fields=["state", "updated_at"])
        count += 1
    if count:
        logger.info("inventory.batches_expired", extra={"event": "inventory.batches_expired", "count": count})
    return count


# EOF
