"""Read handles over the ledger and batch store.

The analytics engine never touches the ORM directly: it talks to a reader
built by a factory, one per task, so each thread works on its own database
connection. ``OrmLedgerReader`` is the production implementation.
"""

import datetime as dt
import functools
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional, Protocol

from django.db import DatabaseError
from inventory.exceptions import NotFoundError, StorageFailureError


@dataclass(frozen=True)
class ItemProfile:
    item_id: int
    name: str
    abc_class: Optional[str]
    unit_price: Decimal
    lead_time_days: int
    seasonal_factor: float
    pass_rate: float
    category: str = ""
    variety: str = ""
    shelf_life_days: int = 0


@dataclass(frozen=True)
class LedgerRow:
    delta_qty: int
    kind: str
    occurred_at: dt.datetime


@dataclass(frozen=True)
class BatchRow:
    batch_id: int
    batch_no: str
    quantity_passed: int
    expiry_date: Optional[dt.date]


class LedgerReader(Protocol):
    def list_item_ids(self) -> list[int]: ...

    def get_item(self, item_id: int) -> ItemProfile: ...

    def list_ledger_entries(
        self, item_id: int, *, since: Optional[dt.datetime] = None, kind: Optional[str] = None
    ) -> list[LedgerRow]: ...

    def net_ledger_quantity(self, item_id: int) -> int: ...

    def list_active_batches(self, item_id: int) -> list[BatchRow]: ...


ReaderFactory = Callable[[], LedgerReader]


def _storage_guard(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            raise StorageFailureError(f"Ledger store unavailable: {exc}") from exc

    return wrapper


class OrmLedgerReader:
    """Reader backed by ``inventory.selectors`` and ``catalog.Flower``."""

    @_storage_guard
    def list_item_ids(self) -> list[int]:
        from catalog.models import Flower

        return list(Flower.objects.order_by("id").values_list("id", flat=True))

    @_storage_guard
    def get_item(self, item_id: int) -> ItemProfile:
        from catalog.models import Flower

        try:
            flower = Flower.objects.get(id=item_id)
        except Flower.DoesNotExist:
            raise NotFoundError(f"Flower {item_id} not found", field="flower_id")
        return ItemProfile(
            item_id=flower.id,
            name=flower.name,
            abc_class=flower.abc_class or None,
            unit_price=flower.price,
            lead_time_days=int(flower.lead_time_days),
            seasonal_factor=float(flower.seasonal_factor),
            pass_rate=float(flower.inspection_pass_rate),
            category=flower.category,
            variety=flower.variety,
            shelf_life_days=int(flower.shelf_life_days),
        )

    @_storage_guard
    def list_ledger_entries(
        self, item_id: int, *, since: Optional[dt.datetime] = None, kind: Optional[str] = None
    ) -> list[LedgerRow]:
        from inventory.selectors import list_ledger_entries

        rows = list_ledger_entries(item_id, since=since, kind=kind).values_list("delta_qty", "kind", "occurred_at")
        return [LedgerRow(delta_qty=delta, kind=k, occurred_at=at) for delta, k, at in rows]

    @_storage_guard
    def net_ledger_quantity(self, item_id: int) -> int:
        from inventory.selectors import net_ledger_quantity

        return net_ledger_quantity(item_id)

    @_storage_guard
    def list_active_batches(self, item_id: int) -> list[BatchRow]:
        from inventory.selectors import list_active_batches

        rows = list_active_batches(item_id).values_list("id", "batch_no", "quantity_passed", "expiry_date")
        return [
            BatchRow(batch_id=pk, batch_no=no, quantity_passed=int(passed), expiry_date=expiry)
            for pk, no, passed, expiry in rows
        ]


# EOF
