"""In-memory ledger store for exercising the analytics engine without a database."""

import datetime as dt
import threading
import time
from collections import defaultdict
from decimal import Decimal
from typing import Optional

from analytics.readers import BatchRow, ItemProfile, LedgerRow
from common.choices import LedgerKind
from inventory.exceptions import NotFoundError, StorageFailureError

AS_OF = dt.datetime(2025, 3, 31, 12, 0, tzinfo=dt.timezone.utc)


class InMemoryLedgerStore:
    """Items, ledger rows and batches kept in dicts.

    ``broken_items`` raise StorageFailureError on any read; ``gates`` block
    reads for an item until the event is set. ``delays`` make the first read
    of an item sleep for that many seconds.
    """

    def __init__(self):
        self.items: dict[int, ItemProfile] = {}
        self.entries: dict[int, list[LedgerRow]] = defaultdict(list)
        self.batches: dict[int, list[BatchRow]] = defaultdict(list)
        self.broken_items: set[int] = set()
        self.gates: dict[int, threading.Event] = {}
        self.delays: dict[int, float] = {}
        self.readers_created = 0
        self._lock = threading.Lock()

    def add_item(
        self,
        item_id: int,
        *,
        abc_class: Optional[str] = "B",
        unit_price: str = "10.00",
        lead_time_days: int = 7,
        seasonal_factor: float = 1.0,
        pass_rate: float = 0.8,
        name: str = "",
    ) -> ItemProfile:
        item = ItemProfile(
            item_id=item_id,
            name=name or f"Item {item_id}",
            abc_class=abc_class,
            unit_price=Decimal(unit_price),
            lead_time_days=lead_time_days,
            seasonal_factor=seasonal_factor,
            pass_rate=pass_rate,
            category="popular",
        )
        self.items[item_id] = item
        return item

    def receive(self, item_id: int, qty: int, at: dt.datetime = AS_OF - dt.timedelta(days=100)) -> None:
        self.entries[item_id].append(LedgerRow(delta_qty=qty, kind=LedgerKind.INBOUND, occurred_at=at))

    def ship(self, item_id: int, qty: int, at: dt.datetime) -> None:
        self.entries[item_id].append(LedgerRow(delta_qty=-qty, kind=LedgerKind.OUTBOUND, occurred_at=at))

    def adjust(self, item_id: int, delta: int, at: dt.datetime = AS_OF - dt.timedelta(days=1)) -> None:
        self.entries[item_id].append(LedgerRow(delta_qty=delta, kind=LedgerKind.ADJUST, occurred_at=at))

    def ship_weekly(self, item_id: int, quantities, as_of: dt.datetime = AS_OF) -> None:
        """One shipment per week going back from ``as_of``; the first quantity is the most recent."""

        for weeks_back, qty in enumerate(quantities, start=1):
            if qty:
                self.ship(item_id, qty, as_of - dt.timedelta(weeks=weeks_back))

    def add_batch(self, item_id: int, batch_id: int, qty: int, expiry_date: Optional[dt.date]) -> None:
        self.batches[item_id].append(
            BatchRow(batch_id=batch_id, batch_no=f"B{batch_id}", quantity_passed=qty, expiry_date=expiry_date)
        )

    def reader(self) -> "InMemoryLedgerReader":
        with self._lock:
            self.readers_created += 1
        return InMemoryLedgerReader(self)


class InMemoryLedgerReader:
    def __init__(self, store: InMemoryLedgerStore):
        self.store = store

    def _check(self, item_id: int) -> None:
        gate = self.store.gates.get(item_id)
        if gate is not None:
            gate.wait(timeout=5)
        if item_id in self.store.broken_items:
            raise StorageFailureError(f"store offline for item {item_id}")

    def list_item_ids(self) -> list[int]:
        return sorted(self.store.items)

    def get_item(self, item_id: int) -> ItemProfile:
        self._check(item_id)
        if item_id in self.store.delays:
            time.sleep(self.store.delays[item_id])
        try:
            return self.store.items[item_id]
        except KeyError:
            raise NotFoundError(f"Flower {item_id} not found", field="flower_id")

    def list_ledger_entries(self, item_id: int, *, since=None, kind=None) -> list[LedgerRow]:
        self._check(item_id)
        rows = [
            row
            for row in self.store.entries.get(item_id, [])
            if (since is None or row.occurred_at >= since) and (not kind or row.kind == kind)
        ]
        return sorted(rows, key=lambda row: row.occurred_at)

    def net_ledger_quantity(self, item_id: int) -> int:
        self._check(item_id)
        return sum(row.delta_qty for row in self.store.entries.get(item_id, []))

    def list_active_batches(self, item_id: int) -> list[BatchRow]:
        self._check(item_id)
        return sorted(self.store.batches.get(item_id, []), key=lambda b: (b.expiry_date or dt.date.max, b.batch_id))
