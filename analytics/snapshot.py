"""Inventory-wide analytics snapshot.

One pass evaluates every item (stock, demand, variability, safety stock,
recommendation, expiring batches). Items are fanned out to a thread pool;
each task builds its own reader and runs inside its own database
connection scope, with a deadline counted from the moment it starts.
Rows are returned in item order, so the snapshot is deterministic for a
given ledger and ``as_of``.

The finished snapshot is cached under a single key for a short TTL. Writes
never invalidate it: reads may lag the ledger by up to the TTL.
"""

import datetime as dt
import logging
import math
import os
import time
from collections import deque
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from contextlib import contextmanager
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from common.choices import StockStatus
from django.conf import settings
from django.core.cache import cache
from django.db import close_old_connections, connection, connections
from django.utils import timezone

from .policy import ReplenishmentPolicy, get_policy
from .readers import OrmLedgerReader, ReaderFactory
from .replenishment import Recommendation, evaluate_item

logger = logging.getLogger("florastock.analytics")

DEFAULT_CACHE_KEY = "analytics:inventory-snapshot"
MIN_CACHE_TTL = 60
MAX_CACHE_TTL = 300


@dataclass(frozen=True)
class ExpiringBatch:
    batch_id: int
    batch_no: str
    quantity: int
    expiry_date: dt.date
    days_until_expiry: int


@dataclass(frozen=True)
class SnapshotRow:
    item_id: int
    item_name: str
    category: str
    abc_class: Optional[str]
    unit_price: Decimal
    pass_rate: float
    lead_time_days: int
    current_stock: int
    safety_stock: float
    weekly_demand: float
    weekly_demand_std_dev: float
    weeks_observed: int
    stock_status: str
    recommendation: Recommendation
    expiring_batches: tuple = ()
    degraded: bool = False
    variety: str = ""

    @property
    def total_value(self) -> Decimal:
        return Decimal(self.unit_price) * self.current_stock

    @property
    def needs_replenishment(self) -> bool:
        return self.recommendation.need_replenishment


@dataclass(frozen=True)
class InventorySnapshot:
    rows: tuple
    as_of: dt.datetime
    generated_at: dt.datetime
    failed_item_ids: tuple = field(default=())


def stock_status(
    current_stock: int, safety_stock: float, weekly_demand: float, policy: Optional[ReplenishmentPolicy] = None
) -> str:
    policy = policy or get_policy()
    if current_stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if current_stock < math.ceil(safety_stock):
        return StockStatus.LOW_STOCK
    if weekly_demand > 0 and current_stock > weekly_demand * policy.overstock_weeks:
        return StockStatus.OVERSTOCK
    return StockStatus.NORMAL


def expiring_batches(batches, *, today: dt.date, within_days: int) -> tuple:
    horizon = today + dt.timedelta(days=within_days)
    return tuple(
        ExpiringBatch(
            batch_id=b.batch_id,
            batch_no=b.batch_no,
            quantity=b.quantity_passed,
            expiry_date=b.expiry_date,
            days_until_expiry=(b.expiry_date - today).days,
        )
        for b in batches
        if b.expiry_date is not None and today <= b.expiry_date <= horizon
    )


def build_snapshot_row(
    item_id: int,
    *,
    reader_factory: ReaderFactory,
    as_of: dt.datetime,
    policy: ReplenishmentPolicy,
    expiry_window_days: int,
) -> SnapshotRow:
    reader = reader_factory()
    item = reader.get_item(item_id)
    evaluation = evaluate_item(item, reader=reader, as_of=as_of, policy=policy)
    demand = evaluation.demand.value
    return SnapshotRow(
        item_id=item.item_id,
        item_name=item.name,
        variety=item.variety,
        category=item.category,
        abc_class=item.abc_class,
        unit_price=item.unit_price,
        pass_rate=item.pass_rate,
        lead_time_days=item.lead_time_days,
        current_stock=evaluation.current_stock,
        safety_stock=evaluation.safety_stock,
        weekly_demand=demand,
        weekly_demand_std_dev=evaluation.std_dev.value,
        weeks_observed=evaluation.demand.weeks_observed,
        stock_status=stock_status(evaluation.current_stock, evaluation.safety_stock, demand, policy),
        recommendation=evaluation.recommendation,
        expiring_batches=expiring_batches(
            reader.list_active_batches(item_id), today=timezone.localdate(as_of), within_days=expiry_window_days
        ),
        degraded=evaluation.recommendation.degraded,
    )


@contextmanager
def isolated_connection(statement_timeout: Optional[float] = None):
    """Connection scope for a pool task: the thread's connections are closed on exit.

    On PostgreSQL the session also gets a statement timeout, so a stalled
    read errors out instead of pinning the worker thread.
    """

    close_old_connections()
    try:
        if statement_timeout and connection.vendor == "postgresql":
            with connection.cursor() as cursor:
                cursor.execute(f"SET statement_timeout = {max(1, int(statement_timeout * 1000))}")
        yield
    finally:
        connections.close_all()


def _run_item(item_id: int, started: dict, item_timeout: float, task_kwargs: dict) -> SnapshotRow:
    started[item_id] = time.monotonic()
    with isolated_connection(statement_timeout=item_timeout):
        return build_snapshot_row(item_id, **task_kwargs)


def _log_item_failure(item_id: int, reason: str) -> None:
    logger.error(
        "analytics.item_failed",
        exc_info=reason != "timeout",
        extra={"event": "analytics.item_failed", "item_id": item_id, "reason": reason},
    )


def max_workers() -> int:
    value = getattr(settings, "ANALYTICS_MAX_WORKERS", None) or os.cpu_count() or 1
    return max(1, int(value))


def _evaluate_inline(item_ids, task_kwargs: dict, item_timeout: float):
    rows: dict[int, SnapshotRow] = {}
    failed: set[int] = set()
    for item_id in item_ids:
        began = time.monotonic()
        try:
            row = build_snapshot_row(item_id, **task_kwargs)
        except Exception:
            _log_item_failure(item_id, "error")
            failed.add(item_id)
            continue
        if time.monotonic() - began > item_timeout:
            _log_item_failure(item_id, "timeout")
            failed.add(item_id)
            continue
        rows[item_id] = row
    return rows, failed


def _evaluate_pooled(item_ids, task_kwargs: dict, item_timeout: float, workers: int):
    rows: dict[int, SnapshotRow] = {}
    failed: set[int] = set()
    started: dict[int, float] = {}
    pending = deque(item_ids)
    running: dict = {}
    poll = max(0.01, min(0.1, item_timeout / 4))

    # At most ``workers`` live tasks; an abandoned task keeps its thread, so
    # the executor may grow past ``workers`` to keep the queue draining.
    executor = ThreadPoolExecutor(max_workers=max(1, len(item_ids)), thread_name_prefix="analytics")
    try:
        while pending or running:
            while pending and len(running) < workers:
                item_id = pending.popleft()
                running[executor.submit(_run_item, item_id, started, item_timeout, task_kwargs)] = item_id

            done, _ = wait(running, timeout=poll, return_when=FIRST_COMPLETED)
            for future in done:
                item_id = running.pop(future)
                try:
                    rows[item_id] = future.result()
                except Exception:
                    _log_item_failure(item_id, "error")
                    failed.add(item_id)

            now = time.monotonic()
            for future, item_id in list(running.items()):
                began = started.get(item_id)
                if future.done() or began is None or now - began <= item_timeout:
                    continue
                future.cancel()
                del running[future]
                _log_item_failure(item_id, "timeout")
                failed.add(item_id)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
    return rows, failed


def compute_snapshot(
    *,
    reader_factory: ReaderFactory = OrmLedgerReader,
    as_of: Optional[dt.datetime] = None,
    policy: Optional[ReplenishmentPolicy] = None,
    workers: Optional[int] = None,
    item_timeout: Optional[float] = None,
    inline: Optional[bool] = None,
) -> InventorySnapshot:
    """Evaluate every item; failed or timed-out items are logged and left out.

    Each item gets ``item_timeout`` seconds from the moment it starts, not
    from when the batch was queued. Inline mode (``ANALYTICS_RUN_INLINE``)
    runs on the calling thread and shares its connection; an item that
    overruns its deadline there is still dropped once it returns.
    """

    started = time.monotonic()
    policy = policy or get_policy()
    as_of = as_of or timezone.now()
    workers = workers or max_workers()
    if item_timeout is None:
        item_timeout = float(getattr(settings, "ANALYTICS_ITEM_TIMEOUT", 10))
    if inline is None:
        inline = bool(getattr(settings, "ANALYTICS_RUN_INLINE", False))
    task_kwargs = dict(
        reader_factory=reader_factory,
        as_of=as_of,
        policy=policy,
        expiry_window_days=int(getattr(settings, "ANALYTICS_EXPIRY_WINDOW_DAYS", 7)),
    )

    item_ids = list(reader_factory().list_item_ids())
    if inline:
        results, failed_ids = _evaluate_inline(item_ids, task_kwargs, item_timeout)
    else:
        results, failed_ids = _evaluate_pooled(item_ids, task_kwargs, item_timeout, workers)
    rows = [results[item_id] for item_id in item_ids if item_id in results]
    failed = [item_id for item_id in item_ids if item_id in failed_ids]

    snapshot = InventorySnapshot(
        rows=tuple(rows), as_of=as_of, generated_at=timezone.now(), failed_item_ids=tuple(failed)
    )
    logger.info(
        "analytics.snapshot_built",
        extra={
            "event": "analytics.snapshot_built",
            "items": len(rows),
            "failed": len(failed),
            "workers": 1 if inline else workers,
            "duration_ms": int((time.monotonic() - started) * 1000),
        },
    )
    return snapshot


def cache_key() -> str:
    return getattr(settings, "ANALYTICS_SNAPSHOT_CACHE_KEY", None) or DEFAULT_CACHE_KEY


def cache_ttl() -> int:
    ttl = int(getattr(settings, "ANALYTICS_SNAPSHOT_CACHE_TTL", MIN_CACHE_TTL))
    return min(max(ttl, MIN_CACHE_TTL), MAX_CACHE_TTL)


def get_snapshot(*, reader_factory: ReaderFactory = OrmLedgerReader) -> InventorySnapshot:
    snapshot = cache.get(cache_key())
    if snapshot is None:
        snapshot = compute_snapshot(reader_factory=reader_factory)
        cache.set(cache_key(), snapshot, cache_ttl())
    return snapshot


def invalidate_snapshot() -> None:
    cache.delete(cache_key())


# EOF
