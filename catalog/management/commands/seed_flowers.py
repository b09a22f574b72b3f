"""Seed flowers and a few weeks of ledger history for local development.

Creates flowers, then for each a received and inspected batch plus weekly
outbound shipments so the analytics endpoints have something to estimate.
Re-running is idempotent: flowers are reused by name and history is only
written for flowers with an empty ledger.
"""

import datetime as dt
from decimal import Decimal

from catalog.models import Flower
from common.choices import AbcClass, FlowerCategory
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from inventory.models import LedgerEntry
from inventory.services import append_ledger_entry, inspect_batch, receive_batch


class Command(BaseCommand):
    help = "Seed flowers with batches and shipment history"

    def add_arguments(self, parser):
        parser.add_argument("--weeks", type=int, default=8, help="Weeks of shipment history to write")

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding flowers...")
        weeks = max(0, options["weeks"])

        flowers = [
            {
                "name": "Rose",
                "variety": "Red Naomi",
                "category": FlowerCategory.POPULAR,
                "abc_class": AbcClass.A,
                "price": Decimal("3.50"),
                "lead_time_days": 5,
                "shelf_life_days": 10,
                "received": 300,
                "passed": 270,
                "weekly": [22, 30, 18, 26, 24, 35, 20, 28],
            },
            {
                "name": "Chrysanthemum",
                "variety": "White Spider",
                "category": FlowerCategory.RELIGIOUS,
                "abc_class": AbcClass.B,
                "price": Decimal("1.80"),
                "lead_time_days": 7,
                "shelf_life_days": 21,
                "received": 200,
                "passed": 180,
                "weekly": [12, 15, 10, 14, 16, 11, 13, 15],
            },
            {
                "name": "Lily",
                "variety": "Casa Blanca",
                "category": FlowerCategory.SEASONAL,
                "abc_class": AbcClass.B,
                "price": Decimal("4.20"),
                "lead_time_days": 10,
                "shelf_life_days": 12,
                "received": 80,
                "passed": 60,
                "weekly": [8, 0, 12, 5],
            },
            {
                "name": "Baby's Breath",
                "variety": "",
                "category": FlowerCategory.RESIDENT,
                "abc_class": AbcClass.C,
                "price": Decimal("0.90"),
                "lead_time_days": 4,
                "shelf_life_days": 14,
                "received": 100,
                "passed": 95,
                "weekly": [],
            },
        ]

        now = timezone.now()
        for item in flowers:
            flower, _ = Flower.objects.get_or_create(
                name=item["name"],
                defaults={
                    "variety": item["variety"],
                    "category": item["category"],
                    "abc_class": item["abc_class"],
                    "price": item["price"],
                    "lead_time_days": item["lead_time_days"],
                    "shelf_life_days": item["shelf_life_days"],
                },
            )
            if LedgerEntry.objects.filter(flower=flower).exists():
                continue
            batch = receive_batch(flower_id=flower.id, quantity_received=item["received"])
            inspect_batch(batch_id=batch.id, passed_qty=item["passed"], note="seed inspection")
            # Shipments spread one per week, oldest first
            history = item["weekly"][-weeks:] if weeks else []
            for offset, qty in enumerate(reversed(history), start=1):
                if qty <= 0:
                    continue
                append_ledger_entry(
                    flower_id=flower.id,
                    kind=LedgerEntry.KIND_OUTBOUND,
                    delta_qty=-qty,
                    reason="seed shipment",
                    occurred_at=now - dt.timedelta(weeks=offset),
                )

        self.stdout.write(self.style.SUCCESS("Flower seed complete."))
