from analytics.services import get_inventory_report
from analytics.snapshot import invalidate_snapshot
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Drop the cached inventory snapshot, rebuild it and print the replenishment list."

    def handle(self, *args, **options):
        invalidate_snapshot()
        report = get_inventory_report()
        self.stdout.write(
            f"Flowers: {report.total_flowers}  units: {report.total_units}  "
            f"out of stock: {report.out_of_stock_count}  low: {report.low_stock_count}"
        )
        for rec in report.replenishment_list:
            self.stdout.write(
                f"  [{rec.level}] {rec.item_name}: stock {rec.current_stock}, order {rec.suggested_order_qty}"
                f" ({rec.reason})"
            )
        self.stdout.write(self.style.SUCCESS("Snapshot refreshed"))
