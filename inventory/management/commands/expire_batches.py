import datetime as dt

from django.core.management.base import BaseCommand, CommandError
from inventory.services import expire_batches


class Command(BaseCommand):
    help = "Mark received, inspected and active batches past their expiry date as expired."

    def add_arguments(self, parser):
        parser.add_argument("--date", help="Treat this ISO date (YYYY-MM-DD) as today")

    def handle(self, *args, **options):
        today = None
        if options.get("date"):
            try:
                today = dt.date.fromisoformat(options["date"])
            except ValueError:
                raise CommandError(f"Invalid --date: {options['date']}")
        count = expire_batches(today=today)
        self.stdout.write(self.style.SUCCESS(f"Expired batches: {count}"))
