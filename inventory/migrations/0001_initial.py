import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Batch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("batch_no", models.CharField(max_length=40, unique=True)),
                ("quantity_received", models.PositiveIntegerField()),
                ("quantity_passed", models.PositiveIntegerField(default=0)),
                ("received_date", models.DateField(default=django.utils.timezone.localdate)),
                ("expiry_date", models.DateField(blank=True, null=True)),
                ("inspection_note", models.CharField(blank=True, max_length=500)),
                ("inspected_at", models.DateTimeField(blank=True, null=True)),
                (
                    "state",
                    models.CharField(
                        choices=[
                            ("received", "Received"),
                            ("inspected", "Inspected"),
                            ("active", "Active"),
                            ("expired", "Expired"),
                            ("discarded", "Discarded"),
                        ],
                        default="received",
                        max_length=16,
                    ),
                ),
                (
                    "flower",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="batches", to="catalog.flower"
                    ),
                ),
            ],
            options={
                "ordering": ["-received_date", "-id"],
                "indexes": [
                    models.Index(fields=["flower", "state"], name="batch_flower_state_idx"),
                    models.Index(fields=["expiry_date"], name="batch_expiry_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity_received__gt", 0)), name="batch_received_positive"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_passed__lte", models.F("quantity_received"))),
                        name="batch_passed_le_received",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(
                        choices=[("in", "Inbound"), ("out", "Outbound"), ("adjust", "Adjust")], max_length=8
                    ),
                ),
                ("delta_qty", models.IntegerField()),
                ("reason", models.CharField(blank=True, max_length=400)),
                ("occurred_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "batch",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="inventory.batch",
                    ),
                ),
                (
                    "flower",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="catalog.flower",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "ledger entries",
                "ordering": ["occurred_at", "id"],
                "indexes": [
                    models.Index(fields=["flower", "kind", "occurred_at"], name="ledger_flower_kind_at_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("kind", "in"), ("delta_qty__gt", 0)),
                            models.Q(("kind", "out"), ("delta_qty__lt", 0)),
                            models.Q(("kind", "adjust"), models.Q(("delta_qty", 0), _negated=True)),
                            _connector="OR",
                        ),
                        name="ledger_sign_matches_kind",
                    ),
                ],
            },
        ),
    ]
