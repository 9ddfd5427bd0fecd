"""
======================================================
PATH: purchases/migrations/0001_initial.py
======================================================
MIGRATION: SUPPLIERS, PURCHASES, SETTLEMENTS

Supplier (aggregate balance owed), Purchase (fuel delivery), and the
SupplierPayment / PaymentAllocation FIFO audit trail.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Supplier",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200)),
                ("contact", models.CharField(max_length=100, blank=True, default="")),
                ("address", models.TextField(blank=True, default="")),
                (
                    "balance",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["name"], name="supplier_name_idx"),
                    models.Index(fields=["is_active"], name="supplier_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(balance__gte=Decimal("0.00")),
                        name="supplier_balance_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Purchase",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("description", models.CharField(max_length=255, blank=True, default="")),
                (
                    "quantity",
                    models.DecimalField(
                        max_digits=12,
                        decimal_places=2,
                        null=True,
                        blank=True,
                        help_text="Litres delivered",
                    ),
                ),
                ("total_cost", models.DecimalField(max_digits=14, decimal_places=2)),
                (
                    "paid_amount",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("UNPAID", "Unpaid"),
                            ("PARTIAL", "Partially paid"),
                            ("PAID", "Paid"),
                        ],
                        default="UNPAID",
                    ),
                ),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        to=settings.AUTH_USER_MODEL,
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="fuel_purchases_created",
                    ),
                ),
                (
                    "credit_posting",
                    models.OneToOneField(
                        to="accounting.posting",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchase_credit_part",
                    ),
                ),
                (
                    "paid_posting",
                    models.OneToOneField(
                        to="accounting.posting",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchase_paid_part",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        to="purchases.supplier",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchases",
                    ),
                ),
            ],
            options={
                "ordering": ["date", "created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["supplier", "status", "date"],
                        name="purchase_open_fifo_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total_cost__gt=Decimal("0.00")),
                        name="purchase_total_cost_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("paid_amount__gte", Decimal("0.00")),
                            ("paid_amount__lte", models.F("total_cost")),
                        ),
                        name="purchase_paid_within_total",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SupplierPayment",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("amount", models.DecimalField(max_digits=14, decimal_places=2)),
                ("method", models.CharField(max_length=10, default="CASH")),
                (
                    "allocated_amount",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                (
                    "unallocated_amount",
                    models.DecimalField(
                        max_digits=14, decimal_places=2, default=Decimal("0.00")
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        to=settings.AUTH_USER_MODEL,
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="supplier_payments_created",
                    ),
                ),
                (
                    "payment_account",
                    models.ForeignKey(
                        to="accounting.paymentaccount",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="supplier_payments",
                    ),
                ),
                (
                    "posting",
                    models.OneToOneField(
                        to="accounting.posting",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="supplier_payment",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        to="purchases.supplier",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=Decimal("0.00")),
                        name="supplier_payment_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            amount=models.F("allocated_amount") + models.F("unallocated_amount")
                        ),
                        name="supplier_payment_allocation_conserved",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentAllocation",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("amount", models.DecimalField(max_digits=14, decimal_places=2)),
                (
                    "payment",
                    models.ForeignKey(
                        to="purchases.supplierpayment",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="allocations",
                    ),
                ),
                (
                    "purchase",
                    models.ForeignKey(
                        to="purchases.purchase",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="allocations",
                    ),
                ),
            ],
            options={
                "ordering": ["purchase__date", "purchase__created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=Decimal("0.00")),
                        name="payment_allocation_amount_positive",
                    ),
                ],
            },
        ),
    ]
