"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: STATION LEDGER TABLES

Creates the chart of accounts, payment accounts, the posting log, the
category code sequence and the expense / income records.

Posting.supplier is added in 0002 (it points at purchases.Supplier, whose
own tables reference Posting).
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Account",
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
                ("code", models.CharField(max_length=5, unique=True)),
                ("name", models.CharField(max_length=150)),
                (
                    "account_type",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("ASSET", "Asset"),
                            ("LIABILITY", "Liability"),
                            ("EQUITY", "Equity"),
                            ("INCOME", "Income"),
                            ("EXPENSE", "Expense"),
                        ],
                    ),
                ),
                (
                    "balance",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Cached running balance (derived from postings)",
                    ),
                ),
                (
                    "is_system",
                    models.BooleanField(
                        default=False,
                        help_text="Seeded role account; cannot be deleted",
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["code"],
                "indexes": [
                    models.Index(fields=["account_type"], name="account_type_idx"),
                    models.Index(fields=["is_active"], name="account_active_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(code__regex="^[1-5][0-9]{4}$"),
                        name="chk_account_code_five_digits",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("name", ""), _negated=True),
                        name="chk_account_name_not_blank",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccountCodeSequence",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("account_type", models.CharField(max_length=20, unique=True)),
                ("last_code", models.PositiveIntegerField()),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Account code sequence",
            },
        ),
        migrations.CreateModel(
            name="PaymentAccount",
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
                ("name", models.CharField(max_length=120, unique=True)),
                (
                    "kind",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("CASH", "Cash"),
                            ("BANK", "Bank"),
                            ("CARD", "Card"),
                            ("ONLINE", "Online"),
                        ],
                        default="BANK",
                    ),
                ),
                ("account_number", models.CharField(max_length=64, blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "ledger_account",
                    models.ForeignKey(
                        to="accounting.account",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payment_accounts",
                        help_text="General-ledger asset account this instrument settles into",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Posting",
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
                ("description", models.TextField(blank=True, default="")),
                (
                    "shift_id",
                    models.CharField(
                        max_length=64,
                        blank=True,
                        null=True,
                        help_text="Opaque shift identifier supplied by the shift workflow",
                    ),
                ),
                (
                    "reference",
                    models.CharField(
                        max_length=100,
                        blank=True,
                        null=True,
                        help_text="Idempotency key supplied by the caller",
                    ),
                ),
                (
                    "posted_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="Accounting effective date",
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
                        related_name="ledger_postings",
                    ),
                ),
                (
                    "credit_account",
                    models.ForeignKey(
                        to="accounting.account",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="credit_postings",
                    ),
                ),
                (
                    "debit_account",
                    models.ForeignKey(
                        to="accounting.account",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="debit_postings",
                    ),
                ),
                (
                    "payment_account",
                    models.ForeignKey(
                        to="accounting.paymentaccount",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="postings",
                    ),
                ),
            ],
            options={
                "verbose_name": "Posting",
                "verbose_name_plural": "Postings",
                "ordering": ["posted_at", "created_at"],
                "indexes": [
                    models.Index(fields=["posted_at"], name="posting_posted_at_idx"),
                    models.Index(fields=["debit_account", "posted_at"], name="posting_debit_idx"),
                    models.Index(fields=["credit_account", "posted_at"], name="posting_credit_idx"),
                    models.Index(fields=["shift_id"], name="posting_shift_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=Decimal("0.00")),
                        name="chk_posting_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("debit_account", models.F("credit_account")), _negated=True
                        ),
                        name="chk_posting_accounts_differ",
                    ),
                    models.UniqueConstraint(
                        fields=("reference",),
                        condition=models.Q(
                            ("reference__isnull", False),
                            models.Q(("reference", ""), _negated=True),
                        ),
                        name="uniq_posting_reference_not_blank",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ExpenseRecord",
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
                ("title", models.CharField(max_length=150)),
                ("category", models.CharField(max_length=100)),
                (
                    "amount",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        validators=[django.core.validators.MinValueValidator(0.01)],
                    ),
                ),
                ("description", models.CharField(max_length=255, blank=True, default="")),
                (
                    "payment_method",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("CASH", "Cash"),
                            ("BANK", "Bank"),
                            ("CARD", "Card"),
                            ("ONLINE", "Online"),
                        ],
                        default="CASH",
                    ),
                ),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "category_account",
                    models.ForeignKey(
                        to="accounting.account",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expense_records",
                    ),
                ),
                (
                    "payment_account",
                    models.ForeignKey(
                        to="accounting.paymentaccount",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expense_records",
                    ),
                ),
                (
                    "posting",
                    models.OneToOneField(
                        to="accounting.posting",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="expense_record",
                    ),
                ),
            ],
            options={
                "verbose_name": "Expense",
                "verbose_name_plural": "Expenses",
                "ordering": ["-date", "-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="IncomeRecord",
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
                ("title", models.CharField(max_length=150)),
                ("category", models.CharField(max_length=100)),
                (
                    "amount",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        validators=[django.core.validators.MinValueValidator(0.01)],
                    ),
                ),
                ("description", models.CharField(max_length=255, blank=True, default="")),
                (
                    "payment_method",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("CASH", "Cash"),
                            ("BANK", "Bank"),
                            ("CARD", "Card"),
                            ("ONLINE", "Online"),
                        ],
                        default="CASH",
                    ),
                ),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "category_account",
                    models.ForeignKey(
                        to="accounting.account",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="income_records",
                    ),
                ),
                (
                    "payment_account",
                    models.ForeignKey(
                        to="accounting.paymentaccount",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="income_records",
                    ),
                ),
                (
                    "posting",
                    models.OneToOneField(
                        to="accounting.posting",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="income_record",
                    ),
                ),
            ],
            options={
                "verbose_name": "Income",
                "verbose_name_plural": "Income",
                "ordering": ["-date", "-created_at"],
                "abstract": False,
            },
        ),
    ]
