# accounting/models/account.py

"""
======================================================
PATH: accounting/models/account.py
======================================================
ACCOUNT MODEL (CHART OF ACCOUNTS)

A single station-wide chart: codes are globally unique.

Guarantees:
- Code is exactly 5 digits and its first digit matches the account type
  (1 Asset, 2 Liability, 3 Equity, 4 Income, 5 Expense)
- Code + name are normalized (trimmed)
- balance is a cached, derived value: it is written ONLY by the posting
  engine through queryset F() updates, never through save()
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Account(models.Model):
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    ACCOUNT_TYPES = [
        (ASSET, "Asset"),
        (LIABILITY, "Liability"),
        (EQUITY, "Equity"),
        (INCOME, "Income"),
        (EXPENSE, "Expense"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=5, unique=True)
    name = models.CharField(max_length=150)

    account_type = models.CharField(
        max_length=20,
        choices=ACCOUNT_TYPES,
    )

    balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Cached running balance (derived from postings)",
    )

    is_system = models.BooleanField(
        default=False,
        help_text="Seeded role account; cannot be deleted",
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["account_type"], name="account_type_idx"),
            models.Index(fields=["is_active"], name="account_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(code__regex=r"^[1-5][0-9]{4}$"),
                name="chk_account_code_five_digits",
            ),
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_account_name_not_blank",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    def clean(self):
        # Lazy import keeps models free of service imports at load time.
        from accounting.services.balance_rules import validate_account_code

        self.code = (self.code or "").strip()
        self.name = (self.name or "").strip()

        if not self.name:
            raise ValidationError({"name": "Account name is required"})

        try:
            validate_account_code(self.code, self.account_type)
        except ValueError as exc:
            raise ValidationError({"code": str(exc)}) from exc

    def save(self, *args, **kwargs):
        if not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if update_fields is not None and "balance" in update_fields:
                raise ValidationError(
                    "Account.balance is maintained by the posting engine and cannot be set directly"
                )
            # Existing rows never write balance (stale copies would clobber F() updates).
            if update_fields is None:
                kwargs["update_fields"] = [
                    f.name
                    for f in self._meta.concrete_fields
                    if not f.primary_key and f.name != "balance"
                ]

        self.full_clean()
        return super().save(*args, **kwargs)
