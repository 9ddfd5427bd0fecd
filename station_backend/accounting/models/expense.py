# accounting/models/expense.py

from __future__ import annotations

import uuid

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.payment_account import PaymentAccount
from accounting.models.posting import Posting


class _CashRecord(models.Model):
    """
    Business record (expense or other income) that owns exactly one posting.

    Rule:
    - Created together with its posting (atomic, via the services)
    - Immutable afterwards; deleting it goes through the service, which
      reverses the posting in the same unit of work
    """

    PAYMENT_CASH = "CASH"
    PAYMENT_BANK = "BANK"
    PAYMENT_CARD = "CARD"
    PAYMENT_ONLINE = "ONLINE"

    PAYMENT_METHODS = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_BANK, "Bank"),
        (PAYMENT_CARD, "Card"),
        (PAYMENT_ONLINE, "Online"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    title = models.CharField(max_length=150)
    category = models.CharField(max_length=100)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    description = models.CharField(max_length=255, blank=True, default="")

    payment_method = models.CharField(
        max_length=10,
        choices=PAYMENT_METHODS,
        default=PAYMENT_CASH,
    )

    date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ["-date", "-created_at"]

    def clean(self):
        self.title = (self.title or "").strip()
        self.category = (self.category or "").strip()
        if not self.title:
            raise ValidationError({"title": "title is required"})
        if not self.category:
            raise ValidationError({"category": "category is required"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(f"{type(self).__name__} records are immutable once posted")
        self.full_clean()
        return super().save(*args, **kwargs)


class ExpenseRecord(_CashRecord):
    """Dr expense category / Cr settlement account."""

    category_account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="expense_records",
    )
    payment_account = models.ForeignKey(
        PaymentAccount,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expense_records",
    )
    posting = models.OneToOneField(
        Posting,
        on_delete=models.PROTECT,
        related_name="expense_record",
    )

    class Meta(_CashRecord.Meta):
        verbose_name = "Expense"
        verbose_name_plural = "Expenses"

    def __str__(self):
        return f"Expense {self.title} - {self.amount} ({self.date})"


class IncomeRecord(_CashRecord):
    """Dr settlement account / Cr income category."""

    category_account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="income_records",
    )
    payment_account = models.ForeignKey(
        PaymentAccount,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="income_records",
    )
    posting = models.OneToOneField(
        Posting,
        on_delete=models.PROTECT,
        related_name="income_record",
    )

    class Meta(_CashRecord.Meta):
        verbose_name = "Income"
        verbose_name_plural = "Income"

    def __str__(self):
        return f"Income {self.title} - {self.amount} ({self.date})"
