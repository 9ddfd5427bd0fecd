# accounting/models/posting.py

"""
======================================================
PATH: accounting/models/posting.py
======================================================
POSTING MODEL (THE TRANSACTION LOG)

One money-moving event: exactly one debit account, one credit account,
one positive amount.

Guarantees:
- Immutable once created (save() on an existing row raises)
- Removal ONLY through the posting engine's reverse(), which also undoes
  the cached balance effects in the same atomic unit
- Idempotency via reference uniqueness (when reference is provided)
- posted_at is the accounting effective date (used by all reports)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.payment_account import PaymentAccount


class Posting(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    debit_account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="debit_postings",
    )
    credit_account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="credit_postings",
    )

    amount = models.DecimalField(max_digits=14, decimal_places=2)
    description = models.TextField(blank=True, default="")

    shift_id = models.CharField(
        max_length=64,
        blank=True,
        null=True,
        help_text="Opaque shift identifier supplied by the shift workflow",
    )
    supplier = models.ForeignKey(
        "purchases.Supplier",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="postings",
    )
    payment_account = models.ForeignKey(
        PaymentAccount,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="postings",
    )

    reference = models.CharField(
        max_length=100,
        blank=True,
        null=True,
        help_text="Idempotency key supplied by the caller",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="ledger_postings",
    )

    posted_at = models.DateTimeField(
        default=timezone.now,
        help_text="Accounting effective date",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["posted_at", "created_at"]
        verbose_name = "Posting"
        verbose_name_plural = "Postings"
        indexes = [
            models.Index(fields=["posted_at"], name="posting_posted_at_idx"),
            models.Index(fields=["debit_account", "posted_at"], name="posting_debit_idx"),
            models.Index(fields=["credit_account", "posted_at"], name="posting_credit_idx"),
            models.Index(fields=["shift_id"], name="posting_shift_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=Decimal("0.00")),
                name="chk_posting_amount_positive",
            ),
            models.CheckConstraint(
                condition=~Q(debit_account=F("credit_account")),
                name="chk_posting_accounts_differ",
            ),
            models.UniqueConstraint(
                fields=["reference"],
                condition=Q(reference__isnull=False) & ~Q(reference=""),
                name="uniq_posting_reference_not_blank",
            ),
        ]

    def __str__(self):
        return f"Posting {self.amount} Dr {self.debit_account_id} / Cr {self.credit_account_id}"

    def clean(self):
        if self.reference is not None:
            ref = str(self.reference).strip()
            self.reference = ref or None

        self.description = (self.description or "").strip()

        if self.amount is None or self.amount <= Decimal("0.00"):
            raise ValidationError({"amount": "Posting amount must be > 0"})

        if self.debit_account_id and self.debit_account_id == self.credit_account_id:
            raise ValidationError("Debit and credit accounts must differ")

        if self.posted_at and timezone.is_naive(self.posted_at):
            self.posted_at = timezone.make_aware(self.posted_at, timezone.get_current_timezone())

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Posting records are immutable once created")

        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "Postings cannot be deleted directly; use the posting engine's reverse()"
        )
