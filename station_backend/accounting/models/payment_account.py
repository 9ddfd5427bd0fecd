# accounting/models/payment_account.py

"""
PAYMENT ACCOUNT MODEL

Named settlement instrument (a bank card, a mobile wallet, the till) that
settles into one general-ledger asset account. Postings may carry it as a
sub-ledger tag.
"""

from __future__ import annotations

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from accounting.models.account import Account


class PaymentAccount(models.Model):
    CASH = "CASH"
    BANK = "BANK"
    CARD = "CARD"
    ONLINE = "ONLINE"

    KINDS = [
        (CASH, "Cash"),
        (BANK, "Bank"),
        (CARD, "Card"),
        (ONLINE, "Online"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=120, unique=True)
    kind = models.CharField(max_length=10, choices=KINDS, default=BANK)
    account_number = models.CharField(max_length=64, blank=True, default="")

    ledger_account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="payment_accounts",
        help_text="General-ledger asset account this instrument settles into",
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Payment account name is required"})

        if self.ledger_account_id and self.ledger_account.account_type != Account.ASSET:
            raise ValidationError(
                {"ledger_account": "Payment accounts must settle into an ASSET account"}
            )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
