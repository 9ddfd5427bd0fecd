# purchases/tests/helpers.py

from __future__ import annotations

import datetime
from decimal import Decimal

from purchases.models import Purchase, Supplier
from purchases.services.purchase_service import record_purchase


class FailingNotifier:
    """Notifier that always blows up; delivery failures must stay outside the ledger."""

    def __init__(self, *, recipient=""):
        self.recipient = recipient

    def notify(self, event):
        raise RuntimeError("gateway down")


def make_supplier(name="Pak Petroleum", balance=None) -> Supplier:
    supplier = Supplier(name=name)
    if balance is not None:
        supplier.balance = Decimal(balance)
    supplier.save()
    return supplier


def credit_purchase(supplier, total, *, day) -> Purchase:
    return record_purchase(
        supplier_id=supplier.id,
        total_cost=total,
        date=datetime.date(2026, 1, day),
    )
