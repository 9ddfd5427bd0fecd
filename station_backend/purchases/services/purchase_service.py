# purchases/services/purchase_service.py

"""
======================================================
PATH: purchases/services/purchase_service.py
======================================================
FUEL PURCHASE SERVICE

Record a delivery from a supplier atomically:

1) Lock supplier
2) Validate 0 <= paid_amount <= total_cost
3) Create the Purchase (status derived from the paid part)
4) Post ledger:
   - paid part:   Dr Fuel Inventory / Cr Cash|Bank|payment account
   - credit part: Dr Fuel Inventory / Cr Accounts Payable
5) Increase supplier balance by the credit part

Reconciliation helper:
- find_supplier_balance_drift(): suppliers whose balance disagrees with
  the sum of their purchases' unpaid remainders
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from django.db import transaction
from django.db.models import DecimalField, ExpressionWrapper, F, Sum, Value
from django.db.models.functions import Coalesce

from accounting.services.exceptions import InvalidAmountError, InvalidPurchaseError
from accounting.services.posting import post_inventory_purchase
from notifications.dispatch import notify_after_commit
from purchases.models import Purchase, Supplier
from purchases.services.payment_service import lock_supplier

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    try:
        amt = Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
        if not amt.is_finite():
            raise InvalidOperation
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Invalid amount: {v!r}", amount=str(v)) from exc
    return amt


@transaction.atomic
def record_purchase(
    *,
    supplier_id,
    total_cost,
    paid_amount=None,
    method: str = "CASH",
    payment_account_id=None,
    quantity=None,
    description: str = "",
    date=None,
    created_by=None,
) -> Purchase:
    total = _money(total_cost)
    paid = _money(paid_amount)

    if total <= ZERO:
        raise InvalidAmountError("total_cost must be > 0", amount=str(total))
    if paid < ZERO or paid > total:
        raise InvalidPurchaseError(
            "paid_amount must be between 0 and total_cost",
            total_cost=str(total),
            paid_amount=str(paid),
        )

    supplier = lock_supplier(supplier_id)
    credit_part = total - paid

    purchase = Purchase(
        supplier=supplier,
        total_cost=total,
        paid_amount=paid,
        quantity=quantity,
        description=(description or "").strip(),
        created_by=created_by,
    )
    if date is not None:
        purchase.date = date

    label = purchase.description or f"Fuel purchase from {supplier.name}"

    if paid > ZERO:
        purchase.paid_posting = post_inventory_purchase(
            amount=paid,
            supplier=supplier,
            on_credit=False,
            method=method,
            payment_account_id=payment_account_id,
            description=f"{label} (paid)",
            created_by=created_by,
        )

    if credit_part > ZERO:
        purchase.credit_posting = post_inventory_purchase(
            amount=credit_part,
            supplier=supplier,
            on_credit=True,
            description=f"{label} (on credit)",
            created_by=created_by,
        )
        Supplier.objects.filter(pk=supplier.pk).update(balance=F("balance") + credit_part)

    purchase.save()

    logger.info(
        "Fuel purchase recorded",
        extra={
            "purchase_id": str(purchase.id),
            "supplier_id": str(supplier.id),
            "total_cost": str(total),
            "paid_amount": str(paid),
            "status": purchase.status,
        },
    )

    notify_after_commit(
        {
            "type": "PURCHASE_RECORDED",
            "supplier_id": str(supplier.id),
            "supplier_name": supplier.name,
            "purchase_id": str(purchase.id),
            "total_cost": str(total),
            "paid_amount": str(paid),
            "status": purchase.status,
        }
    )
    return purchase


def find_supplier_balance_drift() -> list[dict]:
    outstanding = ExpressionWrapper(
        F("purchases__total_cost") - F("purchases__paid_amount"),
        output_field=DecimalField(max_digits=16, decimal_places=2),
    )
    rows = Supplier.objects.annotate(
        expected=Coalesce(
            Sum(outstanding),
            Value(ZERO),
            output_field=DecimalField(max_digits=16, decimal_places=2),
        )
    ).order_by("name")

    drift = []
    for s in rows:
        expected = _money(s.expected)
        if _money(s.balance) != expected:
            drift.append(
                {
                    "supplier_id": str(s.id),
                    "name": s.name,
                    "balance": _money(s.balance),
                    "expected": expected,
                    "difference": _money(s.balance) - expected,
                }
            )
    return drift
