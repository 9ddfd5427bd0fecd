# purchases/services/supplier_ledger_service.py

"""
SUPPLIER LEDGER (READ-ONLY)

Statement of what the station owes one supplier, day by day:

- PURCHASE rows credit the full total_cost and debit the part paid at
  delivery (paid_posting)
- PAYMENT rows debit the settled amount
- running balance = credits - debits (a payable)

The supplier's balance carried in at creation has no purchase behind it;
it is folded into the opening balance so the lifetime closing balance
always equals Supplier.balance.

Rows are keyed by local calendar day: purchases by Purchase.date,
payments by the local date of their posting.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.utils import timezone

from accounting.services.exceptions import SupplierNotFoundError
from purchases.models import Purchase, Supplier, SupplierPayment

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _q2(amount) -> Decimal:
    return Decimal(str(amount or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_major_number(amount) -> float:
    return float(_q2(amount))


def _get_supplier(supplier_id) -> Supplier:
    try:
        return Supplier.objects.get(id=supplier_id)
    except (Supplier.DoesNotExist, ValidationError, ValueError) as exc:
        raise SupplierNotFoundError(
            "Supplier not found", supplier_id=str(supplier_id)
        ) from exc


def _purchase_entry(p: Purchase) -> dict:
    paid_now = _q2(p.paid_posting.amount) if p.paid_posting_id else ZERO
    return {
        "day": p.date,
        "created_at": p.created_at,
        "type": "PURCHASE",
        "ref_id": str(p.id),
        "description": p.description or f"Fuel purchase from {p.supplier.name}",
        "debit": paid_now,
        "credit": _q2(p.total_cost),
        "details": {
            "quantity": _to_major_number(p.quantity) if p.quantity is not None else None,
            "total_cost": _to_major_number(p.total_cost),
            "paid_amount": _to_major_number(p.paid_amount),
            "status": p.status,
        },
    }


def _payment_entry(pay: SupplierPayment) -> dict:
    return {
        "day": timezone.localtime(pay.posting.posted_at).date(),
        "created_at": pay.created_at,
        "type": "PAYMENT",
        "ref_id": str(pay.id),
        "description": pay.posting.description or f"Payment to {pay.supplier.name}",
        "debit": _q2(pay.amount),
        "credit": ZERO,
        "details": {
            "method": pay.method,
            "reference": pay.posting.reference,
            "allocated_amount": _to_major_number(pay.allocated_amount),
            "unallocated_amount": _to_major_number(pay.unallocated_amount),
        },
    }


def get_supplier_ledger(supplier_id, *, start_date=None, end_date=None) -> dict:
    supplier = _get_supplier(supplier_id)

    purchases = (
        Purchase.objects.filter(supplier=supplier)
        .select_related("supplier", "paid_posting")
    )
    payments = (
        SupplierPayment.objects.filter(supplier=supplier)
        .select_related("supplier", "posting")
    )

    entries = [_purchase_entry(p) for p in purchases]
    entries += [_payment_entry(pay) for pay in payments]
    entries.sort(key=lambda e: (e["day"], e["created_at"], e["ref_id"]))

    lifetime_net = sum((e["credit"] - e["debit"] for e in entries), ZERO)
    carried_in = _q2(supplier.balance) - lifetime_net

    opening = carried_in
    running = carried_in
    total_debit = ZERO
    total_credit = ZERO
    rows = []

    for e in entries:
        if end_date is not None and e["day"] > end_date:
            break
        if start_date is not None and e["day"] < start_date:
            opening += e["credit"] - e["debit"]
            running = opening
            continue

        running += e["credit"] - e["debit"]
        total_debit += e["debit"]
        total_credit += e["credit"]
        rows.append(
            {
                "date": e["day"].isoformat(),
                "type": e["type"],
                "ref_id": e["ref_id"],
                "description": e["description"],
                "debit": _to_major_number(e["debit"]),
                "credit": _to_major_number(e["credit"]),
                "running_balance": _to_major_number(running),
                "details": e["details"],
            }
        )

    return {
        "supplier": {
            "id": str(supplier.id),
            "name": supplier.name,
            "balance": _to_major_number(supplier.balance),
        },
        "period": {
            "start": start_date.isoformat() if start_date else None,
            "end": end_date.isoformat() if end_date else None,
        },
        "opening_balance": _to_major_number(opening),
        "total_debit": _to_major_number(total_debit),
        "total_credit": _to_major_number(total_credit),
        "closing_balance": _to_major_number(running),
        "transactions": rows,
    }
