# accounting/services/posting.py

"""
======================================================
PATH: accounting/services/posting.py
======================================================
POSTING ADAPTER

Map business events -> postings and call the posting engine.

This module should remain a thin adapter:
- It DOES NOT do workflows (orchestrators in purchases/, expense_service,
  income_service do).
- It DOES map business events -> debit/credit roles.
- It ALWAYS calls posting_engine.post (engine) for atomicity + idempotency.

Station events:
- Fuel sale:        Dr Cash / Bank / Receivable      Cr Fuel Sales
- Dip variance:     loss   Dr Stock Loss             Cr Fuel Inventory
                    excess Dr Fuel Inventory         Cr Stock Gain
- Fuel purchase:    Dr Fuel Inventory                Cr Cash / Bank (paid part)
                    Dr Fuel Inventory                Cr Accounts Payable (credit part)
- Supplier payment: Dr Accounts Payable              Cr Cash / Bank
- Expense:          Dr expense category              Cr Cash / Bank
- Other income:     Dr Cash / Bank                   Cr income category
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from accounting.models.account import Account
from accounting.models.posting import Posting
from accounting.services import posting_engine
from accounting.services.account_resolver import (
    AccountRole,
    get_account,
    normalize_method,
    resolve_settlement_account,
)
from accounting.services.exceptions import InvalidAmountError, InvalidPaymentMethodError

TWOPLACES = Decimal("0.01")

SALE_METHOD_ROLES = {
    "CASH": AccountRole.CASH,
    "CREDIT": AccountRole.ACCOUNTS_RECEIVABLE,
    "CARD": AccountRole.BANK,
    "ONLINE": AccountRole.BANK,
    "BANK": AccountRole.BANK,
}


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    try:
        amt = Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
        if not amt.is_finite():
            raise InvalidOperation
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Invalid amount: {v!r}", amount=str(v)) from exc
    return amt


# ============================================================
# SALES / STOCK
# ============================================================


def post_fuel_sale(
    *,
    amount,
    payment_method: str = "CASH",
    shift_id: str | None = None,
    description: str = "",
    reference: str | None = None,
    created_by=None,
    posted_at: datetime | None = None,
) -> Posting:
    method = normalize_method(payment_method)
    role = SALE_METHOD_ROLES.get(method)
    if role is None:
        raise InvalidPaymentMethodError(
            f"Invalid sale payment method '{payment_method}'. Use one of: {', '.join(sorted(SALE_METHOD_ROLES))}.",
            method=str(payment_method),
        )

    return posting_engine.post(
        get_account(role),
        get_account(AccountRole.FUEL_SALES),
        amount,
        description or f"Fuel sale ({method.lower()})",
        shift_id=shift_id,
        reference=reference,
        created_by=created_by,
        posted_at=posted_at,
    )


def post_stock_variance(
    *,
    variance_value,
    description: str = "",
    shift_id: str | None = None,
    reference: str | None = None,
    created_by=None,
    posted_at: datetime | None = None,
) -> Posting | None:
    """
    Book a dip-reading variance valued at purchase price.

    Negative value = shortage (loss), positive = excess (gain), zero = nothing.
    """
    value = _money(variance_value)
    if value == Decimal("0.00"):
        return None

    if value < 0:
        debit, credit = get_account(AccountRole.STOCK_LOSS), get_account(AccountRole.FUEL_INVENTORY)
        default_description = "Dip variance: stock loss"
    else:
        debit, credit = get_account(AccountRole.FUEL_INVENTORY), get_account(AccountRole.STOCK_GAIN)
        default_description = "Dip variance: stock gain"

    return posting_engine.post(
        debit,
        credit,
        abs(value),
        description or default_description,
        shift_id=shift_id,
        reference=reference,
        created_by=created_by,
        posted_at=posted_at,
    )


# ============================================================
# PURCHASES / SETTLEMENTS
# ============================================================


def post_inventory_purchase(
    *,
    amount,
    supplier,
    on_credit: bool,
    method: str = "CASH",
    payment_account_id=None,
    description: str = "",
    reference: str | None = None,
    created_by=None,
    posted_at: datetime | None = None,
) -> Posting:
    inventory = get_account(AccountRole.FUEL_INVENTORY)

    payment_account = None
    if on_credit:
        credit = get_account(AccountRole.ACCOUNTS_PAYABLE)
    else:
        credit, payment_account = resolve_settlement_account(
            method=method, payment_account_id=payment_account_id
        )

    return posting_engine.post(
        inventory,
        credit,
        amount,
        description or f"Fuel purchase from {supplier.name}",
        supplier=supplier,
        payment_account=payment_account,
        reference=reference,
        created_by=created_by,
        posted_at=posted_at,
    )


def post_supplier_payment(
    *,
    amount,
    supplier,
    settlement_account: Account,
    payment_account=None,
    reference: str | None = None,
    created_by=None,
    posted_at: datetime | None = None,
) -> Posting:
    return posting_engine.post(
        get_account(AccountRole.ACCOUNTS_PAYABLE),
        settlement_account,
        amount,
        f"Payment to {supplier.name}",
        supplier=supplier,
        payment_account=payment_account,
        reference=reference,
        created_by=created_by,
        posted_at=posted_at,
    )


# ============================================================
# EXPENSES / OTHER INCOME
# ============================================================


def post_expense(
    *,
    amount,
    category_account: Account,
    settlement_account: Account,
    payment_account=None,
    description: str = "",
    created_by=None,
    posted_at: datetime | None = None,
) -> Posting:
    return posting_engine.post(
        category_account,
        settlement_account,
        amount,
        description,
        payment_account=payment_account,
        created_by=created_by,
        posted_at=posted_at,
    )


def post_income(
    *,
    amount,
    category_account: Account,
    settlement_account: Account,
    payment_account=None,
    description: str = "",
    created_by=None,
    posted_at: datetime | None = None,
) -> Posting:
    return posting_engine.post(
        settlement_account,
        category_account,
        amount,
        description,
        payment_account=payment_account,
        created_by=created_by,
        posted_at=posted_at,
    )
