# purchases/services/payment_service.py

"""
SUPPLIER SETTLEMENT (FIFO ALLOCATION)

pay_supplier() is ONE atomic unit:
1. lock supplier, validate amount against outstanding balance
2. post Dr Accounts Payable / Cr settlement account (engine)
3. decrement supplier balance
4. allocate the amount to open purchases, oldest first
5. record the SupplierPayment (+ allocations)

Any failure rolls back all of it. The notification is sent only after
commit; its failure is logged and ignored.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from accounting.models.posting import Posting
from accounting.services.account_resolver import (
    normalize_method,
    resolve_settlement_account,
)
from accounting.services.exceptions import (
    ExceedsOutstandingBalanceError,
    InvalidAmountError,
    SupplierNotFoundError,
)
from accounting.services.posting import post_supplier_payment
from notifications.dispatch import notify_after_commit
from purchases.models import PaymentAllocation, Purchase, Supplier, SupplierPayment


logger = logging.getLogger("payments")


TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    try:
        amt = Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
        if not amt.is_finite():
            raise InvalidOperation
        return amt
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Invalid amount: {v!r}", amount=str(v)) from exc


def lock_supplier(supplier_id) -> Supplier:
    try:
        return Supplier.objects.select_for_update().get(id=supplier_id, is_active=True)
    except (Supplier.DoesNotExist, ValidationError, ValueError) as exc:
        logger.error(
            "Supplier not found during payment",
            extra={"supplier_id": str(supplier_id)},
        )
        raise SupplierNotFoundError(
            "Supplier not found", supplier_id=str(supplier_id)
        ) from exc


def allocate_fifo(*, supplier: Supplier, amount: Decimal) -> tuple[list[tuple[Purchase, Decimal]], Decimal]:
    """
    Apply `amount` to the supplier's UNPAID/PARTIAL purchases in date order.

    Returns ([(purchase, applied), ...], remaining). Caller must be inside
    a transaction; touched purchase rows are locked.
    """
    remaining = amount
    applied: list[tuple[Purchase, Decimal]] = []

    open_purchases = (
        Purchase.objects.select_for_update()
        .filter(
            supplier=supplier,
            status__in=[Purchase.STATUS_UNPAID, Purchase.STATUS_PARTIAL],
        )
        .order_by("date", "created_at", "id")
    )

    for purchase in open_purchases:
        if remaining <= ZERO:
            break

        needed = _money(purchase.total_cost) - _money(purchase.paid_amount)
        if needed <= ZERO:
            continue

        pay = min(remaining, needed)
        purchase.paid_amount = _money(purchase.paid_amount) + pay
        purchase.save(update_fields=["paid_amount"])

        applied.append((purchase, pay))
        remaining -= pay

    return applied, remaining


@transaction.atomic
def pay_supplier(
    *,
    supplier_id,
    amount,
    payment_account_id=None,
    method: str = "CASH",
    created_by=None,
    reference: str | None = None,
) -> Posting:
    """
    SETTLE SUPPLIER BALANCE (atomic)

    Raises InvalidAmountError, SupplierNotFoundError,
    ExceedsOutstandingBalanceError (with outstanding_balance), or any
    posting-engine error; nothing is written on failure.
    """
    logger.info(
        "Initiating supplier payment",
        extra={
            "supplier_id": str(supplier_id),
            "amount": str(amount),
            "payment_method": method,
        },
    )

    amt = _money(amount)
    if amt <= ZERO:
        logger.error("Invalid payment amount", extra={"amount": str(amount)})
        raise InvalidAmountError("Amount must be > 0", amount=str(amt))

    supplier = lock_supplier(supplier_id)

    if amt > supplier.balance:
        logger.warning(
            "Supplier payment exceeds outstanding balance",
            extra={
                "supplier_id": str(supplier.id),
                "amount": str(amt),
                "outstanding_balance": str(supplier.balance),
            },
        )
        raise ExceedsOutstandingBalanceError(
            f"Amount exceeds outstanding balance (Rs. {supplier.balance})",
            outstanding_balance=str(supplier.balance),
            supplier_id=str(supplier.id),
        )

    settlement_account, payment_account = resolve_settlement_account(
        method=method, payment_account_id=payment_account_id
    )

    posting = post_supplier_payment(
        amount=amt,
        supplier=supplier,
        settlement_account=settlement_account,
        payment_account=payment_account,
        reference=reference,
        created_by=created_by,
    )

    Supplier.objects.filter(pk=supplier.pk).update(balance=F("balance") - amt)

    applied, remaining = allocate_fifo(supplier=supplier, amount=amt)
    allocated = amt - remaining

    payment = SupplierPayment.objects.create(
        supplier=supplier,
        posting=posting,
        payment_account=payment_account,
        amount=amt,
        method=normalize_method(method),
        allocated_amount=allocated,
        unallocated_amount=remaining,
        created_by=created_by,
    )
    PaymentAllocation.objects.bulk_create(
        [PaymentAllocation(payment=payment, purchase=p, amount=a) for p, a in applied]
    )

    if remaining > ZERO:
        logger.warning(
            "Supplier payment left an unallocated remainder",
            extra={
                "supplier_id": str(supplier.id),
                "payment_id": str(payment.id),
                "unallocated_amount": str(remaining),
            },
        )

    notify_after_commit(
        {
            "type": "SUPPLIER_PAYMENT",
            "supplier_id": str(supplier.id),
            "supplier_name": supplier.name,
            "amount": str(amt),
            "posting_id": str(posting.id),
            "remaining_balance": str(supplier.balance - amt),
        }
    )

    logger.info(
        "Supplier payment completed successfully",
        extra={
            "payment_id": str(payment.id),
            "posting_id": str(posting.id),
            "allocated_amount": str(allocated),
            "purchases_touched": len(applied),
        },
    )
    return posting
