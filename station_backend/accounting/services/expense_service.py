# PATH: accounting/services/expense_service.py

"""
EXPENSE POSTING SERVICE

Responsibilities:
- Validate expense payload
- Resolve (or issue) the expense category account
- Resolve the settlement account (cash / bank / explicit payment account)
- Create ExpenseRecord + its Posting in ONE atomic unit
- Delete = remove the record and reverse its posting, atomically

Accounting Effect:
- Dr Expense category account
- Cr Cash / Bank
"""

from __future__ import annotations

import logging
from datetime import date as date_type, datetime, time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.expense import ExpenseRecord
from accounting.services import posting_engine
from accounting.services.account_resolver import (
    normalize_method,
    resolve_settlement_account,
)
from accounting.services.account_store import get_or_create_category_account
from accounting.services.exceptions import (
    AccountingServiceError,
    InvalidAmountError,
    RecordNotFoundError,
)
from accounting.services.posting import post_expense

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def parse_amount(v) -> Decimal:
    try:
        amt = Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
        if not amt.is_finite():
            raise InvalidOperation
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Invalid amount: {v!r}", amount=str(v)) from exc
    if amt <= Decimal("0.00"):
        raise InvalidAmountError("Amount must be > 0", amount=str(amt))
    return amt


def normalize_record_date(value) -> date_type:
    if value is None:
        return timezone.localdate()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_type):
        return value
    raise AccountingServiceError("date must be a date")


def posted_at_for(d: date_type) -> datetime:
    """Today's records post now; back-dated records post at the end of their day."""
    if d >= timezone.localdate():
        return timezone.now()
    naive = datetime.combine(d, time(23, 59, 59))
    return timezone.make_aware(naive, timezone.get_current_timezone())


@transaction.atomic
def create_expense(
    *,
    title: str,
    amount,
    category: str,
    payment_method: str = "CASH",
    payment_account_id=None,
    description: str = "",
    date=None,
    created_by=None,
) -> ExpenseRecord:
    amt = parse_amount(amount)
    title = (title or "").strip()
    if not title:
        raise AccountingServiceError("title is required", field="title")
    record_date = normalize_record_date(date)

    category_account = get_or_create_category_account(category, Account.EXPENSE)
    settlement_account, payment_account = resolve_settlement_account(
        method=payment_method, payment_account_id=payment_account_id
    )

    posting = post_expense(
        amount=amt,
        category_account=category_account,
        settlement_account=settlement_account,
        payment_account=payment_account,
        description=f"Expense: {title}" + (f" - {description}" if description else ""),
        created_by=created_by,
        posted_at=posted_at_for(record_date),
    )

    record = ExpenseRecord.objects.create(
        title=title,
        amount=amt,
        category=category_account.name,
        description=(description or "").strip(),
        payment_method=normalize_method(payment_method),
        date=record_date,
        category_account=category_account,
        payment_account=payment_account,
        posting=posting,
    )

    logger.info(
        "Expense recorded",
        extra={
            "expense_id": str(record.id),
            "posting_id": str(posting.id),
            "category": category_account.code,
            "amount": str(amt),
        },
    )
    return record


@transaction.atomic
def delete_expense(expense_id) -> None:
    try:
        record = ExpenseRecord.objects.select_for_update().get(pk=expense_id)
    except (ExpenseRecord.DoesNotExist, ValidationError, ValueError) as exc:
        raise RecordNotFoundError(
            f"Expense {expense_id} not found", expense_id=str(expense_id)
        ) from exc

    posting_id = record.posting_id
    ExpenseRecord.objects.filter(pk=record.pk).delete()
    posting_engine.reverse(posting_id)

    logger.info(
        "Expense deleted",
        extra={"expense_id": str(expense_id), "posting_id": str(posting_id)},
    )
