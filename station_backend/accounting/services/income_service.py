# PATH: accounting/services/income_service.py

"""
OTHER INCOME POSTING SERVICE

Mirror of the expense service for non-fuel income (rent, commissions,
lubricant margins, ...).

Accounting Effect:
- Dr Cash / Bank (or the explicit payment account's ledger account)
- Cr Income category account
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from accounting.models.account import Account
from accounting.models.expense import IncomeRecord
from accounting.services import posting_engine
from accounting.services.account_resolver import (
    normalize_method,
    resolve_settlement_account,
)
from accounting.services.account_store import get_or_create_category_account
from accounting.services.exceptions import AccountingServiceError, RecordNotFoundError
from accounting.services.expense_service import parse_amount, normalize_record_date, posted_at_for
from accounting.services.posting import post_income

logger = logging.getLogger(__name__)


@transaction.atomic
def create_income(
    *,
    title: str,
    amount,
    category: str,
    payment_method: str = "CASH",
    payment_account_id=None,
    description: str = "",
    date=None,
    created_by=None,
) -> IncomeRecord:
    amt = parse_amount(amount)
    title = (title or "").strip()
    if not title:
        raise AccountingServiceError("title is required", field="title")
    record_date = normalize_record_date(date)

    category_account = get_or_create_category_account(category, Account.INCOME)
    settlement_account, payment_account = resolve_settlement_account(
        method=payment_method, payment_account_id=payment_account_id
    )

    posting = post_income(
        amount=amt,
        category_account=category_account,
        settlement_account=settlement_account,
        payment_account=payment_account,
        description=f"Income: {title}" + (f" - {description}" if description else ""),
        created_by=created_by,
        posted_at=posted_at_for(record_date),
    )

    record = IncomeRecord.objects.create(
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
        "Income recorded",
        extra={
            "income_id": str(record.id),
            "posting_id": str(posting.id),
            "category": category_account.code,
            "amount": str(amt),
        },
    )
    return record


@transaction.atomic
def delete_income(income_id) -> None:
    try:
        record = IncomeRecord.objects.select_for_update().get(pk=income_id)
    except (IncomeRecord.DoesNotExist, ValidationError, ValueError) as exc:
        raise RecordNotFoundError(
            f"Income {income_id} not found", income_id=str(income_id)
        ) from exc

    posting_id = record.posting_id
    IncomeRecord.objects.filter(pk=record.pk).delete()
    posting_engine.reverse(posting_id)

    logger.info(
        "Income deleted",
        extra={"income_id": str(income_id), "posting_id": str(posting_id)},
    )
