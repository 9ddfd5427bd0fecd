# accounting/services/posting_engine.py

"""
======================================================
PATH: accounting/services/posting_engine.py
======================================================
POSTING ENGINE (ACCOUNTING ENGINE)

This module is the ONLY place allowed to:
- Create Posting rows
- Delete Posting rows (reverse)
- Mutate Account.balance

Guarantees:
- Each post/reverse is ONE atomic unit: the posting row and both balance
  effects commit together or not at all
- Both account rows are locked (select_for_update, primary-key order) for
  the duration of the unit; balances move through F() increments so no
  concurrent update can be lost
- Idempotency via reference (prevents double-posting on retries)

Everything else (sales, purchases, settlements, expenses) must pass
through here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.posting import Posting
from accounting.services.account_store import adjust_balance
from accounting.services.balance_rules import balance_delta
from accounting.services.exceptions import (
    IdempotencyError,
    InvalidAmountError,
    PostingInUseError,
    PostingNotFoundError,
    SameAccountError,
    UnknownAccountError,
)

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(value) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}", amount=str(value))

    try:
        amt = value if isinstance(value, Decimal) else Decimal(str(value))
        amt = amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
        if not amt.is_finite():
            raise InvalidOperation
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Invalid amount: {value!r}", amount=str(value)) from exc

    if amt <= ZERO:
        raise InvalidAmountError(f"Amount must be > 0 (got {amt})", amount=str(amt))
    return amt


def _code_of(account_or_code) -> str:
    if isinstance(account_or_code, Account):
        return account_or_code.code
    return str(account_or_code or "").strip()


def _as_aware_dt(dt: datetime | None) -> datetime:
    if dt is None:
        return timezone.now()
    if timezone.is_naive(dt):
        return timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


def _lock_accounts(**lookup) -> list[Account]:
    return list(Account.objects.select_for_update().filter(**lookup).order_by("pk"))


# ============================================================
# POST
# ============================================================


@transaction.atomic
def post(
    debit_code,
    credit_code,
    amount,
    description: str = "",
    *,
    shift_id: str | None = None,
    supplier=None,
    payment_account=None,
    reference: str | None = None,
    created_by=None,
    posted_at: datetime | None = None,
) -> Posting:
    """
    Record one balanced movement: Dr `debit_code` / Cr `credit_code`.

    Accepts account codes (or Account instances). Raises InvalidAmountError,
    SameAccountError, UnknownAccountError or IdempotencyError; on any
    failure nothing is written.
    """
    amt = _money(amount)

    debit_code = _code_of(debit_code)
    credit_code = _code_of(credit_code)
    if debit_code == credit_code:
        raise SameAccountError(
            f"Debit and credit account must differ (both {debit_code})",
            account_code=debit_code,
        )

    locked = {a.code: a for a in _lock_accounts(code__in=[debit_code, credit_code])}
    missing = [c for c in (debit_code, credit_code) if c not in locked]
    if missing:
        logger.error("Posting rejected: unknown account", extra={"codes": missing})
        raise UnknownAccountError(
            f"Account(s) not found: {', '.join(missing)}",
            codes=missing,
        )

    debit_account = locked[debit_code]
    credit_account = locked[credit_code]

    reference = (str(reference).strip() or None) if reference is not None else None

    # Clear error before DB constraint race handling
    if reference and Posting.objects.filter(reference=reference).exists():
        raise IdempotencyError(
            f"Posting already exists for reference {reference}",
            reference=reference,
        )

    try:
        with transaction.atomic():
            posting = Posting.objects.create(
                debit_account=debit_account,
                credit_account=credit_account,
                amount=amt,
                description=description or "",
                shift_id=(str(shift_id).strip() or None) if shift_id else None,
                supplier=supplier,
                payment_account=payment_account,
                reference=reference,
                created_by=created_by,
                posted_at=_as_aware_dt(posted_at),
            )
    except IntegrityError as exc:
        if reference and Posting.objects.filter(reference=reference).exists():
            raise IdempotencyError(
                f"Posting already exists for reference {reference}",
                reference=reference,
            ) from exc
        raise

    adjust_balance(debit_account, balance_delta(debit_account.account_type, debit=amt))
    adjust_balance(credit_account, balance_delta(credit_account.account_type, credit=amt))

    logger.info(
        "Posting recorded",
        extra={
            "posting_id": str(posting.id),
            "debit_code": debit_code,
            "credit_code": credit_code,
            "amount": str(amt),
            "reference": reference,
        },
    )
    return posting


# ============================================================
# REVERSE
# ============================================================


@transaction.atomic
def reverse(posting_id) -> None:
    """
    Undo a posting: inverse balance effects + removal of the row, atomically.

    A second reversal of the same id raises PostingNotFoundError.
    """
    try:
        posting = Posting.objects.select_for_update().get(pk=posting_id)
    except (Posting.DoesNotExist, ValidationError, ValueError) as exc:
        raise PostingNotFoundError(
            f"Posting {posting_id} not found",
            posting_id=str(posting_id),
        ) from exc

    locked = {
        a.pk: a
        for a in _lock_accounts(pk__in=[posting.debit_account_id, posting.credit_account_id])
    }
    debit_account = locked[posting.debit_account_id]
    credit_account = locked[posting.credit_account_id]

    try:
        Posting.objects.filter(pk=posting.pk).delete()
    except ProtectedError as exc:
        raise PostingInUseError(
            "Posting belongs to a business record; delete or reverse that record instead",
            posting_id=str(posting.pk),
        ) from exc

    amt = posting.amount
    adjust_balance(debit_account, -balance_delta(debit_account.account_type, debit=amt))
    adjust_balance(credit_account, -balance_delta(credit_account.account_type, credit=amt))

    logger.info(
        "Posting reversed",
        extra={
            "posting_id": str(posting_id),
            "debit_code": debit_account.code,
            "credit_code": credit_account.code,
            "amount": str(amt),
        },
    )


# ============================================================
# REBUILD (reconciliation repair)
# ============================================================


@transaction.atomic
def rebuild_cached_balances() -> list[dict]:
    """
    Recompute every cached balance from the posting log and rewrite the
    rows that drifted. Returns the corrections made.
    """
    from accounting.services.balance_service import compute_account_balances

    accounts = _lock_accounts()
    derived = compute_account_balances()

    corrections: list[dict] = []
    for acc in accounts:
        expected = derived.get(acc.pk, ZERO)
        if acc.balance == expected:
            continue

        Account.objects.filter(pk=acc.pk).update(balance=expected, updated_at=timezone.now())
        corrections.append(
            {
                "account_id": str(acc.pk),
                "code": acc.code,
                "cached": acc.balance,
                "derived": expected,
            }
        )
        logger.warning(
            "Cached balance corrected",
            extra={
                "account_code": acc.code,
                "cached": str(acc.balance),
                "derived": str(expected),
            },
        )

    return corrections
