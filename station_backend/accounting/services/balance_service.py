# accounting/services/balance_service.py

"""
BALANCE & RECONCILIATION SERVICE (AUTHORITATIVE)

Read-only ledger aggregation helpers.

RULES:
- READ-ONLY: no writes, ever
- The Posting log is the single source of truth; Account.balance is a cache
- Accounting timeline uses Posting.posted_at (not created_at)
- Every report section is ONE SQL statement (accounts annotated with
  debit/credit subquery sums), so it reads a single consistent snapshot
  even while postings are being written
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import DecimalField, OuterRef, Subquery, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.posting import Posting
from accounting.services.balance_rules import balance_from_totals

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

_MONEY_FIELD = DecimalField(max_digits=16, decimal_places=2)


def _q2(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _as_aware_dt(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if timezone.is_naive(dt):
        return timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


def _side_total(side: str, *, start=None, end=None):
    qs = Posting.objects.filter(**{side: OuterRef("pk")})
    if start is not None:
        qs = qs.filter(posted_at__gte=start)
    if end is not None:
        qs = qs.filter(posted_at__lte=end)

    qs = qs.order_by().values(side).annotate(total=Sum("amount")).values("total")
    return Coalesce(Subquery(qs, output_field=_MONEY_FIELD), Value(ZERO), output_field=_MONEY_FIELD)


def annotated_accounts(*, start: datetime | None = None, end: datetime | None = None, account_types=None):
    """
    Accounts annotated with debit_total / credit_total over postings whose
    posted_at falls in [start, end] (either bound optional).
    """
    start = _as_aware_dt(start)
    end = _as_aware_dt(end)

    qs = Account.objects.all()
    if account_types:
        qs = qs.filter(account_type__in=list(account_types))

    return qs.annotate(
        debit_total=_side_total("debit_account", start=start, end=end),
        credit_total=_side_total("credit_account", start=start, end=end),
    ).order_by("code")


def account_totals(*, start: datetime | None = None, end: datetime | None = None, account_types=None) -> list[dict]:
    rows = []
    for acc in annotated_accounts(start=start, end=end, account_types=account_types):
        debit = _q2(acc.debit_total)
        credit = _q2(acc.credit_total)
        rows.append(
            {
                "account_id": acc.id,
                "code": acc.code,
                "name": acc.name,
                "account_type": acc.account_type,
                "cached_balance": _q2(acc.balance),
                "debit": debit,
                "credit": credit,
                "balance": _q2(balance_from_totals(acc.account_type, debit, credit)),
            }
        )
    return rows


def compute_account_balances(*, as_of: datetime | None = None) -> dict:
    """Log-derived balance per account id."""
    return {row["account_id"]: row["balance"] for row in account_totals(end=as_of)}


def find_balance_drift() -> list[dict]:
    """
    Accounts whose cached balance disagrees with the posting log.
    Empty list means the cache is consistent.
    """
    return [
        {
            "account_id": row["account_id"],
            "code": row["code"],
            "name": row["name"],
            "cached": row["cached_balance"],
            "derived": row["balance"],
            "difference": row["cached_balance"] - row["balance"],
        }
        for row in account_totals()
        if row["cached_balance"] != row["balance"]
    ]
