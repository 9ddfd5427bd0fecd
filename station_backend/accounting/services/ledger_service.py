# accounting/services/ledger_service.py

"""
ACCOUNT LEDGER SERVICE

Chronological statement for ONE account: every posting where the account
is on either side, with a running balance.

Rules:
- READ-ONLY
- Opening balance = balance of all postings before start_date
- Running balance applies the account's sign rule row by row
- One query (postings up to end_date), split in Python into opening
  activity and statement rows, so opening and rows share one snapshot
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Q
from django.utils import timezone

from accounting.models.posting import Posting
from accounting.services.account_store import get_by_id
from accounting.services.balance_rules import balance_delta

TWOPLACES = Decimal("0.01")


def _q2(amount: Decimal) -> Decimal:
    return (amount or Decimal("0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_major_number(amount: Decimal) -> float:
    return float(_q2(amount))


def _as_aware_dt(v, *, end_of_day: bool):
    if v is None:
        return None
    if isinstance(v, date) and not isinstance(v, datetime):
        t = datetime.max.time() if end_of_day else datetime.min.time()
        v = datetime.combine(v, t)
    if timezone.is_naive(v):
        return timezone.make_aware(v, timezone.get_current_timezone())
    return v


def get_account_ledger(account_id, *, start_date=None, end_date=None) -> dict:
    account = get_by_id(account_id)
    start_dt = _as_aware_dt(start_date, end_of_day=False)
    end_dt = _as_aware_dt(end_date, end_of_day=True)

    qs = (
        Posting.objects.filter(Q(debit_account=account) | Q(credit_account=account))
        .select_related("debit_account", "credit_account")
        .order_by("posted_at", "created_at", "id")
    )
    if end_dt is not None:
        qs = qs.filter(posted_at__lte=end_dt)

    opening = Decimal("0.00")
    running = Decimal("0.00")
    rows = []

    for p in qs:
        is_debit = p.debit_account_id == account.id
        if is_debit:
            delta = balance_delta(account.account_type, debit=p.amount)
        else:
            delta = balance_delta(account.account_type, credit=p.amount)

        if start_dt is not None and p.posted_at < start_dt:
            opening += delta
            running = opening
            continue

        running += delta
        counter = p.credit_account if is_debit else p.debit_account
        rows.append(
            {
                "id": str(p.id),
                "posted_at": p.posted_at.isoformat(),
                "description": p.description,
                "debit": _to_major_number(p.amount) if is_debit else 0.0,
                "credit": 0.0 if is_debit else _to_major_number(p.amount),
                "counter_account": {"code": counter.code, "name": counter.name},
                "shift_id": p.shift_id,
                "reference": p.reference,
                "running_balance": _to_major_number(running),
            }
        )

    return {
        "account": {
            "id": str(account.id),
            "code": account.code,
            "name": account.name,
            "account_type": account.account_type,
        },
        "period": {
            "start": start_dt.isoformat() if start_dt else None,
            "end": end_dt.isoformat() if end_dt else None,
        },
        "opening_balance": _to_major_number(opening),
        "closing_balance": _to_major_number(running),
        "transactions": rows,
    }
