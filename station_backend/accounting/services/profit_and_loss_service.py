# accounting/services/profit_and_loss_service.py

"""
PROFIT & LOSS SERVICE (INCOME STATEMENT)

Read-only aggregation over the posting log.

Contract-locked numbers:
{
  "income": float,
  "expenses": float,
  "net_profit": float,
  "income_minor": int,
  "expenses_minor": int,
  "net_profit_minor": int,
  "income_breakdown": [{"code","name","amount","amount_minor"}],
  "expense_breakdown": [...],
  "period": {"start", "end"}
}

Key rules:
- Uses Posting.posted_at as the accounting effective date
- Date bounds are inclusive (end date runs to end of day)
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

from accounting.models.account import Account
from accounting.services.balance_rules import balance_from_totals
from accounting.services.balance_service import annotated_accounts

TWOPLACES = Decimal("0.01")


def _q2(amount: Decimal) -> Decimal:
    return (amount or Decimal("0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_major_number(amount: Decimal) -> float:
    return float(_q2(amount))


def _to_minor_int(amount: Decimal) -> int:
    return int((_q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def _as_aware_dt(v, *, end_of_day: bool):
    if v is None:
        return None

    if isinstance(v, date) and not isinstance(v, datetime):
        t = datetime.max.time() if end_of_day else datetime.min.time()
        v = datetime.combine(v, t)

    if timezone.is_naive(v):
        return timezone.make_aware(v, timezone.get_current_timezone())
    return v


def get_profit_and_loss(*, start_date=None, end_date=None):
    start_dt = _as_aware_dt(start_date, end_of_day=False)
    end_dt = _as_aware_dt(end_date, end_of_day=True)

    income_total = Decimal("0.00")
    expense_total = Decimal("0.00")
    income_breakdown = []
    expense_breakdown = []

    for acc in annotated_accounts(
        start=start_dt,
        end=end_dt,
        account_types=(Account.INCOME, Account.EXPENSE),
    ):
        amount = _q2(balance_from_totals(acc.account_type, acc.debit_total, acc.credit_total))
        if amount == Decimal("0.00"):
            continue

        line = {
            "account_id": str(acc.id),
            "code": acc.code,
            "name": acc.name,
            "amount": _to_major_number(amount),
            "amount_minor": _to_minor_int(amount),
        }
        if acc.account_type == Account.INCOME:
            income_total += amount
            income_breakdown.append(line)
        else:
            expense_total += amount
            expense_breakdown.append(line)

    net_profit = _q2(income_total - expense_total)

    return {
        "income": _to_major_number(income_total),
        "expenses": _to_major_number(expense_total),
        "net_profit": _to_major_number(net_profit),
        "income_minor": _to_minor_int(income_total),
        "expenses_minor": _to_minor_int(expense_total),
        "net_profit_minor": _to_minor_int(net_profit),
        "income_breakdown": income_breakdown,
        "expense_breakdown": expense_breakdown,
        "period": {
            "start": start_dt.isoformat() if start_dt else None,
            "end": end_dt.isoformat() if end_dt else None,
        },
    }
