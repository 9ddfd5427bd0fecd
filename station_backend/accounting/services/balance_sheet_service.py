# accounting/services/balance_sheet_service.py

"""
BALANCE SHEET SERVICE

Pure accounting read service.

Responsibilities:
- Compute balances per account as at a given moment (from the posting log)
- Classify balances into Assets, Liabilities, Equity
- Report the accounting equation: Assets = Liabilities + Equity + Net Profit

Important:
- Income/Expense activity is not closed into equity (no period closing),
  so net profit to date is reported alongside equity and included in the
  equation.

Contract:
- API emits numeric JSON values (floats, 2dp) plus exact minor-unit ints
- is_balanced is computed on minor units (exact to the cent); an
  unbalanced result is returned (and logged), not raised
"""

from __future__ import annotations

import logging
from datetime import date as date_cls, datetime, time
from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

from accounting.models.account import Account
from accounting.services.balance_rules import balance_from_totals
from accounting.services.balance_service import annotated_accounts
from accounting.services.exceptions import AccountingServiceError

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

SECTION_BY_TYPE = {
    Account.ASSET: "assets",
    Account.LIABILITY: "liabilities",
    Account.EQUITY: "equity",
}


def _q2(amount: Decimal) -> Decimal:
    return (amount or Decimal("0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_major_number(amount: Decimal) -> float:
    return float(_q2(amount))


def _to_minor_int(amount: Decimal) -> int:
    return int((_q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def _parse_as_of_date(as_of_date) -> date_cls | None:
    if not as_of_date:
        return None
    if isinstance(as_of_date, date_cls):
        return as_of_date
    try:
        return date_cls.fromisoformat(str(as_of_date).strip())
    except ValueError as exc:
        raise AccountingServiceError("Invalid as_of_date format (YYYY-MM-DD)") from exc


def _end_of_day_aware(d: date_cls) -> datetime:
    # Inclusive end-of-day snapshot
    naive = datetime.combine(d, time.max)
    return timezone.make_aware(naive, timezone.get_current_timezone())


def generate_balance_sheet(*, as_of_date=None, as_of: datetime | None = None) -> dict:
    """
    Args:
        as_of_date: Optional date / YYYY-MM-DD string (inclusive end-of-day snapshot)
        as_of: Optional exact datetime cutoff (ignored when as_of_date is set)

    Returns:
        {
            "assets": [{"code","name","balance","balance_minor"}...],
            "liabilities": [...],
            "equity": [...],
            "net_profit": 0.0,
            "totals": {...},
            "is_balanced": true
        }
    """
    cutoff_d = _parse_as_of_date(as_of_date)
    cutoff_dt = _end_of_day_aware(cutoff_d) if cutoff_d else as_of

    sections = {"assets": [], "liabilities": [], "equity": []}
    totals = {
        "assets": Decimal("0.00"),
        "liabilities": Decimal("0.00"),
        "equity": Decimal("0.00"),
    }
    income_total = Decimal("0.00")
    expense_total = Decimal("0.00")

    for acc in annotated_accounts(end=cutoff_dt):
        bal = _q2(balance_from_totals(acc.account_type, acc.debit_total, acc.credit_total))

        if acc.account_type == Account.INCOME:
            income_total += bal
            continue
        if acc.account_type == Account.EXPENSE:
            expense_total += bal
            continue

        if bal == Decimal("0.00"):
            continue

        section = SECTION_BY_TYPE[acc.account_type]
        sections[section].append(
            {
                "account_id": str(acc.id),
                "code": acc.code,
                "name": acc.name,
                "balance": _to_major_number(bal),
                "balance_minor": _to_minor_int(bal),
            }
        )
        totals[section] += bal

    net_profit = _q2(income_total - expense_total)
    right_side = _q2(totals["liabilities"] + totals["equity"] + net_profit)

    balanced = _to_minor_int(totals["assets"]) == _to_minor_int(right_side)
    if not balanced:
        logger.error(
            "Balance sheet is unbalanced",
            extra={
                "assets": str(totals["assets"]),
                "liabilities_equity_and_profit": str(right_side),
            },
        )

    return {
        **sections,
        "as_of": cutoff_dt.isoformat() if cutoff_dt else None,
        "net_profit": _to_major_number(net_profit),
        "totals": {
            "assets": _to_major_number(totals["assets"]),
            "liabilities": _to_major_number(totals["liabilities"]),
            "equity": _to_major_number(totals["equity"]),
            "net_profit": _to_major_number(net_profit),
            "liabilities_equity_and_profit": _to_major_number(right_side),
            "assets_minor": _to_minor_int(totals["assets"]),
            "liabilities_minor": _to_minor_int(totals["liabilities"]),
            "equity_minor": _to_minor_int(totals["equity"]),
            "net_profit_minor": _to_minor_int(net_profit),
            "liabilities_equity_and_profit_minor": _to_minor_int(right_side),
        },
        "is_balanced": balanced,
    }
