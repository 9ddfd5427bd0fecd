# accounting/services/trial_balance_service.py

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone
from django.utils.timezone import now

from accounting.services.balance_rules import balance_from_totals
from accounting.services.balance_service import annotated_accounts

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _q2(amount: Decimal) -> Decimal:
    return (amount or Decimal("0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_major_number(amount: Decimal) -> float:
    return float(_q2(amount))


def _to_minor_int(amount: Decimal) -> int:
    return int((_q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def _as_aware_dt(dt):
    if dt is None:
        return None
    if timezone.is_naive(dt):
        return timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


class TrialBalanceService:
    """
    Trial Balance computation service.

    Guarantees:
    - Per-account debit/credit are raw sums over the posting log (NOT the
      cached balance), so the report independently checks the cache
    - Uses Posting.posted_at as accounting timeline
    - One aggregate statement (consistent snapshot, no N+1 queries)
    - Returns JSON-safe numeric values (floats + exact minor-unit ints)
    """

    def generate(self, *, as_of=None):
        cutoff = _as_aware_dt(as_of) or now()

        accounts_output = []
        total_debit = Decimal("0.00")
        total_credit = Decimal("0.00")

        for acc in annotated_accounts(end=cutoff):
            debit = _q2(acc.debit_total)
            credit = _q2(acc.credit_total)
            balance = _q2(balance_from_totals(acc.account_type, debit, credit))

            accounts_output.append(
                {
                    "account_id": str(acc.id),
                    "code": acc.code,
                    "name": acc.name,
                    "account_type": acc.account_type,
                    "debit": _to_major_number(debit),
                    "credit": _to_major_number(credit),
                    "balance": _to_major_number(balance),
                    "debit_minor": _to_minor_int(debit),
                    "credit_minor": _to_minor_int(credit),
                    "balance_minor": _to_minor_int(balance),
                }
            )

            total_debit += debit
            total_credit += credit

        total_debit = _q2(total_debit)
        total_credit = _q2(total_credit)

        balanced = _to_minor_int(total_debit) == _to_minor_int(total_credit)
        if not balanced:
            logger.error(
                "Trial balance does not balance",
                extra={"total_debit": str(total_debit), "total_credit": str(total_credit)},
            )

        return {
            "as_of": cutoff.isoformat(),
            "accounts": accounts_output,
            "total_debit": _to_major_number(total_debit),
            "total_credit": _to_major_number(total_credit),
            "total_debit_minor": _to_minor_int(total_debit),
            "total_credit_minor": _to_minor_int(total_credit),
            "is_balanced": balanced,
        }
