# accounting/services/balance_rules.py

"""
======================================================
PATH: accounting/services/balance_rules.py
======================================================
BALANCE RULES (PURE)

Sign convention shared by the posting engine (incremental) and the
reporting services (from-scratch):

- ASSET, EXPENSE      → debit-normal:  balance = debits - credits
- LIABILITY, EQUITY,
  INCOME              → credit-normal: balance = credits - debits

Account codes follow the 1xxxx..5xxxx convention; the first digit
identifies the type.

No database access in this module.
"""

from __future__ import annotations

from decimal import Decimal

ASSET = "ASSET"
LIABILITY = "LIABILITY"
EQUITY = "EQUITY"
INCOME = "INCOME"
EXPENSE = "EXPENSE"

DEBIT_NORMAL_TYPES = frozenset({ASSET, EXPENSE})
CREDIT_NORMAL_TYPES = frozenset({LIABILITY, EQUITY, INCOME})

CODE_PREFIX_BY_TYPE = {
    ASSET: "1",
    LIABILITY: "2",
    EQUITY: "3",
    INCOME: "4",
    EXPENSE: "5",
}
TYPE_BY_CODE_PREFIX = {v: k for k, v in CODE_PREFIX_BY_TYPE.items()}

ZERO = Decimal("0.00")


def is_debit_normal(account_type: str) -> bool:
    if account_type in DEBIT_NORMAL_TYPES:
        return True
    if account_type in CREDIT_NORMAL_TYPES:
        return False
    raise ValueError(f"Unknown account type: {account_type!r}")


def balance_from_totals(account_type: str, debit_total, credit_total) -> Decimal:
    debit_total = Decimal(debit_total or ZERO)
    credit_total = Decimal(credit_total or ZERO)
    if is_debit_normal(account_type):
        return debit_total - credit_total
    return credit_total - debit_total


def balance_delta(account_type: str, *, debit=ZERO, credit=ZERO) -> Decimal:
    """
    Signed change to an account's cached balance when it receives `debit`
    and/or `credit` from a single posting.
    """
    return balance_from_totals(account_type, debit, credit)


def account_type_for_code(code: str) -> str:
    code = (code or "").strip()
    if len(code) != 5 or not code.isdigit():
        raise ValueError(f"Account code must be exactly 5 digits (got {code!r})")
    try:
        return TYPE_BY_CODE_PREFIX[code[0]]
    except KeyError:
        raise ValueError(f"Account code {code} is outside the 10000-59999 range") from None


def code_range(account_type: str) -> tuple[int, int]:
    try:
        prefix = int(CODE_PREFIX_BY_TYPE[account_type])
    except KeyError:
        raise ValueError(f"Unknown account type: {account_type!r}") from None
    return prefix * 10000, prefix * 10000 + 9999


def validate_account_code(code: str, account_type: str) -> None:
    expected = account_type_for_code(code)
    if expected != account_type:
        low, high = code_range(account_type)
        raise ValueError(
            f"{account_type} account codes must be between {low} and {high} (got {code})"
        )
