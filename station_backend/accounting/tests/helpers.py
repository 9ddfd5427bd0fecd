# accounting/tests/helpers.py

from __future__ import annotations

from decimal import Decimal

from accounting.models.account import Account
from accounting.models.posting import Posting
from accounting.services.account_store import seed_chart_of_accounts
from accounting.services.balance_rules import balance_from_totals

CASH = "10101"
BANK = "10201"
RECEIVABLE = "10301"
FUEL_INVENTORY = "10401"
PAYABLE = "20101"
OWNER_EQUITY = "30101"
FUEL_SALES = "40101"
STOCK_GAIN = "40201"
GENERAL_EXPENSES = "50101"
COGS = "50201"
STOCK_LOSS = "50301"


def seed_chart():
    seed_chart_of_accounts()


def balance_of(code: str) -> Decimal:
    return Account.objects.get(code=code).balance


def derived_balance(code: str) -> Decimal:
    """Balance recomputed from the posting log, independent of the cache."""
    account = Account.objects.get(code=code)
    debit = sum(
        (p.amount for p in Posting.objects.filter(debit_account=account)), Decimal("0.00")
    )
    credit = sum(
        (p.amount for p in Posting.objects.filter(credit_account=account)), Decimal("0.00")
    )
    return balance_from_totals(account.account_type, debit, credit)
