# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models at module level (models must stay pure).
"""

from accounting.models.account import Account
from accounting.models.expense import ExpenseRecord, IncomeRecord
from accounting.models.payment_account import PaymentAccount
from accounting.models.posting import Posting
from accounting.models.sequence import AccountCodeSequence

__all__ = [
    "Account",
    "PaymentAccount",
    "Posting",
    "AccountCodeSequence",
    "ExpenseRecord",
    "IncomeRecord",
]
