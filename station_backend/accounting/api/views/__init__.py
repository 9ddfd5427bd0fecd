# accounting/api/views/__init__.py

"""
accounting.api.views package

Do NOT import accounting.api.urls from here to avoid circular imports.
"""

from accounting.api.views.accounts import (
    AccountDetailView,
    AccountListCreateView,
    PaymentAccountListCreateView,
)
from accounting.api.views.balance_sheet import BalanceSheetView
from accounting.api.views.expenses import (
    ExpenseDeleteView,
    ExpenseListCreateView,
    IncomeDeleteView,
    IncomeListCreateView,
)
from accounting.api.views.ledger import AccountLedgerView
from accounting.api.views.profit_and_loss import ProfitAndLossView
from accounting.api.views.transactions import TransactionDetailView, TransactionListCreateView
from accounting.api.views.trial_balance import TrialBalanceView

__all__ = [
    "AccountListCreateView",
    "AccountDetailView",
    "AccountLedgerView",
    "PaymentAccountListCreateView",
    "TransactionListCreateView",
    "TransactionDetailView",
    "TrialBalanceView",
    "BalanceSheetView",
    "ProfitAndLossView",
    "ExpenseListCreateView",
    "ExpenseDeleteView",
    "IncomeListCreateView",
    "IncomeDeleteView",
]
