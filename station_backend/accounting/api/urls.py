# accounting/api/urls.py

from django.urls import path

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

urlpatterns = [
    # Reports
    path("trial-balance/", TrialBalanceView.as_view(), name="trial-balance"),
    path("balance-sheet/", BalanceSheetView.as_view(), name="balance-sheet"),
    path("profit-and-loss/", ProfitAndLossView.as_view(), name="profit-and-loss"),
    # Chart of accounts
    path("accounts/", AccountListCreateView.as_view(), name="accounts"),
    path("accounts/<uuid:account_id>/", AccountDetailView.as_view(), name="account-detail"),
    path("ledger/<uuid:account_id>/", AccountLedgerView.as_view(), name="account-ledger"),
    path(
        "payment-accounts/",
        PaymentAccountListCreateView.as_view(),
        name="payment-accounts",
    ),
    # Posting engine
    path("transactions/", TransactionListCreateView.as_view(), name="transactions"),
    path(
        "transactions/<uuid:posting_id>/",
        TransactionDetailView.as_view(),
        name="transaction-detail",
    ),
    # Cash records
    path("expenses/", ExpenseListCreateView.as_view(), name="expenses"),
    path("expenses/<uuid:record_id>/", ExpenseDeleteView.as_view(), name="expense-detail"),
    path("income/", IncomeListCreateView.as_view(), name="income"),
    path("income/<uuid:record_id>/", IncomeDeleteView.as_view(), name="income-detail"),
]
