# accounting/apps.py

"""
ACCOUNTING APP CONFIG

Station general ledger:
- Chart of accounts (cached balances)
- Posting engine (post / reverse)
- Expenses + other income
- Reports (trial balance, balance sheet, P&L, account ledger)
"""

from django.apps import AppConfig


class AccountingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounting"
    verbose_name = "Accounting"
