# accounting/tests/test_reports.py

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.utils import timezone

from accounting.models.account import Account
from accounting.services import posting_engine
from accounting.services.balance_service import find_balance_drift
from accounting.services.balance_sheet_service import generate_balance_sheet
from accounting.services.ledger_service import get_account_ledger
from accounting.services.profit_and_loss_service import get_profit_and_loss
from accounting.services.trial_balance_service import TrialBalanceService
from accounting.tests.helpers import (
    BANK,
    CASH,
    COGS,
    FUEL_INVENTORY,
    FUEL_SALES,
    GENERAL_EXPENSES,
    OWNER_EQUITY,
    PAYABLE,
    seed_chart,
)


def _at(d: date, hour: int = 12):
    return timezone.make_aware(datetime.combine(d, time(hour, 0)), timezone.get_current_timezone())


class _StationDayMixin:
    """
    A small station history:

    day 1: owner puts 10,000 in the bank; 6,000 of fuel bought on credit
    day 2: 4,500 fuel sold for cash; 3,000 of fuel cost recognised
    day 3: 2,000 paid to supplier from bank; 350 cash expense
    """

    def build_history(self):
        seed_chart()
        self.day1 = timezone.localdate() - timedelta(days=3)
        self.day2 = self.day1 + timedelta(days=1)
        self.day3 = self.day1 + timedelta(days=2)

        posting_engine.post(BANK, OWNER_EQUITY, "10000", posted_at=_at(self.day1, 9))
        posting_engine.post(FUEL_INVENTORY, PAYABLE, "6000", posted_at=_at(self.day1, 10))
        posting_engine.post(CASH, FUEL_SALES, "4500", posted_at=_at(self.day2))
        posting_engine.post(COGS, FUEL_INVENTORY, "3000", posted_at=_at(self.day2, 18))
        posting_engine.post(PAYABLE, BANK, "2000", posted_at=_at(self.day3, 9))
        posting_engine.post(GENERAL_EXPENSES, CASH, "350", posted_at=_at(self.day3, 15))


class TrialBalanceTests(_StationDayMixin, TestCase):
    def setUp(self):
        self.build_history()

    def test_debits_equal_credits(self):
        tb = TrialBalanceService().generate()

        self.assertTrue(tb["is_balanced"])
        self.assertEqual(tb["total_debit"], 25850.0)
        self.assertEqual(tb["total_debit_minor"], tb["total_credit_minor"])
        self.assertEqual(len(tb["accounts"]), Account.objects.count())

    def test_as_of_cutoff(self):
        tb = TrialBalanceService().generate(as_of=_at(self.day1, 23))
        self.assertEqual(tb["total_debit"], 16000.0)
        cash_row = next(r for r in tb["accounts"] if r["code"] == CASH)
        self.assertEqual(cash_row["balance"], 0.0)


class BalanceSheetTests(_StationDayMixin, TestCase):
    def setUp(self):
        self.build_history()

    def test_accounting_equation_holds(self):
        bs = generate_balance_sheet()
        totals = bs["totals"]

        # assets: bank 8000 + cash 4150 + inventory 3000
        self.assertEqual(totals["assets"], 15150.0)
        self.assertEqual(totals["liabilities"], 4000.0)
        self.assertEqual(totals["equity"], 10000.0)
        self.assertEqual(bs["net_profit"], 1150.0)
        self.assertEqual(totals["assets_minor"], totals["liabilities_equity_and_profit_minor"])
        self.assertTrue(bs["is_balanced"])

    def test_as_of_date_snapshot(self):
        bs = generate_balance_sheet(as_of_date=self.day1.isoformat())
        self.assertEqual(bs["totals"]["assets"], 16000.0)
        self.assertEqual(bs["net_profit"], 0.0)
        self.assertTrue(bs["is_balanced"])

    def test_zero_balances_are_omitted(self):
        bs = generate_balance_sheet(as_of_date=self.day1.isoformat())
        self.assertNotIn(CASH, [row["code"] for row in bs["assets"]])


class ProfitAndLossTests(_StationDayMixin, TestCase):
    def setUp(self):
        self.build_history()

    def test_full_period(self):
        pnl = get_profit_and_loss()

        self.assertEqual(pnl["income"], 4500.0)
        self.assertEqual(pnl["expenses"], 3350.0)
        self.assertEqual(pnl["net_profit"], 1150.0)
        self.assertEqual(pnl["net_profit_minor"], 115000)
        self.assertEqual(
            {row["code"] for row in pnl["expense_breakdown"]}, {COGS, GENERAL_EXPENSES}
        )

    def test_date_bounds_are_inclusive(self):
        pnl = get_profit_and_loss(start_date=self.day3, end_date=self.day3)
        self.assertEqual(pnl["income"], 0.0)
        self.assertEqual(pnl["expenses"], 350.0)

        pnl = get_profit_and_loss(start_date=self.day2, end_date=self.day2)
        self.assertEqual(pnl["net_profit"], 1500.0)


class AccountLedgerTests(_StationDayMixin, TestCase):
    def setUp(self):
        self.build_history()

    def test_running_balance_in_order(self):
        bank = Account.objects.get(code=BANK)
        ledger = get_account_ledger(bank.id)

        self.assertEqual(ledger["opening_balance"], 0.0)
        self.assertEqual([t["running_balance"] for t in ledger["transactions"]], [10000.0, 8000.0])
        self.assertEqual(ledger["transactions"][1]["credit"], 2000.0)
        self.assertEqual(ledger["transactions"][1]["counter_account"]["code"], PAYABLE)
        self.assertEqual(ledger["closing_balance"], float(bank.balance))

    def test_opening_balance_from_earlier_postings(self):
        cash = Account.objects.get(code=CASH)
        ledger = get_account_ledger(cash.id, start_date=self.day3)

        self.assertEqual(ledger["opening_balance"], 4500.0)
        self.assertEqual(len(ledger["transactions"]), 1)
        self.assertEqual(ledger["closing_balance"], 4150.0)

    def test_credit_normal_account(self):
        payable = Account.objects.get(code=PAYABLE)
        ledger = get_account_ledger(payable.id)
        self.assertEqual([t["running_balance"] for t in ledger["transactions"]], [6000.0, 4000.0])


class LastSecondOfDayTests(TestCase):
    """
    A posting in the final fraction of a second belongs to its own day in
    every date-bounded report.
    """

    def setUp(self):
        seed_chart()
        self.day = timezone.localdate() - timedelta(days=5)
        late = datetime.combine(self.day, time(23, 59, 59, 500000))
        posting_engine.post(
            CASH, FUEL_SALES, "100", posted_at=timezone.make_aware(late, timezone.get_current_timezone())
        )

    def test_profit_and_loss_keeps_it_on_its_day(self):
        self.assertEqual(get_profit_and_loss(start_date=self.day, end_date=self.day)["income"], 100.0)
        next_day = self.day + timedelta(days=1)
        self.assertEqual(get_profit_and_loss(start_date=next_day, end_date=next_day)["income"], 0.0)

    def test_ledger_keeps_it_on_its_day(self):
        cash = Account.objects.get(code=CASH)
        ledger = get_account_ledger(cash.id, start_date=self.day, end_date=self.day)
        self.assertEqual(len(ledger["transactions"]), 1)
        self.assertEqual(ledger["closing_balance"], 100.0)

    def test_balance_sheet_as_of_date_includes_it(self):
        bs = generate_balance_sheet(as_of_date=self.day.isoformat())
        self.assertEqual(bs["net_profit"], 100.0)
        self.assertTrue(bs["is_balanced"])


class ReconcileLedgerCommandTests(_StationDayMixin, TestCase):
    def setUp(self):
        self.build_history()

    def test_clean_ledger_passes(self):
        out = StringIO()
        call_command("reconcile_ledger", stdout=out, stderr=StringIO())
        self.assertIn("Ledger reconciled", out.getvalue())

    def test_drift_fails_then_fix_repairs(self):
        Account.objects.filter(code=CASH).update(balance=Decimal("1.00"))
        self.assertEqual([d["code"] for d in find_balance_drift()], [CASH])

        with self.assertRaises(CommandError):
            call_command("reconcile_ledger", stdout=StringIO(), stderr=StringIO())

        call_command("reconcile_ledger", "--fix", stdout=StringIO(), stderr=StringIO())
        self.assertEqual(find_balance_drift(), [])
        self.assertEqual(Account.objects.get(code=CASH).balance, Decimal("4150.00"))


class SeedStationChartCommandTests(TestCase):
    def test_command_seeds_chart(self):
        out = StringIO()
        call_command("seed_station_chart", stdout=out)
        self.assertIn("11 new accounts", out.getvalue())
        self.assertEqual(Account.objects.count(), 11)
