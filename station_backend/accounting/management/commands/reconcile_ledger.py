# accounting/management/commands/reconcile_ledger.py

"""
Ledger integrity check.

1) Trial balance: total debits == total credits
2) Balance sheet: Assets == Liabilities + Equity + Net Profit
3) Cached account balances == balances derived from the posting log
4) Supplier balances == sum of unpaid purchase remainders

--fix rewrites drifted cached account balances from the log. Supplier
drift is reported only.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from accounting.services.balance_service import find_balance_drift
from accounting.services.balance_sheet_service import generate_balance_sheet
from accounting.services.posting_engine import rebuild_cached_balances
from accounting.services.trial_balance_service import TrialBalanceService
from purchases.services.purchase_service import find_supplier_balance_drift


class Command(BaseCommand):
    help = "Check ledger integrity (trial balance, accounting equation, cached balance drift)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--fix",
            action="store_true",
            help="Rebuild drifted cached account balances from the posting log.",
        )

    def handle(self, *args, **options):
        fix = bool(options.get("fix"))
        problems = 0

        self.stdout.write(self.style.MIGRATE_HEADING("Ledger reconciliation"))

        # -----------------------------
        # 1) Trial balance
        # -----------------------------
        tb = TrialBalanceService().generate()
        if tb["is_balanced"]:
            self.stdout.write(
                self.style.SUCCESS(
                    f"[OK] Trial balance: debits={tb['total_debit']} credits={tb['total_credit']}"
                )
            )
        else:
            problems += 1
            self.stderr.write(
                self.style.ERROR(
                    f"[FAIL] Trial balance: debits={tb['total_debit']} credits={tb['total_credit']}"
                )
            )

        # -----------------------------
        # 2) Accounting equation
        # -----------------------------
        bs = generate_balance_sheet()
        totals = bs["totals"]
        line = (
            f"assets={totals['assets']} "
            f"liabilities+equity+profit={totals['liabilities_equity_and_profit']}"
        )
        if bs["is_balanced"]:
            self.stdout.write(self.style.SUCCESS(f"[OK] Balance sheet: {line}"))
        else:
            problems += 1
            self.stderr.write(self.style.ERROR(f"[FAIL] Balance sheet: {line}"))

        # -----------------------------
        # 3) Cached balance drift
        # -----------------------------
        drift = find_balance_drift()
        if not drift:
            self.stdout.write(self.style.SUCCESS("[OK] Cached balances match the posting log"))
        elif fix:
            corrections = rebuild_cached_balances()
            for c in corrections:
                self.stdout.write(
                    self.style.WARNING(f"[FIXED] {c['code']}: {c['cached']} -> {c['derived']}")
                )
        else:
            problems += len(drift)
            self.stderr.write(self.style.ERROR(f"[FAIL] Cached balance drift: {len(drift)} account(s)"))
            for d in drift[:20]:
                self.stderr.write(
                    f"  {d['code']} {d['name']}: cached={d['cached']} derived={d['derived']}"
                )

        # -----------------------------
        # 4) Supplier balance drift
        # -----------------------------
        supplier_drift = find_supplier_balance_drift()
        if not supplier_drift:
            self.stdout.write(self.style.SUCCESS("[OK] Supplier balances match open purchases"))
        else:
            problems += len(supplier_drift)
            self.stderr.write(
                self.style.ERROR(f"[FAIL] Supplier balance drift: {len(supplier_drift)} supplier(s)")
            )
            for d in supplier_drift[:20]:
                self.stderr.write(
                    f"  {d['name']}: balance={d['balance']} expected={d['expected']}"
                )

        self.stdout.write("")
        if problems:
            raise CommandError(f"Reconciliation found {problems} problem(s)")

        self.stdout.write(self.style.SUCCESS("✅ Ledger reconciled"))
