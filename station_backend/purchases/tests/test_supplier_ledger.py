# purchases/tests/test_supplier_ledger.py

from __future__ import annotations

import datetime
from decimal import Decimal

from django.test import TestCase

from accounting.services.exceptions import SupplierNotFoundError
from accounting.tests.helpers import seed_chart
from purchases.services.payment_service import pay_supplier
from purchases.services.purchase_service import record_purchase
from purchases.services.supplier_ledger_service import get_supplier_ledger
from purchases.tests.helpers import credit_purchase, make_supplier


class SupplierLedgerTests(TestCase):
    """
    GUARANTEES:
    - Purchases credit the total, debit the part paid at delivery
    - Payments debit the settled amount
    - Closing balance over the whole history equals Supplier.balance
    - start_date folds earlier activity into the opening balance
    """

    def setUp(self):
        seed_chart()
        self.supplier = make_supplier()
        credit_purchase(self.supplier, "100", day=1)
        credit_purchase(self.supplier, "200", day=2)
        record_purchase(
            supplier_id=self.supplier.id,
            total_cost="500",
            paid_amount="200",
            date=datetime.date(2026, 1, 3),
        )
        pay_supplier(supplier_id=self.supplier.id, amount="150")

    # --------------------------------------------------
    # Whole history
    # --------------------------------------------------

    def test_closing_balance_matches_supplier_balance(self):
        ledger = get_supplier_ledger(self.supplier.id)
        self.supplier.refresh_from_db()

        self.assertEqual(self.supplier.balance, Decimal("450.00"))
        self.assertEqual(Decimal(str(ledger["closing_balance"])), self.supplier.balance)
        self.assertEqual(ledger["opening_balance"], 0.0)
        self.assertEqual(ledger["total_credit"], 800.0)
        self.assertEqual(ledger["total_debit"], 350.0)

    def test_rows_run_in_date_order(self):
        rows = get_supplier_ledger(self.supplier.id)["transactions"]

        self.assertEqual([r["type"] for r in rows], ["PURCHASE"] * 3 + ["PAYMENT"])
        self.assertEqual([r["running_balance"] for r in rows], [100.0, 300.0, 600.0, 450.0])

        split = rows[2]
        self.assertEqual(split["date"], "2026-01-03")
        self.assertEqual(split["credit"], 500.0)
        self.assertEqual(split["debit"], 200.0)

    # --------------------------------------------------
    # Period windows
    # --------------------------------------------------

    def test_start_date_builds_opening_balance(self):
        ledger = get_supplier_ledger(self.supplier.id, start_date=datetime.date(2026, 1, 2))

        self.assertEqual(ledger["opening_balance"], 100.0)
        self.assertEqual(len(ledger["transactions"]), 3)
        self.assertEqual(ledger["transactions"][0]["running_balance"], 300.0)
        self.assertEqual(ledger["closing_balance"], 450.0)

    def test_end_date_is_inclusive(self):
        ledger = get_supplier_ledger(
            self.supplier.id,
            start_date=datetime.date(2026, 1, 2),
            end_date=datetime.date(2026, 1, 3),
        )

        self.assertEqual([r["date"] for r in ledger["transactions"]], ["2026-01-02", "2026-01-03"])
        self.assertEqual(ledger["closing_balance"], 600.0)

    def test_window_before_any_activity(self):
        ledger = get_supplier_ledger(self.supplier.id, end_date=datetime.date(2025, 12, 31))

        self.assertEqual(ledger["transactions"], [])
        self.assertEqual(ledger["opening_balance"], 0.0)
        self.assertEqual(ledger["closing_balance"], 0.0)

    def test_unknown_supplier(self):
        with self.assertRaises(SupplierNotFoundError):
            get_supplier_ledger("00000000-0000-0000-0000-000000000000")


class CarriedBalanceLedgerTests(TestCase):
    """
    GUARANTEES:
    - A balance the supplier was created with opens the statement
    - Closing balance still equals Supplier.balance
    """

    def setUp(self):
        seed_chart()
        self.supplier = make_supplier(name="Shell", balance="300")
        credit_purchase(self.supplier, "100", day=5)
        pay_supplier(supplier_id=self.supplier.id, amount="250")

    def test_carried_balance_opens_the_statement(self):
        ledger = get_supplier_ledger(self.supplier.id)
        self.supplier.refresh_from_db()

        self.assertEqual(ledger["opening_balance"], 300.0)
        self.assertEqual([r["running_balance"] for r in ledger["transactions"]], [400.0, 150.0])
        self.assertEqual(Decimal(str(ledger["closing_balance"])), self.supplier.balance)
