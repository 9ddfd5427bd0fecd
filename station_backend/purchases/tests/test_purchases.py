# purchases/tests/test_purchases.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase, override_settings

from accounting.models.posting import Posting
from accounting.services.exceptions import (
    InvalidAmountError,
    InvalidPurchaseError,
    SupplierNotFoundError,
)
from accounting.tests.helpers import (
    BANK,
    CASH,
    FUEL_INVENTORY,
    PAYABLE,
    balance_of,
    derived_balance,
    seed_chart,
)
from notifications.backends import MemoryNotifier
from purchases.models import Purchase, Supplier
from purchases.services.purchase_service import find_supplier_balance_drift, record_purchase
from purchases.tests.helpers import make_supplier


class RecordPurchaseTests(TestCase):
    """
    GUARANTEES:
    - Paid part credits cash/bank, credit part credits Accounts Payable
    - Supplier balance grows by the credit part only
    - Status follows paid_amount / total_cost
    """

    def setUp(self):
        seed_chart()
        self.supplier = make_supplier()

    def test_split_purchase(self):
        purchase = record_purchase(
            supplier_id=self.supplier.id,
            total_cost="1000",
            paid_amount="400",
            quantity="3.5",
        )

        self.assertEqual(purchase.status, Purchase.STATUS_PARTIAL)
        self.assertEqual(purchase.outstanding, Decimal("600.00"))
        self.assertEqual(purchase.paid_posting.credit_account.code, CASH)
        self.assertEqual(purchase.credit_posting.credit_account.code, PAYABLE)

        self.assertEqual(balance_of(FUEL_INVENTORY), Decimal("1000.00"))
        self.assertEqual(balance_of(CASH), Decimal("-400.00"))
        self.assertEqual(balance_of(PAYABLE), Decimal("600.00"))
        self.assertEqual(balance_of(PAYABLE), derived_balance(PAYABLE))

        self.supplier.refresh_from_db()
        self.assertEqual(self.supplier.balance, Decimal("600.00"))

    def test_fully_paid_by_bank(self):
        purchase = record_purchase(
            supplier_id=self.supplier.id, total_cost="250", paid_amount="250", method="BANK"
        )
        self.assertEqual(purchase.status, Purchase.STATUS_PAID)
        self.assertIsNone(purchase.credit_posting)
        self.assertEqual(balance_of(BANK), Decimal("-250.00"))

        self.supplier.refresh_from_db()
        self.assertEqual(self.supplier.balance, Decimal("0.00"))

    def test_fully_on_credit(self):
        purchase = record_purchase(supplier_id=self.supplier.id, total_cost="300")
        self.assertEqual(purchase.status, Purchase.STATUS_UNPAID)
        self.assertIsNone(purchase.paid_posting)
        self.assertEqual(Posting.objects.filter(supplier=self.supplier).count(), 1)

    def test_rejections_write_nothing(self):
        with self.assertRaises(InvalidAmountError):
            record_purchase(supplier_id=self.supplier.id, total_cost="0")
        with self.assertRaises(InvalidPurchaseError):
            record_purchase(supplier_id=self.supplier.id, total_cost="100", paid_amount="150")
        with self.assertRaises(SupplierNotFoundError):
            record_purchase(supplier_id="00000000-0000-0000-0000-000000000000", total_cost="100")

        self.assertFalse(Purchase.objects.exists())
        self.assertFalse(Posting.objects.exists())

    @override_settings(LEDGER_NOTIFIER="notifications.backends.MemoryNotifier")
    def test_purchase_event(self):
        MemoryNotifier.outbox.clear()
        with self.captureOnCommitCallbacks(execute=True):
            record_purchase(supplier_id=self.supplier.id, total_cost="120", paid_amount="20")

        self.assertEqual(MemoryNotifier.outbox[-1]["type"], "PURCHASE_RECORDED")
        self.assertEqual(MemoryNotifier.outbox[-1]["status"], Purchase.STATUS_PARTIAL)


class SupplierModelTests(TestCase):
    def test_save_never_writes_balance(self):
        supplier = make_supplier()
        stale = Supplier.objects.get(pk=supplier.pk)

        Supplier.objects.filter(pk=supplier.pk).update(balance=Decimal("75.00"))
        stale.contact = "0300-1234567"
        stale.save()

        supplier.refresh_from_db()
        self.assertEqual(supplier.balance, Decimal("75.00"))
        self.assertEqual(supplier.contact, "0300-1234567")


class SupplierDriftTests(TestCase):
    def setUp(self):
        seed_chart()
        self.supplier = make_supplier()
        record_purchase(supplier_id=self.supplier.id, total_cost="500", paid_amount="100")

    def test_consistent_supplier_has_no_drift(self):
        self.assertEqual(find_supplier_balance_drift(), [])

    def test_drift_is_reported(self):
        Supplier.objects.filter(pk=self.supplier.pk).update(balance=Decimal("350.00"))

        drift = find_supplier_balance_drift()
        self.assertEqual(len(drift), 1)
        self.assertEqual(drift[0]["expected"], Decimal("400.00"))
        self.assertEqual(drift[0]["difference"], Decimal("-50.00"))
