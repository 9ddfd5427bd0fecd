# accounting/tests/test_posting_rules.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase, override_settings

from accounting.models.account import Account
from accounting.models.payment_account import PaymentAccount
from accounting.models.posting import Posting
from accounting.services.account_resolver import AccountRole, resolve_code, resolve_settlement_account
from accounting.services.exceptions import InvalidPaymentMethodError, UnknownAccountError
from accounting.services.posting import post_fuel_sale, post_stock_variance
from accounting.tests.helpers import (
    BANK,
    CASH,
    FUEL_INVENTORY,
    FUEL_SALES,
    RECEIVABLE,
    STOCK_GAIN,
    STOCK_LOSS,
    balance_of,
    seed_chart,
)


class FuelSaleTests(TestCase):
    """
    GUARANTEES:
    - Sale method picks the debit side (cash / bank / receivable)
    - Fuel Sales is always credited
    """

    def setUp(self):
        seed_chart()

    def test_methods_map_to_accounts(self):
        cases = [("cash", CASH), ("CREDIT", RECEIVABLE), ("card", BANK), ("online", BANK)]
        for method, code in cases:
            with self.subTest(method=method):
                posting = post_fuel_sale(amount="100", payment_method=method, shift_id="S-7")
                self.assertEqual(posting.debit_account.code, code)
                self.assertEqual(posting.credit_account.code, FUEL_SALES)
                self.assertEqual(posting.shift_id, "S-7")

        self.assertEqual(balance_of(FUEL_SALES), Decimal("400.00"))
        self.assertEqual(balance_of(BANK), Decimal("200.00"))

    def test_unknown_method(self):
        with self.assertRaises(InvalidPaymentMethodError):
            post_fuel_sale(amount="100", payment_method="BARTER")
        self.assertFalse(Posting.objects.exists())


class StockVarianceTests(TestCase):
    def setUp(self):
        seed_chart()

    def test_shortage_is_a_loss(self):
        posting = post_stock_variance(variance_value="-35.50")
        self.assertEqual(posting.debit_account.code, STOCK_LOSS)
        self.assertEqual(posting.credit_account.code, FUEL_INVENTORY)
        self.assertEqual(posting.amount, Decimal("35.50"))

    def test_excess_is_a_gain(self):
        posting = post_stock_variance(variance_value="12")
        self.assertEqual(posting.debit_account.code, FUEL_INVENTORY)
        self.assertEqual(posting.credit_account.code, STOCK_GAIN)
        self.assertEqual(balance_of(STOCK_GAIN), Decimal("12.00"))

    def test_zero_posts_nothing(self):
        self.assertIsNone(post_stock_variance(variance_value="0.001"))
        self.assertFalse(Posting.objects.exists())


class RoleResolutionTests(TestCase):
    def setUp(self):
        seed_chart()

    @override_settings(LEDGER_ACCOUNT_CODES={"BANK": "10202"})
    def test_role_override(self):
        Account.objects.create(code="10202", name="Second Bank", account_type=Account.ASSET)

        self.assertEqual(resolve_code(AccountRole.BANK), "10202")
        posting = post_fuel_sale(amount="50", payment_method="CARD")
        self.assertEqual(posting.debit_account.code, "10202")

    @override_settings(LEDGER_ACCOUNT_CODES={"CASH": "10999"})
    def test_missing_role_account(self):
        with self.assertRaises(UnknownAccountError) as ctx:
            post_fuel_sale(amount="50")
        self.assertEqual(ctx.exception.details["codes"], ["10999"])

    def test_payment_account_wins_over_method(self):
        ledger = Account.objects.create(code="10203", name="Till Float Bank", account_type=Account.ASSET)
        pa = PaymentAccount.objects.create(name="Till float", ledger_account=ledger)

        account, payment_account = resolve_settlement_account(method="CASH", payment_account_id=pa.id)
        self.assertEqual(account, ledger)
        self.assertEqual(payment_account, pa)

    def test_inactive_payment_account_is_unknown(self):
        ledger = Account.objects.create(code="10204", name="Old Bank", account_type=Account.ASSET)
        pa = PaymentAccount.objects.create(name="Old", ledger_account=ledger, is_active=False)

        with self.assertRaises(UnknownAccountError):
            resolve_settlement_account(payment_account_id=pa.id)
