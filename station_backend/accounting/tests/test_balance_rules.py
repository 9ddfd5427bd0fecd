# accounting/tests/test_balance_rules.py

from decimal import Decimal

from django.test import SimpleTestCase

from accounting.services import balance_rules as rules


class BalanceRulesTests(SimpleTestCase):
    """
    GUARANTEES:
    - Assets / expenses are debit-normal; the rest are credit-normal
    - Code prefix identifies the account type
    """

    def test_debit_normal_types(self):
        self.assertTrue(rules.is_debit_normal(rules.ASSET))
        self.assertTrue(rules.is_debit_normal(rules.EXPENSE))
        for t in (rules.LIABILITY, rules.EQUITY, rules.INCOME):
            self.assertFalse(rules.is_debit_normal(t))

    def test_unknown_type_is_rejected(self):
        with self.assertRaises(ValueError):
            rules.is_debit_normal("REVENUE")

    def test_balance_from_totals_applies_sign_rule(self):
        self.assertEqual(
            rules.balance_from_totals(rules.ASSET, Decimal("500.00"), Decimal("120.00")),
            Decimal("380.00"),
        )
        self.assertEqual(
            rules.balance_from_totals(rules.LIABILITY, Decimal("120.00"), Decimal("500.00")),
            Decimal("380.00"),
        )

    def test_balance_delta_for_single_side(self):
        self.assertEqual(rules.balance_delta(rules.ASSET, debit=Decimal("10")), Decimal("10"))
        self.assertEqual(rules.balance_delta(rules.ASSET, credit=Decimal("10")), Decimal("-10"))
        self.assertEqual(rules.balance_delta(rules.INCOME, credit=Decimal("10")), Decimal("10"))
        self.assertEqual(rules.balance_delta(rules.INCOME, debit=Decimal("10")), Decimal("-10"))

    def test_account_type_for_code(self):
        self.assertEqual(rules.account_type_for_code("10101"), rules.ASSET)
        self.assertEqual(rules.account_type_for_code("20101"), rules.LIABILITY)
        self.assertEqual(rules.account_type_for_code("30101"), rules.EQUITY)
        self.assertEqual(rules.account_type_for_code("49001"), rules.INCOME)
        self.assertEqual(rules.account_type_for_code("51001"), rules.EXPENSE)

    def test_malformed_codes(self):
        for bad in ("", "1010", "101010", "1010a", "60101", "00101"):
            with self.subTest(code=bad), self.assertRaises(ValueError):
                rules.account_type_for_code(bad)

    def test_validate_account_code_checks_range(self):
        rules.validate_account_code("20101", rules.LIABILITY)
        with self.assertRaises(ValueError):
            rules.validate_account_code("20101", rules.ASSET)
        self.assertEqual(rules.code_range(rules.EXPENSE), (50000, 59999))
