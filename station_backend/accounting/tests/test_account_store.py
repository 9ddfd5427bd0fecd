# accounting/tests/test_account_store.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase, override_settings

from accounting.models.account import Account
from accounting.models.payment_account import PaymentAccount
from accounting.models.posting import Posting
from accounting.services import account_store, posting_engine
from accounting.services.account_resolver import AccountRole, get_account, resolve_code
from accounting.services.exceptions import (
    AccountInUseError,
    DuplicateAccountCodeError,
    InvalidAccountCodeError,
    ProtectedAccountError,
    UnknownAccountError,
)
from accounting.tests.helpers import CASH, FUEL_SALES, OWNER_EQUITY, balance_of, seed_chart


class SeedChartTests(TestCase):
    def test_seed_creates_station_chart(self):
        created, updated = account_store.seed_chart_of_accounts()

        self.assertEqual((created, updated), (11, 0))
        self.assertEqual(Account.objects.get(code="10401").name, "Fuel Inventory")
        self.assertEqual(Account.objects.filter(is_system=True).count(), 11)

    def test_seed_is_idempotent(self):
        account_store.seed_chart_of_accounts()
        self.assertEqual(account_store.seed_chart_of_accounts(), (0, 0))
        self.assertEqual(Account.objects.count(), 11)

    def test_missing_role_account_names_the_seed_command(self):
        with self.assertRaises(UnknownAccountError) as ctx:
            get_account(AccountRole.CASH)
        self.assertIn("seed_station_chart", str(ctx.exception))

    @override_settings(LEDGER_ACCOUNT_CODES={"BANK": "10202"})
    def test_role_codes_can_be_overridden(self):
        self.assertEqual(resolve_code(AccountRole.BANK), "10202")
        self.assertEqual(resolve_code("cash"), "10101")


class CreateAccountTests(TestCase):
    def setUp(self):
        seed_chart()

    def test_create_plain_account(self):
        account = account_store.create_account(
            code="10501", name=" Petty Cash ", account_type=Account.ASSET
        )
        self.assertEqual(account.name, "Petty Cash")
        self.assertEqual(account.balance, Decimal("0.00"))
        self.assertFalse(account.is_system)

    def test_duplicate_code_rejected(self):
        with self.assertRaises(DuplicateAccountCodeError) as ctx:
            account_store.create_account(code=CASH, name="Another", account_type=Account.ASSET)
        self.assertEqual(ctx.exception.as_dict()["code"], "duplicate_code")
        self.assertEqual(ctx.exception.details["account_code"], CASH)

    def test_code_outside_type_range_rejected(self):
        for code, account_type in (("20501", Account.ASSET), ("1050", Account.ASSET), ("60101", Account.EXPENSE)):
            with self.subTest(code=code), self.assertRaises(InvalidAccountCodeError):
                account_store.create_account(code=code, name="X", account_type=account_type)

    def test_opening_balance_posts_against_equity(self):
        account = account_store.create_account(
            code="10202",
            name="Second Bank",
            account_type=Account.ASSET,
            opening_balance="2500",
        )

        self.assertEqual(account.balance, Decimal("2500.00"))
        self.assertEqual(balance_of(OWNER_EQUITY), Decimal("2500.00"))

        posting = Posting.objects.get(debit_account=account)
        self.assertEqual(posting.credit_account.code, OWNER_EQUITY)

    def test_opening_balance_for_liability_credits_it(self):
        account = account_store.create_account(
            code="20201",
            name="Bank Loan",
            account_type=Account.LIABILITY,
            opening_balance="10000",
        )
        self.assertEqual(account.balance, Decimal("10000.00"))
        self.assertEqual(balance_of(OWNER_EQUITY), Decimal("-10000.00"))


class UpdateDeleteAccountTests(TestCase):
    def setUp(self):
        seed_chart()
        self.account = account_store.create_account(
            code="50401", name="Generator Fuel", account_type=Account.EXPENSE
        )

    def test_rename(self):
        updated = account_store.update_account(self.account.id, name="Generator Diesel")
        self.assertEqual(updated.name, "Generator Diesel")

    def test_type_change_blocked_once_posted(self):
        posting_engine.post("50401", CASH, "10")
        with self.assertRaises(AccountInUseError):
            account_store.update_account(self.account.id, account_type=Account.ASSET)

    def test_delete_unused_account(self):
        account_store.delete_account(self.account.id)
        self.assertFalse(Account.objects.filter(code="50401").exists())

    def test_delete_account_with_postings_refused(self):
        posting_engine.post("50401", CASH, "10")
        with self.assertRaises(AccountInUseError) as ctx:
            account_store.delete_account(self.account.id)
        self.assertEqual(ctx.exception.details["postings"], 1)

    def test_delete_system_account_refused(self):
        with self.assertRaises(ProtectedAccountError):
            account_store.delete_account(Account.objects.get(code=FUEL_SALES).id)

    def test_delete_account_backing_payment_account_refused(self):
        bank = account_store.create_account(code="10205", name="Wallet", account_type=Account.ASSET)
        PaymentAccount.objects.create(name="Mobile Wallet", ledger_account=bank)
        with self.assertRaises(AccountInUseError):
            account_store.delete_account(bank.id)

    def test_unknown_account(self):
        with self.assertRaises(UnknownAccountError):
            account_store.delete_account("not-a-uuid")

    def test_lookup_by_code(self):
        self.assertEqual(account_store.get_by_code(" 10101 ").name, "Cash in Hand")
        with self.assertRaises(UnknownAccountError) as ctx:
            account_store.get_by_code("99999")
        self.assertEqual(ctx.exception.details["codes"], ["99999"])


class CategoryAccountTests(TestCase):
    """
    GUARANTEES:
    - Category codes come from the reserved range, in order, no collisions
    - Same name (any case) reuses the existing account
    """

    def setUp(self):
        seed_chart()

    def test_codes_are_issued_sequentially(self):
        a = account_store.get_or_create_category_account("Electricity", Account.EXPENSE)
        b = account_store.get_or_create_category_account("Salaries", Account.EXPENSE)
        c = account_store.get_or_create_category_account("Car wash", Account.INCOME)

        self.assertEqual((a.code, b.code, c.code), ("51001", "51002", "49001"))

    def test_name_reuse_is_case_insensitive(self):
        a = account_store.get_or_create_category_account("Electricity", Account.EXPENSE)
        b = account_store.get_or_create_category_account("  electricity ", Account.EXPENSE)
        self.assertEqual(a.pk, b.pk)

    def test_taken_codes_are_skipped(self):
        account_store.create_account(code="51001", name="Manual", account_type=Account.EXPENSE)
        issued = account_store.get_or_create_category_account("Rent", Account.EXPENSE)
        self.assertEqual(issued.code, "51002")

    def test_only_expense_and_income_categories(self):
        with self.assertRaises(InvalidAccountCodeError):
            account_store.get_or_create_category_account("Vault", Account.ASSET)
