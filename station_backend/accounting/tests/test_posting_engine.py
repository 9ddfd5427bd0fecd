# accounting/tests/test_posting_engine.py

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.posting import Posting
from accounting.services import posting_engine
from accounting.services.exceptions import (
    IdempotencyError,
    InvalidAmountError,
    PostingNotFoundError,
    SameAccountError,
    UnknownAccountError,
)
from accounting.tests.helpers import (
    CASH,
    FUEL_INVENTORY,
    FUEL_SALES,
    GENERAL_EXPENSES,
    PAYABLE,
    balance_of,
    derived_balance,
    seed_chart,
)


class PostTests(TestCase):
    """
    GUARANTEES:
    - One posting moves both cached balances by the sign rule
    - Every rejection leaves no posting and no balance change
    """

    def setUp(self):
        seed_chart()

    def test_post_updates_both_balances(self):
        posting = posting_engine.post(CASH, FUEL_SALES, Decimal("1500.00"), "Fuel sale")

        self.assertEqual(posting.amount, Decimal("1500.00"))
        self.assertEqual(posting.debit_account.code, CASH)
        self.assertEqual(posting.credit_account.code, FUEL_SALES)
        self.assertEqual(balance_of(CASH), Decimal("1500.00"))
        self.assertEqual(balance_of(FUEL_SALES), Decimal("1500.00"))

    def test_credit_to_asset_reduces_it(self):
        posting_engine.post(CASH, FUEL_SALES, "1000")
        posting_engine.post(GENERAL_EXPENSES, CASH, "250.50")

        self.assertEqual(balance_of(CASH), Decimal("749.50"))
        self.assertEqual(balance_of(GENERAL_EXPENSES), Decimal("250.50"))

    def test_amount_is_rounded_to_cents(self):
        posting = posting_engine.post(CASH, FUEL_SALES, "10.005")
        self.assertEqual(posting.amount, Decimal("10.01"))

    def test_accepts_account_instances(self):
        cash = Account.objects.get(code=CASH)
        sales = Account.objects.get(code=FUEL_SALES)
        posting_engine.post(cash, sales, 40)
        self.assertEqual(balance_of(CASH), Decimal("40.00"))

    def test_cached_balances_agree_with_log(self):
        posting_engine.post(FUEL_INVENTORY, PAYABLE, "5000")
        posting_engine.post(PAYABLE, CASH, "1200")
        posting_engine.post(CASH, FUEL_SALES, "3000")

        for code in (CASH, FUEL_INVENTORY, PAYABLE, FUEL_SALES):
            with self.subTest(code=code):
                self.assertEqual(balance_of(code), derived_balance(code))

    # --------------------------------------------------
    # Rejections
    # --------------------------------------------------

    def test_unknown_account_rejected(self):
        with self.assertRaises(UnknownAccountError) as ctx:
            posting_engine.post("99999", CASH, "100")

        self.assertEqual(ctx.exception.details["codes"], ["99999"])
        self.assertEqual(Posting.objects.count(), 0)
        self.assertEqual(balance_of(CASH), Decimal("0.00"))

    def test_same_account_rejected(self):
        with self.assertRaises(SameAccountError):
            posting_engine.post(CASH, CASH, "100")
        self.assertEqual(Posting.objects.count(), 0)

    def test_invalid_amounts_rejected(self):
        for bad in ("-5", 0, "0.00", "abc", None, "", "NaN", True):
            with self.subTest(amount=bad), self.assertRaises(InvalidAmountError):
                posting_engine.post(CASH, FUEL_SALES, bad)

        self.assertEqual(Posting.objects.count(), 0)
        self.assertEqual(balance_of(CASH), Decimal("0.00"))
        self.assertEqual(balance_of(FUEL_SALES), Decimal("0.00"))

    def test_amount_checked_before_accounts(self):
        with self.assertRaises(InvalidAmountError):
            posting_engine.post("99999", "99999", "-1")

    # --------------------------------------------------
    # Idempotency / effective date
    # --------------------------------------------------

    def test_duplicate_reference_rejected(self):
        posting_engine.post(CASH, FUEL_SALES, "100", reference="SHIFT-7:SALE")

        with self.assertRaises(IdempotencyError) as ctx:
            posting_engine.post(CASH, FUEL_SALES, "100", reference="SHIFT-7:SALE")

        self.assertEqual(ctx.exception.code, "duplicate_reference")
        self.assertEqual(Posting.objects.count(), 1)
        self.assertEqual(balance_of(CASH), Decimal("100.00"))

    def test_blank_reference_is_not_a_key(self):
        posting_engine.post(CASH, FUEL_SALES, "100", reference="  ")
        posting_engine.post(CASH, FUEL_SALES, "100", reference="")
        self.assertEqual(Posting.objects.filter(reference__isnull=True).count(), 2)

    def test_posted_at_and_shift_are_stored(self):
        yesterday = timezone.now() - timedelta(days=1)
        posting = posting_engine.post(
            CASH, FUEL_SALES, "75", shift_id="S-42", posted_at=yesterday
        )
        posting.refresh_from_db()
        self.assertEqual(posting.posted_at, yesterday)
        self.assertEqual(posting.shift_id, "S-42")

    # --------------------------------------------------
    # Immutability
    # --------------------------------------------------

    def test_posting_cannot_be_edited_or_deleted_directly(self):
        posting = posting_engine.post(CASH, FUEL_SALES, "100")

        posting.amount = Decimal("1.00")
        with self.assertRaises(ValidationError):
            posting.save()
        with self.assertRaises(ValidationError):
            posting.delete()

        self.assertEqual(Posting.objects.get(pk=posting.pk).amount, Decimal("100.00"))

    def test_account_save_never_writes_balance(self):
        stale = Account.objects.get(code=CASH)
        posting_engine.post(CASH, FUEL_SALES, "300")

        stale.name = "Till"
        stale.save()

        self.assertEqual(balance_of(CASH), Decimal("300.00"))
        self.assertEqual(Account.objects.get(code=CASH).name, "Till")

        with self.assertRaises(ValidationError):
            stale.save(update_fields=["balance"])


class ReverseTests(TestCase):
    """
    GUARANTEES:
    - reverse(post(...)) restores every balance exactly
    - A reversed posting cannot be reversed twice
    """

    def setUp(self):
        seed_chart()
        posting_engine.post(CASH, FUEL_SALES, "1000")

    def test_reverse_round_trip(self):
        before = {code: balance_of(code) for code in (CASH, GENERAL_EXPENSES)}

        posting = posting_engine.post(GENERAL_EXPENSES, CASH, "123.45")
        posting_engine.reverse(posting.id)

        for code, amount in before.items():
            with self.subTest(code=code):
                self.assertEqual(balance_of(code), amount)
        self.assertFalse(Posting.objects.filter(pk=posting.id).exists())

    def test_reverse_twice_fails(self):
        posting = posting_engine.post(GENERAL_EXPENSES, CASH, "50")
        posting_engine.reverse(posting.id)

        with self.assertRaises(PostingNotFoundError):
            posting_engine.reverse(posting.id)
        self.assertEqual(balance_of(CASH), Decimal("1000.00"))

    def test_reverse_unknown_or_malformed_id(self):
        with self.assertRaises(PostingNotFoundError):
            posting_engine.reverse("00000000-0000-0000-0000-000000000000")
        with self.assertRaises(PostingNotFoundError):
            posting_engine.reverse("not-a-uuid")


class RebuildCachedBalancesTests(TestCase):
    def setUp(self):
        seed_chart()
        posting_engine.post(CASH, FUEL_SALES, "400")

    def test_rebuild_repairs_drift(self):
        Account.objects.filter(code=CASH).update(balance=Decimal("999.00"))

        corrections = posting_engine.rebuild_cached_balances()

        self.assertEqual([c["code"] for c in corrections], [CASH])
        self.assertEqual(balance_of(CASH), Decimal("400.00"))
        self.assertEqual(posting_engine.rebuild_cached_balances(), [])
