# accounting/tests/test_concurrency.py

from __future__ import annotations

import threading
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase, skipUnlessDBFeature

from accounting.models.account import Account
from accounting.models.posting import Posting
from accounting.services import posting_engine
from accounting.services.account_store import adjust_balance
from accounting.tests.helpers import CASH, FUEL_SALES, balance_of, derived_balance, seed_chart


class StaleInstanceTests(TransactionTestCase):
    """
    Two handlers holding their own (stale) Account instances must never
    lose each other's balance updates.
    """

    def setUp(self):
        seed_chart()

    def test_f_updates_do_not_clobber(self):
        first = Account.objects.get(code=CASH)
        second = Account.objects.get(code=CASH)

        adjust_balance(first, Decimal("100.00"))
        adjust_balance(second, Decimal("50.00"))

        self.assertEqual(first.balance, Decimal("100.00"))
        self.assertEqual(second.balance, Decimal("150.00"))
        self.assertEqual(balance_of(CASH), Decimal("150.00"))


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentPostingTests(TransactionTestCase):
    """
    N threads posting A each to the same pair of accounts end at exactly N*A.

    Needs row locks: run with DJANGO_SETTINGS_MODULE=backend.settings.test_postgres.
    """

    THREADS = 8
    AMOUNT = Decimal("12.50")

    def setUp(self):
        seed_chart()

    def test_parallel_posts_lose_nothing(self):
        errors = []
        barrier = threading.Barrier(self.THREADS)

        def worker():
            try:
                barrier.wait()
                posting_engine.post(CASH, FUEL_SALES, self.AMOUNT, "parallel sale")
            except Exception as exc:  # surfaced by the assertion below
                errors.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=worker) for _ in range(self.THREADS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertEqual(Posting.objects.count(), self.THREADS)
        self.assertEqual(balance_of(CASH), self.AMOUNT * self.THREADS)
        self.assertEqual(balance_of(FUEL_SALES), self.AMOUNT * self.THREADS)
        self.assertEqual(balance_of(CASH), derived_balance(CASH))
