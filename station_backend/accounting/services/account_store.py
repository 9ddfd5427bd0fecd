# accounting/services/account_store.py

"""
======================================================
PATH: accounting/services/account_store.py
======================================================
CHART OF ACCOUNTS STORE

CRUD over the station chart plus the two pieces of chart maintenance the
rest of the system relies on:
- category accounts for expenses / other income, issued from a locked
  per-type code sequence (no count-based guessing, no collisions)
- seeding of the fixed role accounts

Rules:
- Codes are unique and must sit in their type's range (1xxxx..5xxxx)
- Accounts referenced by postings cannot be deleted or retyped
- Opening balances are booked as postings against Owner Equity so the
  cached balance always agrees with the posting log
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.posting import Posting
from accounting.models.sequence import AccountCodeSequence
from accounting.services.account_resolver import AccountRole, resolve_code
from accounting.services.balance_rules import (
    is_debit_normal,
    validate_account_code,
)
from accounting.services.exceptions import (
    AccountInUseError,
    DuplicateAccountCodeError,
    InvalidAccountCodeError,
    InvalidAmountError,
    ProtectedAccountError,
    UnknownAccountError,
)

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

# Reserved sub-ranges for auto-issued category accounts.
CATEGORY_CODE_RANGES = {
    Account.EXPENSE: (51001, 59999),
    Account.INCOME: (49001, 49999),
}

# (role, name, type): the fixed station chart.
SEED_ACCOUNTS = [
    (AccountRole.CASH, "Cash in Hand", Account.ASSET),
    (AccountRole.BANK, "Bank Account (Card/Online)", Account.ASSET),
    (AccountRole.ACCOUNTS_RECEIVABLE, "Accounts Receivable", Account.ASSET),
    (AccountRole.FUEL_INVENTORY, "Fuel Inventory", Account.ASSET),
    (AccountRole.ACCOUNTS_PAYABLE, "Accounts Payable", Account.LIABILITY),
    (AccountRole.OWNER_EQUITY, "Owner Equity", Account.EQUITY),
    (AccountRole.FUEL_SALES, "Fuel Sales", Account.INCOME),
    (AccountRole.STOCK_GAIN, "Stock Gain", Account.INCOME),
    (AccountRole.GENERAL_EXPENSES, "General Expenses", Account.EXPENSE),
    (AccountRole.COGS, "Cost of Goods Sold", Account.EXPENSE),
    (AccountRole.STOCK_LOSS, "Stock Loss", Account.EXPENSE),
]


def _opening_amount(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    try:
        return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidAmountError(f"Invalid opening balance: {value!r}") from exc


def _validate_code(code: str, account_type: str) -> str:
    code = (code or "").strip()
    if account_type not in dict(Account.ACCOUNT_TYPES):
        raise InvalidAccountCodeError(
            f"Unknown account type: {account_type!r}", account_type=str(account_type)
        )
    try:
        validate_account_code(code, account_type)
    except ValueError as exc:
        raise InvalidAccountCodeError(str(exc), account_code=code, account_type=account_type) from exc
    return code


def _has_postings(account: Account) -> int:
    return Posting.objects.filter(Q(debit_account=account) | Q(credit_account=account)).count()


# ============================================================
# READ
# ============================================================


def get_by_code(code: str) -> Account:
    code = (code or "").strip()
    try:
        return Account.objects.get(code=code)
    except Account.DoesNotExist as exc:
        raise UnknownAccountError(f"Account {code} not found", codes=[code]) from exc


def get_by_id(account_id) -> Account:
    try:
        return Account.objects.get(pk=account_id)
    except (Account.DoesNotExist, ValidationError, ValueError) as exc:
        raise UnknownAccountError(
            f"Account {account_id} not found", account_id=str(account_id)
        ) from exc


# ============================================================
# CREATE / UPDATE / DELETE
# ============================================================


@transaction.atomic
def create_account(
    *,
    code: str,
    name: str,
    account_type: str,
    opening_balance=None,
    is_system: bool = False,
    created_by=None,
) -> Account:
    code = _validate_code(code, account_type)
    name = (name or "").strip()
    if not name:
        raise InvalidAccountCodeError("Account name is required", account_code=code)

    opening = _opening_amount(opening_balance)

    if Account.objects.filter(code=code).exists():
        raise DuplicateAccountCodeError(f"Account code {code} already exists", account_code=code)

    try:
        with transaction.atomic():
            account = Account.objects.create(
                code=code,
                name=name,
                account_type=account_type,
                is_system=is_system,
            )
    except (IntegrityError, ValidationError) as exc:
        if Account.objects.filter(code=code).exists():
            raise DuplicateAccountCodeError(
                f"Account code {code} already exists", account_code=code
            ) from exc
        raise

    logger.info(
        "Account created",
        extra={"account_code": code, "account_type": account_type},
    )

    if opening != ZERO:
        _post_opening_balance(account, opening, created_by=created_by)
        account.refresh_from_db()

    return account


def _post_opening_balance(account: Account, amount: Decimal, *, created_by=None) -> None:
    equity_code = resolve_code(AccountRole.OWNER_EQUITY)
    if account.code == equity_code:
        raise InvalidAmountError(
            "Owner Equity cannot carry an opening balance against itself",
            account_code=account.code,
        )

    # Debit-normal accounts grow on the debit side; a negative opening
    # balance flips the sides.
    increase_is_debit = is_debit_normal(account.account_type)
    if amount < ZERO:
        increase_is_debit = not increase_is_debit

    if increase_is_debit:
        debit, credit = account.code, equity_code
    else:
        debit, credit = equity_code, account.code

    from accounting.services import posting_engine

    posting_engine.post(
        debit,
        credit,
        abs(amount),
        f"Opening balance for {account.code} {account.name}",
        created_by=created_by,
    )


@transaction.atomic
def update_account(account_id, *, name: str | None = None, account_type: str | None = None) -> Account:
    try:
        account = Account.objects.select_for_update().get(pk=account_id)
    except (Account.DoesNotExist, ValidationError, ValueError) as exc:
        raise UnknownAccountError(
            f"Account {account_id} not found", account_id=str(account_id)
        ) from exc

    fields = []
    if name is not None:
        if not name.strip():
            raise InvalidAccountCodeError("Account name is required", account_code=account.code)
        account.name = name.strip()
        fields.append("name")

    if account_type is not None and account_type != account.account_type:
        in_use = _has_postings(account)
        if in_use:
            raise AccountInUseError(
                f"Account {account.code} has {in_use} posting(s); its type cannot change",
                account_code=account.code,
                postings=in_use,
            )
        _validate_code(account.code, account_type)
        account.account_type = account_type
        fields.append("account_type")

    if fields:
        account.save(update_fields=[*fields, "updated_at"])
        logger.info(
            "Account updated",
            extra={"account_code": account.code, "fields": fields},
        )
    return account


@transaction.atomic
def delete_account(account_id) -> None:
    try:
        account = Account.objects.select_for_update().get(pk=account_id)
    except (Account.DoesNotExist, ValidationError, ValueError) as exc:
        raise UnknownAccountError(
            f"Account {account_id} not found", account_id=str(account_id)
        ) from exc

    if account.is_system:
        raise ProtectedAccountError(
            f"Account {account.code} is a system account and cannot be deleted",
            account_code=account.code,
        )

    in_use = _has_postings(account)
    if in_use:
        raise AccountInUseError(
            f"Account {account.code} has {in_use} posting(s) and cannot be deleted",
            account_code=account.code,
            postings=in_use,
        )

    if account.payment_accounts.exists():
        raise AccountInUseError(
            f"Account {account.code} backs a payment account and cannot be deleted",
            account_code=account.code,
        )

    Account.objects.filter(pk=account.pk).delete()
    logger.info("Account deleted", extra={"account_code": account.code})


def adjust_balance(account, delta: Decimal) -> Account:
    """
    Apply a signed delta to the cached balance with an F() update.

    Posting-engine internal: callers must already hold the row lock inside
    the engine's transaction. Accepts an Account (refreshed in place) or an id.
    """
    if not isinstance(account, Account):
        account = get_by_id(account)

    if delta:
        Account.objects.filter(pk=account.pk).update(
            balance=F("balance") + delta,
            updated_at=timezone.now(),
        )
        account.refresh_from_db(fields=["balance", "updated_at"])
    return account


# ============================================================
# CATEGORY ACCOUNTS (expenses / other income)
# ============================================================


def _next_free_code(account_type: str) -> str:
    low, high = CATEGORY_CODE_RANGES[account_type]

    seq, _ = AccountCodeSequence.objects.get_or_create(
        account_type=account_type,
        defaults={"last_code": low - 1},
    )
    seq = AccountCodeSequence.objects.select_for_update().get(pk=seq.pk)

    candidate = max(seq.last_code + 1, low)
    taken = set(
        Account.objects.filter(code__gte=str(candidate), code__lte=str(high))
        .values_list("code", flat=True)
    )
    while str(candidate) in taken:
        candidate += 1

    if candidate > high:
        raise InvalidAccountCodeError(
            f"No free {account_type} category codes left in {low}-{high}",
            account_type=account_type,
        )

    seq.last_code = candidate
    seq.save(update_fields=["last_code", "updated_at"])
    return str(candidate)


@transaction.atomic
def get_or_create_category_account(name: str, account_type: str) -> Account:
    """
    Reuse the category account with this name (case-insensitive) or issue
    a new one with the next code of the type's reserved range.
    """
    if account_type not in CATEGORY_CODE_RANGES:
        raise InvalidAccountCodeError(
            f"Category accounts exist only for {', '.join(CATEGORY_CODE_RANGES)}",
            account_type=str(account_type),
        )

    name = (name or "").strip()
    if not name:
        raise InvalidAccountCodeError("Category name is required", account_type=account_type)

    existing = Account.objects.filter(account_type=account_type, name__iexact=name).order_by("code").first()
    if existing:
        return existing

    code = _next_free_code(account_type)
    # Re-check under the sequence lock.
    existing = Account.objects.filter(account_type=account_type, name__iexact=name).order_by("code").first()
    if existing:
        return existing

    account = Account.objects.create(code=code, name=name, account_type=account_type)
    logger.info(
        "Category account created",
        extra={"account_code": code, "account_type": account_type, "category": name},
    )
    return account


# ============================================================
# SEED
# ============================================================


@transaction.atomic
def seed_chart_of_accounts() -> tuple[int, int]:
    created_count = 0
    updated_count = 0

    for role, name, account_type in SEED_ACCOUNTS:
        code = resolve_code(role)
        acc, created = Account.objects.get_or_create(
            code=code,
            defaults={
                "name": name,
                "account_type": account_type,
                "is_system": True,
                "is_active": True,
            },
        )
        if created:
            created_count += 1
            continue

        if acc.account_type != account_type:
            raise InvalidAccountCodeError(
                f"Account {code} exists as {acc.account_type}; expected {account_type}",
                account_code=code,
            )

        if not acc.is_system or not acc.is_active:
            acc.is_system = True
            acc.is_active = True
            acc.save(update_fields=["is_system", "is_active", "updated_at"])
            updated_count += 1

    for account_type, (low, _high) in CATEGORY_CODE_RANGES.items():
        AccountCodeSequence.objects.get_or_create(
            account_type=account_type,
            defaults={"last_code": low - 1},
        )

    logger.info(
        "Station chart seeded",
        extra={"accounts_created": created_count, "accounts_updated": updated_count},
    )
    return created_count, updated_count
