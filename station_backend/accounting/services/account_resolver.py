# PATH: accounting/services/account_resolver.py

"""
PATH: accounting/services/account_resolver.py

ACCOUNT RESOLVER (AUTHORITATIVE)

This module answers ONE question:
"Which account should be used for this purpose?"

Business code never names literal account codes. It names a semantic role
(CASH, ACCOUNTS_PAYABLE, FUEL_SALES, ...) and this module maps it to a code.

The default role table matches the seeded station chart. A deployment can
override individual roles via settings.LEDGER_ACCOUNT_CODES, e.g.:

    LEDGER_ACCOUNT_CODES = {"BANK": "10202"}

Design goals:
- deterministic
- hard-fail on missing setup (so we don't post to wrong accounts)
"""

from __future__ import annotations

import enum
import logging

from django.conf import settings
from django.core.exceptions import ValidationError

from accounting.models.account import Account
from accounting.models.payment_account import PaymentAccount
from accounting.services.exceptions import (
    InvalidPaymentMethodError,
    UnknownAccountError,
)

logger = logging.getLogger(__name__)


class AccountRole(str, enum.Enum):
    CASH = "CASH"
    BANK = "BANK"
    ACCOUNTS_RECEIVABLE = "ACCOUNTS_RECEIVABLE"
    FUEL_INVENTORY = "FUEL_INVENTORY"
    ACCOUNTS_PAYABLE = "ACCOUNTS_PAYABLE"
    OWNER_EQUITY = "OWNER_EQUITY"
    FUEL_SALES = "FUEL_SALES"
    STOCK_GAIN = "STOCK_GAIN"
    GENERAL_EXPENSES = "GENERAL_EXPENSES"
    COGS = "COGS"
    STOCK_LOSS = "STOCK_LOSS"


# ------------------------------------------------------------
# DEFAULT ROLE TABLE (seeded station chart)
# ------------------------------------------------------------

DEFAULT_CODES = {
    AccountRole.CASH: "10101",
    AccountRole.BANK: "10201",
    AccountRole.ACCOUNTS_RECEIVABLE: "10301",
    AccountRole.FUEL_INVENTORY: "10401",
    AccountRole.ACCOUNTS_PAYABLE: "20101",
    AccountRole.OWNER_EQUITY: "30101",
    AccountRole.FUEL_SALES: "40101",
    AccountRole.STOCK_GAIN: "40201",
    AccountRole.GENERAL_EXPENSES: "50101",
    AccountRole.COGS: "50201",
    AccountRole.STOCK_LOSS: "50301",
}

# Settlement method -> role. CREDIT is only valid for sales (receivable).
METHOD_ROLES = {
    "CASH": AccountRole.CASH,
    "BANK": AccountRole.BANK,
    "CARD": AccountRole.BANK,
    "ONLINE": AccountRole.BANK,
}


def _role(role) -> AccountRole:
    if isinstance(role, AccountRole):
        return role
    try:
        return AccountRole(str(role or "").strip().upper())
    except ValueError:
        raise UnknownAccountError(f"Unknown account role '{role}'", role=str(role)) from None


def resolve_code(role) -> str:
    role = _role(role)
    overrides = getattr(settings, "LEDGER_ACCOUNT_CODES", None) or {}
    code = overrides.get(role.value) or DEFAULT_CODES[role]
    return str(code).strip()


def role_codes() -> dict[str, str]:
    return {role.value: resolve_code(role) for role in AccountRole}


def get_account(role) -> Account:
    code = resolve_code(role)
    try:
        return Account.objects.get(code=code)
    except Account.DoesNotExist as exc:
        logger.error(
            "Account resolution failed: role account missing",
            extra={"role": _role(role).value, "account_code": code},
        )
        raise UnknownAccountError(
            f"Account {code} for role {_role(role).value} not found. "
            "Run `manage.py seed_station_chart` to create the station chart.",
            codes=[code],
        ) from exc


# ------------------------------------------------------------
# SETTLEMENT ACCOUNT (payments in / out)
# ------------------------------------------------------------


def normalize_method(method: str | None) -> str:
    return (method or "CASH").strip().upper()


def resolve_settlement_account(
    *, method: str | None = "CASH", payment_account_id=None
) -> tuple[Account, PaymentAccount | None]:
    """
    Resolve which GL account money leaves from (or arrives in).

    - explicit payment account wins: its ledger account is used and the
      payment account is returned for sub-ledger tagging
    - otherwise CASH -> Cash, BANK/CARD/ONLINE -> Bank
    """
    if payment_account_id:
        try:
            payment_account = PaymentAccount.objects.select_related("ledger_account").get(
                id=payment_account_id, is_active=True
            )
        except (PaymentAccount.DoesNotExist, ValidationError, ValueError) as exc:
            raise UnknownAccountError(
                f"Payment account {payment_account_id} not found",
                payment_account_id=str(payment_account_id),
            ) from exc
        return payment_account.ledger_account, payment_account

    m = normalize_method(method)
    role = METHOD_ROLES.get(m)
    if role is None:
        logger.error("Invalid payment method provided", extra={"payment_method": method})
        raise InvalidPaymentMethodError(
            f"Invalid payment method '{method}'. Use one of: {', '.join(sorted(METHOD_ROLES))}.",
            method=str(method),
        )
    return get_account(role), None
