# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for ledger services.

Every error carries:
- code: stable machine-readable identifier (used by API clients)
- http_status: status the API layer responds with
- details: structured context (ids, codes, amounts)
"""

from __future__ import annotations


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""

    code = "accounting_error"
    http_status = 400

    def __init__(self, message: str = "", **details):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.details = details

    def as_dict(self) -> dict:
        return {**self.details, "detail": str(self), "code": self.code}


class UnknownAccountError(AccountingServiceError):
    """Raised when an account code or id does not exist."""

    code = "unknown_account"
    http_status = 404


class InvalidAmountError(AccountingServiceError):
    """Raised when an amount is missing, non-numeric or not positive."""

    code = "invalid_amount"


class SameAccountError(AccountingServiceError):
    """Raised when debit and credit resolve to the same account."""

    code = "same_account"


class InvalidAccountCodeError(AccountingServiceError):
    """Raised when an account code is malformed or outside its type's range."""

    code = "invalid_account_code"


class DuplicateAccountCodeError(AccountingServiceError):
    """Raised when an account code is already taken."""

    code = "duplicate_code"
    http_status = 409


class AccountInUseError(AccountingServiceError):
    """Raised when an account referenced by postings is deleted or retyped."""

    code = "account_in_use"
    http_status = 409


class ProtectedAccountError(AccountingServiceError):
    """Raised when a seeded system account is deleted."""

    code = "protected_account"
    http_status = 409


class PostingNotFoundError(AccountingServiceError):
    """Raised when a posting to reverse does not exist."""

    code = "not_found"
    http_status = 404


class RecordNotFoundError(AccountingServiceError):
    """Raised when an expense or income record does not exist."""

    code = "not_found"
    http_status = 404


class IdempotencyError(AccountingServiceError):
    """Raised on duplicate or retried accounting events."""

    code = "duplicate_reference"
    http_status = 409


class InvalidPaymentMethodError(AccountingServiceError):
    """Raised when a settlement method cannot be mapped to an account."""

    code = "invalid_payment_method"


class ExceedsOutstandingBalanceError(AccountingServiceError):
    """Raised when a supplier payment is larger than what is owed."""

    code = "exceeds_outstanding_balance"


class SupplierNotFoundError(AccountingServiceError):
    """Raised when a supplier does not exist or is inactive."""

    code = "supplier_not_found"
    http_status = 404


class InvalidPurchaseError(AccountingServiceError):
    """Raised when a purchase payload is inconsistent."""

    code = "invalid_purchase"


class PostingInUseError(AccountingServiceError):
    """Raised when reversing a posting owned by a business record."""

    code = "posting_in_use"
    http_status = 409
