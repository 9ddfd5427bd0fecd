# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import (
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
    PaymentAccountSerializer,
)
from accounting.api.serializers.expenses import (
    CashRecordCreateSerializer,
    ExpenseRecordSerializer,
    IncomeRecordSerializer,
)
from accounting.api.serializers.postings import PostingCreateSerializer, PostingSerializer

__all__ = [
    "AccountSerializer",
    "AccountCreateSerializer",
    "AccountUpdateSerializer",
    "PaymentAccountSerializer",
    "PostingSerializer",
    "PostingCreateSerializer",
    "ExpenseRecordSerializer",
    "IncomeRecordSerializer",
    "CashRecordCreateSerializer",
]
