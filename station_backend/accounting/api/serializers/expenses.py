# accounting/api/serializers/expenses.py

from decimal import Decimal

from rest_framework import serializers

from accounting.api.fields import PAYMENT_METHODS, UpperChoiceField
from accounting.models.expense import ExpenseRecord, IncomeRecord

_RECORD_FIELDS = [
    "id",
    "title",
    "category",
    "category_account_code",
    "amount",
    "description",
    "payment_method",
    "payment_account",
    "date",
    "posting",
    "created_at",
]


class ExpenseRecordSerializer(serializers.ModelSerializer):
    """
    Output serializer (DB truth) - clean, stable contract.
    """

    category_account_code = serializers.CharField(source="category_account.code", read_only=True)

    class Meta:
        model = ExpenseRecord
        fields = _RECORD_FIELDS
        read_only_fields = _RECORD_FIELDS


class IncomeRecordSerializer(serializers.ModelSerializer):
    category_account_code = serializers.CharField(source="category_account.code", read_only=True)

    class Meta:
        model = IncomeRecord
        fields = _RECORD_FIELDS
        read_only_fields = _RECORD_FIELDS


class CashRecordCreateSerializer(serializers.Serializer):
    """
    Input serializer (Swagger-visible) for expenses and other income.
    """

    title = serializers.CharField(max_length=150)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    category = serializers.CharField(max_length=100)
    payment_method = UpperChoiceField(choices=PAYMENT_METHODS, required=False, default="CASH")
    payment_account_id = serializers.UUIDField(required=False, allow_null=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    date = serializers.DateField(required=False)
