# accounting/api/serializers/accounts.py

from rest_framework import serializers

from accounting.models.account import Account
from accounting.models.payment_account import PaymentAccount


class AccountSerializer(serializers.ModelSerializer):
    """
    Read serializer for chart accounts. balance is the cached running balance.
    """

    class Meta:
        model = Account
        fields = (
            "id",
            "code",
            "name",
            "account_type",
            "balance",
            "is_system",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class AccountCreateSerializer(serializers.Serializer):
    code = serializers.RegexField(r"^\d{5}$", error_messages={"invalid": "code must be exactly 5 digits"})
    name = serializers.CharField(max_length=150)
    account_type = serializers.ChoiceField(choices=Account.ACCOUNT_TYPES)
    opening_balance = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, default=0
    )


class AccountUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150, required=False)
    account_type = serializers.ChoiceField(choices=Account.ACCOUNT_TYPES, required=False)


class PaymentAccountSerializer(serializers.ModelSerializer):
    ledger_account_code = serializers.SlugRelatedField(
        source="ledger_account",
        slug_field="code",
        queryset=Account.objects.filter(account_type=Account.ASSET),
    )

    class Meta:
        model = PaymentAccount
        fields = (
            "id",
            "name",
            "kind",
            "account_number",
            "ledger_account_code",
            "is_active",
            "created_at",
        )
        read_only_fields = ("id", "created_at")
