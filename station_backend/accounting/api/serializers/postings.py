# accounting/api/serializers/postings.py

from rest_framework import serializers

from accounting.models.posting import Posting


class PostingSerializer(serializers.ModelSerializer):
    """
    Output serializer for the transaction log (audit-safe, read-only).
    """

    debit_account_code = serializers.CharField(source="debit_account.code", read_only=True)
    debit_account_name = serializers.CharField(source="debit_account.name", read_only=True)
    credit_account_code = serializers.CharField(source="credit_account.code", read_only=True)
    credit_account_name = serializers.CharField(source="credit_account.name", read_only=True)

    class Meta:
        model = Posting
        fields = [
            "id",
            "debit_account",
            "debit_account_code",
            "debit_account_name",
            "credit_account",
            "credit_account_code",
            "credit_account_name",
            "amount",
            "description",
            "shift_id",
            "supplier",
            "payment_account",
            "reference",
            "created_by",
            "posted_at",
            "created_at",
        ]
        read_only_fields = fields


class PostingCreateSerializer(serializers.Serializer):
    """
    Manual posting by account codes. Amount validation is left to the
    engine so API clients get the same error codes as service callers.
    """

    debit_code = serializers.CharField(max_length=5)
    credit_code = serializers.CharField(max_length=5)
    amount = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, default="")
    shift_id = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    posted_at = serializers.DateTimeField(required=False)
