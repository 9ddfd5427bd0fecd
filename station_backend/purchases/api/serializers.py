# purchases/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from accounting.api.fields import PAYMENT_METHODS, UpperChoiceField
from purchases.models import PaymentAllocation, Purchase, Supplier, SupplierPayment


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ("id", "name", "contact", "address", "balance", "is_active", "created_at")
        read_only_fields = ("id", "balance", "created_at")


class PurchaseSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)
    outstanding = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Purchase
        fields = (
            "id",
            "supplier",
            "supplier_name",
            "description",
            "quantity",
            "total_cost",
            "paid_amount",
            "outstanding",
            "status",
            "date",
            "paid_posting",
            "credit_posting",
            "created_at",
        )
        read_only_fields = fields


class PurchaseCreateSerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField()
    total_cost = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    paid_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.00"), required=False, default=Decimal("0.00")
    )
    method = UpperChoiceField(choices=PAYMENT_METHODS, required=False, default="CASH")
    payment_account_id = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    date = serializers.DateField(required=False)

    def validate(self, attrs):
        if attrs.get("paid_amount", Decimal("0.00")) > attrs["total_cost"]:
            raise serializers.ValidationError(
                {"paid_amount": "paid_amount cannot exceed total_cost"}
            )
        return attrs


class SupplierPayRequestSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    method = UpperChoiceField(choices=PAYMENT_METHODS, required=False, default="CASH")
    payment_account_id = serializers.UUIDField(required=False, allow_null=True)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


class PaymentAllocationSerializer(serializers.ModelSerializer):
    purchase_date = serializers.DateField(source="purchase.date", read_only=True)

    class Meta:
        model = PaymentAllocation
        fields = ("purchase", "purchase_date", "amount")


class SupplierPaymentSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)
    allocations = PaymentAllocationSerializer(many=True, read_only=True)

    class Meta:
        model = SupplierPayment
        fields = [
            "id",
            "supplier",
            "supplier_name",
            "posting",
            "payment_account",
            "amount",
            "method",
            "allocated_amount",
            "unallocated_amount",
            "allocations",
            "created_at",
        ]
        read_only_fields = fields
