# accounting/api/fields.py

from rest_framework import serializers

PAYMENT_METHODS = ["CASH", "BANK", "CARD", "ONLINE"]


class UpperChoiceField(serializers.ChoiceField):
    """ChoiceField that accepts any casing ("cash", " Bank ")."""

    def to_internal_value(self, data):
        return super().to_internal_value(str(data or "").strip().upper())
