# accounting/api/filters.py

"""
Transaction log filters (django-filter).

    /api/accounting/transactions/?account=<uuid>
    /api/accounting/transactions/?shift_id=S-12
    /api/accounting/transactions/?start_date=2026-01-01&end_date=2026-01-31
"""

from django.db.models import Q
import django_filters

from accounting.models.posting import Posting


class PostingFilter(django_filters.FilterSet):
    account = django_filters.UUIDFilter(method="filter_account")
    shift_id = django_filters.CharFilter(field_name="shift_id")
    supplier = django_filters.UUIDFilter(field_name="supplier_id")
    reference = django_filters.CharFilter(field_name="reference")
    start_date = django_filters.DateFilter(field_name="posted_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="posted_at", lookup_expr="date__lte")

    class Meta:
        model = Posting
        fields = ["account", "shift_id", "supplier", "reference", "start_date", "end_date"]

    def filter_account(self, queryset, name, value):
        return queryset.filter(Q(debit_account_id=value) | Q(credit_account_id=value))
