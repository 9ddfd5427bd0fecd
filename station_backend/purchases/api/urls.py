# purchases/api/urls.py

from django.urls import path

from purchases.api.views import (
    PurchaseListCreateView,
    SupplierListCreateView,
    SupplierLedgerView,
    SupplierPaymentListView,
    SupplierPayView,
)

urlpatterns = [
    path("suppliers/", SupplierListCreateView.as_view(), name="purchase-suppliers"),
    path(
        "suppliers/<uuid:supplier_id>/pay/",
        SupplierPayView.as_view(),
        name="supplier-pay",
    ),
    path(
        "suppliers/<uuid:supplier_id>/ledger/",
        SupplierLedgerView.as_view(),
        name="supplier-ledger",
    ),
    path("purchases/", PurchaseListCreateView.as_view(), name="purchases"),
    path("payments/", SupplierPaymentListView.as_view(), name="supplier-payments"),
]
