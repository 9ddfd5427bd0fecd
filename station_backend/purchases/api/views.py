# purchases/api/views.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import forbidden, service_error_response
from accounting.api.params import date_param
from accounting.services.exceptions import AccountingServiceError
from purchases.api.serializers import (
    PurchaseCreateSerializer,
    PurchaseSerializer,
    SupplierPayRequestSerializer,
    SupplierPaymentSerializer,
    SupplierSerializer,
)
from purchases.models import Purchase, Supplier, SupplierPayment
from purchases.services.payment_service import pay_supplier
from purchases.services.purchase_service import record_purchase
from purchases.services.supplier_ledger_service import get_supplier_ledger


class SupplierListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SupplierSerializer

    @extend_schema(tags=["purchases"], responses=SupplierSerializer(many=True))
    def get(self, request):
        qs = Supplier.objects.filter(is_active=True).order_by("name")
        return Response(
            SupplierSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["purchases"],
        request=SupplierSerializer,
        responses={201: SupplierSerializer},
    )
    def post(self, request):
        if not request.user.has_perm("purchases.add_supplier"):
            return forbidden("You do not have permission to add suppliers.")

        s = SupplierSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        supplier = s.save()
        return Response(
            SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED
        )


class SupplierPayView(GenericAPIView):
    """
    POST /api/purchases/suppliers/<uuid>/pay/

    Settles part of the supplier's outstanding balance; allocation to open
    purchases is FIFO by purchase date.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = SupplierPayRequestSerializer

    @extend_schema(
        tags=["purchases"],
        request=SupplierPayRequestSerializer,
        responses={201: SupplierPaymentSerializer},
    )
    def post(self, request, supplier_id):
        if not request.user.has_perm("purchases.add_supplierpayment"):
            return forbidden("You do not have permission to pay suppliers.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            posting = pay_supplier(
                supplier_id=supplier_id,
                amount=data["amount"],
                method=data.get("method", "CASH"),
                payment_account_id=data.get("payment_account_id"),
                reference=data.get("reference") or None,
                created_by=request.user,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        payment = (
            SupplierPayment.objects.select_related("supplier")
            .prefetch_related("allocations__purchase")
            .get(posting=posting)
        )
        return Response(
            SupplierPaymentSerializer(payment).data, status=status.HTTP_201_CREATED
        )


class SupplierLedgerView(APIView):
    """
    GET /api/purchases/suppliers/<uuid>/ledger/?start_date=&end_date=

    Purchases and payments in date order with the running payable balance.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["purchases"],
        parameters=[
            OpenApiParameter("start_date", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("end_date", str, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: dict},
    )
    def get(self, request, supplier_id):
        if not request.user.has_perm("purchases.view_supplier"):
            return forbidden("You do not have permission to view supplier ledgers.")

        start_date, error = date_param(request, "start_date")
        if error is not None:
            return error
        end_date, error = date_param(request, "end_date")
        if error is not None:
            return error

        try:
            data = get_supplier_ledger(supplier_id, start_date=start_date, end_date=end_date)
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(data, status=status.HTTP_200_OK)

class PurchaseListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PurchaseCreateSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseSerializer(many=True))
    def get(self, request):
        qs = Purchase.objects.select_related("supplier").order_by("-date", "-created_at")

        supplier = request.query_params.get("supplier")
        if supplier:
            qs = qs.filter(supplier_id=supplier)

        status_param = (request.query_params.get("status") or "").strip().upper()
        if status_param:
            qs = qs.filter(status=status_param)

        return Response(
            PurchaseSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["purchases"],
        request=PurchaseCreateSerializer,
        responses={201: PurchaseSerializer},
    )
    def post(self, request):
        if not request.user.has_perm("purchases.add_purchase"):
            return forbidden("You do not have permission to record purchases.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            purchase = record_purchase(
                supplier_id=data["supplier_id"],
                total_cost=data["total_cost"],
                paid_amount=data.get("paid_amount"),
                method=data.get("method", "CASH"),
                payment_account_id=data.get("payment_account_id"),
                quantity=data.get("quantity"),
                description=data.get("description", ""),
                date=data.get("date"),
                created_by=request.user,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)


class SupplierPaymentListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SupplierPaymentSerializer

    @extend_schema(tags=["purchases"], responses=SupplierPaymentSerializer(many=True))
    def get(self, request):
        qs = (
            SupplierPayment.objects.select_related("supplier")
            .prefetch_related("allocations__purchase")
            .order_by("-created_at")
        )
        supplier = request.query_params.get("supplier")
        if supplier:
            qs = qs.filter(supplier_id=supplier)

        return Response(
            SupplierPaymentSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )
