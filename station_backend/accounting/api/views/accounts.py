"""
PATH: accounting/api/views/accounts.py

CHART OF ACCOUNTS API

GET    /api/accounting/accounts/            list (filter: ?type=ASSET)
POST   /api/accounting/accounts/            create (optional opening_balance)
GET    /api/accounting/accounts/<uuid>/     detail
PATCH  /api/accounting/accounts/<uuid>/     rename / retype
DELETE /api/accounting/accounts/<uuid>/     delete (refused when in use)

GET    /api/accounting/payment-accounts/    list
POST   /api/accounting/payment-accounts/    create
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import forbidden, service_error_response
from accounting.api.serializers.accounts import (
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
    PaymentAccountSerializer,
)
from accounting.models.account import Account
from accounting.models.payment_account import PaymentAccount
from accounting.services import account_store
from accounting.services.exceptions import AccountingServiceError


class AccountListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountCreateSerializer

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter(
                name="type",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="ASSET, LIABILITY, EQUITY, INCOME or EXPENSE",
            )
        ],
        responses=AccountSerializer(many=True),
    )
    def get(self, request):
        if not request.user.has_perm("accounting.view_account"):
            return forbidden("You do not have permission to view accounts.")

        qs = Account.objects.all().order_by("code")
        account_type = (request.query_params.get("type") or "").strip().upper()
        if account_type:
            qs = qs.filter(account_type=account_type)

        return Response(AccountSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=AccountCreateSerializer,
        responses={201: AccountSerializer},
    )
    def post(self, request):
        if not request.user.has_perm("accounting.add_account"):
            return forbidden("You do not have permission to add accounts.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            account = account_store.create_account(
                code=data["code"],
                name=data["name"],
                account_type=data["account_type"],
                opening_balance=data.get("opening_balance"),
                created_by=request.user,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_201_CREATED)


class AccountDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountUpdateSerializer

    @extend_schema(tags=["accounting"], responses=AccountSerializer)
    def get(self, request, account_id):
        if not request.user.has_perm("accounting.view_account"):
            return forbidden("You do not have permission to view accounts.")
        try:
            account = account_store.get_by_id(account_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=AccountUpdateSerializer,
        responses={200: AccountSerializer},
    )
    def patch(self, request, account_id):
        if not request.user.has_perm("accounting.change_account"):
            return forbidden("You do not have permission to change accounts.")

        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            account = account_store.update_account(account_id, **s.validated_data)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["accounting"], responses={204: None})
    def delete(self, request, account_id):
        if not request.user.has_perm("accounting.delete_account"):
            return forbidden("You do not have permission to delete accounts.")
        try:
            account_store.delete_account(account_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PaymentAccountListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PaymentAccountSerializer

    @extend_schema(tags=["accounting"], responses=PaymentAccountSerializer(many=True))
    def get(self, request):
        qs = PaymentAccount.objects.select_related("ledger_account").filter(is_active=True)
        return Response(
            PaymentAccountSerializer(qs.order_by("name"), many=True).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        tags=["accounting"],
        request=PaymentAccountSerializer,
        responses={201: PaymentAccountSerializer},
    )
    def post(self, request):
        if not request.user.has_perm("accounting.add_paymentaccount"):
            return forbidden("You do not have permission to add payment accounts.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        payment_account = s.save()
        return Response(
            PaymentAccountSerializer(payment_account).data,
            status=status.HTTP_201_CREATED,
        )
