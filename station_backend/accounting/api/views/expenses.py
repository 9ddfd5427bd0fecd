# PATH: accounting/api/views/expenses.py

"""
PATH: accounting/api/views/expenses.py

EXPENSES / OTHER INCOME API

GET    /api/accounting/expenses/          accounting.view_expenserecord
POST   /api/accounting/expenses/          accounting.add_expenserecord
DELETE /api/accounting/expenses/<uuid>/   accounting.delete_expenserecord

GET    /api/accounting/income/            accounting.view_incomerecord
POST   /api/accounting/income/            accounting.add_incomerecord
DELETE /api/accounting/income/<uuid>/     accounting.delete_incomerecord

Create posts to the ledger in the same transaction as the record; delete
reverses that posting.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import forbidden, service_error_response
from accounting.api.serializers.expenses import (
    CashRecordCreateSerializer,
    ExpenseRecordSerializer,
    IncomeRecordSerializer,
)
from accounting.models.expense import ExpenseRecord, IncomeRecord
from accounting.services.exceptions import AccountingServiceError
from accounting.services.expense_service import create_expense, delete_expense
from accounting.services.income_service import create_income, delete_income


class _CashRecordListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CashRecordCreateSerializer

    model = None
    output_serializer = None
    create_fn = None

    def _perm(self, action):
        return f"accounting.{action}_{self.model._meta.model_name}"

    def get(self, request):
        if not request.user.has_perm(self._perm("view")):
            return forbidden("You do not have permission to view these records.")

        qs = self.model.objects.select_related("category_account").order_by(
            "-date", "-created_at"
        )
        return Response(
            self.output_serializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    def post(self, request):
        if not request.user.has_perm(self._perm("add")):
            return forbidden("You do not have permission to add these records.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            record = self.create_fn(created_by=request.user, **s.validated_data)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(
            self.output_serializer(record).data, status=status.HTTP_201_CREATED
        )


class _CashRecordDeleteView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    model = None
    delete_fn = None

    def delete(self, request, record_id):
        perm = f"accounting.delete_{self.model._meta.model_name}"
        if not request.user.has_perm(perm):
            return forbidden("You do not have permission to delete these records.")
        try:
            self.delete_fn(record_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["accounting"], request=CashRecordCreateSerializer, responses=ExpenseRecordSerializer)
class ExpenseListCreateView(_CashRecordListCreateView):
    model = ExpenseRecord
    output_serializer = ExpenseRecordSerializer
    create_fn = staticmethod(create_expense)


@extend_schema(tags=["accounting"], responses={204: None})
class ExpenseDeleteView(_CashRecordDeleteView):
    model = ExpenseRecord
    delete_fn = staticmethod(delete_expense)


@extend_schema(tags=["accounting"], request=CashRecordCreateSerializer, responses=IncomeRecordSerializer)
class IncomeListCreateView(_CashRecordListCreateView):
    model = IncomeRecord
    output_serializer = IncomeRecordSerializer
    create_fn = staticmethod(create_income)


@extend_schema(tags=["accounting"], responses={204: None})
class IncomeDeleteView(_CashRecordDeleteView):
    model = IncomeRecord
    delete_fn = staticmethod(delete_income)
