"""
PATH: accounting/api/views/ledger.py

ACCOUNT LEDGER API VIEW (READ-ONLY)

GET /api/accounting/ledger/<uuid>/?start_date=&end_date=
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import forbidden, service_error_response
from accounting.api.params import date_param
from accounting.services.exceptions import AccountingServiceError
from accounting.services.ledger_service import get_account_ledger


class AccountLedgerView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter("start_date", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("end_date", str, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: dict},
    )
    def get(self, request, account_id):
        if not request.user.has_perm("accounting.view_posting"):
            return forbidden("You do not have permission to view the ledger.")

        start_date, error = date_param(request, "start_date")
        if error is not None:
            return error
        end_date, error = date_param(request, "end_date")
        if error is not None:
            return error

        try:
            data = get_account_ledger(account_id, start_date=start_date, end_date=end_date)
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(data, status=status.HTTP_200_OK)
