"""
PATH: accounting/api/views/balance_sheet.py

BALANCE SHEET API VIEW (READ-ONLY)

GET /api/accounting/balance-sheet/?as_of_date=YYYY-MM-DD

is_balanced=false is reported, not turned into an error status.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import forbidden
from accounting.api.params import as_of_param
from accounting.services.balance_sheet_service import generate_balance_sheet


class BalanceSheetView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter("as_of", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("as_of_date", str, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: dict},
    )
    def get(self, request):
        if not request.user.has_perm("accounting.view_posting"):
            return forbidden("You do not have permission to view the balance sheet.")

        as_of, error = as_of_param(request)
        if error is not None:
            return error

        return Response(generate_balance_sheet(as_of=as_of), status=status.HTTP_200_OK)
