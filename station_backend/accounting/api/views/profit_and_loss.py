"""
PATH: accounting/api/views/profit_and_loss.py

PROFIT & LOSS API VIEW (READ-ONLY)

GET /api/accounting/profit-and-loss/?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import forbidden
from accounting.api.params import date_param
from accounting.services.profit_and_loss_service import get_profit_and_loss


class ProfitAndLossView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter("start_date", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("end_date", str, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: dict},
    )
    def get(self, request):
        if not request.user.has_perm("accounting.view_posting"):
            return forbidden("You do not have permission to view profit and loss.")

        start_date, error = date_param(request, "start_date")
        if error is not None:
            return error
        end_date, error = date_param(request, "end_date")
        if error is not None:
            return error

        data = get_profit_and_loss(start_date=start_date, end_date=end_date)
        return Response(data, status=status.HTTP_200_OK)
