"""
PATH: accounting/api/views/trial_balance.py

TRIAL BALANCE API VIEW (READ-ONLY)

- Permission-gated: requires accounting.view_posting
- ?as_of=<ISO datetime> or ?as_of_date=YYYY-MM-DD (end-of-day snapshot)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import forbidden
from accounting.api.params import as_of_param
from accounting.services.trial_balance_service import TrialBalanceService


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(
            name="as_of",
            type=str,
            location=OpenApiParameter.QUERY,
            required=False,
            description="ISO datetime snapshot (e.g. 2026-01-15T23:59:59).",
        ),
        OpenApiParameter(
            name="as_of_date",
            type=str,
            location=OpenApiParameter.QUERY,
            required=False,
            description="End-of-day snapshot (YYYY-MM-DD). If set, overrides as_of.",
        ),
    ],
    responses={200: dict},
)
class TrialBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm("accounting.view_posting"):
            return forbidden("You do not have permission to view trial balance.")

        as_of, error = as_of_param(request)
        if error is not None:
            return error

        data = TrialBalanceService().generate(as_of=as_of)
        data["as_of_date"] = request.query_params.get("as_of_date") or None
        return Response(data, status=status.HTTP_200_OK)
