# accounting/api/errors.py

"""
Service error -> HTTP response mapping shared by accounting and purchases views.

Body shape: {"detail": <message>, "code": <stable code>, ...details}
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from accounting.services.exceptions import AccountingServiceError


def service_error_response(exc: AccountingServiceError) -> Response:
    return Response(exc.as_dict(), status=exc.http_status)


def forbidden(detail: str) -> Response:
    return Response({"detail": detail}, status=status.HTTP_403_FORBIDDEN)
