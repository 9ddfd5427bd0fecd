# accounting/api/params.py

"""
Query-param parsing shared by the report and list views.

Each parser returns (value, error_response); exactly one is non-None
when the param was supplied.
"""

from __future__ import annotations

from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import status
from rest_framework.response import Response


def _as_aware_dt(dt):
    if dt is None:
        return None
    if timezone.is_naive(dt):
        return timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


def date_param(request, name):
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        return None, None
    d = parse_date(raw)
    if d is None:
        return None, Response(
            {"detail": f"Invalid {name} (expected YYYY-MM-DD)"},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return d, None


def as_of_param(request):
    """
    as_of_date (end-of-day) wins over as_of (ISO datetime).
    """
    d, error = date_param(request, "as_of_date")
    if error is not None:
        return None, error
    if d is not None:
        return _as_aware_dt(datetime.combine(d, time.max)), None

    raw = (request.query_params.get("as_of") or "").strip()
    if not raw:
        return None, None
    dt = parse_datetime(raw)
    if dt is None:
        return None, Response(
            {"detail": "Invalid as_of (expected ISO datetime)"},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return _as_aware_dt(dt), None
