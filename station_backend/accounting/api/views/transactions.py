"""
PATH: accounting/api/views/transactions.py

TRANSACTION LOG API

GET    /api/accounting/transactions/          filtered list (PostingFilter)
POST   /api/accounting/transactions/          manual posting by account codes
GET    /api/accounting/transactions/<uuid>/   detail
DELETE /api/accounting/transactions/<uuid>/   reverse (undo) the posting

Postings are immutable; DELETE is the only correction path and it goes
through the posting engine so cached balances move with it.
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import forbidden, service_error_response
from accounting.api.filters import PostingFilter
from accounting.api.serializers.postings import (
    PostingCreateSerializer,
    PostingSerializer,
)
from accounting.models.posting import Posting
from accounting.services import posting_engine
from accounting.services.exceptions import AccountingServiceError, PostingNotFoundError


class TransactionListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PostingCreateSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = PostingFilter

    def get_queryset(self):
        return Posting.objects.select_related("debit_account", "credit_account").order_by(
            "-posted_at", "-created_at"
        )

    @extend_schema(tags=["accounting"], responses=PostingSerializer(many=True))
    def get(self, request):
        if not request.user.has_perm("accounting.view_posting"):
            return forbidden("You do not have permission to view transactions.")

        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(PostingSerializer(page, many=True).data)
        return Response(PostingSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=PostingCreateSerializer,
        responses={201: PostingSerializer},
    )
    def post(self, request):
        if not request.user.has_perm("accounting.add_posting"):
            return forbidden("You do not have permission to post transactions.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            posting = posting_engine.post(
                data["debit_code"],
                data["credit_code"],
                data["amount"],
                data.get("description", ""),
                shift_id=data.get("shift_id") or None,
                reference=data.get("reference") or None,
                posted_at=data.get("posted_at"),
                created_by=request.user,
            )
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(PostingSerializer(posting).data, status=status.HTTP_201_CREATED)


class TransactionDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PostingSerializer

    @extend_schema(tags=["accounting"], responses=PostingSerializer)
    def get(self, request, posting_id):
        if not request.user.has_perm("accounting.view_posting"):
            return forbidden("You do not have permission to view transactions.")

        posting = (
            Posting.objects.select_related("debit_account", "credit_account")
            .filter(pk=posting_id)
            .first()
        )
        if posting is None:
            return service_error_response(
                PostingNotFoundError("Posting not found", posting_id=str(posting_id))
            )
        return Response(PostingSerializer(posting).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["accounting"], responses={204: None})
    def delete(self, request, posting_id):
        if not request.user.has_perm("accounting.delete_posting"):
            return forbidden("You do not have permission to reverse transactions.")
        try:
            posting_engine.reverse(posting_id)
        except AccountingServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
