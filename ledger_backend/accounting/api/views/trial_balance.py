"""
PATH: accounting/api/views/trial_balance.py

TRIAL BALANCE API VIEW (READ-ONLY)

- mode=static        opening balances only (default)
- mode=transactions  opening balances + postings up to asOf
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.query import parameter_error, validated_query
from accounting.api.serializers.reports import StatementQuerySerializer
from accounting.services.exceptions import ReportParameterError
from accounting.services.trial_balance_service import TrialBalanceService
from permissions.roles import CAP_REPORTS_VIEW, HasCapability

STATEMENT_PARAMETERS = [
    OpenApiParameter(
        name="mode",
        type=str,
        location=OpenApiParameter.QUERY,
        required=False,
        enum=["static", "transactions"],
        description="static = opening balances only; transactions = include postings up to asOf.",
    ),
    OpenApiParameter(
        name="asOf",
        type=OpenApiTypes.DATE,
        location=OpenApiParameter.QUERY,
        required=False,
        description="Cutoff date (YYYY-MM-DD) for transactions mode. Defaults to today.",
    ),
]


@extend_schema(tags=["reports"], parameters=STATEMENT_PARAMETERS, responses={200: dict, 400: dict})
class TrialBalanceView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    def get(self, request):
        params = validated_query(StatementQuerySerializer, request).validated_data

        try:
            data = TrialBalanceService().generate(mode=params["mode"], as_of=params["asOf"])
        except ReportParameterError as exc:
            return parameter_error(exc)

        return Response(data, status=status.HTTP_200_OK)
