# PATH: accounting/api/views/cash_flow.py

"""
CASH FLOW API (READ-ONLY)

GET /api/cash-flow?financialYear=2024-25
    12 months April-March; idle months are zero.
    financialYear defaults to the current one.

GET /api/cash-flow/summary/<monthCode>     e.g. Apr-24
    inflow/outflow per ledger for one month.
"""

from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.query import parameter_error, validated_query
from accounting.api.serializers.reports import CashFlowQuerySerializer
from accounting.services.cash_flow_service import (
    build_cash_flow,
    build_month_summary,
    current_financial_year,
)
from accounting.services.exceptions import ReportParameterError
from permissions.roles import CAP_REPORTS_VIEW, HasCapability


class CashFlowView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(
        tags=["reports"],
        parameters=[
            OpenApiParameter(
                name="financialYear",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="YYYY-YY (or YYYY-YYYY). Defaults to the current financial year.",
            ),
        ],
        responses={200: dict, 400: dict},
    )
    def get(self, request):
        params = validated_query(CashFlowQuerySerializer, request).validated_data
        financial_year = params["financialYear"] or current_financial_year(timezone.localdate())

        try:
            data = build_cash_flow(financial_year=financial_year)
        except ReportParameterError as exc:
            return parameter_error(exc)

        return Response(data, status=status.HTTP_200_OK)


class CashFlowMonthSummaryView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(tags=["reports"], responses={200: dict, 400: dict})
    def get(self, request, month_code: str):
        try:
            data = build_month_summary(month_code_value=month_code)
        except ReportParameterError as exc:
            return parameter_error(exc)
        return Response(data, status=status.HTTP_200_OK)
