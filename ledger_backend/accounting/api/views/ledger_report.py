# PATH: accounting/api/views/ledger_report.py

"""
LEDGER REPORT API (READ-ONLY)

GET /api/ledger-report/report?ledgerId=&fromDate=&toDate=
    [&includeOpening=true&includeClosing=true]

Running balance is rebuilt from posted lines on every request.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.query import parameter_error, validated_query
from accounting.api.serializers.reports import LedgerReportQuerySerializer
from accounting.services.exceptions import LedgerNotFoundError, ReportParameterError
from accounting.services.ledger_report_service import build_ledger_report
from permissions.roles import CAP_REPORTS_VIEW, HasCapability


class LedgerReportView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(
        tags=["reports"],
        parameters=[
            OpenApiParameter("ledgerId", OpenApiTypes.INT, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("fromDate", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("toDate", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("includeOpening", OpenApiTypes.BOOL, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("includeClosing", OpenApiTypes.BOOL, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: dict, 400: dict, 404: dict},
    )
    def get(self, request):
        params = validated_query(LedgerReportQuerySerializer, request).validated_data

        try:
            statement = build_ledger_report(
                ledger_id=params["ledgerId"],
                from_date=params["fromDate"],
                to_date=params["toDate"],
                include_opening=params["includeOpening"],
                include_closing=params["includeClosing"],
            )
        except LedgerNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except ReportParameterError as exc:
            return parameter_error(exc)

        return Response(statement.as_dict(), status=status.HTTP_200_OK)
