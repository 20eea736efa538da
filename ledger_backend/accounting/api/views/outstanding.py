# PATH: accounting/api/views/outstanding.py

"""
OUTSTANDING & AGEING API (READ-ONLY)

Per party:
  GET /api/outstanding-receivables   (customerGroup)
  GET /api/outstanding-payables      (supplierGroup)
Per bill:
  GET /api/billwise-receivables
  GET /api/billwise-payables
Supplemented:
  GET /api/outstanding-summary
  GET /api/outstanding-ledger

Zero matching parties is an empty list, never an error.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.query import parameter_error, validated_query
from accounting.api.serializers.reports import (
    BillwiseQuerySerializer,
    OutstandingLedgerQuerySerializer,
    PayablesQuerySerializer,
    ReceivablesQuerySerializer,
)
from accounting.services.exceptions import ReportParameterError
from accounting.services.outstanding_service import (
    PAYABLE,
    RECEIVABLE,
    billwise_outstanding,
    outstanding_ledger,
    outstanding_summary,
    party_outstanding,
)
from permissions.roles import CAP_REPORTS_VIEW, HasCapability


def _query(name, type_=str, description=""):
    return OpenApiParameter(
        name=name,
        type=type_,
        location=OpenApiParameter.QUERY,
        required=False,
        description=description,
    )


PARTY_PARAMETERS = [
    _query("searchTerm", description="Case-insensitive match on party name."),
    _query("riskCategory", description="Critical | High | Medium | Low"),
    _query("sortBy", description="amount | overdue | party | customer/supplier | risk"),
    _query("sortOrder", description="asc | desc"),
    _query("limit", OpenApiTypes.INT),
    _query("offset", OpenApiTypes.INT),
]

BILLWISE_PARAMETERS = [
    _query("searchTerm"),
    _query("partyName", description="Exact party name (case-insensitive)."),
    _query("selectedCustomer"),
    _query("selectedSupplier"),
    _query("selectedAgeingBucket", description="0-30 | 31-60 | 61-90 | 90+"),
    _query("selectedRiskCategory", description="Critical | High | Medium | Low"),
    _query("sortBy", description="amount | overdue | party | customer/supplier | date | risk"),
    _query("sortOrder", description="asc | desc"),
    _query("limit", OpenApiTypes.INT),
    _query("offset", OpenApiTypes.INT),
]


class _PartyOutstandingView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    role = None
    query_serializer_class = None

    def get(self, request):
        query = validated_query(self.query_serializer_class, request)
        params = query.validated_data

        try:
            data = party_outstanding(
                self.role,
                search_term=params["searchTerm"],
                group_name=query.group_name(),
                risk_category=params["riskCategory"],
                sort_by=params["sortBy"],
                sort_order=params["sortOrder"],
                limit=params["limit"],
                offset=params["offset"],
            )
        except ReportParameterError as exc:
            return parameter_error(exc)

        return Response(data, status=status.HTTP_200_OK)


@extend_schema(
    tags=["outstanding"],
    parameters=[_query("customerGroup"), *PARTY_PARAMETERS],
    responses={200: dict, 400: dict},
)
class OutstandingReceivablesView(_PartyOutstandingView):
    role = RECEIVABLE
    query_serializer_class = ReceivablesQuerySerializer


@extend_schema(
    tags=["outstanding"],
    parameters=[_query("supplierGroup"), *PARTY_PARAMETERS],
    responses={200: dict, 400: dict},
)
class OutstandingPayablesView(_PartyOutstandingView):
    role = PAYABLE
    query_serializer_class = PayablesQuerySerializer


class _BillwiseView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    role = None

    def get(self, request):
        query = validated_query(BillwiseQuerySerializer, request)
        params = query.validated_data

        try:
            data = billwise_outstanding(
                self.role,
                search_term=params["searchTerm"],
                party_name=query.party_name(),
                ageing_bucket=params["selectedAgeingBucket"],
                risk_category=params["selectedRiskCategory"],
                sort_by=params["sortBy"],
                sort_order=params["sortOrder"],
                limit=params["limit"],
                offset=params["offset"],
            )
        except ReportParameterError as exc:
            return parameter_error(exc)

        return Response(data, status=status.HTTP_200_OK)


@extend_schema(tags=["outstanding"], parameters=BILLWISE_PARAMETERS, responses={200: dict, 400: dict})
class BillwiseReceivablesView(_BillwiseView):
    role = RECEIVABLE


@extend_schema(tags=["outstanding"], parameters=BILLWISE_PARAMETERS, responses={200: dict, 400: dict})
class BillwisePayablesView(_BillwiseView):
    role = PAYABLE


class OutstandingSummaryView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(tags=["outstanding"], responses={200: dict})
    def get(self, request):
        return Response(outstanding_summary(), status=status.HTTP_200_OK)


class OutstandingLedgerView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(
        tags=["outstanding"],
        parameters=[
            _query("ledgerName"),
            _query("searchTerm", description="Matches bill number, voucher type or ledger name."),
            _query("from", OpenApiTypes.DATE),
            _query("to", OpenApiTypes.DATE),
        ],
        responses={200: dict, 400: dict},
    )
    def get(self, request):
        params = validated_query(OutstandingLedgerQuerySerializer, request).validated_data

        try:
            data = outstanding_ledger(
                ledger_name=params["ledgerName"],
                search_term=params["searchTerm"],
                from_date=params["from"],
                to_date=params["to"],
            )
        except ReportParameterError as exc:
            return parameter_error(exc)

        return Response(data, status=status.HTTP_200_OK)
