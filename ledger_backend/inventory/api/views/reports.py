# PATH: inventory/api/views/reports.py

"""
STOCK REPORT API (READ-ONLY)

GET /api/stock-summary        fromDate, toDate, stockGroupId, stockItemId,
                              godownId, basis, showProfit
GET /api/movement-analysis    fromDate, toDate (required), stockItemId, direction
GET /api/ageing-analysis      toDate (required), basis, stockItemId, stockGroupId
GET /api/godown-summary       godownId

Quantities are never stored; every report replays posted item lines.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.query import parameter_error, validated_query
from inventory.api.serializers.reports import (
    GodownSummaryQuerySerializer,
    MovementQuerySerializer,
    StockAgeingQuerySerializer,
    StockSummaryQuerySerializer,
)
from inventory.services.exceptions import StockReportParameterError
from inventory.services.stock_ageing_service import build_stock_ageing
from inventory.services.stock_report_service import (
    build_godown_summary,
    build_movement_analysis,
    build_stock_summary,
)
from permissions.roles import CAP_INVENTORY_VIEW, HasCapability


def _param(name, type_=OpenApiTypes.STR, *, required=False, description=""):
    return OpenApiParameter(
        name=name,
        type=type_,
        location=OpenApiParameter.QUERY,
        required=required,
        description=description,
    )


BASIS_PARAMETER = _param("basis", description="Quantity | Value | Cost")


class StockReportView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_VIEW

    query_serializer_class = None

    def build(self, params: dict) -> dict:
        raise NotImplementedError

    def get(self, request):
        params = validated_query(self.query_serializer_class, request).validated_data
        try:
            data = self.build(params)
        except StockReportParameterError as exc:
            return parameter_error(exc)
        return Response(data, status=status.HTTP_200_OK)


@extend_schema(
    tags=["inventory"],
    parameters=[
        _param("fromDate", OpenApiTypes.DATE),
        _param("toDate", OpenApiTypes.DATE),
        _param("stockGroupId", OpenApiTypes.INT),
        _param("stockItemId", OpenApiTypes.INT),
        _param("godownId", OpenApiTypes.INT),
        BASIS_PARAMETER,
        _param("showProfit", OpenApiTypes.BOOL),
    ],
    responses={200: dict, 400: dict},
)
class StockSummaryView(StockReportView):
    query_serializer_class = StockSummaryQuerySerializer

    def build(self, params):
        return build_stock_summary(
            from_date=params["fromDate"],
            to_date=params["toDate"],
            stock_group_id=params["stockGroupId"],
            stock_item_id=params["stockItemId"],
            godown_id=params["godownId"],
            basis=params["basis"],
            show_profit=params["showProfit"],
        )


@extend_schema(
    tags=["inventory"],
    parameters=[
        _param("fromDate", OpenApiTypes.DATE, required=True),
        _param("toDate", OpenApiTypes.DATE, required=True),
        _param("stockItemId", OpenApiTypes.INT),
        _param("direction", description="in | out"),
    ],
    responses={200: dict, 400: dict},
)
class MovementAnalysisView(StockReportView):
    query_serializer_class = MovementQuerySerializer

    def build(self, params):
        return build_movement_analysis(
            from_date=params["fromDate"],
            to_date=params["toDate"],
            stock_item_id=params["stockItemId"],
            direction=params["direction"],
        )


@extend_schema(
    tags=["inventory"],
    parameters=[
        _param("toDate", OpenApiTypes.DATE, required=True),
        BASIS_PARAMETER,
        _param("stockItemId", OpenApiTypes.INT),
        _param("stockGroupId", OpenApiTypes.INT),
    ],
    responses={200: dict, 400: dict},
)
class StockAgeingView(StockReportView):
    query_serializer_class = StockAgeingQuerySerializer

    def build(self, params):
        return build_stock_ageing(
            to_date=params["toDate"],
            basis=params["basis"],
            stock_item_id=params["stockItemId"],
            stock_group_id=params["stockGroupId"],
        )


@extend_schema(tags=["inventory"], parameters=[_param("godownId", OpenApiTypes.INT)], responses={200: dict})
class GodownSummaryView(StockReportView):
    query_serializer_class = GodownSummaryQuerySerializer

    def build(self, params):
        return build_godown_summary(godown_id=params["godownId"])
