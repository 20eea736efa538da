# vouchers/api/views/queries.py

"""
READ-ONLY VOUCHER ENDPOINTS

GET /api/vouchers/<id>   header + entries + bill allocations
GET /api/daybook         ?fromDate=&toDate=&voucherType=
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.query import validated_query
from permissions.roles import CAP_REPORTS_VIEW, HasCapability
from vouchers.api.serializers.queries import DayBookQuerySerializer
from vouchers.services.exceptions import VoucherNotFoundError
from vouchers.services.voucher_query_service import build_day_book, get_voucher_detail


class VoucherDetailView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(tags=["vouchers"], responses={200: dict, 404: dict})
    def get(self, request, voucher_id: int):
        try:
            data = get_voucher_detail(voucher_id)
        except VoucherNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(data, status=status.HTTP_200_OK)


class DayBookView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(
        tags=["vouchers"],
        parameters=[
            OpenApiParameter("fromDate", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("toDate", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("voucherType", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: dict, 400: dict},
    )
    def get(self, request):
        params = validated_query(DayBookQuerySerializer, request).validated_data
        data = build_day_book(
            from_date=params["fromDate"],
            to_date=params["toDate"],
            voucher_type=params["voucherType"] or None,
        )
        return Response(data, status=status.HTTP_200_OK)
