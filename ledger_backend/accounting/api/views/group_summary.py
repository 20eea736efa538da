# PATH: accounting/api/views/group_summary.py

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.query import parameter_error, validated_query
from accounting.api.serializers.reports import GroupSummaryQuerySerializer
from accounting.api.views.trial_balance import STATEMENT_PARAMETERS
from accounting.services.exceptions import ReportParameterError
from accounting.services.financial_statement_service import build_group_summary
from permissions.roles import CAP_REPORTS_VIEW, HasCapability


class GroupSummaryView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(
        tags=["reports"],
        parameters=[
            OpenApiParameter(
                name="groupType",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Restrict to one group type (Asset, Liability, Income, ...).",
            ),
            *STATEMENT_PARAMETERS,
        ],
        responses={200: dict, 400: dict},
    )
    def get(self, request):
        params = validated_query(GroupSummaryQuerySerializer, request).validated_data
        try:
            data = build_group_summary(
                group_type=params["groupType"],
                mode=params["mode"],
                as_of=params["asOf"],
            )
        except ReportParameterError as exc:
            return parameter_error(exc)
        return Response(data, status=status.HTTP_200_OK)
