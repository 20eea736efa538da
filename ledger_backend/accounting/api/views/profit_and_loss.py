# PATH: accounting/api/views/profit_and_loss.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.query import parameter_error, validated_query
from accounting.api.serializers.reports import StatementQuerySerializer
from accounting.api.views.trial_balance import STATEMENT_PARAMETERS
from accounting.services.exceptions import ReportParameterError
from accounting.services.profit_and_loss_service import get_profit_and_loss
from permissions.roles import CAP_REPORTS_VIEW, HasCapability


class ProfitAndLossView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(tags=["reports"], parameters=STATEMENT_PARAMETERS, responses={200: dict, 400: dict})
    def get(self, request):
        params = validated_query(StatementQuerySerializer, request).validated_data
        try:
            data = get_profit_and_loss(mode=params["mode"], as_of=params["asOf"])
        except ReportParameterError as exc:
            return parameter_error(exc)
        return Response(data, status=status.HTTP_200_OK)
