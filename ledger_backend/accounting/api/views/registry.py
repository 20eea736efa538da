# PATH: accounting/api/views/registry.py

"""
LEDGER & GROUP REGISTRY API (READ-ONLY)

GET /api/ledger              list (search, groupId, groupName, isActive)
GET /api/ledger/<id>         one ledger
GET /api/ledger/cash-bank    ledgers under Cash/Bank groups
GET /api/ledger-groups       group tree, flattened

Master data is maintained through the Django admin; these endpoints
never write.
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.filters import LedgerFilter
from accounting.api.serializers.registry import LedgerGroupSerializer, LedgerSerializer
from accounting.models import Ledger, LedgerGroup
from accounting.services.exceptions import LedgerNotFoundError
from accounting.services.registry import cash_bank_ledgers, get_ledger
from permissions.roles import CAP_REPORTS_VIEW, HasCapability


@extend_schema(tags=["registry"])
class LedgerListView(ListAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    serializer_class = LedgerSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = LedgerFilter

    def get_queryset(self):
        return Ledger.objects.select_related("group").order_by("name", "id")


class LedgerDetailView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    @extend_schema(tags=["registry"], responses={200: LedgerSerializer, 404: dict})
    def get(self, request, ledger_id: int):
        try:
            ledger = get_ledger(ledger_id)
        except LedgerNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response(LedgerSerializer(ledger).data, status=status.HTTP_200_OK)


@extend_schema(tags=["registry"])
class CashBankLedgerListView(ListAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    serializer_class = LedgerSerializer
    pagination_class = None

    def get_queryset(self):
        return cash_bank_ledgers()


@extend_schema(tags=["registry"])
class LedgerGroupListView(ListAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    serializer_class = LedgerGroupSerializer
    pagination_class = None

    def get_queryset(self):
        return LedgerGroup.objects.select_related("parent").order_by("name")
