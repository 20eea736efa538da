# inventory/api/views/settings.py

"""
GET  /api/fifo/settings   current valuation settings (defaults if never saved)
POST /api/fifo/settings   partial update; unknown or invalid values -> 400
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.api.serializers.settings import ValuationSettingsSerializer
from inventory.models import ValuationSettings
from inventory.services.exceptions import InventoryServiceError
from inventory.services.valuation_settings_service import update_valuation_settings
from permissions.roles import CAP_INVENTORY_SETTINGS, CAP_INVENTORY_VIEW, HasCapability


class ValuationSettingsView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]

    @property
    def required_capability(self):
        if self.request.method == "POST":
            return CAP_INVENTORY_SETTINGS
        return CAP_INVENTORY_VIEW

    @extend_schema(tags=["inventory"], responses=ValuationSettingsSerializer)
    def get(self, request):
        return Response(
            ValuationSettingsSerializer(ValuationSettings.current()).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        tags=["inventory"],
        request=ValuationSettingsSerializer,
        responses={200: ValuationSettingsSerializer, 400: dict},
    )
    def post(self, request):
        s = ValuationSettingsSerializer(ValuationSettings.current(), data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            saved = update_valuation_settings(dict(s.validated_data))
        except InventoryServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "message": "FIFO settings saved successfully",
                "settings": ValuationSettingsSerializer(saved).data,
            },
            status=status.HTTP_200_OK,
        )
