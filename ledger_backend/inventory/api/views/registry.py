# inventory/api/views/registry.py

from drf_spectacular.utils import extend_schema
from rest_framework.generics import ListAPIView
from rest_framework.permissions import IsAuthenticated

from inventory.api.serializers.registry import GodownSerializer, StockItemSerializer
from inventory.models import Godown, StockItem
from permissions.roles import CAP_INVENTORY_VIEW, HasCapability


@extend_schema(tags=["inventory"])
class StockItemListView(ListAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_VIEW

    serializer_class = StockItemSerializer

    def get_queryset(self):
        qs = StockItem.objects.select_related("stock_group").order_by("name", "id")
        search = (self.request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(name__icontains=search)
        return qs


@extend_schema(tags=["inventory"])
class GodownListView(ListAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_VIEW

    serializer_class = GodownSerializer
    pagination_class = None

    def get_queryset(self):
        return Godown.objects.order_by("name", "id")
