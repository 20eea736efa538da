# vouchers/api/views/orders.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import CAP_VOUCHERS_POST, HasCapability
from vouchers.api.serializers.queries import OrderStatusSerializer
from vouchers.services.exceptions import OrderStatusError, VoucherNotFoundError
from vouchers.services.order_service import change_order_status


class OrderStatusView(APIView):
    """
    PUT /api/{sales,purchase}-orders/<id>/status  {"status": "confirmed"}
    """

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_VOUCHERS_POST

    order_type = ""

    @extend_schema(tags=["vouchers"], request=OrderStatusSerializer, responses={200: dict, 400: dict, 404: dict})
    def put(self, request, order_id: int):
        s = OrderStatusSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            order = change_order_status(
                order_type=self.order_type,
                order_id=order_id,
                status=s.validated_data["status"],
            )
        except VoucherNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except OrderStatusError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "message": "Order status updated successfully",
                "id": order.id,
                "status": order.status,
            },
            status=status.HTTP_200_OK,
        )


class SalesOrderStatusView(OrderStatusView):
    order_type = "sales-order"


class PurchaseOrderStatusView(OrderStatusView):
    order_type = "purchase-order"
