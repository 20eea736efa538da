# inventory/api/serializers/registry.py

from rest_framework import serializers

from inventory.models import Godown, StockItem


class StockItemSerializer(serializers.ModelSerializer):
    stockGroupId = serializers.IntegerField(source="stock_group_id", read_only=True)
    stockGroupName = serializers.CharField(source="stock_group.name", read_only=True, default="")
    openingBalance = serializers.DecimalField(
        source="opening_balance", max_digits=14, decimal_places=3, read_only=True
    )
    openingRate = serializers.DecimalField(
        source="opening_rate", max_digits=14, decimal_places=2, read_only=True
    )
    hsnCode = serializers.CharField(source="hsn_code", read_only=True)
    gstRate = serializers.DecimalField(source="gst_rate", max_digits=5, decimal_places=2, read_only=True)
    standardPurchaseRate = serializers.DecimalField(
        source="standard_purchase_rate", max_digits=14, decimal_places=2, read_only=True
    )
    standardSaleRate = serializers.DecimalField(
        source="standard_sale_rate", max_digits=14, decimal_places=2, read_only=True
    )
    batchNumber = serializers.CharField(source="batch_number", read_only=True)
    batchExpiryDate = serializers.DateField(source="batch_expiry_date", read_only=True)

    class Meta:
        model = StockItem
        fields = [
            "id",
            "name",
            "unit",
            "stockGroupId",
            "stockGroupName",
            "openingBalance",
            "openingRate",
            "hsnCode",
            "gstRate",
            "standardPurchaseRate",
            "standardSaleRate",
            "batchNumber",
            "batchExpiryDate",
        ]


class GodownSerializer(serializers.ModelSerializer):
    class Meta:
        model = Godown
        fields = ["id", "name", "address"]
