# inventory/api/serializers/settings.py

from rest_framework import serializers

from inventory.models import ValuationSettings


class ValuationSettingsSerializer(serializers.ModelSerializer):
    """
    camelCase view of the valuation settings row. Updates are partial.
    """

    enableFifoForAllItems = serializers.BooleanField(source="enable_fifo_for_all_items", required=False)
    calculationMethod = serializers.ChoiceField(
        source="calculation_method",
        choices=ValuationSettings.CalculationMethod.choices,
        required=False,
    )
    roundingPrecision = serializers.IntegerField(
        source="rounding_precision", min_value=0, max_value=6, required=False
    )
    treatZeroStockAs = serializers.ChoiceField(
        source="treat_zero_stock_as",
        choices=ValuationSettings.ZeroStockPolicy.choices,
        required=False,
    )
    considerExpiry = serializers.BooleanField(source="consider_expiry", required=False)
    autoAdjustNegativeStock = serializers.BooleanField(source="auto_adjust_negative_stock", required=False)
    trackBatchWiseFifo = serializers.BooleanField(source="track_batch_wise_fifo", required=False)
    enableFifoCategories = serializers.ListField(
        source="enable_fifo_categories", child=serializers.IntegerField(), required=False
    )
    enableFifoItems = serializers.ListField(
        source="enable_fifo_items", child=serializers.IntegerField(), required=False
    )
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = ValuationSettings
        fields = [
            "enableFifoForAllItems",
            "calculationMethod",
            "roundingPrecision",
            "treatZeroStockAs",
            "considerExpiry",
            "autoAdjustNegativeStock",
            "trackBatchWiseFifo",
            "enableFifoCategories",
            "enableFifoItems",
            "updatedAt",
        ]
