# inventory/api/serializers/reports.py

"""
Query-parameter serializers for the stock reports.

`basis` and `direction` stay free text here; the report services parse
them and name the offending parameter on failure.
"""

from rest_framework import serializers


class StockSummaryQuerySerializer(serializers.Serializer):
    fromDate = serializers.DateField(required=False, allow_null=True, default=None)
    toDate = serializers.DateField(required=False, allow_null=True, default=None)
    stockGroupId = serializers.IntegerField(required=False, allow_null=True, default=None)
    stockItemId = serializers.IntegerField(required=False, allow_null=True, default=None)
    godownId = serializers.IntegerField(required=False, allow_null=True, default=None)
    basis = serializers.CharField(required=False, allow_blank=True, default="")
    showProfit = serializers.BooleanField(required=False, default=False)


class MovementQuerySerializer(serializers.Serializer):
    fromDate = serializers.DateField(required=False, allow_null=True, default=None)
    toDate = serializers.DateField(required=False, allow_null=True, default=None)
    stockItemId = serializers.IntegerField(required=False, allow_null=True, default=None)
    direction = serializers.CharField(required=False, allow_blank=True, default="")


class StockAgeingQuerySerializer(serializers.Serializer):
    toDate = serializers.DateField(required=False, allow_null=True, default=None)
    basis = serializers.CharField(required=False, allow_blank=True, default="")
    stockItemId = serializers.IntegerField(required=False, allow_null=True, default=None)
    stockGroupId = serializers.IntegerField(required=False, allow_null=True, default=None)


class GodownSummaryQuerySerializer(serializers.Serializer):
    godownId = serializers.IntegerField(required=False, allow_null=True, default=None)
