# vouchers/api/serializers/queries.py

from rest_framework import serializers


class DayBookQuerySerializer(serializers.Serializer):
    fromDate = serializers.DateField(required=False, allow_null=True, default=None)
    toDate = serializers.DateField(required=False, allow_null=True, default=None)
    voucherType = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        start, end = attrs["fromDate"], attrs["toDate"]
        if start and end and start > end:
            raise serializers.ValidationError({"fromDate": "fromDate must be on or before toDate"})
        return attrs


class OrderStatusSerializer(serializers.Serializer):
    # Allowed values are checked by the order service so the error lists them
    status = serializers.CharField()
