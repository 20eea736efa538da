# accounting/api/serializers/registry.py

from rest_framework import serializers

from accounting.models import Ledger, LedgerGroup


class LedgerGroupSerializer(serializers.ModelSerializer):
    parentId = serializers.IntegerField(source="parent_id", read_only=True)
    groupType = serializers.CharField(source="group_type", read_only=True)
    effectiveType = serializers.CharField(source="effective_type", read_only=True)

    class Meta:
        model = LedgerGroup
        fields = ["id", "name", "parentId", "groupType", "effectiveType"]
        read_only_fields = fields


class LedgerSerializer(serializers.ModelSerializer):
    """
    Read contract for ledger master data.
    """

    groupId = serializers.IntegerField(source="group_id", read_only=True)
    groupName = serializers.CharField(source="group.name", read_only=True, default="")
    openingBalance = serializers.DecimalField(
        source="opening_balance", max_digits=14, decimal_places=2, coerce_to_string=False, read_only=True
    )
    balanceType = serializers.CharField(source="balance_type", read_only=True)
    gstNumber = serializers.CharField(source="gst_number", read_only=True)
    panNumber = serializers.CharField(source="pan_number", read_only=True)
    creditDays = serializers.IntegerField(source="credit_days", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)

    class Meta:
        model = Ledger
        fields = [
            "id",
            "name",
            "groupId",
            "groupName",
            "openingBalance",
            "balanceType",
            "address",
            "phone",
            "email",
            "gstNumber",
            "panNumber",
            "creditDays",
            "isActive",
        ]
        read_only_fields = fields
