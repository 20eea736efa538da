# accounting/api/serializers/reports.py

"""
Query-parameter serializers for the ledger-side reports.

Query keys are camelCase on the wire; views read validated_data.
"""

from rest_framework import serializers

from accounting.services.financial_statement_service import MODE_STATIC, MODES

SORT_ORDERS = ["asc", "desc"]


class LedgerReportQuerySerializer(serializers.Serializer):
    ledgerId = serializers.IntegerField(min_value=1)
    fromDate = serializers.DateField()
    toDate = serializers.DateField()
    includeOpening = serializers.BooleanField(required=False, default=True)
    includeClosing = serializers.BooleanField(required=False, default=True)

    def validate(self, attrs):
        if attrs["fromDate"] > attrs["toDate"]:
            raise serializers.ValidationError({"fromDate": "fromDate must be on or before toDate"})
        return attrs


class StatementQuerySerializer(serializers.Serializer):
    mode = serializers.ChoiceField(choices=MODES, required=False, default=MODE_STATIC)
    asOf = serializers.DateField(required=False, allow_null=True, default=None)


class GroupSummaryQuerySerializer(StatementQuerySerializer):
    groupType = serializers.CharField(required=False, allow_blank=True, default="")


class OutstandingQuerySerializer(serializers.Serializer):
    """
    Per-party outstanding. The group filter key depends on the role
    (customerGroup / supplierGroup) and is declared by subclasses.
    """

    group_param = ""

    searchTerm = serializers.CharField(required=False, allow_blank=True, default="")
    riskCategory = serializers.CharField(required=False, allow_blank=True, default="")
    sortBy = serializers.CharField(required=False, default="amount")
    sortOrder = serializers.ChoiceField(choices=SORT_ORDERS, required=False, default="desc")
    limit = serializers.IntegerField(required=False, min_value=0, max_value=1000, default=100)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)

    def group_name(self) -> str:
        return self.validated_data.get(self.group_param, "")


class ReceivablesQuerySerializer(OutstandingQuerySerializer):
    group_param = "customerGroup"
    customerGroup = serializers.CharField(required=False, allow_blank=True, default="")


class PayablesQuerySerializer(OutstandingQuerySerializer):
    group_param = "supplierGroup"
    supplierGroup = serializers.CharField(required=False, allow_blank=True, default="")


class BillwiseQuerySerializer(serializers.Serializer):
    searchTerm = serializers.CharField(required=False, allow_blank=True, default="")
    partyName = serializers.CharField(required=False, allow_blank=True, default="")
    selectedCustomer = serializers.CharField(required=False, allow_blank=True, default="")
    selectedSupplier = serializers.CharField(required=False, allow_blank=True, default="")
    selectedAgeingBucket = serializers.CharField(required=False, allow_blank=True, default="")
    selectedRiskCategory = serializers.CharField(required=False, allow_blank=True, default="")
    sortBy = serializers.CharField(required=False, default="amount")
    sortOrder = serializers.ChoiceField(choices=SORT_ORDERS, required=False, default="desc")
    limit = serializers.IntegerField(required=False, min_value=0, max_value=5000, allow_null=True, default=None)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)

    def party_name(self) -> str:
        data = self.validated_data
        return data["partyName"] or data["selectedCustomer"] or data["selectedSupplier"]


class OutstandingLedgerQuerySerializer(serializers.Serializer):
    ledgerName = serializers.CharField(required=False, allow_blank=True, default="")
    searchTerm = serializers.CharField(required=False, allow_blank=True, default="")

    def get_fields(self):
        # "from" / "to" are Python keywords, so they cannot be class attributes
        fields = super().get_fields()
        fields["from"] = serializers.DateField(required=False, allow_null=True, default=None)
        fields["to"] = serializers.DateField(required=False, allow_null=True, default=None)
        return fields


class CashFlowQuerySerializer(serializers.Serializer):
    financialYear = serializers.CharField(required=False, allow_blank=True, default="")


class LedgerListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, default="")
    groupId = serializers.IntegerField(required=False, allow_null=True, default=None)
