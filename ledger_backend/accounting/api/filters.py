# accounting/api/filters.py

import django_filters

from accounting.models import Ledger


class LedgerFilter(django_filters.FilterSet):
    """
    /api/ledger?search=cash&groupId=3&isActive=true
    """

    search = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    groupId = django_filters.NumberFilter(field_name="group_id")
    groupName = django_filters.CharFilter(field_name="group__name", lookup_expr="iexact")
    isActive = django_filters.BooleanFilter(field_name="is_active")

    class Meta:
        model = Ledger
        fields = ["search", "groupId", "groupName", "isActive"]
