# accounting/admin.py

"""
Master data (ledger groups, ledgers) is maintained here; the API only
reads it.
"""

from django.contrib import admin

from accounting.models import Ledger, LedgerGroup

# ============================================================
# LEDGER GROUP
# ============================================================


@admin.register(LedgerGroup)
class LedgerGroupAdmin(admin.ModelAdmin):
    list_display = ("name", "parent", "group_type", "created_at")
    list_filter = ("group_type",)
    search_fields = ("name",)
    ordering = ("name",)
    readonly_fields = ("created_at",)


# ============================================================
# LEDGER
# ============================================================


@admin.register(Ledger)
class LedgerAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "group",
        "opening_balance",
        "balance_type",
        "credit_days",
        "is_active",
    )
    list_filter = ("balance_type", "is_active", "group")
    search_fields = ("name", "gst_number", "pan_number")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")

    fieldsets = (
        (
            "Ledger Identity",
            {
                "fields": ("name", "group", "is_active"),
            },
        ),
        (
            "Opening Position",
            {
                "fields": ("opening_balance", "balance_type", "credit_days"),
            },
        ),
        (
            "Party Details",
            {
                "fields": ("address", "phone", "email", "gst_number", "pan_number"),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )
