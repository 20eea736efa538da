# inventory/admin.py

from django.contrib import admin

from inventory.models import Godown, GodownAllocation, StockGroup, StockItem, ValuationSettings


@admin.register(StockGroup)
class StockGroupAdmin(admin.ModelAdmin):
    list_display = ("name", "parent")
    search_fields = ("name",)
    ordering = ("name",)


@admin.register(StockItem)
class StockItemAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "stock_group",
        "unit",
        "opening_balance",
        "standard_purchase_rate",
        "standard_sale_rate",
    )
    list_filter = ("stock_group", "enable_batch_tracking")
    search_fields = ("name", "hsn_code", "batch_number")
    ordering = ("name",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(Godown)
class GodownAdmin(admin.ModelAdmin):
    list_display = ("name", "address")
    search_fields = ("name",)
    ordering = ("name",)


@admin.register(GodownAllocation)
class GodownAllocationAdmin(admin.ModelAdmin):
    list_display = ("godown", "stock_item", "quantity")
    list_filter = ("godown",)
    search_fields = ("stock_item__name", "godown__name")


@admin.register(ValuationSettings)
class ValuationSettingsAdmin(admin.ModelAdmin):
    list_display = ("calculation_method", "rounding_precision", "treat_zero_stock_as", "updated_at")
    readonly_fields = ("updated_at",)

    def has_add_permission(self, request):
        return not ValuationSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
