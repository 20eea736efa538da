# vouchers/admin.py

"""
Posted vouchers are browse-only. Vouchers are created through the
posting API and never edited or deleted.
"""

from django.contrib import admin

from vouchers.models import (
    BillAllocation,
    DeliveryNote,
    NoteVoucher,
    StockJournal,
    TradeInvoice,
    TradeOrder,
    Voucher,
    VoucherEntry,
)


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class VoucherEntryInline(admin.TabularInline):
    model = VoucherEntry
    extra = 0
    can_delete = False
    readonly_fields = ("ledger", "entry_type", "amount", "narration", "bank_name", "cheque_number")

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


HEADER_LIST_DISPLAY = ("id", "voucher_type", "mode", "number", "date", "created_at")


@admin.register(Voucher)
class VoucherAdmin(ReadOnlyAdmin):
    list_display = (*HEADER_LIST_DISPLAY, "party")
    list_filter = ("voucher_type", "date")
    search_fields = ("number", "reference_no", "narration")
    ordering = ("-date", "-id")
    inlines = [VoucherEntryInline]


@admin.register(TradeInvoice)
class TradeInvoiceAdmin(ReadOnlyAdmin):
    list_display = (*HEADER_LIST_DISPLAY, "party", "total", "ledger_voucher")
    list_filter = ("voucher_type", "date")
    search_fields = ("number", "reference_no")
    ordering = ("-date", "-id")


@admin.register(NoteVoucher)
class NoteVoucherAdmin(ReadOnlyAdmin):
    list_display = (*HEADER_LIST_DISPLAY, "party")
    list_filter = ("voucher_type", "mode")
    ordering = ("-date", "-id")


@admin.register(StockJournal)
class StockJournalAdmin(ReadOnlyAdmin):
    list_display = HEADER_LIST_DISPLAY
    ordering = ("-date", "-id")


@admin.register(DeliveryNote)
class DeliveryNoteAdmin(ReadOnlyAdmin):
    list_display = (*HEADER_LIST_DISPLAY, "party")
    ordering = ("-date", "-id")


@admin.register(TradeOrder)
class TradeOrderAdmin(ReadOnlyAdmin):
    list_display = (*HEADER_LIST_DISPLAY, "party", "status")
    list_filter = ("voucher_type", "status")
    ordering = ("-date", "-id")


@admin.register(BillAllocation)
class BillAllocationAdmin(ReadOnlyAdmin):
    list_display = ("id", "settlement", "bill", "amount", "created_at")
    ordering = ("-created_at",)
