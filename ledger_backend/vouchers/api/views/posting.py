# PATH: vouchers/api/views/posting.py

"""
VOUCHER POSTING API

One view class, one posting contract. Each endpoint only fixes the
voucher type; the kind descriptor decides header table, line tables,
required fields and the balance rule.

POST /api/vouchers                     payment | receipt | contra | journal
                                       (+ sales/purchase in accounting mode)
POST /api/sale-vouchers/vouchers       sales
POST /api/purchase-vouchers            purchase
POST /api/CreditNotevoucher            credit-note
POST /api/DebitNoteVoucher             debit-note
POST /api/StockJournal                 stock-journal
POST /api/DeliveryItem                 delivery
POST /api/sales-orders                 sales-order
POST /api/purchase-orders              purchase-order

Error mapping (this view is the only boundary):
- VoucherValidationError -> 400 {detail, fields}
- UnknownReferenceError  -> 400 {detail, missing}
- VoucherPostingError    -> 500 {detail} (cause is logged, not returned)
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import CAP_VOUCHERS_POST, HasCapability
from vouchers.api.serializers.payload import parse_voucher_payload
from vouchers.models import Voucher
from vouchers.services.exceptions import (
    UnknownReferenceError,
    VoucherPostingError,
    VoucherValidationError,
)
from vouchers.services.kinds import resolve_kind
from vouchers.services.posting_engine import post_voucher


class VoucherPostingView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_VOUCHERS_POST

    # None: the request body names the type
    voucher_type: str | None = None

    def resolve(self, payload):
        return resolve_kind(
            self.voucher_type or payload.voucher_type,
            payload.mode or None,
            entries=payload.entries,
        )

    @extend_schema(tags=["vouchers"], request=dict, responses={201: dict, 400: dict, 500: dict})
    def post(self, request):
        try:
            payload = parse_voucher_payload(request.data)
            kind = self.resolve(payload)
            posted = post_voucher(
                kind=kind,
                header=payload.header,
                entries=payload.entries,
                allocations=payload.allocations,
            )
        except UnknownReferenceError as exc:
            return Response(
                {"detail": str(exc), "missing": exc.missing},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except VoucherValidationError as exc:
            return Response(
                {"detail": str(exc), "fields": exc.fields},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except VoucherPostingError:
            return Response(
                {"detail": "Failed to save voucher"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {
                "message": f"{kind.label} voucher saved successfully",
                "id": posted.id,
                "ledgerVoucherId": posted.ledger_voucher_id,
                "voucherType": kind.voucher_type,
                "mode": kind.mode,
                "itemLines": len(posted.item_lines),
                "ledgerLines": len(posted.ledger_lines),
                "billAllocations": len(posted.allocations),
            },
            status=status.HTTP_201_CREATED,
        )


class GenericVoucherView(VoucherPostingView):
    """
    Vouchers stored in the generic header table only; item invoices,
    notes, stock journals and orders have their own endpoints.
    """

    def resolve(self, payload):
        kind = super().resolve(payload)
        if kind.header_model is not Voucher:
            raise VoucherValidationError(
                f"{kind.label} vouchers cannot be posted here",
                fields={"type": f"Post {kind.label.lower()} vouchers to their dedicated endpoint."},
            )
        return kind


class SalesVoucherView(VoucherPostingView):
    voucher_type = "sales"


class PurchaseVoucherView(VoucherPostingView):
    voucher_type = "purchase"


class CreditNoteVoucherView(VoucherPostingView):
    voucher_type = "credit-note"


class DebitNoteVoucherView(VoucherPostingView):
    voucher_type = "debit-note"


class StockJournalView(VoucherPostingView):
    voucher_type = "stock-journal"


class DeliveryItemView(VoucherPostingView):
    voucher_type = "delivery"


class SalesOrderView(VoucherPostingView):
    voucher_type = "sales-order"


class PurchaseOrderView(VoucherPostingView):
    voucher_type = "purchase-order"
