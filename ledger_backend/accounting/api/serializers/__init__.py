# accounting/api/serializers/__init__.py

from accounting.api.serializers.registry import LedgerGroupSerializer, LedgerSerializer
from accounting.api.serializers.reports import (
    BillwiseQuerySerializer,
    CashFlowQuerySerializer,
    LedgerReportQuerySerializer,
    OutstandingLedgerQuerySerializer,
    PayablesQuerySerializer,
    ReceivablesQuerySerializer,
    StatementQuerySerializer,
)

__all__ = [
    "LedgerSerializer",
    "LedgerGroupSerializer",
    "LedgerReportQuerySerializer",
    "StatementQuerySerializer",
    "ReceivablesQuerySerializer",
    "PayablesQuerySerializer",
    "BillwiseQuerySerializer",
    "OutstandingLedgerQuerySerializer",
    "CashFlowQuerySerializer",
]
