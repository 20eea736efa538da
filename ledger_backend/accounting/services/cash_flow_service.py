# accounting/services/cash_flow_service.py

"""
CASH FLOW (FINANCIAL YEAR, APRIL-MARCH)

- inflow  = debit lines on vouchers of an inflow type
- outflow = credit lines on vouchers of an outflow type
- the month axis is always 12 entries; idle months are zero

Type sets come from settings (CASH_FLOW_INFLOW_TYPES /
CASH_FLOW_OUTFLOW_TYPES).
"""

from __future__ import annotations

import calendar
import re
from datetime import date
from decimal import Decimal

from django.conf import settings
from django.db.models import Q
from django.db.models.functions import TruncMonth

from accounting.services.aggregates import credit_sum, debit_sum, money_sum
from accounting.services.exceptions import ReportParameterError
from accounting.services.money import ZERO, to_major_number, to_minor_int
from vouchers.models import CREDIT, DEBIT, VoucherEntry

FINANCIAL_YEAR_RE = re.compile(r"^(\d{4})-(\d{2}|\d{4})$")
MONTH_CODE_RE = re.compile(r"^([A-Za-z]{3})-(\d{2})$")

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def inflow_types() -> list[str]:
    return [t.lower() for t in getattr(settings, "CASH_FLOW_INFLOW_TYPES", ("receipt", "sales"))]


def outflow_types() -> list[str]:
    return [t.lower() for t in getattr(settings, "CASH_FLOW_OUTFLOW_TYPES", ("payment", "purchase"))]


def parse_financial_year(value) -> tuple[date, date]:
    """
    "2024-25" or "2024-2025" -> (2024-04-01, 2025-03-31)
    """
    match = FINANCIAL_YEAR_RE.match(str(value or "").strip())
    if not match:
        raise ReportParameterError(
            f"Invalid financialYear '{value}'. Expected YYYY-YY", field="financialYear"
        )

    start_year = int(match.group(1))
    end_raw = match.group(2)
    if len(end_raw) == 4:
        end_year = int(end_raw)
    else:
        # two-digit suffix: "1999-00" ends in 2000
        end_year = start_year + 1 if int(end_raw) == (start_year + 1) % 100 else -1

    if end_year != start_year + 1:
        raise ReportParameterError(
            f"Invalid financialYear '{value}'. Years must be consecutive", field="financialYear"
        )
    return date(start_year, 4, 1), date(end_year, 3, 31)


def current_financial_year(today: date) -> str:
    start = today.year if today.month >= 4 else today.year - 1
    return f"{start}-{(start + 1) % 100:02d}"


def month_code(month_start: date) -> str:
    return f"{MONTHS[month_start.month - 1]}-{month_start.year % 100:02d}"


def parse_month_code(value) -> tuple[date, date]:
    """
    "Apr-24" -> (2024-04-01, 2024-04-30)
    """
    match = MONTH_CODE_RE.match(str(value or "").strip())
    month_name = match.group(1).title() if match else ""
    if month_name not in MONTHS:
        raise ReportParameterError(
            f"Invalid month code '{value}'. Expected e.g. Apr-24", field="monthCode"
        )

    year = 2000 + int(match.group(2))
    month = MONTHS.index(month_name) + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _flow_filters():
    inflow = Q(voucher__voucher_type__in=inflow_types())
    outflow = Q(voucher__voucher_type__in=outflow_types())
    return inflow, outflow


def build_cash_flow(*, financial_year: str) -> dict:
    start, end = parse_financial_year(financial_year)
    inflow_q, outflow_q = _flow_filters()

    rows = (
        VoucherEntry.objects.filter(voucher__date__gte=start, voucher__date__lte=end)
        .filter(inflow_q | outflow_q)
        .annotate(month=TruncMonth("voucher__date"))
        .values("month")
        .annotate(inflow=debit_sum(extra=inflow_q), outflow=credit_sum(extra=outflow_q))
        .order_by("month")
    )
    by_month = {(r["month"].year, r["month"].month): r for r in rows}

    months = []
    total_in = ZERO
    total_out = ZERO
    for offset in range(12):
        month_index = (3 + offset) % 12 + 1
        year = start.year if month_index >= 4 else end.year
        row = by_month.get((year, month_index), {})

        inflow = row.get("inflow", ZERO)
        outflow = row.get("outflow", ZERO)
        total_in += inflow
        total_out += outflow

        months.append(
            {
                "month": MONTHS[month_index - 1],
                "monthCode": month_code(date(year, month_index, 1)),
                "inflow": to_major_number(inflow),
                "outflow": to_major_number(outflow),
                "netFlow": to_major_number(inflow - outflow),
            }
        )

    return {
        "financialYear": f"{start.year}-{end.year % 100:02d}",
        "fromDate": start.isoformat(),
        "toDate": end.isoformat(),
        "cashFlowData": months,
        "totalInflow": to_major_number(total_in),
        "totalOutflow": to_major_number(total_out),
        "totalNetFlow": to_major_number(total_in - total_out),
        "totalNetFlowMinor": to_minor_int(total_in - total_out),
    }


def _ledger_totals(condition: Q, start: date, end: date) -> tuple[list[dict], Decimal]:
    rows = list(
        VoucherEntry.objects.filter(condition, voucher__date__gte=start, voucher__date__lte=end)
        .values("ledger_id", "ledger__name")
        .annotate(total=money_sum())
        .order_by("-total", "ledger__name", "ledger_id")
    )
    total = sum((r["total"] for r in rows), ZERO)
    return [
        {"ledgerId": r["ledger_id"], "name": r["ledger__name"], "amount": to_major_number(r["total"])}
        for r in rows
    ], total


def build_month_summary(*, month_code_value: str) -> dict:
    start, end = parse_month_code(month_code_value)
    inflow_q, outflow_q = _flow_filters()

    inflow, total_in = _ledger_totals(inflow_q & Q(entry_type=DEBIT), start, end)
    outflow, total_out = _ledger_totals(outflow_q & Q(entry_type=CREDIT), start, end)

    return {
        "monthCode": month_code(start),
        "fromDate": start.isoformat(),
        "toDate": end.isoformat(),
        "inflow": inflow,
        "outflow": outflow,
        "totalInflow": to_major_number(total_in),
        "totalOutflow": to_major_number(total_out),
    }
