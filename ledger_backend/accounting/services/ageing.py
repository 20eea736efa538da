# accounting/services/ageing.py

"""
AGEING & RISK HELPERS (PURE)

No database access here. Outstanding reports and stock ageing both
bucket a non-negative day count into one of a fixed set of ranges.

Bucket tables partition [0, inf): contiguous, non-overlapping, the last
bucket open-ended. Negative day counts are treated as 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from django.conf import settings

from accounting.services.money import to_decimal


@dataclass(frozen=True)
class AgeingBucket:
    label: str
    min_days: int
    max_days: int | None = None  # inclusive; None = open-ended

    def contains(self, days: int) -> bool:
        if days < self.min_days:
            return False
        return self.max_days is None or days <= self.max_days


STANDARD_BUCKETS = (
    AgeingBucket("0-30", 0, 30),
    AgeingBucket("31-60", 31, 60),
    AgeingBucket("61-90", 61, 90),
    AgeingBucket("90+", 91),
)

EXTENDED_BUCKETS = (
    AgeingBucket("0-30", 0, 30),
    AgeingBucket("31-60", 31, 60),
    AgeingBucket("61-90", 61, 90),
    AgeingBucket("91-180", 91, 180),
    AgeingBucket(">180", 181),
)


def bucket_labels(buckets=STANDARD_BUCKETS) -> list[str]:
    return [b.label for b in buckets]


def bucket_for(days, buckets=STANDARD_BUCKETS) -> AgeingBucket:
    days = max(0, int(days or 0))
    for bucket in buckets:
        if bucket.contains(days):
            return bucket
    # unreachable for a well-formed table
    raise ValueError(f"No ageing bucket covers {days} days")


def default_credit_days() -> int:
    return int(getattr(settings, "LEDGER_DEFAULT_CREDIT_DAYS", 30))


def resolve_due_date(bill_date: date, due_date: date | None = None, credit_days: int | None = None) -> date:
    """
    Explicit due date wins; otherwise bill date + credit period.
    """
    if due_date is not None:
        return due_date
    days = credit_days if credit_days is not None else default_credit_days()
    return bill_date + timedelta(days=int(days))


def overdue_days(due_date: date | None, today: date) -> int:
    if due_date is None:
        return 0
    return max(0, (today - due_date).days)


# =====================================================
# RISK TIERS
# =====================================================

CRITICAL = "Critical"
HIGH = "High"
MEDIUM = "Medium"
LOW = "Low"

# most severe first
RISK_TIERS = (CRITICAL, HIGH, MEDIUM, LOW)


@dataclass(frozen=True)
class RiskThreshold:
    tier: str
    min_overdue_days: int
    min_amount: Decimal

    def matches(self, amount: Decimal, days: int) -> bool:
        return days > self.min_overdue_days and amount > self.min_amount


class RiskTable:
    """
    Tiered thresholds on (outstanding amount, overdue days).

    A tier applies when BOTH values exceed its minimums; the most severe
    matching tier wins and Low is the fallback. Each tier condition is
    upward-closed, so raising either input never lowers the tier.
    """

    def __init__(self, thresholds):
        by_tier = {t.tier: t for t in thresholds}
        unknown = set(by_tier) - set(RISK_TIERS)
        if unknown:
            raise ValueError(f"Unknown risk tiers: {', '.join(sorted(unknown))}")
        self.thresholds = [by_tier[tier] for tier in RISK_TIERS if tier in by_tier]

    @classmethod
    def from_config(cls, config: dict) -> "RiskTable":
        thresholds = []
        for tier, limits in (config or {}).items():
            if tier == LOW:
                continue
            thresholds.append(
                RiskThreshold(
                    tier=tier,
                    min_overdue_days=int(limits.get("min_overdue_days", 0)),
                    min_amount=to_decimal(limits.get("min_amount", 0)),
                )
            )
        return cls(thresholds)

    def classify(self, amount, days) -> str:
        amount = to_decimal(amount)
        days = max(0, int(days or 0))
        for threshold in self.thresholds:
            if threshold.matches(amount, days):
                return threshold.tier
        return LOW


def risk_rank(tier: str) -> int:
    """Higher is more severe."""
    try:
        return len(RISK_TIERS) - RISK_TIERS.index(tier)
    except ValueError:
        return 0


DEFAULT_RISK_THRESHOLDS = {
    "receivable": {
        CRITICAL: {"min_overdue_days": 90, "min_amount": 50000},
        HIGH: {"min_overdue_days": 60, "min_amount": 30000},
        MEDIUM: {"min_overdue_days": 30, "min_amount": 10000},
    },
    "payable": {
        CRITICAL: {"min_overdue_days": 90, "min_amount": 200000},
        HIGH: {"min_overdue_days": 60, "min_amount": 100000},
        MEDIUM: {"min_overdue_days": 30, "min_amount": 50000},
    },
}


def risk_table_for(role: str) -> RiskTable:
    configured = getattr(settings, "OUTSTANDING_RISK_THRESHOLDS", None) or DEFAULT_RISK_THRESHOLDS
    config = configured.get(role) or DEFAULT_RISK_THRESHOLDS.get(role, {})
    return RiskTable.from_config(config)
