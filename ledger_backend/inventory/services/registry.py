# inventory/services/registry.py

"""
Stock-side registry lookups (batch, one query each).
"""

from __future__ import annotations

from typing import Iterable

from inventory.models import Godown, StockItem


def _clean_ids(ids: Iterable) -> set[int]:
    return {int(raw) for raw in ids if raw not in (None, "")}


def fetch_stock_items(ids: Iterable) -> dict[int, StockItem]:
    wanted = _clean_ids(ids)
    if not wanted:
        return {}
    return {item.id: item for item in StockItem.objects.filter(id__in=wanted)}


def fetch_godowns(ids: Iterable) -> dict[int, Godown]:
    wanted = _clean_ids(ids)
    if not wanted:
        return {}
    return {godown.id: godown for godown in Godown.objects.filter(id__in=wanted)}
