# accounting/services/registry.py

"""
LEDGER & GROUP REGISTRY (READ CONTRACT)

The posting engine and every report reach ledger master data through
these lookups only. Each lookup is a single batch query.
"""

from __future__ import annotations

from typing import Iterable

from django.db.models import Q

from accounting.models.ledger import Ledger
from accounting.models.ledger_group import LedgerGroup, group_type_map
from accounting.services.exceptions import LedgerNotFoundError


def _clean_ids(ids: Iterable) -> set[int]:
    cleaned = set()
    for raw in ids:
        if raw is None or raw == "":
            continue
        cleaned.add(int(raw))
    return cleaned


def fetch_ledgers(ids: Iterable) -> dict[int, Ledger]:
    """
    {id: Ledger} for the ids that exist. Callers diff against the request
    to find unknown references.
    """
    wanted = _clean_ids(ids)
    if not wanted:
        return {}
    return {
        ledger.id: ledger
        for ledger in Ledger.objects.select_related("group").filter(id__in=wanted)
    }


def get_ledger(ledger_id) -> Ledger:
    try:
        return Ledger.objects.select_related("group").get(pk=int(ledger_id))
    except (Ledger.DoesNotExist, TypeError, ValueError) as exc:
        raise LedgerNotFoundError("Ledger not found") from exc


def ledger_type_of(ledger: Ledger, types: dict[int, str] | None = None) -> str:
    if ledger.group_id is None:
        return ""
    if types is not None:
        return types.get(ledger.group_id, "")
    return ledger.group.effective_type


def cash_bank_ledgers():
    """
    Ledgers whose group (or an ancestor) is typed Cash or Bank.
    """
    types = group_type_map()
    group_ids = [
        gid
        for gid, gtype in types.items()
        if gtype in (LedgerGroup.CASH, LedgerGroup.BANK)
    ]
    return (
        Ledger.objects.select_related("group")
        .filter(group_id__in=group_ids, is_active=True)
        .order_by("name", "id")
    )


def search_ledgers(*, search: str = "", group_id=None, group_name: str = ""):
    qs = Ledger.objects.select_related("group").order_by("name", "id")

    search = (search or "").strip()
    if search:
        qs = qs.filter(name__icontains=search)

    if group_id not in (None, ""):
        qs = qs.filter(group_id=int(group_id))

    group_name = (group_name or "").strip()
    if group_name:
        qs = qs.filter(Q(group__name__iexact=group_name))

    return qs
