# accounting/tests/factories.py

"""
Seeding helpers shared by the ledger, voucher and stock test suites.

Vouchers are always created through the posting engine so tests see
exactly what the API would have written.
"""

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from accounting.models import Ledger, LedgerGroup
from inventory.models import Godown, StockGroup, StockItem
from vouchers.services.kinds import resolve_kind
from vouchers.services.posting_engine import post_voucher

User = get_user_model()


def make_user(username="staff", *, roles=(), superuser=False):
    if superuser:
        return User.objects.create_superuser(
            username=username, email=f"{username}@example.com", password="pass1234"
        )
    user = User.objects.create_user(username=username, password="pass1234")
    for role in roles:
        group, _ = Group.objects.get_or_create(name=role)
        user.groups.add(group)
    return user


def make_group(name, group_type="", parent=None) -> LedgerGroup:
    return LedgerGroup.objects.create(name=name, group_type=group_type, parent=parent)


def make_ledger(name, *, group=None, opening="0", balance_type=Ledger.DEBIT, **extra) -> Ledger:
    return Ledger.objects.create(
        name=name,
        group=group,
        opening_balance=Decimal(opening),
        balance_type=balance_type,
        **extra,
    )


def make_item(name, *, opening="0", purchase_rate="0", sale_rate="0", group=None, **extra) -> StockItem:
    return StockItem.objects.create(
        name=name,
        stock_group=group,
        opening_balance=Decimal(opening),
        standard_purchase_rate=Decimal(purchase_rate),
        standard_sale_rate=Decimal(sale_rate),
        **extra,
    )


def make_stock_group(name) -> StockGroup:
    return StockGroup.objects.create(name=name)


def make_godown(name) -> Godown:
    return Godown.objects.create(name=name)


def line(ledger, entry_type, amount) -> dict:
    return {"ledger_id": ledger.id, "entry_type": entry_type, "amount": str(amount)}


def item_line(item, quantity, rate, **extra) -> dict:
    return {"item_id": item.id, "quantity": str(quantity), "rate": str(rate), **extra}


def post(voucher_type, on, entries, *, mode=None, allocations=None, **header):
    kind = resolve_kind(voucher_type, mode, entries=entries)
    return post_voucher(
        kind=kind,
        header={"date": on, **header},
        entries=entries,
        allocations=allocations,
    )


def api_client_for(user):
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=user)
    return client
