# accounting/models/ledger_group.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class LedgerGroup(models.Model):
    """
    Hierarchical grouping of ledgers.

    The group type routes attached ledgers into financial-statement sections.
    A blank type is inherited from the nearest typed ancestor.
    """

    ASSET = "Asset"
    LIABILITY = "Liability"
    INCOME = "Income"
    EXPENSE = "Expense"
    CAPITAL = "Capital"
    CASH = "Cash"
    BANK = "Bank"

    GROUP_TYPES = [
        (ASSET, "Asset"),
        (LIABILITY, "Liability"),
        (INCOME, "Income"),
        (EXPENSE, "Expense"),
        (CAPITAL, "Capital"),
        (CASH, "Cash"),
        (BANK, "Bank"),
    ]

    name = models.CharField(max_length=150, unique=True)

    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
    )

    group_type = models.CharField(
        max_length=20,
        choices=GROUP_TYPES,
        blank=True,
        default="",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Ledger Group"
        verbose_name_plural = "Ledger Groups"
        indexes = [
            models.Index(fields=["group_type"]),
            models.Index(fields=["parent"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_ledger_group_name_not_blank",
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def effective_type(self) -> str:
        seen = set()
        node = self
        while node is not None and node.pk not in seen:
            if node.group_type:
                return node.group_type
            seen.add(node.pk)
            node = node.parent
        return ""

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Group name is required")

        node = self.parent
        while node is not None:
            if self.pk and node.pk == self.pk:
                raise ValidationError("A ledger group cannot be its own ancestor")
            node = node.parent

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


def group_type_map() -> dict[int, str]:
    """
    {group_id: effective group type} for every group, resolved in one query.
    """
    rows = {
        row["id"]: (row["parent_id"], row["group_type"])
        for row in LedgerGroup.objects.values("id", "parent_id", "group_type")
    }

    resolved: dict[int, str] = {}
    for group_id in rows:
        seen = set()
        node = group_id
        found = ""
        while node is not None and node not in seen:
            seen.add(node)
            parent_id, group_type = rows.get(node, (None, ""))
            if group_type:
                found = group_type
                break
            node = parent_id
        resolved[group_id] = found
    return resolved
