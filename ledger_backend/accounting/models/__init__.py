# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.ledger import Ledger
from accounting.models.ledger_group import LedgerGroup, group_type_map

__all__ = [
    "LedgerGroup",
    "Ledger",
    "group_type_map",
]
