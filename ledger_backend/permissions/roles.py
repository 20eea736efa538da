# permissions/roles.py

from __future__ import annotations

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
# Roles are stored as Django auth groups with these names.
ROLE_ADMIN = "admin"
ROLE_ACCOUNTANT = "accountant"
ROLE_STOREKEEPER = "storekeeper"
ROLE_AUDITOR = "auditor"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_ACCOUNTANT,
    ROLE_STOREKEEPER,
    ROLE_AUDITOR,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_VOUCHERS_POST = "vouchers.post"
CAP_REPORTS_VIEW = "reports.view"
CAP_INVENTORY_VIEW = "inventory.view"
CAP_INVENTORY_SETTINGS = "inventory.settings"

ALL_CAPABILITIES = {
    CAP_VOUCHERS_POST,
    CAP_REPORTS_VIEW,
    CAP_INVENTORY_VIEW,
    CAP_INVENTORY_SETTINGS,
}


# =========================================================
# ROLE → CAPABILITY MAP (DEFAULT)
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_ACCOUNTANT: {
        CAP_VOUCHERS_POST,
        CAP_REPORTS_VIEW,
        CAP_INVENTORY_VIEW,
    },
    ROLE_STOREKEEPER: {
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_SETTINGS,
    },
    ROLE_AUDITOR: {
        CAP_REPORTS_VIEW,
        CAP_INVENTORY_VIEW,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_roles(user) -> set[str]:
    if not user or not getattr(user, "is_authenticated", False):
        return set()
    names = user.groups.values_list("name", flat=True)
    return {name for name in names if name in STAFF_ROLES}


def effective_capabilities_for(user) -> set[str]:
    """
    Union of the capabilities granted by every role the user holds.
    Superusers hold every capability.
    """
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)

    caps: set[str] = set()
    for role in get_user_roles(user):
        caps |= ROLE_CAPABILITIES.get(role, set())
    return caps


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_REPORTS_VIEW
    """

    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default to avoid accidental open endpoints
            return False

        return required in effective_capabilities_for(user)
