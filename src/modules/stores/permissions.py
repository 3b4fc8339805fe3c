"""Store-scoped role permission for DRF views.

The store is read from the URL (``view.kwargs["store_id"]``).  A view
narrows the roles allowed per action with ``store_roles``::

    store_roles = {"default": ALL_ROLES, "destroy": MANAGER_ROLES}

The resolved membership is attached to ``request.store_member``.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.permissions import BasePermission

from modules.stores.constants import ALL_ROLES
from modules.stores.exceptions import RoleNotAllowed, StoreAccessDenied
from modules.stores.models import StoreMember

STORE_LOOKUP_KWARG = "store_id"


def allowed_roles_for(view) -> frozenset[str]:
    store_roles = getattr(view, "store_roles", None) or {}
    return store_roles.get(getattr(view, "action", None), store_roles.get("default", ALL_ROLES))


class IsStoreMember(BasePermission):
    def has_permission(self, request, view) -> bool:
        if not request.user or not request.user.is_authenticated:
            return False

        store_id = view.kwargs.get(STORE_LOOKUP_KWARG)
        try:
            membership = (
                StoreMember.objects.select_related("store")
                .filter(store_id=store_id, user=request.user, is_active=True)
                .first()
            )
        except (ValueError, DjangoValidationError):
            membership = None

        if membership is None:
            raise StoreAccessDenied()
        if membership.role not in allowed_roles_for(view):
            raise RoleNotAllowed()

        request.store_member = membership
        return True
