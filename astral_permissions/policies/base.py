"""
Policy handles.

A policy binds permission strategies to one named data-preparation step.
Policies are created by a PolicyManagerStore and hold no state of their
own: whether a permission can be computed is decided by the manager's
current preparation status at the moment ``create_permission`` is called.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from astral_permissions.types import PermissionStrategy, Preparer

if TYPE_CHECKING:
    from astral_permissions.logger import PermissionsLogger
    from astral_permissions.permission import Permission
    from astral_permissions.policies.manager import PolicyManagerStore


def _prepare_nothing() -> None:
    return None


@dataclass(frozen=True)
class PolicyRecord:
    """
    Registration of a policy inside a manager.

    Attributes:
        name: Name used to identify the policy in diagnostics. Not required
            to be unique.
        prepare_data: Function preparing the data the policy's permissions
            depend on. May return an awaitable.
    """

    name: str
    prepare_data: Preparer = _prepare_nothing


class Policy:
    """
    Named handle for computing permissions once policy data is ready.

    Example:
        >>> documents = manager.create_policy("documents", prepare_data=load_roles)
        >>> await manager.prepare_data_async()
        >>>
        >>> def can_edit(allow, deny):
        ...     if roles.is_admin:
        ...         return allow()
        ...     deny("no-admin")
        >>>
        >>> documents.create_permission(can_edit).is_allowed
        True
    """

    def __init__(
        self,
        record: PolicyRecord,
        manager: PolicyManagerStore,
        diagnostics: PermissionsLogger,
    ) -> None:
        self._record = record
        self._manager = manager
        self._diagnostics = diagnostics

    @property
    def name(self) -> str:
        return self._record.name

    def create_permission(self, strategy: PermissionStrategy) -> Permission:
        """
        Compute a permission, taking the data preparation status into account.

        If the manager's data is not ready the strategy is not called and
        the permission is denied with ``SystemDenialReason.MISSING_DATA``.
        """
        return self._manager._calc_permission(self._record.name, strategy, self._diagnostics)

    def __repr__(self) -> str:
        return f"Policy(name={self.name!r})"
