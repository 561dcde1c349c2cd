"""
Permission values.

A permission is the immutable result of a decision: either allowed, or
denied with a reason. Both variants expose the same surface so callers can
inspect ``is_allowed`` and ``reason`` without checking the type first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from astral_permissions.types import DenialReason


@dataclass(frozen=True)
class AllowedPermission:
    """
    An allowed permission.

    ``reason`` is always None; the attribute exists so that allowed and
    denied permissions can be read the same way.
    """

    @property
    def is_allowed(self) -> bool:
        return True

    @property
    def reason(self) -> DenialReason | None:
        return None

    def has_reason(self, reason: DenialReason) -> bool:
        """An allowed permission carries no reason."""
        return False

    def __bool__(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"is_allowed": True, "reason": None}


@dataclass(frozen=True)
class DenialPermission:
    """
    A denied permission together with the reason for the denial.

    Attributes:
        reason: Why access was denied. Either a ``SystemDenialReason``
            value or a reason defined by the application.

    Example:
        >>> permission = create_denial_permission("no-admin")
        >>> permission.has_reason("no-admin")
        True
        >>> bool(permission)
        False
    """

    reason: DenialReason

    @property
    def is_allowed(self) -> bool:
        return False

    def has_reason(self, reason: DenialReason) -> bool:
        """Check whether access was denied for the given reason."""
        return reason == self.reason

    def __bool__(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"is_allowed": False, "reason": str(self.reason)}


Permission = Union[AllowedPermission, DenialPermission]


def create_allowed_permission() -> AllowedPermission:
    return AllowedPermission()


def create_denial_permission(reason: DenialReason) -> DenialPermission:
    return DenialPermission(reason)
