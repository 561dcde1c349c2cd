"""
Core type definitions for astral_permissions.

This module defines the system denial reasons, the callable contracts
used by rules and policies, and the preparation status snapshot exposed
by the policy manager.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

DenialReason = str
"""A denial reason: a ``SystemDenialReason`` value or any caller-defined string."""

AllowCallback = Callable[[], None]
DenyCallback = Callable[[DenialReason], None]

Rule = Callable[[AllowCallback, DenyCallback], Any]
"""
A decision function invoked with ``allow`` and ``deny`` callbacks.

It must run synchronously and is expected to call at most one of the
callbacks, at most once. Its return value is ignored.
"""

PermissionStrategy = Rule

Preparer = Callable[[], Union[Awaitable[Any], None]]
"""Zero-argument data-preparation function of a policy."""


class SystemDenialReason(str, Enum):
    """Reserved denial reasons signalling infrastructural problems."""

    INTERNAL_ERROR = "internal-error"
    """The permission could not be computed: the strategy produced no outcome."""

    MISSING_DATA = "missing-data"
    """The data required to compute the permission has not been prepared."""

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PreparationStatus:
    """
    Snapshot of the policy manager's data-preparation state.

    Exactly one of the four flags is true. ``error`` holds the failure of
    the last cycle when ``is_error`` is set, and is None otherwise.

    Example:
        >>> status = manager.preparing_data_status
        >>> if status.is_error:
        ...     logger.warning(f"Policy data unavailable: {status.error}")
    """

    is_idle: bool = True
    is_loading: bool = False
    is_success: bool = False
    is_error: bool = False
    error: BaseException | None = None

    def __post_init__(self) -> None:
        flags = (self.is_idle, self.is_loading, self.is_success, self.is_error)
        if sum(flags) != 1:
            raise ValueError(
                f"Exactly one preparation status flag must be set, got {self._flag_names()}"
            )

    def _flag_names(self) -> list[str]:
        return [
            name for name in ("is_idle", "is_loading", "is_success", "is_error")
            if getattr(self, name)
        ]

    @classmethod
    def idle(cls) -> PreparationStatus:
        return cls()

    @classmethod
    def loading(cls) -> PreparationStatus:
        return cls(is_idle=False, is_loading=True)

    @classmethod
    def success(cls) -> PreparationStatus:
        return cls(is_idle=False, is_success=True)

    @classmethod
    def failed(cls, error: BaseException) -> PreparationStatus:
        return cls(is_idle=False, is_error=True, error=error)

    @property
    def state(self) -> str:
        """Name of the active state: idle, loading, success or error."""
        if self.is_loading:
            return "loading"
        if self.is_success:
            return "success"
        if self.is_error:
            return "error"
        return "idle"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary; ``error`` is present only when recorded."""
        result: dict[str, Any] = {
            "is_idle": self.is_idle,
            "is_loading": self.is_loading,
            "is_success": self.is_success,
            "is_error": self.is_error,
        }
        if self.error is not None:
            result["error"] = self.error
        return result
