"""
Custom exceptions for astral_permissions.

Permission computation never raises on its own: every failure of the
decision path degrades to a denial. The exceptions below cover the few
places where an error is reported to the caller (misconfiguration) or
attached to a diagnostic (a strategy that produced no decision).
"""

from __future__ import annotations

from typing import Any


class PermissionsError(Exception):
    """
    Base exception for all astral_permissions errors.

    ``details`` carries structured context for diagnostics and is kept out
    of ``str(error)``.
    """

    def __init__(self, message: str, **details: Any) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(PermissionsError):
    """
    Raised when a policy manager or policy is given an invalid setting.

    Example:
        >>> PolicyManagerConfig.from_dict({"is_debug": "false"})
        Traceback (most recent call last):
        ...
        ConfigurationError: Invalid is_debug: expected a bool, got 'false'
    """

    def __init__(self, config_key: str, expected: str, received: Any) -> None:
        self.config_key = config_key
        self.received = received
        super().__init__(
            f"Invalid {config_key}: expected {expected}, got {received!r}",
            config_key=config_key,
            expected=expected,
            received=str(received),
        )


class MissingRuleOutcomeError(PermissionsError):
    """
    A permission strategy returned without calling ``allow`` or ``deny``.

    This is a defect in the caller's strategy, not a data problem. It is
    never raised by the decision path: the permission degrades to
    ``SystemDenialReason.INTERNAL_ERROR`` and this error is attached to the
    error-level diagnostic instead.
    """

    def __init__(self, policy_name: str) -> None:
        self.policy_name = policy_name
        super().__init__(
            f"Permission strategy of policy '{policy_name}' called neither allow nor deny",
            policy_name=policy_name,
        )
