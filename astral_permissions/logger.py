"""
Diagnostics for the permission decision path.

Policy managers report why a permission was denied through a
PermissionsLogger. It wraps a standard library logger, prefixes every
message with the scope it was created for, and does nothing at all when
disabled, so production builds pay no cost for diagnostics.
"""

from __future__ import annotations

import logging

MESSAGE_TAG = "astral_permissions"

# Module loggers of the package (astral_permissions.policies.*, ...) are not
# children of this one, so nothing reaches its handlers while disabled.
DEFAULT_LOGGER_NAME = "astral_permissions_diagnostics"


class PermissionsLogger:
    """
    Scoped, switchable diagnostics sink.

    Messages are formatted as ``[astral_permissions]/<prefix>: <message>`` and
    emitted through ``logging.getLogger(<logger name>)``. When the logger is
    disabled every call is a no-op.

    Example:
        >>> diagnostics = PermissionsLogger(is_enabled=True)
        >>> policy_diagnostics = diagnostics.for_policy("documents")
        >>> policy_diagnostics.warn("Data has not been prepared")
        WARNING:astral_permissions_diagnostics:[astral_permissions]/Policy:documents: Data has not been prepared
    """

    def __init__(
        self,
        is_enabled: bool = False,
        prefix: str = "",
        logger_name: str = DEFAULT_LOGGER_NAME,
    ) -> None:
        self.is_enabled = is_enabled
        self.prefix = prefix
        self.logger_name = logger_name
        self._logger = logging.getLogger(logger_name)

    def _format_message(self, message: str) -> str:
        return f"[{MESSAGE_TAG}]/{self.prefix}: {message}"

    def error(self, message: str, error: BaseException | None = None) -> None:
        """Log an error-level diagnostic, attaching ``error`` if given."""
        if self.is_enabled:
            self._logger.error(self._format_message(message), exc_info=error)

    def warn(self, message: str) -> None:
        if self.is_enabled:
            self._logger.warning(self._format_message(message))

    def info(self, message: str) -> None:
        if self.is_enabled:
            self._logger.info(self._format_message(message))

    def with_prefix(self, prefix: str) -> PermissionsLogger:
        """Create a logger sharing this one's switch and sink under another prefix."""
        return PermissionsLogger(
            is_enabled=self.is_enabled,
            prefix=prefix,
            logger_name=self.logger_name,
        )

    def for_policy(self, policy_name: str) -> PermissionsLogger:
        return self.with_prefix(f"Policy:{policy_name}")
