"""
Policy manager.

The PolicyManagerStore owns the application's policies. It prepares the
data of all policies together, tracks a single preparation status shared
by all of them, and gates every permission request on that status.

Quick Start:
    >>> manager = create_policy_manager_store(is_debug=True)
    >>> admin = manager.create_policy("admin", prepare_data=user_repo.load_roles)
    >>>
    >>> await manager.prepare_data_async()
    >>>
    >>> permission = admin.create_permission(
    ...     lambda allow, deny: allow() if user_repo.roles.is_admin else deny("no-admin")
    ... )

Overlapping preparation cycles:
    Each call to ``prepare_data_sync``/``prepare_data_async`` starts a new,
    numbered cycle. Only the most recently started cycle may record its
    outcome; a cycle that settles after a newer one began leaves the status
    alone.

Failure tie-break:
    A cycle waits for all preparers to settle. If several fail, the
    recorded error is the one raised by the earliest registered policy.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from astral_permissions.exceptions import ConfigurationError, MissingRuleOutcomeError
from astral_permissions.logger import DEFAULT_LOGGER_NAME, PermissionsLogger
from astral_permissions.permission import Permission, create_denial_permission
from astral_permissions.policies.base import Policy, PolicyRecord
from astral_permissions.policies.status import PreparationStatusMachine, StatusListener
from astral_permissions.rules import create_rule
from astral_permissions.types import (
    PermissionStrategy,
    PreparationStatus,
    Preparer,
    SystemDenialReason,
)

logger = logging.getLogger(__name__)

DEBUG_ENV_VAR = "ASTRAL_PERMISSIONS_DEBUG"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


@dataclass
class PolicyManagerConfig:
    """
    Configuration for a policy manager.

    Attributes:
        is_debug: Emit permission diagnostics. When False every diagnostic
            is suppressed.
        logger_name: Name of the standard library logger diagnostics go to.

    Example:
        >>> config = PolicyManagerConfig(is_debug=True)
        >>> manager = PolicyManagerStore(config)
    """

    is_debug: bool = False
    logger_name: str = DEFAULT_LOGGER_NAME

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "is_debug": self.is_debug,
            "logger_name": self.logger_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PolicyManagerConfig:
        """
        Create config from dictionary.

        Raises:
            ConfigurationError: If ``is_debug`` is present and not a bool.
        """
        is_debug = data.get("is_debug", False)
        if not isinstance(is_debug, bool):
            raise ConfigurationError(
                config_key="is_debug",
                expected="a bool",
                received=is_debug,
            )

        return cls(
            is_debug=is_debug,
            logger_name=data.get("logger_name", DEFAULT_LOGGER_NAME),
        )

    @classmethod
    def from_env(cls) -> PolicyManagerConfig:
        """
        Create config from the ``ASTRAL_PERMISSIONS_DEBUG`` environment variable.

        Raises:
            ConfigurationError: If the variable holds an unrecognised value.
        """
        raw = os.environ.get(DEBUG_ENV_VAR, "")
        value = raw.strip().lower()

        if value in _TRUE_VALUES:
            return cls(is_debug=True)
        if value in _FALSE_VALUES:
            return cls(is_debug=False)

        raise ConfigurationError(
            config_key=DEBUG_ENV_VAR,
            expected="one of: 1, 0, true, false, yes, no, on, off",
            received=raw,
        )


class PolicyManagerStore:
    """
    Registry of policies and owner of the shared preparation status.

    The status starts idle, enters loading whenever a preparation cycle
    starts, and ends the cycle in success or error. Permissions of every
    policy are denied with ``SystemDenialReason.MISSING_DATA`` unless the
    status is success at the moment they are requested.

    The manager is meant to be used from a single event loop.
    """

    def __init__(self, config: PolicyManagerConfig | None = None) -> None:
        self.config = config or PolicyManagerConfig()
        self._diagnostics = PermissionsLogger(
            is_enabled=self.config.is_debug,
            logger_name=self.config.logger_name,
        )
        self._manager_diagnostics = self._diagnostics.with_prefix("PolicyManager")
        self._status = PreparationStatusMachine()
        self._policies: list[PolicyRecord] = []
        self._cycle = 0
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def preparing_data_status(self) -> PreparationStatus:
        """Snapshot of the current preparation status."""
        return self._status.status

    @property
    def policies(self) -> list[PolicyRecord]:
        """Registered policies in registration order."""
        return list(self._policies)

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """
        Call ``listener`` with the new status after every status transition.

        Returns:
            A function that unsubscribes the listener.
        """
        return self._status.subscribe(listener)

    def unsubscribe(self, listener: StatusListener) -> bool:
        return self._status.unsubscribe(listener)

    def create_policy(self, name: str, prepare_data: Preparer | None = None) -> Policy:
        """
        Register a policy and return its handle.

        Policies can be created at any time. A policy created after a
        preparation cycle has its data prepared by the next cycle.

        Args:
            name: Name of the policy, used in diagnostics.
            prepare_data: Function preparing the policy's data. When
                omitted the policy needs no preparation.

        Raises:
            ConfigurationError: If ``prepare_data`` is not callable.
        """
        if prepare_data is None:
            record = PolicyRecord(name=name)
        elif not callable(prepare_data):
            raise ConfigurationError(
                config_key="prepare_data",
                expected="a callable returning an awaitable",
                received=prepare_data,
            )
        else:
            record = PolicyRecord(name=name, prepare_data=prepare_data)

        self._policies.append(record)
        logger.debug(f"Registered policy '{name}'")

        return Policy(record, self, self._diagnostics.for_policy(name))

    def prepare_data_sync(self) -> None:
        """
        Start preparing the data of all policies without waiting for it.

        The status is loading when this returns. A failure is not raised;
        it can only be observed through ``preparing_data_status``.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        loop = asyncio.get_running_loop()
        cycle, awaitables = self._start_cycle()

        task = loop.create_task(self._settle_cycle(cycle, awaitables))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def prepare_data_async(self) -> None:
        """
        Prepare the data of all policies and wait until it is ready.

        Raises:
            Exception: The failure recorded in the status, if any preparer failed.
        """
        cycle, awaitables = self._start_cycle()

        error = await self._settle_cycle(cycle, awaitables)
        if error is not None:
            raise error

    def _start_cycle(self) -> tuple[int, list[Awaitable[Any]]]:
        self._cycle += 1
        cycle = self._cycle
        self._status.begin_loading()

        awaitables: list[Awaitable[Any]] = []
        # Policies registered by a preparer during this loop wait for the next cycle.
        for record in list(self._policies):
            try:
                result = record.prepare_data()
            except Exception as e:
                awaitables.append(self._reraise(e))
                continue
            awaitables.append(result if inspect.isawaitable(result) else self._done())

        return cycle, awaitables

    async def _settle_cycle(
        self,
        cycle: int,
        awaitables: list[Awaitable[Any]],
    ) -> BaseException | None:
        try:
            results = await asyncio.gather(*awaitables, return_exceptions=True)
        except asyncio.CancelledError as e:
            if cycle == self._cycle:
                self._status.mark_error(e)
            raise

        error = next((r for r in results if isinstance(r, BaseException)), None)

        if cycle != self._cycle:
            logger.debug(f"Preparation cycle {cycle} superseded by cycle {self._cycle}")
            return error

        if error is None:
            self._status.mark_success()
        else:
            self._manager_diagnostics.error("Failed to prepare policy data", error)
            self._status.mark_error(error)

        return error

    @staticmethod
    async def _done() -> None:
        return None

    @staticmethod
    async def _reraise(error: Exception) -> None:
        raise error

    def _calc_permission(
        self,
        policy_name: str,
        strategy: PermissionStrategy,
        diagnostics: PermissionsLogger,
    ) -> Permission:
        status = self._status.status

        if not status.is_success:
            if status.is_idle:
                diagnostics.warn("Data for the permission has not been prepared yet")
            elif status.is_loading:
                diagnostics.warn("Data for the permission is still being prepared")
            else:
                diagnostics.warn(f"Data for the permission failed to prepare: {status.error!r}")
            return create_denial_permission(SystemDenialReason.MISSING_DATA)

        permission = create_rule(strategy)

        if permission.has_reason(SystemDenialReason.INTERNAL_ERROR):
            diagnostics.error(
                "Permission strategy called neither allow nor deny",
                MissingRuleOutcomeError(policy_name),
            )
        elif not permission.is_allowed:
            diagnostics.info(f"Permission denied: {permission.reason}")

        return permission


def create_policy_manager_store(
    config: PolicyManagerConfig | dict[str, Any] | None = None,
    *,
    is_debug: bool | None = None,
) -> PolicyManagerStore:
    """
    Create a policy manager.

    Args:
        config: A PolicyManagerConfig, or a dict such as ``{"is_debug": True}``.
        is_debug: Overrides ``config.is_debug`` when given.

    Example:
        >>> manager = create_policy_manager_store({"is_debug": True})
    """
    if config is None:
        resolved = PolicyManagerConfig()
    elif isinstance(config, PolicyManagerConfig):
        resolved = PolicyManagerConfig(**config.to_dict())
    elif isinstance(config, dict):
        resolved = PolicyManagerConfig.from_dict(config)
    else:
        raise ConfigurationError(
            config_key="config",
            expected="PolicyManagerConfig, dict or None",
            received=config,
        )

    if is_debug is not None:
        resolved.is_debug = is_debug

    return PolicyManagerStore(resolved)
