"""
Pytest fixtures for astral_permissions tests.

Provides common fixtures used across all test modules.
"""

from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from astral_permissions import PolicyManagerStore, create_policy_manager_store
from astral_permissions.types import AllowCallback, DenyCallback


# ============================================================================
# Policy Manager Fixtures
# ============================================================================


@pytest.fixture
def manager() -> PolicyManagerStore:
    """Create a policy manager with diagnostics disabled."""
    return create_policy_manager_store()


@pytest.fixture
def debug_manager() -> PolicyManagerStore:
    """Create a policy manager with diagnostics enabled."""
    return create_policy_manager_store(is_debug=True)


# ============================================================================
# Strategy Fixtures
# ============================================================================


def allow_strategy(allow: AllowCallback, deny: DenyCallback) -> None:
    allow()


def silent_strategy(allow: AllowCallback, deny: DenyCallback) -> None:
    pass


def deny_with(reason: str) -> Callable[[AllowCallback, DenyCallback], None]:
    """Build a strategy that denies with ``reason``."""
    def strategy(allow: AllowCallback, deny: DenyCallback) -> None:
        deny(reason)
    return strategy


# ============================================================================
# Preparer Helpers
# ============================================================================


async def prepare_nothing() -> None:
    return None


class GatedPreparer:
    """Preparer that stays pending until released, then succeeds or fails."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls = 0
        self._released = asyncio.Event()

    def release(self) -> None:
        self._released.set()

    async def __call__(self) -> None:
        self.calls += 1
        await self._released.wait()
        if self.error is not None:
            raise self.error


async def settle() -> None:
    """Give pending fire-and-forget preparation tasks a chance to finish."""
    for _ in range(10):
        await asyncio.sleep(0)
