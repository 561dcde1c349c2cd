"""
Rule evaluation.

``create_rule`` turns a decision function written against ``allow`` and
``deny`` callbacks into exactly one Permission. Rules are handy for checks
that are shared between several policies, or for one-off checks that do
not depend on prepared policy data.
"""

from __future__ import annotations

import inspect
import logging

from astral_permissions.permission import (
    Permission,
    create_allowed_permission,
    create_denial_permission,
)
from astral_permissions.types import DenialReason, Rule, SystemDenialReason

logger = logging.getLogger(__name__)


def create_rule(rule: Rule) -> Permission:
    """
    Evaluate a decision function and return the resulting permission.

    The rule is called synchronously with two callbacks. ``allow()`` makes
    the outcome an allowed permission, ``deny(reason)`` a denial with that
    reason. When a callback is called more than once, or both are called,
    the last call wins. When neither is called the outcome is a denial with
    ``SystemDenialReason.INTERNAL_ERROR``.

    Asynchronous rules are not supported: an ``async def`` rule never runs
    and yields ``INTERNAL_ERROR``.

    Args:
        rule: The decision function.

    Returns:
        The permission decided by the rule.

    Example:
        >>> def can_buy_alcohol(age: int | None) -> Permission:
        ...     def rule(allow, deny):
        ...         if age is None:
        ...             return deny("missing-user-age")
        ...         if age < 18:
        ...             return deny("not-for-your-age")
        ...         allow()
        ...     return create_rule(rule)
        >>> can_buy_alcohol(21).is_allowed
        True
        >>> can_buy_alcohol(16).reason
        'not-for-your-age'
    """
    result: Permission | None = None

    def allow() -> None:
        nonlocal result
        result = create_allowed_permission()

    def deny(reason: DenialReason) -> None:
        nonlocal result
        result = create_denial_permission(reason)

    returned = rule(allow, deny)

    if inspect.isawaitable(returned):
        logger.debug("Rule returned an awaitable; asynchronous rules are not supported")
        if inspect.iscoroutine(returned):
            returned.close()
        return create_denial_permission(SystemDenialReason.INTERNAL_ERROR)

    if result is None:
        return create_denial_permission(SystemDenialReason.INTERNAL_ERROR)

    return result
