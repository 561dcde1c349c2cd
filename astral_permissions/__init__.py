"""
astral_permissions: permission decisions gated on prepared policy data.

Applications declare named policies, each with an asynchronous step that
prepares the data its decisions depend on. Once the data is ready,
permissions are computed with small decision functions that call either
``allow()`` or ``deny(reason)``.

Basic Usage:
    >>> from astral_permissions import create_policy_manager_store
    >>>
    >>> manager = create_policy_manager_store(is_debug=True)
    >>> admin_policy = manager.create_policy("admin", prepare_data=user_repo.load_roles)
    >>>
    >>> await manager.prepare_data_async()
    >>>
    >>> def administration(allow, deny):
    ...     if user_repo.roles.is_admin:
    ...         return allow()
    ...     deny("no-admin")
    >>>
    >>> permission = admin_policy.create_permission(administration)
    >>> if not permission.is_allowed:
    ...     show_reason(permission.reason)

Permissions requested before the data is prepared, or after preparation
failed, are denied with ``SystemDenialReason.MISSING_DATA``.
"""

__version__ = "0.1.0"

from astral_permissions.exceptions import (
    ConfigurationError,
    MissingRuleOutcomeError,
    PermissionsError,
)
from astral_permissions.logger import PermissionsLogger
from astral_permissions.permission import (
    AllowedPermission,
    DenialPermission,
    Permission,
    create_allowed_permission,
    create_denial_permission,
)
from astral_permissions.policies import (
    Policy,
    PolicyManagerConfig,
    PolicyManagerStore,
    create_policy_manager_store,
)
from astral_permissions.rules import create_rule
from astral_permissions.types import (
    DenialReason,
    PermissionStrategy,
    PreparationStatus,
    Rule,
    SystemDenialReason,
)

__all__ = [
    # Version
    "__version__",
    # Policy manager
    "PolicyManagerStore",
    "PolicyManagerConfig",
    "create_policy_manager_store",
    "Policy",
    # Rules
    "create_rule",
    # Permissions
    "Permission",
    "AllowedPermission",
    "DenialPermission",
    "create_allowed_permission",
    "create_denial_permission",
    # Types
    "DenialReason",
    "Rule",
    "PermissionStrategy",
    "PreparationStatus",
    "SystemDenialReason",
    # Diagnostics
    "PermissionsLogger",
    # Exceptions
    "PermissionsError",
    "ConfigurationError",
    "MissingRuleOutcomeError",
]
