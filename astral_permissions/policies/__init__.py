"""
Policies and the policy manager.

Quick Start:
    >>> from astral_permissions.policies import create_policy_manager_store
    >>>
    >>> manager = create_policy_manager_store()
    >>> documents = manager.create_policy("documents", prepare_data=load_roles)
    >>>
    >>> await manager.prepare_data_async()
    >>> documents.create_permission(lambda allow, deny: allow()).is_allowed
    True
"""

from astral_permissions.policies.base import Policy, PolicyRecord
from astral_permissions.policies.manager import (
    PolicyManagerConfig,
    PolicyManagerStore,
    create_policy_manager_store,
)
from astral_permissions.policies.status import PreparationStatusMachine, StatusListener

__all__ = [
    "Policy",
    "PolicyRecord",
    "PolicyManagerConfig",
    "PolicyManagerStore",
    "create_policy_manager_store",
    "PreparationStatusMachine",
    "StatusListener",
]
