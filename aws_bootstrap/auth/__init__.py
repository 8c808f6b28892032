"""AWS role assumption.

This module exchanges an ambient configuration for temporary, role-scoped
credentials via STS.
"""

from .role_manager import RoleManager, assume_role

__all__ = ["RoleManager", "assume_role"]
