"""
Role-based authorization package.

This package provides:
- A role registry with inheritance between roles
- Wildcard permission matching
- Permission templates expanded with target, static and fan-out values
- An engine answering whether a user may perform an action

Quick Start:
    >>> from rail_authz.authorization import load_roles, is_authorized
    >>>
    >>> load_roles([
    ...     {"_id": "driver", "display": "Driver", "permissions": ["trips.view.self"]},
    ...     {"_id": "supervisor", "display": "Supervisor",
    ...      "permissions": ["users.update.*"], "inherits": ["driver"]},
    ... ])
    >>> user = {"id": 5, "role_ids": ["supervisor"]}
    >>> is_authorized(user, "users.<action>.<target>", {"targetId": 7, "static": {"action": "update"}})
    True

Exports:
    - Role, AuthorizationOptions, AuthorizationExplanation: Dataclasses
    - CyclicRoleInheritanceError: Raised for looping role inheritance
    - RoleRegistry, AuthorizationEngine: Core classes
    - is_permission_match, fill_permission_template: Pure helpers
    - require_authorization: Decorator for GraphQL resolvers
    - authorization_engine: Global singleton instance of AuthorizationEngine
"""

from .decorators import require_authorization
from .engine import (
    AuthorizationEngine,
    authorization_engine,
    explain_authorization,
    get_display,
    get_displays,
    get_role,
    get_user_id,
    get_user_role_ids,
    is_authorized,
    load_roles,
    role_has_permission,
    user_has_permission,
)
from .matching import is_permission_match
from .registry import RoleRegistry
from .templates import fill_permission_template
from .types import (
    AuthorizationExplanation,
    AuthorizationOptions,
    CyclicRoleInheritanceError,
    Role,
)

__all__ = [
    # Types
    "Role",
    "AuthorizationOptions",
    "AuthorizationExplanation",
    "CyclicRoleInheritanceError",
    # Core
    "RoleRegistry",
    "AuthorizationEngine",
    "is_permission_match",
    "fill_permission_template",
    "get_user_id",
    "get_user_role_ids",
    # Decorators
    "require_authorization",
    # Singleton and shortcuts
    "authorization_engine",
    "load_roles",
    "get_role",
    "get_display",
    "get_displays",
    "role_has_permission",
    "user_has_permission",
    "is_authorized",
    "explain_authorization",
]
