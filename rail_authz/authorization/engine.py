"""
AuthorizationEngine - Public entry point for authorization decisions.

The engine expands a permission template into the permissions it requires,
then checks each of them against the user's roles. Every expanded permission
must be granted (AND); a permission is granted when any of the user's roles,
or any role those inherit from, holds a matching permission (OR).
"""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Union

from ..config_proxy import get_setting
from .registry import RoleRegistry
from .templates import fill_permission_template, unresolved_placeholders
from .types import AuthorizationExplanation, AuthorizationOptions, Role

logger = logging.getLogger(__name__)

OptionsType = Union[AuthorizationOptions, Mapping, None]

_ROLE_ID_KEYS = ("role_ids", "roleIds")
_USER_ID_KEYS = ("_id", "id", "pk")


def _read(user: Any, key: str) -> Any:
    if isinstance(user, Mapping):
        return user.get(key)
    return getattr(user, key, None)


def get_user_id(user: Any) -> Any:
    """Return the identifier of a user object or mapping (``_id``, ``id`` or ``pk``)."""
    if user is None:
        return None
    for key in _USER_ID_KEYS:
        value = _read(user, key)
        if value is not None:
            return value
    return None


def get_user_role_ids(user: Any) -> list[str]:
    """
    Return the role identifiers held by a user.

    Reads ``role_ids`` (or ``roleIds``). When none are present and
    ``authorization_settings.use_django_groups`` is enabled, the names of the
    user's Django groups are used instead.
    """
    if user is None:
        return []
    for key in _ROLE_ID_KEYS:
        value = _read(user, key)
        if value is not None:
            if isinstance(value, str):
                return [value]
            return [str(role_id) for role_id in value if role_id is not None]

    if get_setting("authorization_settings.use_django_groups", False):
        groups = getattr(user, "groups", None)
        if groups is not None and getattr(user, "pk", None) is not None:
            return list(groups.values_list("name", flat=True))
    return []


class AuthorizationEngine:
    """
    Composes the role registry, permission matcher and template expander.
    """

    def __init__(self, registry: Optional[RoleRegistry] = None):
        self.registry = registry if registry is not None else RoleRegistry()

    # --- Registry passthrough ---

    def load_roles(self, roles: Iterable[Union[Role, Mapping]]) -> int:
        return self.registry.load_roles(roles)

    def get_role(self, role_id: Optional[str]) -> Optional[Role]:
        return self.registry.get_role(role_id)

    def get_display(self, role_id: Optional[str]) -> Optional[str]:
        return self.registry.get_display(role_id)

    def get_displays(self, role_ids: Iterable[Optional[str]]) -> list[Optional[str]]:
        return self.registry.get_displays(role_ids)

    # --- Permission checks ---

    def role_has_permission(self, role_id: Optional[str], permission: str) -> bool:
        """Return True if the role (or an inherited role) grants ``permission``."""
        return self.registry.role_has_permission(role_id, permission)

    def user_has_permission(self, user: Any, permission: str) -> bool:
        """Return True if any of the user's roles grants ``permission``."""
        if not user:
            return False
        return any(
            self.registry.role_has_permission(role_id, permission)
            for role_id in get_user_role_ids(user)
        )

    def fill_permission_template(
        self, user_id: Any, template: str, options: OptionsType = None, **kwargs: Any
    ) -> list[str]:
        return fill_permission_template(user_id, template, options, **kwargs)

    def is_authorized(
        self, user: Any, template: str, options: OptionsType = None, **kwargs: Any
    ) -> bool:
        """
        Check that a user holds every permission a template expands to.

        Args:
            user: The user invoking the permission (object or mapping).
            template: The permission template.
            options: Authorization options; see ``fill_permission_template``.

        Returns:
            True if the request is authorized, False otherwise.
        """
        if not user:
            return False
        permissions = fill_permission_template(get_user_id(user), template, options, **kwargs)
        for permission in permissions:
            if not self.user_has_permission(user, permission):
                self._log_denial(user, template, permission)
                return False
        return True

    def explain_authorization(
        self, user: Any, template: str, options: OptionsType = None, **kwargs: Any
    ) -> AuthorizationExplanation:
        """
        Evaluate a template like ``is_authorized`` and report how it was decided.

        Evaluation stops at the first denied permission, so
        ``granted_permissions`` lists the permissions checked before it.
        """
        explanation = AuthorizationExplanation(template=template, allowed=False)
        if not user:
            return explanation

        explanation.user_roles = get_user_role_ids(user)
        explanation.required_permissions = fill_permission_template(
            get_user_id(user), template, options, **kwargs
        )
        for permission in explanation.required_permissions:
            if not self.user_has_permission(user, permission):
                explanation.denied_permission = permission
                return explanation
            explanation.granted_permissions.append(permission)

        explanation.allowed = True
        return explanation

    def _log_denial(self, user: Any, template: str, permission: str) -> None:
        if not get_setting("authorization_settings.log_denials", True):
            return
        unresolved = unresolved_placeholders(permission)
        if unresolved:
            logger.debug(
                "Permission '%s' from template '%s' has unresolved placeholders: %s",
                permission,
                template,
                ", ".join(unresolved),
            )
        logger.debug(
            "Authorization denied for user %s: '%s' (template '%s')",
            get_user_id(user),
            permission,
            template,
        )


# Global singleton instance
authorization_engine = AuthorizationEngine()


def load_roles(roles: Iterable[Union[Role, Mapping]]) -> int:
    return authorization_engine.load_roles(roles)


def get_role(role_id: Optional[str]) -> Optional[Role]:
    return authorization_engine.get_role(role_id)


def get_display(role_id: Optional[str]) -> Optional[str]:
    return authorization_engine.get_display(role_id)


def get_displays(role_ids: Iterable[Optional[str]]) -> list[Optional[str]]:
    return authorization_engine.get_displays(role_ids)


def role_has_permission(role_id: Optional[str], permission: str) -> bool:
    return authorization_engine.role_has_permission(role_id, permission)


def user_has_permission(user: Any, permission: str) -> bool:
    return authorization_engine.user_has_permission(user, permission)


def is_authorized(user: Any, template: str, options: OptionsType = None, **kwargs: Any) -> bool:
    return authorization_engine.is_authorized(user, template, options, **kwargs)


def explain_authorization(
    user: Any, template: str, options: OptionsType = None, **kwargs: Any
) -> AuthorizationExplanation:
    return authorization_engine.explain_authorization(user, template, options, **kwargs)


__all__ = [
    "AuthorizationEngine",
    "authorization_engine",
    "get_user_id",
    "get_user_role_ids",
    "load_roles",
    "get_role",
    "get_display",
    "get_displays",
    "role_has_permission",
    "user_has_permission",
    "is_authorized",
    "explain_authorization",
]
