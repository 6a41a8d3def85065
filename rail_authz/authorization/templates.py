"""
Permission template expansion.

A template such as ``users.<action>.<target>.<role>`` is filled in three
ordered passes: ``<target>`` from the target id, static replacements, then
fan-out replacements producing one permission per value. Each pass replaces
only the first occurrence of a placeholder.
"""

from typing import Any, Mapping, Optional, Union

from .types import AuthorizationOptions

TARGET_KEY = "target"
SELF = "self"
OTHERS = "others"


def placeholder(key: str) -> str:
    return f"<{key}>"


def _replace_first(permissions: list[str], key: str, value: Any) -> list[str]:
    token = placeholder(key)
    return [permission.replace(token, str(value), 1) for permission in permissions]


def fill_permission_template(
    user_id: Any,
    template: str,
    options: Union[AuthorizationOptions, Mapping[str, Any], None] = None,
    **kwargs: Any,
) -> list[str]:
    """
    Fill a permission template and return every permission it expands to.

    Args:
        user_id: Identifier of the user invoking the permission.
        template: Permission template with ``<key>`` placeholders.
        options: Authorization options (object or mapping); keyword
            arguments ``target_id``, ``static`` and ``all`` are merged in.

    Returns:
        The expanded permissions, in fan-out order. Unresolved placeholders
        are left in place.
    """
    resolved = AuthorizationOptions.build(options, **kwargs)
    permissions = [template]

    if resolved.has_target:
        target = SELF if user_id == resolved.target_id else OTHERS
        permissions = _replace_first(permissions, TARGET_KEY, target)

    if resolved.static is not None:
        for key, value in resolved.static.items():
            permissions = _replace_first(permissions, key, value)

    if resolved.all is not None:
        for key, values in resolved.all.items():
            token = placeholder(key)
            permissions = [
                permission.replace(token, str(value), 1)
                for permission in permissions
                for value in values
            ]

    return permissions


def unresolved_placeholders(permission: str) -> Optional[list[str]]:
    """Return the placeholder keys still present in ``permission``, if any."""
    keys = []
    start = permission.find("<")
    while start != -1:
        end = permission.find(">", start + 1)
        if end == -1:
            break
        keys.append(permission[start + 1 : end])
        start = permission.find("<", end + 1)
    return keys or None


__all__ = ["fill_permission_template", "unresolved_placeholders", "placeholder"]
