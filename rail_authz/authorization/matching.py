"""
Permission string matching.

Permissions are dot separated segments. A ``*`` segment on either side
matches any single segment. Only the common prefix length is compared, so a
shorter permission matches every longer permission sharing its prefix:
``users.update`` matches ``users.update.self.driver``.
"""

WILDCARD = "*"
SEPARATOR = "."


def split_permission(permission: str) -> list[str]:
    """Lower-case a permission and split it into segments."""
    return permission.lower().split(SEPARATOR)


def is_permission_match(required: str, held: str) -> bool:
    """Return True when ``held`` satisfies ``required`` (the check is symmetric)."""
    required_segments = split_permission(required)
    held_segments = split_permission(held)
    for required_segment, held_segment in zip(required_segments, held_segments):
        if (
            required_segment != held_segment
            and required_segment != WILDCARD
            and held_segment != WILDCARD
        ):
            return False
    return True


def matches_any(required: str, held_permissions) -> bool:
    """Return True when any permission in ``held_permissions`` satisfies ``required``."""
    return any(is_permission_match(required, held) for held in held_permissions)


__all__ = ["WILDCARD", "split_permission", "is_permission_match", "matches_any"]
