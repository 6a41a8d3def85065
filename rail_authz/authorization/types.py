"""
Type definitions for the authorization package.

This module contains the dataclasses and errors used throughout the package:
- Role: An immutable named bundle of permissions and parent roles
- AuthorizationOptions: Substitutions used to fill a permission template
- AuthorizationExplanation: Detailed outcome of an authorization check
- CyclicRoleInheritanceError: Raised when role inheritance loops back
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence


class CyclicRoleInheritanceError(ValueError):
    """Raised when a role inherits from itself, directly or transitively."""

    def __init__(self, cycle: Sequence[str]):
        self.cycle = tuple(cycle)
        super().__init__(f"Cyclic role inheritance: {' -> '.join(self.cycle)}")


def _coerce_tuple(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(str(item) for item in value if item is not None)
    return (str(value),)


@dataclass(frozen=True)
class Role:
    """Definition of a role: its permissions and the roles it inherits from."""

    id: str
    display: str = ""
    permissions: tuple[str, ...] = ()
    inherits: tuple[str, ...] = ()
    assignable: bool = False
    default: bool = False

    def __post_init__(self):
        object.__setattr__(self, "permissions", _coerce_tuple(self.permissions))
        object.__setattr__(self, "inherits", _coerce_tuple(self.inherits))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Role":
        """
        Build a role from its JSON-shaped mapping.

        Accepts ``_id`` or ``id`` for the identifier.

        Raises:
            ValueError: If the mapping carries no usable identifier.
        """
        role_id = data.get("_id", data.get("id"))
        if not role_id or not isinstance(role_id, str):
            raise ValueError("Role entry is missing a string '_id'")
        return cls(
            id=role_id,
            display=str(data.get("display") or ""),
            permissions=data.get("permissions"),
            inherits=data.get("inherits"),
            assignable=bool(data.get("assignable", False)),
            default=bool(data.get("default", False)),
        )


_MISSING = object()


@dataclass
class AuthorizationOptions:
    """Substitutions applied to a permission template."""

    target_id: Any = _MISSING
    static: Optional[dict[str, str]] = None
    all: Optional[dict[str, list[str]]] = None

    @property
    def has_target(self) -> bool:
        return self.target_id is not _MISSING

    @classmethod
    def build(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> "AuthorizationOptions":
        """
        Normalize a mapping and/or keyword arguments into options.

        ``target_id`` (or ``targetId``) is considered present whenever the key
        is supplied, even with a ``None`` value.
        """
        if isinstance(options, AuthorizationOptions) and not kwargs:
            return options

        merged: dict[str, Any] = {}
        if isinstance(options, AuthorizationOptions):
            if options.has_target:
                merged["target_id"] = options.target_id
            if options.static is not None:
                merged["static"] = options.static
            if options.all is not None:
                merged["all"] = options.all
        elif options:
            merged.update(options)
        merged.update(kwargs)

        if "targetId" in merged:
            merged.setdefault("target_id", merged.pop("targetId"))

        return cls(
            target_id=merged.get("target_id", _MISSING),
            static=dict(merged["static"]) if merged.get("static") is not None else None,
            all=(
                {key: list(values) for key, values in merged["all"].items()}
                if merged.get("all") is not None
                else None
            ),
        )


@dataclass
class AuthorizationExplanation:
    """Comprehensive explanation of an authorization check."""

    template: str
    allowed: bool
    required_permissions: list[str] = field(default_factory=list)
    granted_permissions: list[str] = field(default_factory=list)
    denied_permission: Optional[str] = None
    user_roles: list[str] = field(default_factory=list)


__all__ = [
    "Role",
    "AuthorizationOptions",
    "AuthorizationExplanation",
    "CyclicRoleInheritanceError",
]
