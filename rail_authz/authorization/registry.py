"""
RoleRegistry - In-memory store of role definitions.

Roles are appended by ``load_roles`` and never removed. Each load builds a new
snapshot (ordered role list plus id map) and publishes it in one assignment,
so concurrent readers always see either the previous or the next state.
"""

import logging
from threading import Lock
from typing import Iterable, Mapping, NamedTuple, Optional, Union

from ..config_proxy import get_setting
from .matching import matches_any
from .types import CyclicRoleInheritanceError, Role

logger = logging.getLogger(__name__)


class _Snapshot(NamedTuple):
    roles: tuple[Role, ...]
    role_map: dict[str, Role]


class RoleRegistry:
    """Stores roles by identifier and resolves permissions through inheritance."""

    def __init__(self, roles: Optional[Iterable[Union[Role, Mapping]]] = None):
        self._load_lock = Lock()
        self._snapshot = _Snapshot((), {})
        if roles:
            self.load_roles(roles)

    # --- Loading ---

    def load_roles(self, roles: Iterable[Union[Role, Mapping]]) -> int:
        """
        Append roles to the registry.

        A duplicate identifier replaces the previous map entry while both
        records stay in the ordered role list.

        Returns:
            Number of roles loaded.

        Raises:
            CyclicRoleInheritanceError: If inheritance validation is enabled
                and the load would introduce a cycle. Nothing is loaded then.
            ValueError: If a mapping entry has no identifier.
        """
        incoming = [
            role if isinstance(role, Role) else Role.from_dict(role) for role in roles
        ]
        with self._load_lock:
            current = self._snapshot
            role_map = dict(current.role_map)
            for role in incoming:
                if role.id in role_map:
                    logger.debug("Role '%s' already loaded, replacing map entry", role.id)
                role_map[role.id] = role

            if get_setting("authorization_settings.validate_inheritance_on_load", True):
                _validate_acyclic(role_map, [role.id for role in incoming])

            self._snapshot = _Snapshot(current.roles + tuple(incoming), role_map)

        logger.info("Loaded %s role(s) (total: %s)", len(incoming), len(self._snapshot.roles))
        return len(incoming)

    # --- Lookups ---

    @property
    def roles(self) -> list[Role]:
        """Every loaded role in load order, duplicates included."""
        return list(self._snapshot.roles)

    def get_role(self, role_id: Optional[str]) -> Optional[Role]:
        """Return the role for ``role_id``, or None when unknown."""
        if role_id is None:
            return None
        return self._snapshot.role_map.get(role_id)

    def get_display(self, role_id: Optional[str]) -> Optional[str]:
        role = self.get_role(role_id)
        return None if role is None else role.display

    def get_displays(self, role_ids: Iterable[Optional[str]]) -> list[Optional[str]]:
        return [self.get_display(role_id) for role_id in role_ids]

    def get_assignable_roles(self) -> list[Role]:
        return [role for role in self._snapshot.role_map.values() if role.assignable]

    def get_default_roles(self) -> list[Role]:
        return [role for role in self._snapshot.role_map.values() if role.default]

    def get_default_role_ids(self) -> list[str]:
        return [role.id for role in self.get_default_roles()]

    def get_role_lineage(self, role_id: str) -> list[str]:
        """
        Return ``role_id`` and every role it inherits from, depth first.

        Only roles present in the registry are listed; each appears once.

        Raises:
            CyclicRoleInheritanceError: If the inheritance graph loops.
        """
        role_map = self._snapshot.role_map
        lineage: list[str] = []

        def visit(current_id: str, path: tuple[str, ...]) -> None:
            if current_id in path:
                raise CyclicRoleInheritanceError(path + (current_id,))
            role = role_map.get(current_id)
            if role is None or current_id in lineage:
                return
            lineage.append(current_id)
            for parent_id in role.inherits:
                visit(parent_id, path + (current_id,))

        visit(role_id, ())
        return lineage

    # --- Permission resolution ---

    def role_has_permission(self, role_id: Optional[str], permission: str) -> bool:
        """
        Return True if the role, or any role it inherits from, grants ``permission``.

        Unknown roles grant nothing.

        Raises:
            CyclicRoleInheritanceError: If resolution reaches a role already
                on the current inheritance path.
        """
        if not role_id:
            return False
        return self._resolve(self._snapshot.role_map, role_id, permission, ())

    def _resolve(
        self,
        role_map: dict[str, Role],
        role_id: str,
        permission: str,
        path: tuple[str, ...],
    ) -> bool:
        if role_id in path:
            raise CyclicRoleInheritanceError(path + (role_id,))
        role = role_map.get(role_id)
        if role is None:
            return False
        if matches_any(permission, role.permissions):
            return True
        path = path + (role_id,)
        return any(
            self._resolve(role_map, parent_id, permission, path)
            for parent_id in role.inherits
        )


def _validate_acyclic(role_map: dict[str, Role], start_ids: Iterable[str]) -> None:
    """Raise if any inheritance cycle is reachable from ``start_ids``."""
    done: set[str] = set()

    def visit(role_id: str, path: tuple[str, ...]) -> None:
        if role_id in path:
            raise CyclicRoleInheritanceError(path + (role_id,))
        if role_id in done:
            return
        role = role_map.get(role_id)
        if role is None:
            return
        for parent_id in role.inherits:
            visit(parent_id, path + (role_id,))
        done.add(role_id)

    for role_id in start_ids:
        visit(role_id, ())


__all__ = ["RoleRegistry"]
