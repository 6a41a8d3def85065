"""
Role definition loader for roles.json files.

This module reads role definitions from JSON files, either explicitly listed
or found in installed Django apps, and loads them into the authorization
engine's registry.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from django.apps import apps

from .authorization import CyclicRoleInheritanceError, Role, authorization_engine
from .authorization.engine import AuthorizationEngine
from .config_proxy import get_setting

logger = logging.getLogger(__name__)


def load_app_role_definitions(
    app_configs: Optional[Iterable[object]] = None,
    engine: Optional[AuthorizationEngine] = None,
) -> int:
    """
    Load roles files from installed apps into the registry.

    Args:
        app_configs: Optional iterable of Django app configs. Defaults to all
            installed apps.
        engine: Engine to load into. Defaults to the global engine.

    Returns:
        Number of roles loaded from role files.
    """
    if app_configs is None:
        app_configs = apps.get_app_configs()

    file_name = get_setting("authorization_settings.roles_file_name", "roles.json")
    paths = []
    for app_config in app_configs:
        app_path = getattr(app_config, "path", None)
        if not app_path:
            continue
        roles_path = Path(app_path) / file_name
        if roles_path.exists():
            paths.append(roles_path)

    return load_role_files(paths, engine=engine)


def load_role_files(
    paths: Iterable[Union[str, Path]],
    engine: Optional[AuthorizationEngine] = None,
) -> int:
    """
    Load roles from JSON files into the registry.

    Each file holds either ``{"roles": [...]}`` or a bare list of role
    objects. Unreadable or invalid files, and files whose roles would close
    an inheritance cycle, are skipped with a warning.

    Returns:
        Number of roles loaded.
    """
    engine = engine or authorization_engine
    loaded_count = 0
    for path in paths:
        roles = read_role_file(Path(path))
        if not roles:
            continue
        try:
            loaded_count += engine.load_roles(roles)
        except CyclicRoleInheritanceError as exc:
            logger.warning("Skipping roles file %s: %s", path, exc)
    return loaded_count


def read_role_file(roles_path: Path) -> list[Role]:
    """Parse one roles file into Role records, skipping malformed entries."""
    try:
        content = roles_path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        logger.warning("Could not read roles file %s: %s", roles_path, exc)
        return []
    if not content:
        logger.debug("Skipping empty roles file %s", roles_path)
        return []
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning("Invalid JSON in roles file %s: %s", roles_path, exc)
        return []

    entries = payload.get("roles", []) if isinstance(payload, dict) else payload
    if entries is None:
        return []
    if not isinstance(entries, list):
        logger.warning("Roles file %s must define a list of roles", roles_path)
        return []

    roles: list[Role] = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning("Role #%s in %s must be an object", position, roles_path)
            continue
        try:
            roles.append(Role.from_dict(entry))
        except ValueError as exc:
            logger.warning("Skipping role #%s in %s: %s", position, roles_path, exc)
    return roles


__all__ = ["load_app_role_definitions", "load_role_files", "read_role_file"]
