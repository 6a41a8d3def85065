"""
Django app configuration for rail-authz.

On startup the role registry is populated from ``roles.json`` files found in
installed apps and from any files listed in
``authorization_settings.roles_files``.
"""

import logging

from django.apps import AppConfig as BaseAppConfig

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for rail-authz."""

    name = "rail_authz"
    verbose_name = "Rail Authorization"
    label = "rail_authz"

    def ready(self):
        """Load role definitions once Django has loaded every app."""
        from .config_proxy import get_setting
        from .role_loader import load_app_role_definitions, load_role_files

        if not get_setting("authorization_settings.load_roles_on_startup", True):
            return

        loaded = load_app_role_definitions()
        loaded += load_role_files(get_setting("authorization_settings.roles_files", []))
        logger.info("rail-authz loaded %s role(s) on startup", loaded)
