"""
Library default settings for rail-authz.

These values are used when neither runtime overrides nor the Django
``RAIL_AUTHZ`` setting define a key.
"""

from typing import Any

LIBRARY_DEFAULTS: dict[str, Any] = {
    "authorization_settings": {
        "load_roles_on_startup": True,
        "roles_file_name": "roles.json",
        "roles_files": [],
        "validate_inheritance_on_load": True,
        "use_django_groups": False,
        "log_denials": True,
    },
}
