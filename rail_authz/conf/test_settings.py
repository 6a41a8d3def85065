"""
Django settings used by the rail-authz test suite.
"""

SECRET_KEY = "rail-authz-tests"
DEBUG = False
USE_TZ = True

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "rail_authz.apps.AppConfig",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

RAIL_AUTHZ = {
    "authorization_settings": {
        "load_roles_on_startup": True,
        "log_denials": True,
    },
}
