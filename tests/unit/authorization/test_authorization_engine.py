"""
Unit tests for the authorization engine.
"""

import logging
from types import SimpleNamespace

import pytest

from rail_authz.authorization import (
    AuthorizationEngine,
    AuthorizationOptions,
    RoleRegistry,
    get_user_id,
    get_user_role_ids,
)
from rail_authz.config_proxy import configure_runtime_settings

pytestmark = pytest.mark.unit


ROLES = [
    {"_id": "driver", "display": "Driver", "permissions": ["trips.view.self", "users.update.self.driver"]},
    {
        "_id": "supervisor",
        "display": "Supervisor",
        "permissions": ["users.update.*.supervisor"],
        "inherits": ["driver"],
    },
    {"_id": "auditor", "display": "Auditor", "permissions": ["reports.view"]},
]

FAN_OUT = {"targetId": 5, "static": {"action": "update"}, "all": {"role": ["driver", "supervisor"]}}


@pytest.fixture
def engine():
    return AuthorizationEngine(RoleRegistry(ROLES))


def _user(user_id=5, role_ids=()):
    return SimpleNamespace(id=user_id, role_ids=list(role_ids))


def test_user_has_permission_through_any_role(engine):
    user = _user(role_ids=["auditor", "driver"])
    assert engine.user_has_permission(user, "trips.view.self") is True
    assert engine.user_has_permission(user, "reports.view") is True
    assert engine.user_has_permission(user, "users.delete.self") is False


def test_user_without_roles_has_no_permission(engine):
    assert engine.user_has_permission(_user(), "trips.view.self") is False


def test_null_user_has_no_permission(engine):
    assert engine.user_has_permission(None, "trips.view.self") is False
    assert engine.is_authorized(None, "trips.view.self") is False


def test_role_has_permission_through_inheritance(engine):
    assert engine.role_has_permission("supervisor", "trips.view.self") is True
    assert engine.role_has_permission(None, "trips.view.self") is False


def test_is_authorized_requires_every_fanned_out_permission(engine):
    supervisor = _user(role_ids=["supervisor"])
    driver = _user(role_ids=["driver"])
    assert engine.is_authorized(supervisor, "users.<action>.<target>.<role>", FAN_OUT) is True
    assert engine.is_authorized(driver, "users.<action>.<target>.<role>", FAN_OUT) is False


def test_is_authorized_resolves_target_from_user_id(engine):
    driver = _user(user_id=7, role_ids=["driver"])
    assert engine.is_authorized(driver, "trips.view.<target>", target_id=7) is True
    assert engine.is_authorized(driver, "trips.view.<target>", target_id=8) is False


def test_is_authorized_accepts_mapping_user(engine):
    user = {"_id": 5, "roleIds": ["supervisor"]}
    assert engine.is_authorized(user, "users.<action>.<target>.<role>", FAN_OUT) is True


def test_unresolved_placeholder_is_not_authorized(engine, caplog):
    user = _user(role_ids=["auditor"])
    with caplog.at_level(logging.DEBUG, logger="rail_authz.authorization.engine"):
        assert engine.is_authorized(user, "reports.view.<missing>") is True
        assert engine.is_authorized(user, "trips.<missing>") is False
    assert "unresolved placeholders" in caplog.text


def test_denials_are_not_logged_when_disabled(engine, caplog):
    configure_runtime_settings(authorization_settings__log_denials=False)
    with caplog.at_level(logging.DEBUG, logger="rail_authz.authorization.engine"):
        assert engine.is_authorized(_user(), "trips.view.self") is False
    assert "Authorization denied" not in caplog.text


def test_explain_authorization_reports_first_denied_permission(engine):
    driver = _user(role_ids=["driver"])
    explanation = engine.explain_authorization(driver, "users.<action>.<target>.<role>", FAN_OUT)
    assert explanation.allowed is False
    assert explanation.required_permissions == [
        "users.update.self.driver",
        "users.update.self.supervisor",
    ]
    assert explanation.granted_permissions == ["users.update.self.driver"]
    assert explanation.denied_permission == "users.update.self.supervisor"
    assert explanation.user_roles == ["driver"]


def test_explain_authorization_allowed(engine):
    explanation = engine.explain_authorization(
        _user(role_ids=["supervisor"]), "users.<action>.<target>.<role>", FAN_OUT
    )
    assert explanation.allowed is True
    assert explanation.denied_permission is None


def test_registry_passthrough(engine):
    assert engine.get_role("driver").display == "Driver"
    assert engine.get_displays(["auditor", "nope"]) == ["Auditor", None]
    assert engine.load_roles([{"_id": "guest", "display": "Guest"}]) == 1
    assert engine.get_display("guest") == "Guest"


def test_user_id_and_role_id_helpers():
    assert get_user_id({"_id": 3}) == 3
    assert get_user_id(SimpleNamespace(pk=9)) == 9
    assert get_user_id(None) is None
    assert get_user_role_ids({"roleIds": ["a", None, "b"]}) == ["a", "b"]
    assert get_user_role_ids(SimpleNamespace(role_ids="solo")) == ["solo"]
    assert get_user_role_ids(SimpleNamespace()) == []


@pytest.mark.django_db
def test_django_groups_are_used_when_enabled(engine):
    from django.contrib.auth.models import Group, User

    user = User.objects.create_user(username="grouped", password="pass12345")
    user.groups.add(Group.objects.create(name="auditor"))

    assert get_user_role_ids(user) == []
    assert engine.user_has_permission(user, "reports.view") is False

    configure_runtime_settings(authorization_settings__use_django_groups=True)
    assert get_user_role_ids(user) == ["auditor"]
    assert engine.user_has_permission(user, "reports.view") is True


def test_is_authorized_with_options_dataclass(engine):
    driver = {"id": 5, "role_ids": ["driver"]}
    assert engine.is_authorized(driver, "trips.view.<target>", AuthorizationOptions(target_id=5)) is True
    assert engine.is_authorized(driver, "trips.view.<target>", AuthorizationOptions(target_id=6)) is False


def test_underscore_id_takes_precedence_for_target(engine):
    driver = {"_id": 5, "id": 99, "role_ids": ["driver"]}
    assert get_user_id(driver) == 5
    assert engine.is_authorized(driver, "trips.view.<target>", target_id=5) is True
