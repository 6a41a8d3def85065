import pytest

from rail_authz.config_proxy import clear_runtime_settings


@pytest.fixture(autouse=True)
def _reset_runtime_settings():
    clear_runtime_settings()
    yield
    clear_runtime_settings()
