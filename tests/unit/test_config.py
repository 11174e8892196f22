"""
Unit tests for restriction settings resolution and validation.
"""

import pytest
from django.apps import apps
from django.test import override_settings

from field_restrictions import ConfigurationError, EnforcementMode
from field_restrictions.config_proxy import (
    SettingsProxy,
    get_enforcement_mode,
    get_setting,
)
from field_restrictions.testing import override_restriction_settings

pytestmark = pytest.mark.unit


def test_library_defaults_apply():
    with override_settings(FIELD_RESTRICTIONS={}):
        assert get_setting("enforcement_settings.enforcement_mode") == "ledger"
        assert get_setting("audit_settings.log_denials") is True
        assert get_setting("missing.key", "fallback") == "fallback"


def test_django_setting_takes_precedence():
    with override_restriction_settings(
        enforcement_settings={"enforcement_mode": "fail_fast"}
    ):
        assert get_enforcement_mode() is EnforcementMode.FAIL_FAST
        assert get_setting("enforcement_settings.default_combinator") == "any"
    assert get_enforcement_mode() is EnforcementMode.LEDGER


def test_unknown_enforcement_mode_is_a_configuration_error():
    with override_restriction_settings(
        enforcement_settings={"enforcement_mode": "quiet"}
    ):
        with pytest.raises(ConfigurationError):
            get_enforcement_mode()


def test_proxy_caches_until_cleared():
    proxy = SettingsProxy()
    with override_settings(FIELD_RESTRICTIONS={"registry_settings": {"freeze_registry_on_ready": True}}):
        assert proxy.get("registry_settings.freeze_registry_on_ready") is True
    assert proxy.get("registry_settings.freeze_registry_on_ready") is True

    proxy.clear_cache()
    assert proxy.get("registry_settings.freeze_registry_on_ready") is False


def test_validate_reports_errors_and_warnings():
    with override_settings(
        FIELD_RESTRICTIONS={
            "enforcement_settings": {"default_combinator": "xor"},
            "unknown_settings": {},
        }
    ):
        results = SettingsProxy().validate()

    assert results["valid"] is False
    assert any("default_combinator" in error for error in results["errors"])
    assert any("unknown_settings" in warning for warning in results["warnings"])


def test_app_config_rejects_invalid_settings():
    app_config = apps.get_app_config("field_restrictions")

    with override_restriction_settings(
        enforcement_settings={"enforcement_mode": "quiet"}
    ):
        with pytest.raises(ConfigurationError):
            app_config._validate_configuration()

    app_config._validate_configuration()


def test_settings_changes_apply_without_clearing_a_cache():
    with override_settings(
        FIELD_RESTRICTIONS={"enforcement_settings": {"enforcement_mode": "fail_fast"}}
    ):
        assert get_enforcement_mode() is EnforcementMode.FAIL_FAST
        with override_settings(FIELD_RESTRICTIONS={}):
            assert get_enforcement_mode() is EnforcementMode.LEDGER
        assert get_enforcement_mode() is EnforcementMode.FAIL_FAST
