"""
Tests for PermissionsLogger and PolicyManagerConfig.
"""

from __future__ import annotations

import logging

import pytest

from astral_permissions import (
    ConfigurationError,
    MissingRuleOutcomeError,
    PermissionsLogger,
    PolicyManagerConfig,
    create_policy_manager_store,
)
from astral_permissions.logger import DEFAULT_LOGGER_NAME
from astral_permissions.policies.manager import DEBUG_ENV_VAR


class TestPermissionsLogger:
    """Tests for the scoped diagnostics logger."""

    def test_formats_prefix(self, caplog):
        diagnostics = PermissionsLogger(is_enabled=True).for_policy("documents")

        with caplog.at_level(logging.INFO, logger=DEFAULT_LOGGER_NAME):
            diagnostics.info("checked")

        assert caplog.records[0].getMessage() == "[astral_permissions]/Policy:documents: checked"

    def test_levels(self, caplog):
        diagnostics = PermissionsLogger(is_enabled=True, prefix="test")

        with caplog.at_level(logging.INFO, logger=DEFAULT_LOGGER_NAME):
            diagnostics.info("info")
            diagnostics.warn("warn")
            diagnostics.error("error", ValueError("cause"))

        assert [r.levelno for r in caplog.records] == [
            logging.INFO,
            logging.WARNING,
            logging.ERROR,
        ]
        assert isinstance(caplog.records[2].exc_info[1], ValueError)

    def test_disabled_logger_is_silent(self, caplog):
        diagnostics = PermissionsLogger(is_enabled=False)

        with caplog.at_level(logging.DEBUG, logger=DEFAULT_LOGGER_NAME):
            diagnostics.info("info")
            diagnostics.warn("warn")
            diagnostics.error("error")

        assert caplog.records == []

    def test_children_inherit_switch_and_sink(self, caplog):
        parent = PermissionsLogger(is_enabled=True, logger_name="custom.sink")
        child = parent.for_policy("reports")

        assert child.is_enabled is True
        assert child.logger_name == "custom.sink"
        assert child.prefix == "Policy:reports"

        with caplog.at_level(logging.WARNING, logger="custom.sink"):
            child.warn("missing")

        assert caplog.records[0].name == "custom.sink"
        assert caplog.records[0].getMessage() == "[astral_permissions]/Policy:reports: missing"


class TestPolicyManagerConfig:
    """Tests for PolicyManagerConfig."""

    def test_defaults(self):
        config = PolicyManagerConfig()

        assert config.to_dict() == {"is_debug": False, "logger_name": DEFAULT_LOGGER_NAME}

    def test_from_dict(self):
        config = PolicyManagerConfig.from_dict({"is_debug": True, "logger_name": "app.permissions"})

        assert config.is_debug is True
        assert config.logger_name == "app.permissions"

    @pytest.mark.parametrize("value", ["false", "true", 1, 0, None])
    def test_from_dict_rejects_non_bool_debug(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            PolicyManagerConfig.from_dict({"is_debug": value})

        assert exc_info.value.config_key == "is_debug"
        assert exc_info.value.received == value

    def test_factory_rejects_string_debug(self):
        with pytest.raises(ConfigurationError):
            create_policy_manager_store({"is_debug": "false"})

    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_from_env_enabled(self, monkeypatch, value):
        monkeypatch.setenv(DEBUG_ENV_VAR, value)

        assert PolicyManagerConfig.from_env().is_debug is True

    @pytest.mark.parametrize("value", ["0", "false", "no", "off", ""])
    def test_from_env_disabled(self, monkeypatch, value):
        monkeypatch.setenv(DEBUG_ENV_VAR, value)

        assert PolicyManagerConfig.from_env().is_debug is False

    def test_from_env_unset(self, monkeypatch):
        monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)

        assert PolicyManagerConfig.from_env().is_debug is False

    def test_from_env_invalid(self, monkeypatch):
        monkeypatch.setenv(DEBUG_ENV_VAR, "maybe")

        with pytest.raises(ConfigurationError) as exc_info:
            PolicyManagerConfig.from_env()

        assert exc_info.value.config_key == DEBUG_ENV_VAR
        assert exc_info.value.to_dict()["details"]["received"] == "maybe"


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_missing_rule_outcome_message(self):
        error = MissingRuleOutcomeError("documents")

        assert "documents" in str(error)
        assert error.to_dict()["error_type"] == "MissingRuleOutcomeError"

    def test_configuration_error_message_and_details(self):
        error = ConfigurationError(config_key="is_debug", expected="a bool", received="false")

        assert str(error) == "Invalid is_debug: expected a bool, got 'false'"
        assert error.to_dict()["details"] == {
            "config_key": "is_debug",
            "expected": "a bool",
            "received": "false",
        }
