# -*- coding: utf-8 -*-

"""
Unit tests for the configuration module.
Verifies loading settings from environment variables.
"""

import importlib
import os
from unittest.mock import patch

import pytest

import request_guard.config as config_module


@pytest.fixture(autouse=True)
def restore_config():
    """Reload config with the real environment after each test."""
    yield
    importlib.reload(config_module)


class TestDefaultSchemaObjectConfig:
    """Tests for REQUEST_GUARD_DEFAULT_SCHEMA_OBJECT."""

    def test_default_is_strict(self):
        """
        What it does: Verifies the default when the variable is unset.
        Purpose: Ensure field maps reject extra fields out of the box.
        """
        env = {k: v for k, v in os.environ.items() if k != "REQUEST_GUARD_DEFAULT_SCHEMA_OBJECT"}
        with patch.dict(os.environ, env, clear=True):
            importlib.reload(config_module)

            print(f"DEFAULT_SCHEMA_OBJECT: {config_module.DEFAULT_SCHEMA_OBJECT}")
            assert config_module.DEFAULT_SCHEMA_OBJECT == "strict"

    def test_lax_from_environment(self):
        """What it does: LAX (any case) is accepted."""
        with patch.dict(os.environ, {"REQUEST_GUARD_DEFAULT_SCHEMA_OBJECT": "LAX"}):
            importlib.reload(config_module)

            assert config_module.DEFAULT_SCHEMA_OBJECT == "lax"

    def test_invalid_value_falls_back(self):
        """What it does: unknown values fall back to strict."""
        with patch.dict(os.environ, {"REQUEST_GUARD_DEFAULT_SCHEMA_OBJECT": "loose"}):
            importlib.reload(config_module)

            assert config_module.DEFAULT_SCHEMA_OBJECT == "strict"


class TestMissingSchemaBehaviorConfig:
    """Tests for REQUEST_GUARD_MISSING_SCHEMA_BEHAVIOR."""

    def test_any_from_environment(self):
        with patch.dict(os.environ, {"REQUEST_GUARD_MISSING_SCHEMA_BEHAVIOR": "any"}):
            importlib.reload(config_module)

            assert config_module.MISSING_SCHEMA_BEHAVIOR == "any"

    def test_invalid_value_falls_back(self):
        with patch.dict(os.environ, {"REQUEST_GUARD_MISSING_SCHEMA_BEHAVIOR": "ignore"}):
            importlib.reload(config_module)

            assert config_module.MISSING_SCHEMA_BEHAVIOR == "strict"


class TestMiscConfig:
    """Tests for status code and log level settings."""

    def test_failure_status_from_environment(self):
        with patch.dict(os.environ, {"REQUEST_GUARD_FAILURE_STATUS": "422"}):
            importlib.reload(config_module)

            assert config_module.FAILURE_STATUS_CODE == 422

    def test_log_level_uppercase_conversion(self):
        """What it does: lowercase LOG_LEVEL is upper-cased."""
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}):
            importlib.reload(config_module)

            assert config_module.LOG_LEVEL == "WARNING"
