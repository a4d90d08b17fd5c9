"""
Unit tests for configuration management (flat Settings).

Tests cover:
- Default values
- Loading from RBAC_* environment variables
- Validation (log level, timeout, cache TTL, cache backend)
- Cached singleton behavior
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from rbac.core.config import Settings, get_settings
from rbac.core.enums import Environment
from rbac.domain.enums import RulePathPolicy


@pytest.mark.unit
class TestSettingsDefaults:
    """Test default values."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.log_level == "INFO"
        assert settings.rule_path_policy == RulePathPolicy.ALL_ALONG_PATH
        assert settings.check_timeout_seconds is None
        assert settings.hierarchy_cache_enabled is False
        assert settings.hierarchy_cache_ttl_seconds == 300
        assert settings.redis_url is None
        assert settings.is_development is True
        assert settings.is_production is False


@pytest.mark.unit
class TestSettingsFromEnvironment:
    """Test env-driven loading."""

    def test_reads_prefixed_variables(self):
        env = {
            "RBAC_ENVIRONMENT": "production",
            "RBAC_LOG_LEVEL": "debug",
            "RBAC_RULE_PATH_POLICY": "target_only",
            "RBAC_CHECK_TIMEOUT_SECONDS": "0.5",
            "RBAC_HIERARCHY_CACHE_ENABLED": "true",
            "RBAC_REDIS_URL": "redis://cache:6379/0",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = get_settings()

        assert settings.is_production is True
        assert settings.log_level == "DEBUG"
        assert settings.rule_path_policy == RulePathPolicy.TARGET_ONLY
        assert settings.check_timeout_seconds == 0.5
        assert settings.hierarchy_cache_enabled is True
        assert settings.redis_url == "redis://cache:6379/0"

    def test_unprefixed_variables_are_ignored(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}, clear=True):
            settings = Settings()

        assert settings.log_level == "INFO"

    def test_get_settings_is_cached(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_settings() is get_settings()


@pytest.mark.unit
class TestSettingsValidation:
    """Test field validation."""

    def test_invalid_log_level_rejected(self):
        with patch.dict(os.environ, {"RBAC_LOG_LEVEL": "verbose"}, clear=True):
            with pytest.raises(ValidationError):
                Settings()

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_non_positive_timeout_rejected(self, value):
        with patch.dict(os.environ, {"RBAC_CHECK_TIMEOUT_SECONDS": value}, clear=True):
            with pytest.raises(ValidationError):
                Settings()

    def test_non_positive_cache_ttl_rejected(self):
        with patch.dict(os.environ, {"RBAC_HIERARCHY_CACHE_TTL_SECONDS": "0"}, clear=True):
            with pytest.raises(ValidationError):
                Settings()

    def test_cache_requires_redis_url(self):
        with patch.dict(os.environ, {"RBAC_HIERARCHY_CACHE_ENABLED": "true"}, clear=True):
            with pytest.raises(ValidationError, match="redis_url"):
                Settings()

    def test_unknown_policy_rejected(self):
        with patch.dict(os.environ, {"RBAC_RULE_PATH_POLICY": "first_match"}, clear=True):
            with pytest.raises(ValidationError):
                Settings()
