# tests/unit/core/test_config.py
from __future__ import annotations

import pytest

from fitflow.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
)


@pytest.mark.parametrize(
    ("env", "expected"),
    [("production", ProductionConfig), ("Testing", TestingConfig), ("unknown", DevelopmentConfig)],
)
def test_get_config_follows_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)

    assert get_config() is expected


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("FITFLOW_FLAG", " Yes ")
    monkeypatch.setenv("FITFLOW_LIMIT", "0")
    monkeypatch.setenv("FITFLOW_WORKERS", "8")

    assert env_bool("FITFLOW_FLAG") is True
    assert env_bool("FITFLOW_MISSING", True) is True
    assert env_int("FITFLOW_LIMIT", 50) == 50
    assert env_int("FITFLOW_WORKERS", 4) == 8
    assert env_int("FITFLOW_MISSING", 4) == 4


def test_testing_config_propagates_exceptions():
    assert TestingConfig.TESTING is True
    assert TestingConfig.PROPAGATE_EXCEPTIONS is True
    assert TestingConfig.API_BASE_PREFIX == "/api"
