"""Unit tests for core.config.Settings and core.log.setup_logging."""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from dbexec.core.config import Settings
from dbexec.core.log import setup_logging


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("EXTERNAL_DB_POOL_SIZE", "EXTERNAL_DB_STATEMENT_TIMEOUT", "ENVIRONMENT"):
        monkeypatch.delenv(key, raising=False)
    s = Settings(_env_file=None)
    assert s.EXTERNAL_DB_POOL_SIZE == 5
    assert s.EXTERNAL_DB_STATEMENT_TIMEOUT is None
    assert s.ENVIRONMENT == "local"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXTERNAL_DB_POOL_SIZE", "12")
    monkeypatch.setenv("EXTERNAL_DB_STATEMENT_TIMEOUT", "2.5")
    monkeypatch.setenv("QUERY_EXECUTOR_MAX_WORKERS", "3")
    s = Settings(_env_file=None)
    assert s.EXTERNAL_DB_POOL_SIZE == 12
    assert s.EXTERNAL_DB_STATEMENT_TIMEOUT == 2.5
    assert s.QUERY_EXECUTOR_MAX_WORKERS == 3


def test_settings_reject_invalid_worker_count(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QUERY_EXECUTOR_MAX_WORKERS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@patch("dbexec.core.log.sentry_sdk")
@patch("dbexec.core.log.settings")
def test_setup_logging_inits_sentry_outside_local(
    mock_settings: MagicMock, mock_sentry: MagicMock
) -> None:
    mock_settings.LOG_LEVEL = "info"
    mock_settings.SENTRY_DSN = "https://key@sentry.example.com/1"
    mock_settings.ENVIRONMENT = "production"
    setup_logging()
    mock_sentry.init.assert_called_once_with(
        dsn="https://key@sentry.example.com/1", environment="production"
    )


@patch("dbexec.core.log.sentry_sdk")
@patch("dbexec.core.log.settings")
def test_setup_logging_skips_sentry_locally(
    mock_settings: MagicMock, mock_sentry: MagicMock
) -> None:
    mock_settings.LOG_LEVEL = "DEBUG"
    mock_settings.SENTRY_DSN = "https://key@sentry.example.com/1"
    mock_settings.ENVIRONMENT = "local"
    setup_logging()
    mock_sentry.init.assert_not_called()
