import pytest

from btc_dca.api import dependencies
from btc_dca.monitoring import error_logging


@pytest.fixture(autouse=True)
def isolated_error_log(tmp_path, monkeypatch):
    """Keep fallback records written during tests out of the repo's datalake/."""
    log_path = tmp_path / "error_log.jsonl"
    monkeypatch.setattr(error_logging, "DEFAULT_ERROR_LOG", log_path)
    monkeypatch.setattr(error_logging, "_configured_error_log", None)
    return log_path


@pytest.fixture(autouse=True)
def fresh_app_config(monkeypatch):
    """get_app_config is cached per process; reset it and its env var around each test."""
    monkeypatch.delenv(dependencies.CONFIG_ENV_VAR, raising=False)
    dependencies.get_app_config.cache_clear()
    yield
    dependencies.get_app_config.cache_clear()
