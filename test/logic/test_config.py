"""Tests for client configuration resolution."""

import pytest

from protorunner.util import ClientConfig, load_client_config
from protorunner.util.defaults import API_URL_ENV_VAR, DEFAULT_API_URL


@pytest.fixture(autouse=True)
def no_env_url(monkeypatch):
    monkeypatch.delenv(API_URL_ENV_VAR, raising=False)


def _write(tmp_path, text):
    path = tmp_path / "config.ini"
    path.write_text(text)
    return path


def test_defaults_when_file_missing(tmp_path):
    config = load_client_config(tmp_path / "missing.ini")
    assert config == ClientConfig()
    assert config.api_url == DEFAULT_API_URL
    assert config.simulate is True


def test_ini_file(tmp_path):
    path = _write(
        tmp_path,
        "[client]\n"
        "api_url = http://robot-host:8000/\n"
        "timeout = 60\n"
        "tick_interval = 0.25\n"
        "simulate = no\n",
    )
    config = load_client_config(path)
    assert config.api_url == "http://robot-host:8000"
    assert config.timeout == 60.0
    assert config.tick_interval == 0.25
    assert config.simulate is False


def test_partial_ini_file(tmp_path):
    path = _write(tmp_path, "[client]\ntimeout = 5\n")
    config = load_client_config(path)
    assert config.timeout == 5.0
    assert config.api_url == DEFAULT_API_URL


def test_ini_without_section(tmp_path):
    path = _write(tmp_path, "[server]\nport = 8000\n")
    assert load_client_config(path) == ClientConfig()


def test_ini_bad_value(tmp_path):
    path = _write(tmp_path, "[client]\ntimeout = soon\n")
    with pytest.raises(ValueError, match="Invalid value in config file"):
        load_client_config(path)


def test_env_overrides_file(tmp_path, monkeypatch):
    path = _write(tmp_path, "[client]\napi_url = http://from-file:8000\n")
    monkeypatch.setenv(API_URL_ENV_VAR, "http://from-env:9000")
    assert load_client_config(path).api_url == "http://from-env:9000"


def test_explicit_overrides_win(tmp_path, monkeypatch):
    monkeypatch.setenv(API_URL_ENV_VAR, "http://from-env:9000")
    config = load_client_config(
        tmp_path / "missing.ini",
        api_url="http://from-cli:7000/",
        timeout=None,
        simulate=False,
    )
    assert config.api_url == "http://from-cli:7000"
    assert config.timeout == ClientConfig().timeout
    assert config.simulate is False
