"""Tests for configuration loading and client construction."""

import json

import pydantic
import pytest
import structlog

from sftpgo_admin import config, restapi


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "url": "http://sftpgo.test:8080",
                "username": "admin",
                "password": "secret",
                "timeout": 7.5,
                "log_level": "debug",
            },
        ),
    )
    return path


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


def test_load_config(config_file):
    cfg = config.load_config(str(config_file))

    assert cfg.url == "http://sftpgo.test:8080"
    assert cfg.username == "admin"
    assert cfg.password.get_secret_value() == "secret"
    assert cfg.timeout == 7.5
    assert cfg.token_timeout == restapi.DEFAULT_TOKEN_TIMEOUT


def test_password_hidden_in_repr(config_file):
    cfg = config.load_config(str(config_file))
    assert "secret" not in repr(cfg)


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="not found"):
        config.load_config(str(tmp_path / "missing.json"))


def test_load_config_malformed_json(tmp_path):
    """A file that is not JSON fails with the same error as bad values."""
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with pytest.raises(pydantic.ValidationError):
        config.load_config(str(path))


def test_load_config_rejects_invalid_timeout(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"url": "http://x", "username": "a", "password": "b", "timeout": 0}),
    )

    with pytest.raises(pydantic.ValidationError):
        config.load_config(str(path))


def test_load_config_requires_credentials(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"url": "http://x"}))

    with pytest.raises(pydantic.ValidationError):
        config.load_config(str(path))


def test_create_client(config_file):
    cfg = config.load_config(str(config_file))

    with config.create_client(cfg) as api_client:
        assert isinstance(api_client, restapi.SftpgoApiClient)
        assert api_client.base_url == "http://sftpgo.test:8080"


def test_create_client_from_env(config_file, monkeypatch):
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(config_file))

    with config.create_client_from_config() as api_client:
        assert api_client.base_url == "http://sftpgo.test:8080"


def test_explicit_path_wins_over_env(config_file, monkeypatch, tmp_path):
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(tmp_path / "missing.json"))

    with config.create_client_from_config(str(config_file)) as api_client:
        assert api_client.base_url == "http://sftpgo.test:8080"
