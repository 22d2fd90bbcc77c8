import os

import pytest

from orchestrator_client.config import ConnectionSettings, PollSettings, Settings


def _valid_settings(**poll) -> Settings:
    return Settings(
        connection=ConnectionSettings(host="orch.example", token="t"),
        poll=PollSettings(**poll),
    )


def test_from_env_defaults(monkeypatch):
    for name in list(os.environ):
        if name.startswith("ORCHESTRATOR_"):
            monkeypatch.delenv(name)

    settings = Settings.from_env()

    assert settings.connection.port == 8143
    assert settings.connection.host == ""
    assert settings.connection.token is None
    assert settings.connection.username is None
    assert settings.connection.ssl_verify is True
    assert settings.connection.timeout_seconds == 30.0
    assert settings.connection.max_retries == 0
    assert settings.poll.poll_interval_seconds == 1.0
    assert settings.poll.max_attempts is None
    assert settings.poll.deadline_seconds is None
    assert settings.environment == "production"


def test_from_env_reads_variables(monkeypatch):
    monkeypatch.setenv("ORCHESTRATOR_HOST", "orch.example")
    monkeypatch.setenv("ORCHESTRATOR_PORT", "9143")
    monkeypatch.setenv("ORCHESTRATOR_USERNAME", "admin")
    monkeypatch.setenv("ORCHESTRATOR_PASSWORD", "pw")
    monkeypatch.setenv("ORCHESTRATOR_SSL_VERIFY", "false")
    monkeypatch.setenv("ORCHESTRATOR_POLL_INTERVAL_SECONDS", "0.5")
    monkeypatch.setenv("ORCHESTRATOR_POLL_MAX_ATTEMPTS", "12")
    monkeypatch.setenv("ORCHESTRATOR_POLL_DEADLINE_SECONDS", "300")
    monkeypatch.setenv("ORCHESTRATOR_ENVIRONMENT", "staging")

    settings = Settings.from_env()

    assert settings.connection.host == "orch.example"
    assert settings.connection.port == 9143
    assert settings.connection.username == "admin"
    assert settings.connection.ssl_verify is False
    assert settings.poll.poll_interval_seconds == 0.5
    assert settings.poll.max_attempts == 12
    assert settings.poll.deadline_seconds == 300.0
    assert settings.environment == "staging"
    settings.validate()


def test_validate_requires_host():
    with pytest.raises(ValueError, match="ORCHESTRATOR_HOST"):
        Settings(connection=ConnectionSettings(token="t")).validate()


def test_validate_requires_credentials():
    with pytest.raises(ValueError, match="ORCHESTRATOR_TOKEN"):
        Settings(connection=ConnectionSettings(host="orch.example", username="admin")).validate()


def test_validate_rejects_bad_port():
    with pytest.raises(ValueError, match="ORCHESTRATOR_PORT"):
        Settings(connection=ConnectionSettings(host="orch.example", token="t", port=0)).validate()


def test_validate_rejects_negative_max_retries():
    settings = Settings(
        connection=ConnectionSettings(host="orch.example", token="t", max_retries=-1)
    )

    with pytest.raises(ValueError, match="ORCHESTRATOR_MAX_RETRIES"):
        settings.validate()


@pytest.mark.parametrize(
    ("poll", "message"),
    [
        ({"poll_interval_seconds": -1}, "POLL_INTERVAL"),
        ({"backoff": 0.5}, "POLL_BACKOFF"),
        ({"poll_interval_seconds": 10, "max_interval_seconds": 5}, "POLL_MAX_INTERVAL"),
        ({"max_attempts": 0}, "POLL_MAX_ATTEMPTS"),
        ({"deadline_seconds": 0}, "POLL_DEADLINE"),
    ],
)
def test_validate_rejects_bad_poll_settings(poll, message):
    with pytest.raises(ValueError, match=message):
        _valid_settings(**poll).validate()
