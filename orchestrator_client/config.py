"""Runtime configuration for the orchestrator connection and job polling."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_PORT = 8143


@dataclass(slots=True)
class ConnectionSettings:
    """Where the orchestrator lives and how to authenticate against it."""

    host: str = ""
    port: int = DEFAULT_PORT
    token: str | None = None
    username: str | None = None
    password: str | None = None
    ssl_verify: bool = True
    timeout_seconds: float = 30.0
    max_retries: int = 0


@dataclass(slots=True)
class PollSettings:
    """Bounds for waiting on a job.

    ``max_attempts`` and ``deadline_seconds`` of ``None`` mean unbounded. The
    delay between polls starts at ``poll_interval_seconds`` and is multiplied
    by ``backoff`` after every unfinished poll, capped at
    ``max_interval_seconds``.
    """

    poll_interval_seconds: float = 1.0
    backoff: float = 1.0
    max_interval_seconds: float = 30.0
    max_attempts: int | None = None
    deadline_seconds: float | None = None

    def delays(self):
        delay = self.poll_interval_seconds
        while True:
            yield delay
            delay = min(delay * self.backoff, self.max_interval_seconds)

    def validate(self) -> None:
        if self.poll_interval_seconds < 0:
            raise ValueError("ORCHESTRATOR_POLL_INTERVAL_SECONDS must be >= 0.")
        if self.backoff < 1:
            raise ValueError("ORCHESTRATOR_POLL_BACKOFF must be >= 1.")
        if self.max_interval_seconds < self.poll_interval_seconds:
            raise ValueError(
                "ORCHESTRATOR_POLL_MAX_INTERVAL_SECONDS must be >= the poll interval."
            )
        if self.max_attempts is not None and self.max_attempts <= 0:
            raise ValueError("ORCHESTRATOR_POLL_MAX_ATTEMPTS must be a positive integer.")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ValueError("ORCHESTRATOR_POLL_DEADLINE_SECONDS must be > 0.")


@dataclass(slots=True)
class Settings:
    """Client settings grouped by concern."""

    connection: ConnectionSettings = field(default_factory=ConnectionSettings)
    poll: PollSettings = field(default_factory=PollSettings)
    environment: str = "production"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from ``ORCHESTRATOR_*`` environment variables."""

        return cls(
            connection=ConnectionSettings(
                host=os.getenv("ORCHESTRATOR_HOST", "").strip(),
                port=int(os.getenv("ORCHESTRATOR_PORT", str(DEFAULT_PORT))),
                token=os.getenv("ORCHESTRATOR_TOKEN") or None,
                username=os.getenv("ORCHESTRATOR_USERNAME") or None,
                password=os.getenv("ORCHESTRATOR_PASSWORD") or None,
                ssl_verify=_env_bool("ORCHESTRATOR_SSL_VERIFY", default=True),
                timeout_seconds=float(os.getenv("ORCHESTRATOR_TIMEOUT_SECONDS", "30.0")),
                max_retries=int(os.getenv("ORCHESTRATOR_MAX_RETRIES", "0")),
            ),
            poll=PollSettings(
                poll_interval_seconds=float(
                    os.getenv("ORCHESTRATOR_POLL_INTERVAL_SECONDS", "1.0"),
                ),
                backoff=float(os.getenv("ORCHESTRATOR_POLL_BACKOFF", "1.0")),
                max_interval_seconds=float(
                    os.getenv("ORCHESTRATOR_POLL_MAX_INTERVAL_SECONDS", "30.0"),
                ),
                max_attempts=_env_optional_int("ORCHESTRATOR_POLL_MAX_ATTEMPTS"),
                deadline_seconds=_env_optional_float("ORCHESTRATOR_POLL_DEADLINE_SECONDS"),
            ),
            environment=os.getenv("ORCHESTRATOR_ENVIRONMENT", "production"),
        )

    def validate(self) -> None:
        """Raise configuration error if the connection or polling settings are unusable."""

        if not self.connection.host:
            raise ValueError("ORCHESTRATOR_HOST is required.")
        if not 0 < self.connection.port < 65536:
            raise ValueError(f"ORCHESTRATOR_PORT out of range: {self.connection.port}")
        if not self.connection.token and not (
            self.connection.username and self.connection.password
        ):
            raise ValueError(
                "Set ORCHESTRATOR_TOKEN or both ORCHESTRATOR_USERNAME and ORCHESTRATOR_PASSWORD."
            )
        if self.connection.timeout_seconds <= 0:
            raise ValueError("ORCHESTRATOR_TIMEOUT_SECONDS must be > 0.")
        if self.connection.max_retries < 0:
            raise ValueError("ORCHESTRATOR_MAX_RETRIES must be >= 0.")
        if not self.environment:
            raise ValueError("ORCHESTRATOR_ENVIRONMENT must not be empty.")
        self.poll.validate()


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_optional_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


def _env_optional_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None
