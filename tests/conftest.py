import json

import pytest

from orchestrator_client.client.jobs import JobClient
from orchestrator_client.config import PollSettings
from orchestrator_client.transport.http import TransportResponse


def _make_response(body, status_code: int = 200, message: str = "OK") -> TransportResponse:
    text = body if isinstance(body, str) else json.dumps(body)
    return TransportResponse(status_code=status_code, message=message, body=text)


def _status_body(*states: str) -> dict:
    return {"status": [{"state": state} for state in states]}


class FakeTransport:
    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls: list[tuple] = []
        self.on_get = None

    def get(self, uri: str) -> TransportResponse:
        self.calls.append(("GET", uri, None))
        if self.on_get:
            self.on_get(len(self.calls))
        return self._next()

    def post(self, uri: str, body) -> TransportResponse:
        self.calls.append(("POST", uri, body))
        return self._next()

    def _next(self) -> TransportResponse:
        if not self.responses:
            return _make_response({"job": {"name": "1"}})
        return self.responses.pop(0)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def events():
    return []


@pytest.fixture
def client(transport, events):
    return JobClient(
        transport,
        poll_settings=PollSettings(poll_interval_seconds=0),
        observer=events.append,
    )


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def status_body():
    return _status_body
