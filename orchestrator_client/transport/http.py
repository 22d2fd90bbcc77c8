import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urlencode

import requests
import urllib3
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth
from urllib3.util.retry import Retry

from orchestrator_client.config import DEFAULT_PORT, ConnectionSettings
from orchestrator_client.errors import InvalidArgument, MalformedResponse, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    message: str
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except (TypeError, ValueError) as err:
            raise MalformedResponse(
                f"response body is not valid JSON (HTTP {self.status_code} {self.message})"
            ) from err


class Transport(Protocol):
    def get(self, uri: str) -> TransportResponse: ...

    def post(self, uri: str, body: Any) -> TransportResponse: ...


def make_pagination_params(uri: str, limit: int = 0, offset: int = 0) -> str:
    if limit < 0 or offset < 0:
        raise InvalidArgument(f"limit and offset must be >= 0, got {limit} and {offset}")
    params = {}
    if limit:
        params["limit"] = limit
    if offset:
        params["offset"] = offset
    if not params:
        return uri
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}{urlencode(params)}"


class OrchestratorHttp:
    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        token: str | None = None,
        username: str | None = None,
        password: str | None = None,
        ssl_verify: bool = True,
        timeout: float = 30.0,
        max_retries: int = 0,
    ):
        if not host:
            raise InvalidArgument("host is required")
        if max_retries < 0:
            raise InvalidArgument(f"max_retries must be >= 0, got {max_retries}")
        self.base_url = f"https://{host}:{port}/"
        self.timeout = timeout
        self.session = requests.Session()
        self.session.verify = ssl_verify
        self.session.headers.update(
            {"Content-Type": "application/json", "Accept": "application/json"}
        )
        if token:
            self.session.headers["X-Authentication"] = token
        elif username and password:
            self.session.auth = HTTPBasicAuth(username, password)
        if not ssl_verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
        if max_retries:
            # connection errors only; a re-sent POST would submit the job twice
            retry = Retry(
                total=max_retries, connect=max_retries, read=0, status=0, backoff_factor=0.5
            )
            self.session.mount("https://", HTTPAdapter(max_retries=retry))

    @classmethod
    def from_settings(cls, settings: ConnectionSettings) -> "OrchestratorHttp":
        return cls(
            settings.host,
            settings.port,
            token=settings.token,
            username=settings.username,
            password=settings.password,
            ssl_verify=settings.ssl_verify,
            timeout=settings.timeout_seconds,
            max_retries=settings.max_retries,
        )

    def url_for(self, uri: str) -> str:
        return self.base_url + uri.lstrip("/")

    def get(self, uri: str) -> TransportResponse:
        return self._request("GET", uri)

    def post(self, uri: str, body: Any) -> TransportResponse:
        return self._request("POST", uri, body)

    def _request(self, method: str, uri: str, body: Any = None) -> TransportResponse:
        url = self.url_for(uri)
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                data=None if body is None else json.dumps(body),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(method, uri, str(e)) from e
        if not response.ok:
            logger.debug(
                "%s %s returned %s %s", method, url, response.status_code, response.reason
            )
        return TransportResponse(
            status_code=response.status_code,
            message=response.reason or "",
            body=response.text,
        )

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
