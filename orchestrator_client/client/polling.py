import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from orchestrator_client.config import PollSettings
from orchestrator_client.errors import (
    Cancelled,
    JobFailed,
    JobNotFound,
    MalformedResponse,
    PollTimeout,
    TransportError,
)
from orchestrator_client.models.job import (
    JobStatusReport,
    StatusPredicate,
    any_failed,
    any_finished,
)
from orchestrator_client.transport.http import TransportResponse

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Not Found"


class PollOutcome(str, Enum):
    PENDING = "pending"
    FINISHED = "finished"
    FAILED = "failed"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class PollEvent:
    job_id: str
    attempt: int
    elapsed_seconds: float
    outcome: PollOutcome
    states: list[str] = field(default_factory=list)


PollObserver = Callable[[PollEvent], None]


class LoggingObserver:
    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def __call__(self, event: PollEvent):
        self.log.info(
            "Waiting for job=%s attempt=%d elapsed=%.1fs outcome=%s states=%s",
            event.job_id,
            event.attempt,
            event.elapsed_seconds,
            event.outcome.value,
            ",".join(event.states) or "-",
        )


class CancelToken:
    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        return self._event.wait(timeout)


def wait_until_finished(
    get_job: Callable[[str], TransportResponse],
    job_id: str,
    *,
    settings: PollSettings | None = None,
    cancel: CancelToken | None = None,
    is_finished: StatusPredicate = any_finished,
    is_failed: StatusPredicate = any_failed,
    observer: PollObserver | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> JobStatusReport:
    """Poll ``get_job`` until ``is_finished`` holds for the job's status report.

    By default a report with any ``failed`` entry (and nothing satisfying
    ``is_finished``) raises ``JobFailed``. Pass ``is_failed=never_failed`` to
    keep polling through failed entries and stop only on completion.
    """
    settings = settings or PollSettings()
    cancel = cancel or CancelToken()
    observer = observer or LoggingObserver()
    started = clock()
    delays = settings.delays()
    attempts = 0

    def emit(outcome: PollOutcome, states: list[str]):
        observer(PollEvent(job_id, attempts, clock() - started, outcome, states))

    while True:
        if cancel.cancelled:
            raise Cancelled(job_id, attempts)
        remaining = _remaining(settings, started, clock)
        if remaining is not None and remaining <= 0:
            raise PollTimeout(job_id, attempts, "deadline elapsed")

        attempts += 1
        try:
            response = get_job(job_id)
        except TransportError:
            emit(PollOutcome.ERROR, [])
            raise
        if response.message == NOT_FOUND_MESSAGE:
            emit(PollOutcome.NOT_FOUND, [])
            raise JobNotFound(job_id)
        try:
            report = JobStatusReport.from_dict(response.json())
        except MalformedResponse as e:
            emit(PollOutcome.ERROR, [])
            raise MalformedResponse(e.message, e.field, job_id) from e

        if is_finished(report):
            emit(PollOutcome.FINISHED, report.states)
            return report
        if is_failed(report):
            emit(PollOutcome.FAILED, report.states)
            raise JobFailed(job_id, report.states)
        emit(PollOutcome.PENDING, report.states)

        if settings.max_attempts is not None and attempts >= settings.max_attempts:
            raise PollTimeout(job_id, attempts, "max attempts reached")
        delay = next(delays)
        remaining = _remaining(settings, started, clock)
        if remaining is not None:
            delay = max(min(delay, remaining), 0)
        if cancel.wait(delay):
            raise Cancelled(job_id, attempts)


def _remaining(settings: PollSettings, started: float, clock: Callable[[], float]) -> float | None:
    if settings.deadline_seconds is None:
        return None
    return settings.deadline_seconds - (clock() - started)
