import logging
from collections.abc import Sequence
from typing import Any

from orchestrator_client.client.polling import CancelToken, PollObserver, wait_until_finished
from orchestrator_client.config import PollSettings, Settings
from orchestrator_client.errors import InvalidArgument
from orchestrator_client.models.job import (
    CreatedJob,
    JobRequest,
    JobScope,
    JobStatusReport,
    StatusPredicate,
    any_failed,
    any_finished,
)
from orchestrator_client.transport.http import (
    OrchestratorHttp,
    Transport,
    TransportResponse,
    make_pagination_params,
)

logger = logging.getLogger(__name__)

JOBS_URI = "orchestrator/v1/jobs"
TASK_URI = "/command/task"
FACTS_TASK = "facts"


class JobClient:
    def __init__(
        self,
        transport: Transport,
        *,
        environment: str = "production",
        poll_settings: PollSettings | None = None,
        observer: PollObserver | None = None,
    ):
        self.transport = transport
        self.environment = environment
        self.poll_settings = poll_settings or PollSettings()
        self.observer = observer

    @classmethod
    def from_settings(cls, settings: Settings, observer: PollObserver | None = None) -> "JobClient":
        settings.validate()
        return cls(
            OrchestratorHttp.from_settings(settings.connection),
            environment=settings.environment,
            poll_settings=settings.poll,
            observer=observer,
        )

    def list_jobs(self) -> TransportResponse:
        return self.transport.get(JOBS_URI)

    def get_job(self, job_id: str, limit: int = 0, offset: int = 0) -> TransportResponse:
        if not job_id:
            raise InvalidArgument("job_id must not be empty")
        return self.transport.get(make_pagination_params(f"{JOBS_URI}/{job_id}", limit, offset))

    def submit_facts_job(self, nodes: Sequence[str]) -> TransportResponse:
        request = JobRequest(task=FACTS_TASK, scope=JobScope(nodes), environment=self.environment)
        logger.debug("Submitting facts job for %d node(s)", len(request.scope.nodes))
        return self.transport.post(JOBS_URI, request.to_dict())

    def submit_job(self, body: Any) -> TransportResponse:
        return self.transport.post(TASK_URI, body)

    @staticmethod
    def extract_job_id(response: TransportResponse) -> str:
        return CreatedJob.from_dict(response.json()).name

    def wait_until_finished(
        self,
        job_id: str,
        *,
        cancel: CancelToken | None = None,
        is_finished: StatusPredicate = any_finished,
        is_failed: StatusPredicate = any_failed,
        settings: PollSettings | None = None,
    ) -> JobStatusReport:
        """Block until the job finishes. Raises ``JobFailed`` on a failed entry unless
        ``is_failed=never_failed`` is passed."""
        if not job_id:
            raise InvalidArgument("job_id must not be empty")
        return wait_until_finished(
            self.get_job,
            job_id,
            settings=settings or self.poll_settings,
            cancel=cancel,
            is_finished=is_finished,
            is_failed=is_failed,
            observer=self.observer,
        )

    def run_facts_job(
        self,
        nodes: Sequence[str],
        *,
        cancel: CancelToken | None = None,
        is_finished: StatusPredicate = any_finished,
    ) -> str:
        job_id = self.extract_job_id(self.submit_facts_job(nodes))
        logger.info("Facts job %s submitted for %s", job_id, ", ".join(nodes))
        self.wait_until_finished(job_id, cancel=cancel, is_finished=is_finished)
        return job_id
