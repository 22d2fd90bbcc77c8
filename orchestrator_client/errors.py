class OrchestratorError(Exception):
    pass


class InvalidArgument(OrchestratorError, ValueError):
    pass


class TransportError(OrchestratorError, ConnectionError):
    def __init__(self, method: str, uri: str, reason: str):
        super().__init__(f"{method} {uri} failed: {reason}")
        self.method = method
        self.uri = uri
        self.reason = reason


class MalformedResponse(OrchestratorError, ValueError):
    def __init__(self, message: str, field: str | None = None, job_id: str | None = None):
        detail = message if field is None else f"{message} (field: {field})"
        super().__init__(detail if job_id is None else f"job {job_id}: {detail}")
        self.message = message
        self.field = field
        self.job_id = job_id


class JobNotFound(OrchestratorError, LookupError):
    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id} not found.")
        self.job_id = job_id


class JobFailed(OrchestratorError):
    def __init__(self, job_id: str, states: list[str]):
        super().__init__(f"Job {job_id} failed (states: {', '.join(states)})")
        self.job_id = job_id
        self.states = states


class Cancelled(OrchestratorError):
    def __init__(self, job_id: str, attempts: int):
        super().__init__(f"Waiting for job {job_id} cancelled after {attempts} poll(s)")
        self.job_id = job_id
        self.attempts = attempts


class PollTimeout(OrchestratorError, TimeoutError):
    def __init__(self, job_id: str, attempts: int, reason: str):
        super().__init__(f"Job {job_id} did not finish: {reason} after {attempts} poll(s)")
        self.job_id = job_id
        self.attempts = attempts
        self.reason = reason
