from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from orchestrator_client.errors import InvalidArgument, MalformedResponse


class JobState(str, Enum):
    NEW = "new"
    READY = "ready"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FINISHED = "finished"
    FAILED = "failed"


@dataclass
class JobScope:
    nodes: list[str]

    def __post_init__(self):
        if isinstance(self.nodes, str) or not isinstance(self.nodes, Sequence):
            raise InvalidArgument("scope nodes must be a list of node names")
        if not self.nodes:
            raise InvalidArgument("scope nodes must not be empty")
        if not all(isinstance(node, str) and node for node in self.nodes):
            raise InvalidArgument("scope nodes must be non-empty strings")
        self.nodes = list(self.nodes)

    def to_dict(self) -> dict:
        return {"nodes": list(self.nodes)}


@dataclass
class JobRequest:
    task: str
    scope: JobScope
    environment: str = "production"
    params: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.task, str) or not self.task:
            raise InvalidArgument("task must be a non-empty string")
        if not isinstance(self.environment, str) or not self.environment:
            raise InvalidArgument("environment must be a non-empty string")

    def to_dict(self) -> dict:
        return {
            "environment": self.environment,
            "task": self.task,
            "params": dict(self.params),
            "scope": self.scope.to_dict(),
        }


@dataclass(frozen=True)
class CreatedJob:
    name: str
    id: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "CreatedJob":
        if not isinstance(data, dict):
            raise MalformedResponse("creation response is not an object")
        job = data.get("job")
        if not isinstance(job, dict):
            raise MalformedResponse("creation response has no job object", "job")
        name = job.get("name")
        if not isinstance(name, str) or not name:
            raise MalformedResponse("creation response has no job name", "job.name")
        job_url = job.get("id")
        return cls(name=name, id=job_url if isinstance(job_url, str) else None)


@dataclass(frozen=True)
class StatusEntry:
    state: str
    enter_time: str | None = None
    exit_time: str | None = None

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> "StatusEntry":
        if not isinstance(data, dict):
            raise MalformedResponse("status entry is not an object", f"status[{index}]")
        state = data.get("state")
        if not isinstance(state, str):
            raise MalformedResponse("status entry has no state", f"status[{index}].state")
        return cls(state=state, enter_time=data.get("enter_time"), exit_time=data.get("exit_time"))


@dataclass(frozen=True)
class JobStatusReport:
    status: list[StatusEntry]

    @property
    def states(self) -> list[str]:
        return [entry.state for entry in self.status]

    @property
    def is_finished(self) -> bool:
        return any_finished(self)

    @classmethod
    def from_dict(cls, data: Any) -> "JobStatusReport":
        if not isinstance(data, dict):
            raise MalformedResponse("status report is not an object")
        entries = data.get("status")
        if not isinstance(entries, list):
            raise MalformedResponse("status report has no status list", "status")
        return cls(status=[StatusEntry.from_dict(e, i) for i, e in enumerate(entries)])


StatusPredicate = Callable[[JobStatusReport], bool]


def any_finished(report: JobStatusReport) -> bool:
    return any(entry.state == JobState.FINISHED.value for entry in report.status)


def all_finished(report: JobStatusReport) -> bool:
    # an empty report has nothing finished yet
    return bool(report.status) and all(
        entry.state == JobState.FINISHED.value for entry in report.status
    )


def any_failed(report: JobStatusReport) -> bool:
    return any(entry.state == JobState.FAILED.value for entry in report.status)


def never_failed(report: JobStatusReport) -> bool:
    return False
