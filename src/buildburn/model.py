# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True)
class Step:
    """A single step inside a CI job, as observed after it ran."""
    name: str
    conclusion: str = ""
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        return _elapsed(self.started_at, self.completed_at)

    @property
    def minutes(self) -> float:
        return self.duration_seconds / 60.0

    @property
    def is_failure(self) -> bool:
        return self.conclusion == "failure"


@dataclass(frozen=True)
class Job:
    """
    A finished CI job: timing, runner labels and the steps it executed.

    `workflow` is the name of the workflow run the job belonged to.
    Steps keep their execution order.
    """
    name: str
    workflow: str = ""
    conclusion: str = ""
    labels: List[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    steps: List[Step] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        return _elapsed(self.started_at, self.completed_at)

    @property
    def minutes(self) -> float:
        return self.duration_seconds / 60.0

    @property
    def is_failure(self) -> bool:
        return self.conclusion == "failure"


@dataclass(frozen=True)
class Workflow:
    """Jobs grouped under one workflow name for reporting."""
    name: str
    jobs: List[Job] = field(default_factory=list)


def _elapsed(start: Optional[datetime], end: Optional[datetime]) -> float:
    # missing timestamps count as no duration at all
    if start is None or end is None:
        return 0.0
    # naive and aware timestamps cannot be subtracted
    if (start.tzinfo is None) != (end.tzinfo is None):
        return 0.0
    return (end - start).total_seconds()


def group_by_workflow(jobs: Iterable[Job]) -> List[Workflow]:
    """Group jobs by workflow name, keeping first-seen workflow order."""
    grouped: Dict[str, List[Job]] = {}
    for job in jobs:
        grouped.setdefault(job.workflow, []).append(job)
    return [Workflow(name=name, jobs=wf_jobs) for name, wf_jobs in grouped.items()]
