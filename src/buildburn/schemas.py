# schemas.py
# Payload shapes for job records, mirroring the GitHub Actions REST API.
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .model import Job, Step


class InputError(Exception):
    """Raised when a job records file cannot be read or parsed."""
    pass


def _assume_utc(value: Optional[datetime]) -> Optional[datetime]:
    # GitHub timestamps are UTC; naive values are taken to be UTC too
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class StepPayload(BaseModel):
    name: str
    conclusion: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @field_validator("started_at", "completed_at")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _assume_utc(value)

    def to_step(self) -> Step:
        return Step(
            name=self.name,
            conclusion=self.conclusion or "",
            started_at=self.started_at,
            completed_at=self.completed_at,
        )


class JobPayload(BaseModel):
    name: str
    workflow: Optional[str] = None   # not part of the API payload; set from the run
    conclusion: Optional[str] = None
    labels: List[str] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    steps: List[StepPayload] = Field(default_factory=list)

    @field_validator("started_at", "completed_at")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _assume_utc(value)

    def to_job(self, workflow: str | None = None) -> Job:
        return Job(
            name=self.name,
            workflow=workflow if workflow is not None else (self.workflow or ""),
            conclusion=self.conclusion or "",
            labels=list(self.labels),
            started_at=self.started_at,
            completed_at=self.completed_at,
            steps=[s.to_step() for s in self.steps],
        )


class JobsResponse(BaseModel):
    jobs: List[JobPayload] = Field(default_factory=list)


class RunPayload(BaseModel):
    id: int
    name: str = ""


class RunsResponse(BaseModel):
    workflow_runs: List[RunPayload] = Field(default_factory=list)


def parse_jobs(data: Any) -> List[Job]:
    """Accept either a list of job payloads or an object with a "jobs" list."""
    if isinstance(data, dict):
        data = data.get("jobs", [])
    if not isinstance(data, list):
        raise InputError("Expected a list of jobs or an object with a 'jobs' list")
    try:
        return [JobPayload.model_validate(item).to_job() for item in data]
    except ValidationError as e:
        raise InputError(f"Invalid job record: {e}") from e


def load_jobs_file(path: str | Path) -> List[Job]:
    """Load job records from a JSON file."""
    p = Path(path).expanduser()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise InputError(f"Input file not found: {p}") from e
    except json.JSONDecodeError as e:
        raise InputError(f"Input file is not valid JSON: {e}") from e
    return parse_jobs(data)
