import json

import pytest

from buildburn.cost import calculate_cost
from buildburn.model import group_by_workflow
from buildburn.schemas import InputError, JobPayload, load_jobs_file, parse_jobs

JOB = {
    "name": "build",
    "workflow": "CI",
    "conclusion": "failure",
    "labels": ["ubuntu-latest"],
    "started_at": "2024-05-01T12:00:00Z",
    "completed_at": "2024-05-01T12:10:00Z",
    "steps": [
        {
            "name": "npm ci",
            "conclusion": "success",
            "started_at": "2024-05-01T12:00:00Z",
            "completed_at": "2024-05-01T12:02:00Z",
        },
        {"name": "Post job", "conclusion": None, "started_at": None, "completed_at": None},
    ],
}


class TestJobPayload:

    def test_to_job(self):
        job = JobPayload.model_validate(JOB).to_job()
        assert job.name == "build"
        assert job.workflow == "CI"
        assert job.is_failure
        assert job.minutes == pytest.approx(10)
        assert [s.name for s in job.steps] == ["npm ci", "Post job"]
        assert job.steps[0].minutes == pytest.approx(2)

    def test_null_timestamps_have_no_duration(self):
        job = JobPayload.model_validate(JOB).to_job()
        assert job.steps[1].duration_seconds == 0
        assert job.steps[1].conclusion == ""

    def test_workflow_override(self):
        job = JobPayload.model_validate(JOB).to_job(workflow="Nightly")
        assert job.workflow == "Nightly"

    def test_minimal_payload(self):
        job = JobPayload.model_validate({"name": "x"}).to_job()
        assert job.labels == []
        assert job.steps == []
        assert job.workflow == ""


class TestParseJobs:

    def test_list(self):
        assert len(parse_jobs([JOB, JOB])) == 2

    def test_wrapped_object(self):
        assert len(parse_jobs({"jobs": [JOB]})) == 1

    def test_not_a_list(self):
        with pytest.raises(InputError):
            parse_jobs("nope")

    def test_invalid_record(self):
        with pytest.raises(InputError, match="Invalid job record"):
            parse_jobs([{"labels": []}])


class TestLoadJobsFile:

    def test_load(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps([JOB]), encoding="utf-8")
        jobs = load_jobs_file(path)
        assert jobs[0].name == "build"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputError, match="not found"):
            load_jobs_file(tmp_path / "missing.json")

    def test_bad_json(self, tmp_path):
        path = tmp_path / "jobs.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InputError, match="not valid JSON"):
            load_jobs_file(path)


class TestMixedTimezones:

    def test_naive_timestamps_taken_as_utc(self):
        payload = dict(JOB, started_at="2024-05-01T12:00:00Z", completed_at="2024-05-01T12:10:00", steps=[])
        job = JobPayload.model_validate(payload).to_job()
        assert job.completed_at.tzinfo is not None
        assert job.minutes == pytest.approx(10)

    def test_mixed_step_timestamps_cost_normally(self):
        step = {
            "name": "npm ci",
            "started_at": "2024-05-01T12:00:00",
            "completed_at": "2024-05-01T12:02:00+00:00",
        }
        jobs = parse_jobs([dict(JOB, steps=[step])])
        report = calculate_cost(group_by_workflow(jobs), "linux", 7)
        assert report.total_cost == pytest.approx(10 * 0.008)
        assert [e.minutes for e in report.per_step] == [pytest.approx(2)]
