# github.py
from __future__ import annotations

import json
import urllib.error
import urllib.request
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from urllib.parse import quote, urljoin

from pydantic import ValidationError

from .model import Job
from .schemas import JobsResponse, RunPayload, RunsResponse
from .settings import GITHUB_API_URL
from .ui.console import get_console


class APIError(Exception):
    """Raised when GitHub API requests fail."""
    pass


class GitHubClient:
    """Minimal GitHub Actions REST client for fetching finished jobs."""

    def __init__(self, token: str, api_url: str = GITHUB_API_URL):
        """
        Initialize client.

        Args:
            token: GitHub token sent as a bearer credential
            api_url: API base URL (GitHub Enterprise installs differ)
        """
        self.api_url = api_url.rstrip("/")
        self.token = token

    def _get(self, path: str) -> dict:
        """
        GET a JSON document from the API.

        Raises:
            APIError: On HTTP errors, network errors or undecodable JSON
        """
        url = urljoin(self.api_url + "/", path.lstrip("/"))
        req = urllib.request.Request(
            url,
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github+json",
            },
            method="GET",
        )
        try:
            with urllib.request.urlopen(req) as response:
                body = response.read().decode("utf-8")
                return json.loads(body) if body else {}
        except urllib.error.HTTPError as e:
            raise APIError(f"GitHub API returned {e.code} {e.reason}")
        except urllib.error.URLError as e:
            raise APIError(f"Network error: {e.reason}")
        except json.JSONDecodeError as e:
            raise APIError(f"Invalid JSON response: {e}")

    def list_runs(self, repo: str, since: date) -> List[RunPayload]:
        """Workflow runs created on or after `since` (first page, up to 100)."""
        created = quote(f">={since.isoformat()}")
        data = self._get(f"/repos/{repo}/actions/runs?created={created}&per_page=100")
        try:
            return RunsResponse.model_validate(data).workflow_runs
        except ValidationError as e:
            raise APIError(f"Unexpected runs payload: {e}") from e

    def list_jobs(self, repo: str, run_id: int) -> JobsResponse:
        data = self._get(f"/repos/{repo}/actions/runs/{run_id}/jobs?per_page=100")
        try:
            return JobsResponse.model_validate(data)
        except ValidationError as e:
            raise APIError(f"Unexpected jobs payload: {e}") from e

    def fetch_jobs(self, repo: str, days: int, today: Optional[date] = None) -> List[Job]:
        """
        Fetch all jobs of runs created within the last `days` days.

        Each job is tagged with its run's workflow name. Runs whose jobs
        cannot be fetched are skipped.
        """
        console = get_console()
        today = today or datetime.now(timezone.utc).date()
        since = today - timedelta(days=days)

        runs = self.list_runs(repo, since)
        console.print_debug(f"Found {len(runs)} run(s) since {since.isoformat()}")

        jobs: List[Job] = []
        for run in runs:
            try:
                resp = self.list_jobs(repo, run.id)
            except APIError as e:
                console.print_debug(f"Skipping run {run.id} ({run.name}): {e}")
                continue
            jobs.extend(j.to_job(workflow=run.name) for j in resp.jobs)

        console.print_debug(f"Fetched {len(jobs)} job(s) from {len(runs)} run(s)")
        return jobs
