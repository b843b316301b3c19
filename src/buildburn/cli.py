# cli.py
from __future__ import annotations

import sys
from typing import List

import click

from buildburn import settings
from buildburn.analyzer import analyze
from buildburn.cost import calculate_cost
from buildburn.github import APIError, GitHubClient
from buildburn.model import Job, group_by_workflow
from buildburn.recommendations import generate_recommendations
from buildburn.schemas import InputError, load_jobs_file
from buildburn.ui.console import Console, set_console, get_console


def load_jobs(repo: str | None, input_path: str | None, token: str | None, days: int) -> List[Job]:
    """
    Load job records from a JSON file or from the GitHub API.

    Raises:
        SystemExit: If neither source is usable
    """
    console = get_console()

    if input_path:
        jobs = load_jobs_file(input_path)
        console.print_debug(f"Loaded {len(jobs)} job(s) from {input_path}")
        return jobs

    if not repo:
        console.print_error(
            "No job source given",
            "Specify a repository to fetch from or a JSON file of job records.",
            suggestion="buildburn report --repo owner/repo [--days 7]\n  buildburn report --input jobs.json",
        )
        sys.exit(1)

    token = token or settings.github_token()
    if not token:
        console.print_error(
            "Missing GitHub token",
            "No --token given and GITHUB_TOKEN is not set.",
            suggestion="export GITHUB_TOKEN=<token> or pass --token <token>",
        )
        sys.exit(1)

    client = GitHubClient(token, api_url=settings.GITHUB_API_URL)
    return client.fetch_jobs(repo, days)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """BuildBurn: CI cost attribution and waste finder."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option("--repo", default=None, help="GitHub repo (owner/repo)")
@click.option("--input", "input_path", default=None, help="JSON file of job records instead of the GitHub API")
@click.option("--token", default=None, help="GitHub token (or GITHUB_TOKEN env)")
@click.option("--days", default=settings.DEFAULT_DAYS, type=int, show_default=True, help="Lookback window in days")
@click.option("--format", "out_fmt", type=click.Choice(["table", "json"]), default="table", show_default=True)
@click.option(
    "--mode",
    type=click.Choice(["summary", "cost", "recommendations"]),
    default="summary",
    show_default=True,
    help="Narrative summary, cost attribution or structured recommendations",
)
@click.option("--default-os", default="linux", show_default=True, help="Runner OS for jobs without labels (cost mode)")
@click.pass_context
def report(ctx, repo, input_path, token, days, out_fmt, mode, default_os):
    """Analyze CI job runs and report cost and waste."""
    console = get_console()

    try:
        jobs = load_jobs(repo, input_path, token, days)
        rates = settings.load_rates()

        if mode == "cost":
            result = calculate_cost(group_by_workflow(jobs), default_os, days, rates)
            if out_fmt == "json":
                console.print_json(result.to_dict())
            else:
                console.print_cost_report(result, days)
        elif mode == "recommendations":
            recs = generate_recommendations(jobs, days, rates)
            if out_fmt == "json":
                console.print_json([r.to_dict() for r in recs])
            else:
                console.print_recommendations(recs)
        else:
            summary = analyze(jobs, days, rates)
            if out_fmt == "json":
                console.print_json(summary.to_dict())
            else:
                console.print_summary(summary, days)

    except InputError as e:
        console.print_error(
            "Could not read job records",
            str(e),
            suggestion="Pass a JSON list of jobs, or an object with a 'jobs' list.",
        )
        sys.exit(1)
    except APIError as e:
        console.print_error(
            "Fetch error",
            str(e),
            suggestion="Check the repository name, token permissions and GITHUB_API_URL.",
        )
        if ctx.obj.get("debug", False):
            import traceback
            traceback.print_exc()
        sys.exit(1)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


if __name__ == "__main__":
    cli()
