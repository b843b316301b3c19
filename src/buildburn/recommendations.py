# recommendations.py
# Structured optimization recommendations.
#
# Each detector scans the whole job collection for one inefficiency pattern
# and returns zero or more findings. generate_recommendations() runs them in a
# fixed order and concatenates the results; nothing is merged or deduplicated.

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Sequence

from .model import Job
from .rates import DEFAULT_RATES, RateTable, has_platform, runner_rate

INSTALL_KEYWORDS = ["install", "npm ci", "pip install", "go mod download"]

CACHE_MISS_MIN_SECONDS = 60
CACHE_SAVINGS_RATIO = 0.7

CHECKOUT_MIN_SECONDS = 30
CHECKOUT_SAVINGS_RATIO = 0.5

# flat estimate per redundant job, USD/month
DUPLICATE_STEP_UNIT_COST = 5.0

EXPENSIVE_OS_MIN_MINUTES = 5


@dataclass(frozen=True)
class Recommendation:
    """A single optimization suggestion."""
    rule_id: str
    severity: str  # "high" | "medium" | "low"
    estimated_monthly_savings: float
    fix: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


Detector = Callable[[Sequence[Job], int, RateTable], List[Recommendation]]


def monthly_scale(days: int) -> float:
    """Multiplier extrapolating an observed window to 30 days."""
    if days <= 0:
        days = 1
    return 30.0 / days


def detect_cache_miss(
    jobs: Sequence[Job], days: int, rates: RateTable = DEFAULT_RATES
) -> List[Recommendation]:
    """
    Flag dependency-install steps (install, npm ci, pip install,
    go mod download) slower than 60 seconds; caching saves ~70% of them.
    """
    scale = monthly_scale(days)
    recs: List[Recommendation] = []
    for job in jobs:
        rate = runner_rate(job.labels, rates)
        for step in job.steps:
            dur_sec = step.duration_seconds
            if dur_sec <= CACHE_MISS_MIN_SECONDS:
                continue
            name = step.name.lower()
            if not any(kw in name for kw in INSTALL_KEYWORDS):
                continue

            saved_min = dur_sec * CACHE_SAVINGS_RATIO / 60.0
            recs.append(
                Recommendation(
                    rule_id="cache-miss",
                    severity="high",
                    estimated_monthly_savings=saved_min * rate * scale,
                    fix=(
                        f"Add actions/cache for step '{step.name}' (took {dur_sec:.0f}s). "
                        "Caching dependencies can reduce this step by ~70%."
                    ),
                )
            )
    return recs


def detect_long_checkout(
    jobs: Sequence[Job], days: int, rates: RateTable = DEFAULT_RATES
) -> List[Recommendation]:
    """Flag checkout steps slower than 30 seconds; a shallow clone saves ~50%."""
    scale = monthly_scale(days)
    recs: List[Recommendation] = []
    for job in jobs:
        rate = runner_rate(job.labels, rates)
        for step in job.steps:
            dur_sec = step.duration_seconds
            if dur_sec <= CHECKOUT_MIN_SECONDS:
                continue
            if "checkout" not in step.name.lower():
                continue

            saved_min = dur_sec * CHECKOUT_SAVINGS_RATIO / 60.0
            recs.append(
                Recommendation(
                    rule_id="long-checkout",
                    severity="low",
                    estimated_monthly_savings=saved_min * rate * scale,
                    fix=(
                        f"Use shallow clone (fetch-depth: 1) for step '{step.name}' "
                        f"(took {dur_sec:.0f}s). This can cut checkout time by ~50%."
                    ),
                )
            )
    return recs


def detect_duplicate_steps(
    jobs: Sequence[Job], days: int, rates: RateTable = DEFAULT_RATES
) -> List[Recommendation]:
    """
    Flag step names shared by two or more distinct job names across the whole
    input. Savings are a flat estimate per redundant job, independent of the
    observation window.
    """
    # step name -> job names containing it, in first-seen order
    step_jobs: Dict[str, Dict[str, None]] = {}
    for job in jobs:
        for step in job.steps:
            step_jobs.setdefault(step.name, {})[job.name] = None

    recs: List[Recommendation] = []
    for step_name, job_names in step_jobs.items():
        count = len(job_names)
        if count < 2:
            continue
        recs.append(
            Recommendation(
                rule_id="duplicate-steps",
                severity="medium",
                estimated_monthly_savings=(count - 1) * DUPLICATE_STEP_UNIT_COST,
                fix=(
                    f"Step '{step_name}' appears in {count} jobs. Consider using a matrix "
                    "strategy or reusable workflow to reduce duplication."
                ),
            )
        )
    return recs


def detect_expensive_os(
    jobs: Sequence[Job], days: int, rates: RateTable = DEFAULT_RATES
) -> List[Recommendation]:
    """Flag macOS jobs running longer than 5 minutes."""
    scale = monthly_scale(days)
    recs: List[Recommendation] = []
    for job in jobs:
        if not has_platform(job.labels, "macos"):
            continue
        dur_min = job.minutes
        if dur_min <= EXPENSIVE_OS_MIN_MINUTES:
            continue

        recs.append(
            Recommendation(
                rule_id="expensive-os",
                severity="high",
                estimated_monthly_savings=dur_min * (rates.high - rates.low) * scale,
                fix=(
                    f"Job '{job.name}' runs on macOS for {dur_min:.1f} min "
                    f"(${dur_min * rates.high:.2f}/run). macOS runners cost 10x Linux. "
                    "Move non-GUI tests to ubuntu-latest to save ~90%."
                ),
            )
        )
    return recs


DETECTORS: List[Detector] = [
    detect_cache_miss,
    detect_long_checkout,
    detect_duplicate_steps,
    detect_expensive_os,
]


def generate_recommendations(
    jobs: Sequence[Job],
    days: int,
    rates: RateTable = DEFAULT_RATES,
    detectors: Sequence[Detector] = DETECTORS,
) -> List[Recommendation]:
    """Run every detector in order and concatenate their findings."""
    jobs = list(jobs)
    recs: List[Recommendation] = []
    for detector in detectors:
        recs.extend(detector(jobs, days, rates))
    return recs
