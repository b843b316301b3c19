# analyzer.py
# Narrative summary report: totals, hottest steps by accumulated minutes,
# detected waste and plain-language suggestions.
#
# Its waste heuristics are tuned separately from recommendations.py and use
# different thresholds and cost formulas on purpose; keep them independent.

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .model import Job, Step
from .rates import DEFAULT_RATES, RateTable, Tier, runner_rate, tier_for_labels

TOP_STEPS = 10
SLOW_DEPS_MIN_MINUTES = 3
SLOW_DEPS_WASTE_RATIO = 0.5
HOT_STEP_MIN_MINUTES = 30

DEPS_KEYWORDS = ["install", "npm", "pip"]


@dataclass(frozen=True)
class StepTotal:
    name: str
    minutes: float


@dataclass(frozen=True)
class WasteItem:
    type: str
    detail: str
    cost_impact: float


@dataclass
class SummaryReport:
    total_minutes: float = 0.0
    total_cost: float = 0.0
    monthly_estimate: float = 0.0
    cost_by_workflow: Dict[str, float] = field(default_factory=dict)
    top_steps: List[StepTotal] = field(default_factory=list)
    waste: List[WasteItem] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @property
    def waste_total(self) -> float:
        return sum(w.cost_impact for w in self.waste)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_minutes": self.total_minutes,
            "total_cost": self.total_cost,
            "monthly_estimate": self.monthly_estimate,
            "cost_by_workflow": dict(self.cost_by_workflow),
            "top_steps": [asdict(s) for s in self.top_steps],
            "waste": [asdict(w) for w in self.waste],
            "suggestions": list(self.suggestions),
        }


# ---------------------------------------------------------------------
# Waste rules
# ---------------------------------------------------------------------

def failed_job_waste(job: Job, rate: float) -> Optional[WasteItem]:
    """A failed job wastes its entire cost (it has to be re-run)."""
    if not job.is_failure:
        return None
    return WasteItem("retry", f"Failed: {job.name}", job.minutes * rate)


def failed_cache_waste(step: Step, rate: float) -> Optional[WasteItem]:
    if "cache" in step.name.lower() and step.is_failure:
        return WasteItem("cache-miss", step.name, step.minutes * rate)
    return None


def slow_deps_waste(step: Step, rate: float) -> Optional[WasteItem]:
    minutes = step.minutes
    name = step.name.lower()
    if minutes > SLOW_DEPS_MIN_MINUTES and any(kw in name for kw in DEPS_KEYWORDS):
        return WasteItem(
            "slow-deps",
            f"{step.name} ({minutes:.1f}m)",
            minutes * rate * SLOW_DEPS_WASTE_RATIO,
        )
    return None


JOB_WASTE_RULES: List[Callable[[Job, float], Optional[WasteItem]]] = [failed_job_waste]
STEP_WASTE_RULES: List[Callable[[Step, float], Optional[WasteItem]]] = [
    failed_cache_waste,
    slow_deps_waste,
]


# ---------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------

def analyze(
    jobs: Sequence[Job],
    days: int,
    rates: RateTable = DEFAULT_RATES,
) -> SummaryReport:
    """
    Build the narrative summary for a job collection.

    Jobs with a non-positive duration are skipped entirely, steps likewise.
    Rates come from runner labels only. The monthly estimate stays 0 when
    `days` is not positive.
    """
    report = SummaryReport()
    step_minutes: Dict[str, float] = {}
    has_mac = False

    for job in jobs:
        rate = runner_rate(job.labels, rates)
        minutes = job.minutes
        if minutes <= 0:
            continue

        cost = minutes * rate
        report.total_minutes += minutes
        report.total_cost += cost
        report.cost_by_workflow[job.workflow] = report.cost_by_workflow.get(job.workflow, 0.0) + cost
        if tier_for_labels(job.labels) is Tier.HIGH:
            has_mac = True

        for job_rule in JOB_WASTE_RULES:
            item = job_rule(job, rate)
            if item is not None:
                report.waste.append(item)

        for step in job.steps:
            if step.minutes <= 0:
                continue
            step_minutes[step.name] = step_minutes.get(step.name, 0.0) + step.minutes
            for step_rule in STEP_WASTE_RULES:
                item = step_rule(step, rate)
                if item is not None:
                    report.waste.append(item)

    totals = [StepTotal(name, m) for name, m in step_minutes.items()]
    report.top_steps = sorted(totals, key=lambda s: s.minutes, reverse=True)[:TOP_STEPS]
    report.suggestions = _suggestions(report, has_mac)

    if days > 0:
        report.monthly_estimate = report.total_cost / days * 30
    return report


def _suggestions(report: SummaryReport, has_mac: bool) -> List[str]:
    out: List[str] = []
    waste_sum = report.waste_total
    if waste_sum > 0:
        out.append(f"Fix {len(report.waste)} issues to save ~${waste_sum:.2f}")
    if has_mac:
        out.append("macOS runners cost 10x Linux, switch where possible")
    for s in report.top_steps:
        if s.minutes > HOT_STEP_MIN_MINUTES:
            out.append(f"'{s.name}' used {s.minutes:.0f}m, cache or parallelize")
    return out
