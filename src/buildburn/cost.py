# cost.py
# Hierarchical cost attribution: step -> job -> workflow -> total.

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List

from .model import Workflow
from .rates import DEFAULT_RATES, RateTable, resolve_rate

TOP_STEPS = 5
PROJECTION_DAYS = 30


@dataclass(frozen=True)
class StepCostEntry:
    """Cost attribution for one executed step occurrence."""
    workflow: str
    job: str
    step: str
    cost: float
    minutes: float


@dataclass
class CostReport:
    """Full cost breakdown for an observation window."""
    per_step: List[StepCostEntry] = field(default_factory=list)
    per_job: Dict[str, float] = field(default_factory=dict)
    per_workflow: Dict[str, float] = field(default_factory=dict)
    total_cost: float = 0.0
    projected_cost_30day: float = 0.0
    top_steps: List[StepCostEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "per_step": [asdict(e) for e in self.per_step],
            "per_job": dict(self.per_job),
            "per_workflow": dict(self.per_workflow),
            "total_cost": self.total_cost,
            "projected_cost_30day": self.projected_cost_30day,
            "top_steps": [asdict(e) for e in self.top_steps],
        }


def normalize_days(days: int) -> int:
    return days if days > 0 else 1


def top_step_costs(entries: List[StepCostEntry], n: int = TOP_STEPS) -> List[StepCostEntry]:
    """Most expensive entries first; equal costs keep their original order."""
    # sorted() is stable, reverse=True included
    return sorted(entries, key=lambda e: e.cost, reverse=True)[:n]


def calculate_cost(
    workflows: Iterable[Workflow],
    default_os: str = "linux",
    observation_days: int = 7,
    rates: RateTable = DEFAULT_RATES,
) -> CostReport:
    """
    Compute a CostReport from workflow data.

    Args:
        workflows: Workflows with their jobs (see model.group_by_workflow)
        default_os: Runner OS used when a job carries no labels
        observation_days: Days the input spans; <= 0 is treated as 1

    Jobs and steps with a non-positive duration contribute nothing. Every job
    and workflow name seen still gets an entry in the per-job/per-workflow maps.
    """
    days = normalize_days(observation_days)

    per_job: Dict[str, float] = {}
    per_workflow: Dict[str, float] = {}
    all_steps: List[StepCostEntry] = []
    total = 0.0

    for wf in workflows:
        wf_cost = 0.0
        for job in wf.jobs:
            per_job.setdefault(job.name, 0.0)
            rate = resolve_rate(job.labels, default_os, rates)
            job_minutes = job.minutes
            if job_minutes <= 0:
                continue

            job_cost = job_minutes * rate
            per_job[job.name] += job_cost
            wf_cost += job_cost

            for step in job.steps:
                step_minutes = step.minutes
                if step_minutes <= 0:
                    continue
                all_steps.append(
                    StepCostEntry(
                        workflow=wf.name,
                        job=job.name,
                        step=step.name,
                        cost=step_minutes * rate,
                        minutes=step_minutes,
                    )
                )

        per_workflow[wf.name] = per_workflow.get(wf.name, 0.0) + wf_cost
        total += wf_cost

    return CostReport(
        per_step=all_steps,
        per_job=per_job,
        per_workflow=per_workflow,
        total_cost=total,
        projected_cost_30day=total / days * PROJECTION_DAYS,
        top_steps=top_step_costs(all_steps),
    )
