from .model import Job, Step, Workflow, group_by_workflow
from .rates import DEFAULT_RATES, RateTable, Tier, resolve_rate, runner_rate
from .cost import CostReport, StepCostEntry, calculate_cost
from .recommendations import Recommendation, DETECTORS, generate_recommendations
from .analyzer import SummaryReport, analyze

__all__ = [
    "Job", "Step", "Workflow", "group_by_workflow",
    "DEFAULT_RATES", "RateTable", "Tier", "resolve_rate", "runner_rate",
    "CostReport", "StepCostEntry", "calculate_cost",
    "Recommendation", "DETECTORS", "generate_recommendations",
    "SummaryReport", "analyze",
]
