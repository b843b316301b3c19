"""Console output formatting utilities for BuildBurn."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..analyzer import SummaryReport
    from ..cost import CostReport
    from ..recommendations import Recommendation


class Console:
    """Centralized console output formatting."""
    
    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.
        
        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug
    
    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))
    
    def print_summary(self, report: SummaryReport, days: int) -> None:
        """Print the narrative summary report."""
        title = f"BuildBurn Report (last {days} days)"
        print(f"\n{title}")
        print("=" * len(title))
        print(
            f"  CI minutes: {report.total_minutes:.0f} | Cost: ${report.total_cost:.2f}"
            f" | Monthly: ${report.monthly_estimate:.2f}"
        )

        if report.cost_by_workflow:
            self.print_header("Cost by Workflow")
            for wf, cost in report.cost_by_workflow.items():
                pct = cost / report.total_cost * 100 if report.total_cost > 0 else 0.0
                print(f"  {wf:<35} ${cost:7.2f} ({pct:4.0f}%)")

        if report.top_steps:
            self.print_header("Top Steps")
            for s in report.top_steps:
                print(f"  {s.name:<35} {s.minutes:7.1f} min")

        if report.waste:
            self.print_header("Waste Detected")
            for w in report.waste:
                print(f"  [{w.type:<9}] {w.detail:<28} ${w.cost_impact:.2f}")

        if report.suggestions:
            self.print_header("Suggestions")
            for i, s in enumerate(report.suggestions, start=1):
                print(f"  {i}. {s}")
        print()
    
    def print_cost_report(self, report: CostReport, days: int) -> None:
        """Print the cost attribution report."""
        title = f"Cost Attribution (last {days} days)"
        print(f"\n{title}")
        print("=" * len(title))
        print(f"  Total: ${report.total_cost:.2f} | Projected 30-day: ${report.projected_cost_30day:.2f}")

        if report.per_workflow:
            self.print_header("Per Workflow")
            for wf, cost in report.per_workflow.items():
                print(f"  {wf:<35} ${cost:8.2f}")

        if report.per_job:
            self.print_header("Per Job")
            for name, cost in report.per_job.items():
                print(f"  {name:<35} ${cost:8.2f}")

        if report.top_steps:
            self.print_header("Most Expensive Steps")
            for e in report.top_steps:
                label = f"{e.workflow} / {e.job} / {e.step}"
                print(f"  {label:<50} {e.minutes:7.1f} min ${e.cost:7.2f}")
        print()
    
    def print_recommendations(self, recs: list[Recommendation]) -> None:
        """Print structured recommendations."""
        self.print_header("Recommendations")
        if not recs:
            print("  No recommendations, nothing obvious to optimize.")
            print()
            return
        total = sum(r.estimated_monthly_savings for r in recs)
        for i, r in enumerate(recs, start=1):
            print(f"  {i}. [{r.severity.upper():<6}] {r.rule_id} (~${r.estimated_monthly_savings:.2f}/month)")
            print(f"     {r.fix}")
        print(f"\n  Estimated total savings: ~${total:.2f}/month")
        print()
    
    def print_json(self, payload: Any) -> None:
        """Print a payload as indented JSON."""
        print(json.dumps(payload, indent=2))
    
    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.
        
        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)
    
    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)
    
    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)
    
    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
