# rates.py
# Maps runner labels to a per-minute billing rate.
#
# Matching is a case-insensitive substring search over an ordered rule list:
# labels are examined in the order given and the first label containing a
# known platform substring decides the tier. Anything unmatched is billed at
# the low (Linux) tier.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple


class Tier(str, Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"


@dataclass(frozen=True)
class RateTable:
    """Per-minute USD rates for each runner tier."""
    low: float = 0.008    # Linux
    mid: float = 0.016    # Windows
    high: float = 0.08    # macOS

    def rate(self, tier: Tier) -> float:
        if tier is Tier.HIGH:
            return self.high
        if tier is Tier.MID:
            return self.mid
        return self.low


# GitHub-hosted runner list prices
DEFAULT_RATES = RateTable()

# (substring, tier), first match wins
PLATFORM_RULES: List[Tuple[str, Tier]] = [
    ("macos", Tier.HIGH),
    ("windows", Tier.MID),
]


def _tier_for_label(label: str) -> Optional[Tier]:
    low = label.lower()
    for needle, tier in PLATFORM_RULES:
        if needle in low:
            return tier
    return None


def tier_for_labels(labels: Iterable[str]) -> Tier:
    for label in labels:
        tier = _tier_for_label(label)
        if tier is not None:
            return tier
    return Tier.LOW


def runner_rate(labels: Iterable[str], rates: RateTable = DEFAULT_RATES) -> float:
    """Per-minute rate for a job's runner labels (low tier when nothing matches)."""
    return rates.rate(tier_for_labels(labels))


def rate_for_os(os_label: str, rates: RateTable = DEFAULT_RATES) -> float:
    """Per-minute rate for a bare OS name such as "linux", "windows" or "macos"."""
    return rates.rate(_tier_for_label(os_label or "") or Tier.LOW)


def resolve_rate(
    labels: List[str],
    default_os: str | None = None,
    rates: RateTable = DEFAULT_RATES,
) -> float:
    """
    Rate for a job: label-based when the job has labels, otherwise the
    default OS fallback (low tier if no default is given).
    """
    if labels:
        return runner_rate(labels, rates)
    return rate_for_os(default_os or "", rates)


def has_platform(labels: Iterable[str], needle: str) -> bool:
    """True if any label contains `needle` (case-insensitive)."""
    needle = needle.lower()
    return any(needle in label.lower() for label in labels)
