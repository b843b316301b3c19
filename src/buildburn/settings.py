from __future__ import annotations
import os

from .rates import DEFAULT_RATES, RateTable

GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com")
DEFAULT_DAYS = int(os.environ.get("BUILDBURN_DEFAULT_DAYS", "7"))


def github_token() -> str | None:
    return os.environ.get("GITHUB_TOKEN") or None


def load_rates() -> RateTable:
    """Rate table with per-tier overrides from BUILDBURN_RATE_* env vars."""
    return RateTable(
        low=float(os.environ.get("BUILDBURN_RATE_LINUX", DEFAULT_RATES.low)),
        mid=float(os.environ.get("BUILDBURN_RATE_WINDOWS", DEFAULT_RATES.mid)),
        high=float(os.environ.get("BUILDBURN_RATE_MACOS", DEFAULT_RATES.high)),
    )
