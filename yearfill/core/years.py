"""Year parsing and earliest-year selection shared by every lookup source."""

from __future__ import annotations

from typing import Any, Iterable, Optional


def earliest_year(years: Iterable[int]) -> Optional[int]:
    """Return the earliest positive year, or None when there is none.

    The earliest known date is taken as the original release; later dates are
    reissues. No weighting by source or score is applied.
    """
    valid = [year for year in years if year > 0]
    return min(valid) if valid else None


def parse_year(value: Optional[str]) -> Optional[int]:
    """Parse the leading year of a ``YYYY`` or ``YYYY-MM-DD`` string."""
    if not value or not isinstance(value, str):
        return None
    year = value.strip().split("-", 1)[0]
    if len(year) != 4 or not year.isdigit():
        return None
    parsed = int(year)
    return parsed if parsed > 0 else None


def coerce_year(value: Any) -> Optional[int]:
    """Accept a structured year field given either as an int or digit string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
        return parsed if parsed > 0 else None
    return None
