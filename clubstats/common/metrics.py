"""
Rate metrics and series helpers used to prepare statistics for the tables
and trend charts.

This module provides:
    - safe-division rate helpers (`percentage`, `per_match`) that never return
        NaN or infinity,
    - `resolve_percentage`, which prefers an upstream (API-supplied) percentage
        and falls back to the safe ratio of made/attempted counts,
    - `moving_average`, a trailing fixed-window mean used to smooth per-match
        trend lines,
    - form and streak helpers computed from a chronological list of results.

Function notes:
    - `moving_average` keeps the sequence length: positions without a full
        window of history pass the raw value through.
    - Every helper accepts messy numbers and coerces them with `to_num`, so a
        stray None or NaN in a series turns into 0 instead of poisoning sums.
"""

#Import libraries
from __future__ import annotations
import math
from typing import Any, Iterable, Optional, Sequence

import numpy as np

from clubstats.common.constants import RESULTS, SMOOTHING_WINDOW
from clubstats.common.utils import to_num


# ---------- Rates ----------
def percentage(numerator: Any, denominator: Any) -> float:
    """(numerator / denominator) * 100, or 0 when the denominator is not positive."""
    d = to_num(denominator)
    if d <= 0:
        return 0.0
    return (to_num(numerator) / d) * 100.0


def resolve_percentage(supplied: Any, made: Any, attempted: Any) -> float:
    """Upstream percentage when it is a finite number, otherwise made/attempted."""
    if supplied is not None and not isinstance(supplied, bool):
        try:
            v = float(supplied)
        except (TypeError, ValueError):
            v = math.nan
        if math.isfinite(v):
            return v
    return percentage(made, attempted)


def per_match(total: Any, matches: Any) -> float:
    m = to_num(matches)
    return to_num(total) / m if m > 0 else 0.0


def participations(goals: Any, assists: Any, pre_assists: Any = 0) -> float:
    """Goal involvements: goals + assists + pre-assists."""
    return to_num(goals) + to_num(assists) + to_num(pre_assists)


def mean(values: Iterable[Any]) -> float:
    vals = [to_num(v) for v in values]
    return sum(vals) / len(vals) if vals else 0.0


# ---------- Smoothing ----------
def moving_average(values: Sequence[Any], window: int = SMOOTHING_WINDOW) -> np.ndarray:
    """Trailing moving average with a running sum; the first window-1 points are raw."""
    x = np.array([to_num(v) for v in values], dtype=float)
    # Return early for empty input (avoid index errors below)
    if len(x) == 0:
        return x

    w = max(int(window), 1)
    y = np.zeros_like(x, dtype=float)
    running = 0.0
    for i in range(len(x)):
        running += x[i]
        if i >= w:
            running -= x[i - w]
        y[i] = running / w if i >= w - 1 else x[i]
    return y


# ---------- Form & streaks ----------
def normalize_result(val: Any) -> Optional[str]:
    s = str(val).strip().upper()[:1] if val is not None else ""
    return s if s in RESULTS else None


def form_string(results: Sequence[Optional[str]], last: int) -> str:
    """Last `last` known results in chronological order, e.g. 'WWDLW'."""
    known = [r for r in results if r in RESULTS]
    if last <= 0:
        return ""
    return "".join(known[-last:])


def current_streak(flags: Sequence[bool]) -> int:
    """Number of trailing True values."""
    n = 0
    for f in reversed(flags):
        if not f:
            break
        n += 1
    return n
