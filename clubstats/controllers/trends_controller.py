from __future__ import annotations
import logging
from typing import Iterable, List

from clubstats.common.constants import SMOOTHING_WINDOW
from clubstats.common.metrics import current_streak, form_string, moving_average
from clubstats.common.utils import fmt_br_from_iso, sort_stamp
from clubstats.models.match_model import MatchStatRecord, TrendSeries

logger = logging.getLogger(__name__)


def chronological(records: Iterable[MatchStatRecord]) -> List[MatchStatRecord]:
    """Records with a timestamp, oldest first (stable for equal instants)."""
    timed = [r for r in records if r.timestamp is not None]
    return sorted(timed, key=lambda r: sort_stamp(r.timestamp))


def smooth(values: Iterable[float], window: int = SMOOTHING_WINDOW) -> tuple:
    return tuple(float(v) for v in moving_average(list(values), window))


def build_trend(records: Iterable[MatchStatRecord], window: int = SMOOTHING_WINDOW) -> TrendSeries:
    """
    Chart-ready per-match series with trailing moving averages, plus the
    form guide and the current streaks. Every series is aligned 1:1 with
    `labels`.
    """
    series = chronological(records)
    if not series:
        return TrendSeries()

    pass_pct = tuple(r.pass_pct for r in series)
    tackle_pct = tuple(r.tackle_pct for r in series)
    rating = tuple(r.rating for r in series)

    decided = [r for r in series if r.result is not None]
    results = [r.result for r in decided]

    logger.debug("trend over %d matches (%d with a result)", len(series), len(decided))
    return TrendSeries(
        labels=tuple(fmt_br_from_iso(r.day) for r in series),
        pass_pct=pass_pct,
        tackle_pct=tackle_pct,
        rating=rating,
        pass_pct_smoothed=smooth(pass_pct, window),
        tackle_pct_smoothed=smooth(tackle_pct, window),
        rating_smoothed=smooth(rating, window),
        form_last5=form_string(results, 5),
        form_last10=form_string(results, 10),
        current_unbeaten=current_streak([r in ("W", "D") for r in results]),
        current_wins=current_streak([r == "W" for r in results]),
        current_clean_sheets=current_streak([r.goals_conceded == 0 for r in decided]),
    )
