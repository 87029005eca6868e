"""
Main entry of the statistics engine.

`derive(batch, config)` is the single function the dashboard calls whenever
its selection changes (player, clubs, date range or selected day). It only
composes the helpers under `controllers/` and `common/`:
    - extraction of the raw batch into canonical records,
    - selection filters taken from `DeriveConfig`,
    - day roll-ups and the aggregation mode ("all" -> day rows, a specific
        day -> that day's match rows),
    - rankings for every metric in both directions,
    - period summary, best day and (for a single day) game highlights,
    - badge colors for the day keys and the smoothed trend series,
    - the club view of each day (win rate, goal difference) and its rankings.

Nothing is cached between calls and the input batch is never modified:
calling `derive` twice with the same arguments returns equal views.
"""

# Import libraries
from __future__ import annotations
import logging
from types import MappingProxyType
from typing import Any, Iterable, Optional

from clubstats.common.colors import colors_for
from clubstats.common.constants import DAY_MODE
from clubstats.controllers.data_controller import extract_records, filter_records
from clubstats.controllers.stats_controller import (
    aggregation_mode, best_club_day, best_day, bucket_by_day, build_rows, day_highlights,
    rank_all, rank_all_club_days, scope_label, select_day, summarize_club_days,
    summarize_club_period, summarize_period,
)
from clubstats.controllers.trends_controller import build_trend
from clubstats.models.match_model import DeriveConfig, DerivedView

logger = logging.getLogger(__name__)


def derive(batch: Optional[Iterable[Any]], config: Optional[DeriveConfig] = None) -> DerivedView:
    config = config or DeriveConfig()

    # 1) Canonical records for the current selection
    records = filter_records(
        extract_records(batch, tz=config.tz),
        player_id=config.player_id,
        club_ids=config.club_ids,
        date_from=config.date_from,
        date_to=config.date_to,
    )

    # 2) Day roll-ups (always over the whole period, most recent first)
    days = bucket_by_day(records)

    # 3) Granularity: whole days, or the matches of the selected day
    mode = aggregation_mode(config.day_key)
    scoped = records if mode == DAY_MODE else select_day(records, config.day_key)
    rows = build_rows(mode, days, scoped)
    rankings = rank_all(rows, top_n=config.top_n)

    # 4) Summary cards
    label = scope_label(config.day_key, config.date_from, config.date_to, days)
    summary = summarize_period(scoped, days_count=len(days) if mode == DAY_MODE else 1, label=label)
    highlights = tuple(day_highlights(scoped)) if mode != DAY_MODE else ()

    # 5) Club results by day (whole period)
    club_days = summarize_club_days(days)

    logger.debug("derived %s view: %d records, %d days, %d rows", mode, len(records), len(days), len(rows))
    return DerivedView(
        mode=mode,
        records=records,
        days=tuple(days),
        rows=tuple(rows),
        rankings=MappingProxyType(rankings),
        summary=summary,
        best_day=best_day(days),
        highlights=highlights,
        date_colors=MappingProxyType(colors_for(d.date for d in reversed(days))),
        trend=build_trend(records, window=config.smoothing_window),
        club_days=tuple(club_days),
        club_rankings=MappingProxyType(rank_all_club_days(club_days, top_n=config.top_n)),
        best_club_day=best_club_day(club_days),
        club_summary=summarize_club_period(club_days),
    )
