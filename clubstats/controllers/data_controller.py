"""
Data controller: turns a raw batch from the retrieval layer into canonical
records and applies the externally-owned selection (player, clubs, dates).

This module exposes:
    - `extract_record(raw)` / `extract_records(batch)` which normalize
        loosely-typed mappings into `MatchStatRecord` objects,
    - `records_frame(records)` which lays records out as a DataFrame for the
        pandas-based aggregation in `stats_controller`,
    - `filter_records(...)`, `player_options(...)` and `dates_for_player(...)`
        which implement the selection inputs of the dashboard.

Extraction degrades field by field: a bad counter becomes 0, a bad timestamp
becomes None, and a record without a timestamp is still returned (it simply
has no day key). Nothing here raises for malformed data.
"""

from __future__ import annotations
from dataclasses import asdict, fields
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from clubstats.common.constants import COUNTER_FIELDS, FIELD_ALIASES
from clubstats.common.metrics import normalize_result, resolve_percentage
from clubstats.common.utils import first_present, fmt_hm, parse_timestamp, to_count, to_num
from clubstats.models.match_model import MatchStatRecord, PlayerOption

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["idx"] + [f.name for f in fields(MatchStatRecord)] + ["day", "time"]


def _pick(raw: Mapping[str, Any], name: str) -> Any:
    return first_present(raw, FIELD_ALIASES[name])


def _opt_id(val: Any) -> Optional[int]:
    # 0 and junk ids mean "unknown"
    if val is None:
        return None
    return to_count(val) or None


def _result_from_counters(counters: Dict[str, int]) -> Optional[str]:
    """A single-match record with exactly one of wins/draws/losses set."""
    flags = [("W", counters["wins"]), ("D", counters["draws"]), ("L", counters["losses"])]
    hits = [r for r, n in flags if n > 0]
    return hits[0] if len(hits) == 1 else None


def extract_record(raw: Any, tz: Optional[str] = None) -> MatchStatRecord:
    """Normalize one raw statistic mapping into a `MatchStatRecord`."""
    if not isinstance(raw, Mapping):
        raw = {}

    ts, has_time = parse_timestamp(_pick(raw, "timestamp"), tz=tz)
    counters = {name: to_count(_pick(raw, name)) for name in COUNTER_FIELDS}

    match_id = _pick(raw, "match_id")
    name = _pick(raw, "player_name")

    return MatchStatRecord(
        match_id=str(match_id) if match_id is not None else None,
        player_id=_opt_id(_pick(raw, "player_id")),
        player_name=str(name) if name is not None else None,
        club_id=_opt_id(_pick(raw, "club_id")),
        timestamp=ts,
        has_time=has_time,
        rating=to_num(_pick(raw, "rating")),
        pass_pct=resolve_percentage(_pick(raw, "pass_pct"), counters["passes_made"], counters["pass_attempts"]),
        tackle_pct=resolve_percentage(_pick(raw, "tackle_pct"), counters["tackles_made"], counters["tackle_attempts"]),
        result=normalize_result(_pick(raw, "result")) or _result_from_counters(counters),
        **counters,
    )


def extract_records(batch: Optional[Iterable[Any]], tz: Optional[str] = None) -> Tuple[MatchStatRecord, ...]:
    if not batch:
        return ()
    out: List[MatchStatRecord] = []
    skipped = 0
    for raw in batch:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        out.append(extract_record(raw, tz=tz))
    untimed = sum(1 for r in out if r.timestamp is None)
    if skipped or untimed:
        logger.debug("extracted %d records (%d non-mapping items skipped, %d without timestamp)",
                     len(out), skipped, untimed)
    return tuple(out)


def records_frame(records: Iterable[MatchStatRecord]) -> pd.DataFrame:
    """One row per record with every model field plus 'idx', 'day' and 'time' columns."""
    rows = []
    for i, r in enumerate(records):
        row = asdict(r)
        row["idx"] = i
        row["day"] = r.day
        row["time"] = fmt_hm(r.timestamp) if r.has_time else None
        rows.append(row)
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


# ---------- Selection ----------
def filter_records(
    records: Iterable[MatchStatRecord],
    player_id: Optional[int] = None,
    club_ids: Iterable[int] = (),
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Tuple[MatchStatRecord, ...]:
    """
    Keep records of the selected player/clubs inside the inclusive date range.
    With a date bound set, records without a timestamp cannot be placed and
    are dropped.
    """
    clubs = frozenset(club_ids or ())
    out = []
    for r in records:
        if player_id is not None and r.player_id != player_id:
            continue
        if clubs and r.club_id not in clubs:
            continue
        if date_from is not None or date_to is not None:
            if r.timestamp is None:
                continue
            d = r.timestamp.date()
            if date_from is not None and d < date_from:
                continue
            if date_to is not None and d > date_to:
                continue
        out.append(r)
    return tuple(out)


def player_options(records: Iterable[MatchStatRecord]) -> List[PlayerOption]:
    """Distinct players (first name seen wins), sorted by name."""
    names: Dict[int, str] = {}
    for r in records:
        if not r.player_id:
            continue
        if r.player_id not in names:
            names[r.player_id] = r.player_name or f"Player {r.player_id}"
    opts = [PlayerOption(player_id=pid, name=n) for pid, n in names.items()]
    return sorted(opts, key=lambda o: (o.name.casefold(), o.player_id))


def dates_for_player(records: Iterable[MatchStatRecord], player_id: int) -> List[str]:
    """Day keys on which the player appears, most recent first."""
    days = {r.day for r in records if r.player_id == player_id and r.day is not None}
    return sorted(days, reverse=True)
