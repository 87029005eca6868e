"""
Stats controller: day roll-ups, rankable rows, top/bottom rankings and the
summary views built on top of them.

Pipeline pieces:
    - `bucket_by_day(records)` groups records by local calendar date with a
        pandas groupby and emits one `DaySummary` per day, most recent first.
    - `build_day_rows` / `build_match_rows` turn either granularity into the
        same `RankableRow` shape; `aggregation_mode(day_key)` decides which
        one a view uses ("all" -> day rows, a specific day -> match rows).
    - `rank_rows(rows, metric, direction)` sorts on a primary key and a
        tie-break key and keeps the first `top_n` rows.
    - `summarize_period`, `best_day`, `day_highlights` and
        `best_and_worst_days` feed the summary cards.
    - `summarize_club_days`, `rank_club_days`, `best_club_day` and
        `summarize_club_period` read the same day roll-ups as club results
        (win rate, goal difference, goals for and against).
"""

from __future__ import annotations
import logging
from dataclasses import asdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from clubstats.common.constants import (
    ALL_DAYS, BEST, COUNTER_FIELDS, DAY_MODE, MATCH_MODE, NO_DATE, TOP_N, WORST,
)
from clubstats.common.metrics import mean, per_match, percentage
from clubstats.common.utils import fmt_br_from_iso, fmt_hm, iso_utc
from clubstats.controllers.data_controller import records_frame
from clubstats.models.match_model import (
    ClubDayRanking, ClubDaySummary, ClubPeriodSummary, DayExtremes, DaySummary, DayValue,
    MatchStatRecord, MixedGranularityError, PeriodSummary, RankableRow, RankingList,
    UnknownRankingError,
)

logger = logging.getLogger(__name__)

# (metric, direction) -> (primary key, ascending, tie-break key, ascending).
# Tackles are asymmetric: the best games are judged by volume, the worst by
# efficiency.
RANKINGS: Dict[Tuple[str, str], Tuple[str, bool, str, bool]] = {
    ("goals", BEST):    ("goals", False, "rating", False),
    ("goals", WORST):   ("goals", True, "rating", True),
    ("assists", BEST):  ("assists", False, "rating", False),
    ("assists", WORST): ("assists", True, "rating", True),
    ("tackles", BEST):  ("tackles_made", False, "tackle_pct", False),
    ("tackles", WORST): ("tackle_pct", True, "tackles_made", True),
    ("passes", BEST):   ("pass_pct", False, "passes_made", False),
    ("passes", WORST):  ("pass_pct", True, "passes_made", True),
}
METRICS = ("goals", "assists", "tackles", "passes")
DIRECTIONS = (BEST, WORST)


# ---------- Temporal bucketing ----------
def _first_time(s: pd.Series) -> Optional[str]:
    return min(s.dropna(), default=None)


def _last_time(s: pd.Series) -> Optional[str]:
    return max(s.dropna(), default=None)


def _opt_str(v) -> Optional[str]:
    # groupby may hand back NaN for days without a time of day
    return v if isinstance(v, str) else None


def bucket_by_day(records: Iterable[MatchStatRecord]) -> List[DaySummary]:
    """
    One `DaySummary` per local calendar date, most recent day first.

    Counters are summed; the average rating is the mean of the per-match
    ratings; pass/tackle percentages are recomputed from the day's summed
    made/attempted counts. Records without a timestamp are left out.
    """
    df = records_frame(records)
    df = df[df["day"].notna()]
    if df.empty:
        return []

    g = df.groupby("day", sort=False)
    agg = g[list(COUNTER_FIELDS)].sum()
    agg["match_count"] = g.size()
    agg["average_rating"] = g["rating"].agg(mean)
    agg["first_match_time"] = g["time"].agg(_first_time)
    agg["last_match_time"] = g["time"].agg(_last_time)
    agg = agg.sort_index(ascending=False)

    days: List[DaySummary] = []
    for day, row in agg.iterrows():
        counters = {name: int(row[name]) for name in COUNTER_FIELDS}
        days.append(DaySummary(
            date=str(day),
            match_count=int(row["match_count"]),
            pass_pct=percentage(counters["passes_made"], counters["pass_attempts"]),
            tackle_pct=percentage(counters["tackles_made"], counters["tackle_attempts"]),
            average_rating=float(row["average_rating"]),
            first_match_time=_opt_str(row["first_match_time"]),
            last_match_time=_opt_str(row["last_match_time"]),
            **counters,
        ))
    logger.debug("bucketed %d records into %d days", len(df), len(days))
    return days


# ---------- Row builder ----------
def aggregation_mode(day_key: Optional[str]) -> str:
    """'all' (or no key) ranks whole days; a specific day ranks its matches."""
    if not day_key or day_key == ALL_DAYS:
        return DAY_MODE
    return MATCH_MODE


def select_day(records: Iterable[MatchStatRecord], day_key: str) -> Tuple[MatchStatRecord, ...]:
    key = day_key[:10]
    return tuple(r for r in records if r.day == key)


def build_day_rows(days: Iterable[DaySummary]) -> List[RankableRow]:
    return [
        RankableRow(
            id=f"day-{d.date}",
            source=DAY_MODE,
            date_iso=f"{d.date}T00:00:00Z",
            time=None,
            goals=d.goals,
            assists=d.assists,
            pre_assists=d.pre_assists,
            passes_made=d.passes_made,
            pass_attempts=d.pass_attempts,
            pass_pct=d.pass_pct,
            tackles_made=d.tackles_made,
            tackle_attempts=d.tackle_attempts,
            tackle_pct=d.tackle_pct,
            saves=d.saves,
            rating=d.average_rating,
        )
        for d in days
    ]


def build_match_rows(records: Iterable[MatchStatRecord]) -> List[RankableRow]:
    rows = []
    for idx, r in enumerate(records):
        iso = iso_utc(r.timestamp)
        rows.append(RankableRow(
            id=f"{idx}-{iso or NO_DATE}-{r.goals}-{r.assists}",
            source=MATCH_MODE,
            date_iso=iso,
            time=fmt_hm(r.timestamp) if r.has_time else None,
            goals=r.goals,
            assists=r.assists,
            pre_assists=r.pre_assists,
            passes_made=r.passes_made,
            pass_attempts=r.pass_attempts,
            pass_pct=r.pass_pct,
            tackles_made=r.tackles_made,
            tackle_attempts=r.tackle_attempts,
            tackle_pct=r.tackle_pct,
            saves=r.saves,
            rating=r.rating,
        ))
    return rows


def build_rows(mode: str, days: Sequence[DaySummary], records: Sequence[MatchStatRecord]) -> List[RankableRow]:
    if mode == DAY_MODE:
        return build_day_rows(days)
    return build_match_rows(records)


# ---------- Rankings ----------
def rank_rows(rows: Iterable[RankableRow], metric: str, direction: str, top_n: int = TOP_N) -> RankingList:
    """
    Top `top_n` rows for one metric and direction (best/worst).

    Order is primary key, then tie-break key, then input position, so the
    result is fully deterministic. All rows must share one source.
    """
    key = RANKINGS.get((metric, direction))
    if key is None:
        raise UnknownRankingError(f"no ranking for metric={metric!r} direction={direction!r}")
    primary, primary_asc, tie, tie_asc = key

    rows = tuple(rows)
    sources = {r.source for r in rows}
    if len(sources) > 1:
        raise MixedGranularityError(f"cannot rank day and match rows together: {sorted(sources)}")

    if not rows or top_n <= 0:
        return RankingList(metric, direction, primary, tie, ())

    df = pd.DataFrame({
        "pos": range(len(rows)),
        primary: [getattr(r, primary) for r in rows],
        tie: [getattr(r, tie) for r in rows],
    })
    df = df.sort_values(by=[primary, tie, "pos"], ascending=[primary_asc, tie_asc, True], kind="mergesort")
    keep = df["pos"].head(top_n).tolist()
    return RankingList(metric, direction, primary, tie, tuple(rows[i] for i in keep))


def rank_all(rows: Iterable[RankableRow], top_n: int = TOP_N) -> Dict[Tuple[str, str], RankingList]:
    rows = tuple(rows)
    return {
        (metric, direction): rank_rows(rows, metric, direction, top_n=top_n)
        for metric in METRICS
        for direction in DIRECTIONS
    }


# ---------- Summaries ----------
def scope_label(day_key: Optional[str], date_from: Optional[date], date_to: Optional[date],
                days: Sequence[DaySummary] = ()) -> str:
    """'DD/MM/YYYY' for one day, 'DD/MM/YYYY — DD/MM/YYYY' for a period."""
    if aggregation_mode(day_key) == MATCH_MODE:
        return fmt_br_from_iso(day_key)
    start = date_from.isoformat() if date_from else (days[-1].date if days else "")
    end = date_to.isoformat() if date_to else (days[0].date if days else "")
    if not start and not end:
        return ""
    return f"{fmt_br_from_iso(start)} — {fmt_br_from_iso(end)}"


def summarize_period(records: Sequence[MatchStatRecord], days_count: int, label: str = "") -> Optional[PeriodSummary]:
    """Totals and rates over the selected matches; None when there are none."""
    if not records:
        return None

    def total(attr: str) -> int:
        return sum(getattr(r, attr) for r in records)

    matches = len(records)
    goals = total("goals")
    passes_made, pass_attempts = total("passes_made"), total("pass_attempts")
    tackles_made, tackle_attempts = total("tackles_made"), total("tackle_attempts")

    return PeriodSummary(
        scope_label=label,
        total_matches=matches,
        total_wins=total("wins"),
        total_draws=total("draws"),
        total_losses=total("losses"),
        total_goals=goals,
        total_assists=total("assists"),
        total_passes_made=passes_made,
        total_pass_attempts=pass_attempts,
        total_tackles_made=tackles_made,
        total_tackle_attempts=tackle_attempts,
        total_saves=total("saves"),
        avg_rating=mean(r.rating for r in records),
        pass_pct=percentage(passes_made, pass_attempts),
        tackle_pct=percentage(tackles_made, tackle_attempts),
        goals_per_game=per_match(goals, matches),
        days_count=days_count,
        matches_per_day=matches / days_count if days_count > 0 else float(matches),
    )


def best_day(days: Sequence[DaySummary]) -> Optional[DaySummary]:
    """Day with the most goal participations, then the best average rating."""
    if not days:
        return None
    return sorted(days, key=lambda d: (-d.participations, -d.average_rating))[0]


def day_highlights(records: Iterable[MatchStatRecord]) -> List[MatchStatRecord]:
    """A day's matches ordered by participations, then rating (best game first)."""
    return sorted(records, key=lambda r: (-r.participations, -r.rating))


def _extreme_metrics(d: DaySummary) -> Dict[str, float]:
    return {
        "goals": d.goals,
        "assists": d.assists,
        "pass_pct": d.pass_pct,
        "tackle_pct": d.tackle_pct,
        "participations": per_match(d.participations, d.match_count),
        "saves": d.saves,
        "rating": d.average_rating,
    }


def _pick(current: DayValue, day: str, value: float, better) -> DayValue:
    # ties go to the most recent day
    if better(value, current.value) or (value == current.value and day > current.date):
        return DayValue(date=day, value=value)
    return current


def best_and_worst_days(records: Iterable[MatchStatRecord]) -> Tuple[List[DayExtremes], List[DayExtremes]]:
    """
    Per player, the best and the worst day for each tracked metric.
    Both lists are sorted by player name.
    """
    by_player: Dict[int, List[MatchStatRecord]] = {}
    names: Dict[int, str] = {}
    for r in records:
        if not r.player_id:
            continue
        by_player.setdefault(r.player_id, []).append(r)
        if r.player_name:
            names[r.player_id] = r.player_name

    best_out: List[DayExtremes] = []
    worst_out: List[DayExtremes] = []
    for pid, player_records in by_player.items():
        days = bucket_by_day(player_records)
        if not days:
            continue
        best: Dict[str, DayValue] = {}
        worst: Dict[str, DayValue] = {}
        for d in reversed(days):
            for metric, v in _extreme_metrics(d).items():
                v = float(v)
                if metric not in best:
                    best[metric] = worst[metric] = DayValue(date=d.date, value=v)
                    continue
                best[metric] = _pick(best[metric], d.date, v, lambda a, b: a > b)
                worst[metric] = _pick(worst[metric], d.date, v, lambda a, b: a < b)
        name = names.get(pid, f"Player {pid}")
        best_out.append(DayExtremes(player_id=pid, player_name=name, **best))
        worst_out.append(DayExtremes(player_id=pid, player_name=name, **worst))

    def order(x: DayExtremes):
        return (x.player_name.casefold(), x.player_id)

    return sorted(best_out, key=order), sorted(worst_out, key=order)


# ---------- Club results by day ----------
# Ranking name -> ordered (key, ascending) pairs. Every chain ends on the date
# (oldest first) so equal days keep calendar order.
CLUB_RANKINGS: Dict[str, Tuple[Tuple[str, bool], ...]] = {
    "win_pct":           (("win_pct", False), ("goal_difference", False), ("goals_for", False)),
    "goal_difference":   (("goal_difference", False), ("goals_for", False), ("goals_against", True)),
    "goals_for":         (("goals_for", False), ("goals_against", True)),
    "low_goals_against": (("goals_against", True), ("goals_for", False)),
}
# Days without a match have no meaningful win rate.
_NEEDS_MATCHES = {"win_pct"}
_BEST_CLUB_DAY = (
    ("win_pct", False), ("goal_difference", False), ("goals_for", False),
    ("goals_against", True), ("date", False),
)


def summarize_club_days(days: Iterable[DaySummary]) -> List[ClubDaySummary]:
    """
    Club view of each day roll-up: goals scored are read as goals for and
    goals conceded as goals against. Keeps the input order.
    """
    out = []
    for d in days:
        out.append(ClubDaySummary(
            date=d.date,
            match_count=d.match_count,
            wins=d.wins,
            draws=d.draws,
            losses=d.losses,
            goals_for=d.goals,
            goals_against=d.goals_conceded,
            win_pct=percentage(d.wins, d.match_count),
            goal_difference=d.goals - d.goals_conceded,
            goals_for_per_match=per_match(d.goals, d.match_count),
            goals_against_per_match=per_match(d.goals_conceded, d.match_count),
        ))
    return out


def _sort_club_days(days: Sequence[ClubDaySummary], keys: Sequence[Tuple[str, bool]]) -> List[ClubDaySummary]:
    df = pd.DataFrame([asdict(d) for d in days])
    df["pos"] = range(len(days))
    by = [k for k, _ in keys] + ["pos"]
    ascending = [asc for _, asc in keys] + [True]
    df = df.sort_values(by=by, ascending=ascending, kind="mergesort")
    return [days[i] for i in df["pos"].tolist()]


def rank_club_days(days: Iterable[ClubDaySummary], name: str, top_n: int = TOP_N) -> ClubDayRanking:
    """Top `top_n` days for one club ranking ('win_pct', 'goal_difference', 'goals_for', 'low_goals_against')."""
    chain = CLUB_RANKINGS.get(name)
    if chain is None:
        raise UnknownRankingError(f"no club ranking named {name!r}")
    keys = chain + (("date", True),)

    days = tuple(days)
    if name in _NEEDS_MATCHES:
        days = tuple(d for d in days if d.match_count > 0)
    if not days or top_n <= 0:
        return ClubDayRanking(name, tuple(k for k, _ in keys), ())
    ordered = _sort_club_days(days, keys)
    return ClubDayRanking(name, tuple(k for k, _ in keys), tuple(ordered[:top_n]))


def rank_all_club_days(days: Iterable[ClubDaySummary], top_n: int = TOP_N) -> Dict[str, ClubDayRanking]:
    days = tuple(days)
    return {name: rank_club_days(days, name, top_n=top_n) for name in CLUB_RANKINGS}


def best_club_day(days: Sequence[ClubDaySummary]) -> Optional[ClubDaySummary]:
    """Best win rate, then goal difference, goals for, fewest against, latest date."""
    if not days:
        return None
    return _sort_club_days(days, _BEST_CLUB_DAY)[0]


def summarize_club_period(days: Sequence[ClubDaySummary]) -> Optional[ClubPeriodSummary]:
    if not days:
        return None
    matches = sum(d.match_count for d in days)
    wins = sum(d.wins for d in days)
    gf = sum(d.goals_for for d in days)
    ga = sum(d.goals_against for d in days)
    active = sum(1 for d in days if d.match_count > 0)
    return ClubPeriodSummary(
        total_matches=matches,
        total_wins=wins,
        total_draws=sum(d.draws for d in days),
        total_losses=sum(d.losses for d in days),
        goals_for=gf,
        goals_against=ga,
        goal_difference=gf - ga,
        win_pct=percentage(wins, matches),
        goals_for_per_match=per_match(gf, matches),
        goals_against_per_match=per_match(ga, matches),
        days_with_matches=active,
        matches_per_day=per_match(matches, active),
    )
