"""
Data model for the statistics engine.

Every entity is a frozen dataclass so derived views can be passed to the
rendering layer without accidental modification; a new input batch produces
new objects instead of updating old ones.

Entities:
    - `MatchStatRecord`: one player-or-club line for a single match, already
        normalized (all counters are numbers, rates are resolved).
    - `DaySummary`: roll-up of every record sharing one local calendar date.
    - `RankableRow`: metric-agnostic row built from either a day or a match.
    - `RankingList`: the top rows for one metric and direction.
    - `PeriodSummary`, `DayValue`, `DayExtremes`, `PlayerOption`, `TrendSeries`: supporting
        views for summary cards, per-player best/worst days and trend charts.
    - `DeriveConfig` / `DerivedView`: the explicit input selection and the
        complete output of `clubstats.main.derive`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from clubstats.common.colors import KeyColor
from clubstats.common.constants import ALL_DAYS, SMOOTHING_WINDOW, TOP_N
from clubstats.common.metrics import participations


class MixedGranularityError(ValueError):
    """A single ranking received both day rows and match rows."""


class UnknownRankingError(ValueError):
    """No ranking is defined for the requested (metric, direction)."""


@dataclass(frozen=True)
class MatchStatRecord:
    match_id: Optional[str] = None
    player_id: Optional[int] = None
    player_name: Optional[str] = None
    club_id: Optional[int] = None
    timestamp: Optional[datetime] = None
    has_time: bool = False
    goals: int = 0
    assists: int = 0
    pre_assists: int = 0
    shots: int = 0
    passes_made: int = 0
    pass_attempts: int = 0
    tackles_made: int = 0
    tackle_attempts: int = 0
    saves: int = 0
    red_cards: int = 0
    goals_conceded: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    rating: float = 0.0
    pass_pct: float = 0.0
    tackle_pct: float = 0.0
    result: Optional[str] = None

    @property
    def day(self) -> Optional[str]:
        return self.timestamp.date().isoformat() if self.timestamp is not None else None

    @property
    def participations(self) -> float:
        return participations(self.goals, self.assists, self.pre_assists)


@dataclass(frozen=True)
class DaySummary:
    date: str
    match_count: int
    goals: int
    assists: int
    pre_assists: int
    shots: int
    passes_made: int
    pass_attempts: int
    pass_pct: float
    tackles_made: int
    tackle_attempts: int
    tackle_pct: float
    saves: int
    red_cards: int
    goals_conceded: int
    wins: int
    draws: int
    losses: int
    average_rating: float
    first_match_time: Optional[str] = None
    last_match_time: Optional[str] = None

    @property
    def participations(self) -> float:
        return participations(self.goals, self.assists, self.pre_assists)


@dataclass(frozen=True)
class RankableRow:
    id: str
    source: str                 # "day" | "match"
    date_iso: Optional[str]
    time: Optional[str]
    goals: int
    assists: int
    pre_assists: int
    passes_made: int
    pass_attempts: int
    pass_pct: float
    tackles_made: int
    tackle_attempts: int
    tackle_pct: float
    saves: int
    rating: float

    @property
    def participations(self) -> float:
        return participations(self.goals, self.assists, self.pre_assists)


@dataclass(frozen=True)
class RankingList:
    metric: str
    direction: str
    sort_key: str
    tie_break_key: str
    rows: Tuple[RankableRow, ...] = ()

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class PeriodSummary:
    scope_label: str
    total_matches: int
    total_wins: int
    total_draws: int
    total_losses: int
    total_goals: int
    total_assists: int
    total_passes_made: int
    total_pass_attempts: int
    total_tackles_made: int
    total_tackle_attempts: int
    total_saves: int
    avg_rating: float
    pass_pct: float
    tackle_pct: float
    goals_per_game: float
    days_count: int
    matches_per_day: float


@dataclass(frozen=True)
class ClubDaySummary:
    """Results of the selected clubs on one day, read as a single club."""
    date: str
    match_count: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    win_pct: float
    goal_difference: int
    goals_for_per_match: float
    goals_against_per_match: float


@dataclass(frozen=True)
class ClubDayRanking:
    name: str
    sort_keys: Tuple[str, ...]
    days: Tuple[ClubDaySummary, ...] = ()

    def __len__(self) -> int:
        return len(self.days)


@dataclass(frozen=True)
class ClubPeriodSummary:
    total_matches: int
    total_wins: int
    total_draws: int
    total_losses: int
    goals_for: int
    goals_against: int
    goal_difference: int
    win_pct: float
    goals_for_per_match: float
    goals_against_per_match: float
    days_with_matches: int
    matches_per_day: float


@dataclass(frozen=True)
class DayValue:
    date: str
    value: float


@dataclass(frozen=True)
class DayExtremes:
    """Best (or worst) day of one player for each tracked metric."""
    player_id: int
    player_name: str
    goals: DayValue
    assists: DayValue
    pass_pct: DayValue
    tackle_pct: DayValue
    participations: DayValue
    saves: DayValue
    rating: DayValue


@dataclass(frozen=True)
class PlayerOption:
    player_id: int
    name: str


@dataclass(frozen=True)
class TrendSeries:
    labels: Tuple[str, ...] = ()
    pass_pct: Tuple[float, ...] = ()
    tackle_pct: Tuple[float, ...] = ()
    rating: Tuple[float, ...] = ()
    pass_pct_smoothed: Tuple[float, ...] = ()
    tackle_pct_smoothed: Tuple[float, ...] = ()
    rating_smoothed: Tuple[float, ...] = ()
    form_last5: str = ""
    form_last10: str = ""
    current_unbeaten: int = 0
    current_wins: int = 0
    current_clean_sheets: int = 0


@dataclass(frozen=True)
class DeriveConfig:
    """Externally-owned selection state, passed explicitly into `derive`."""
    player_id: Optional[int] = None
    club_ids: FrozenSet[int] = frozenset()
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    day_key: str = ALL_DAYS
    top_n: int = TOP_N
    smoothing_window: int = SMOOTHING_WINDOW
    tz: Optional[str] = None


@dataclass(frozen=True)
class DerivedView:
    """
    Everything one selection renders. Mapping fields are read-only
    `MappingProxyType` views.
    """
    mode: str
    records: Tuple[MatchStatRecord, ...] = ()
    days: Tuple[DaySummary, ...] = ()
    rows: Tuple[RankableRow, ...] = ()
    rankings: Mapping[Tuple[str, str], RankingList] = field(default_factory=lambda: MappingProxyType({}))
    summary: Optional[PeriodSummary] = None
    best_day: Optional[DaySummary] = None
    highlights: Tuple[MatchStatRecord, ...] = ()
    date_colors: Mapping[str, KeyColor] = field(default_factory=lambda: MappingProxyType({}))
    trend: TrendSeries = field(default_factory=TrendSeries)
    club_days: Tuple[ClubDaySummary, ...] = ()
    club_rankings: Mapping[str, ClubDayRanking] = field(default_factory=lambda: MappingProxyType({}))
    best_club_day: Optional[ClubDaySummary] = None
    club_summary: Optional[ClubPeriodSummary] = None
