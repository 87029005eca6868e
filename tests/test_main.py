"""
End-to-end tests for `derive`, the engine's single entry point.
"""
import copy
from datetime import date

import pytest

from clubstats import DeriveConfig, derive
from clubstats.common.constants import BEST, DAY_MODE, MATCH_MODE
from clubstats.models.match_model import TrendSeries


def test_all_days_view(player_batch):
    view = derive(player_batch)
    assert view.mode == DAY_MODE
    assert len(view.records) == 6
    assert [d.date for d in view.days] == ["2025-11-06", "2025-11-04", "2025-11-02"]
    assert {r.source for r in view.rows} == {DAY_MODE}
    assert len(view.rankings) == 8
    assert view.rankings[("goals", BEST)].rows[0].id == "day-2025-11-04"
    assert view.summary.total_matches == 6
    assert view.summary.days_count == 3
    assert view.summary.scope_label == "02/11/2025 — 06/11/2025"
    assert view.best_day.date == "2025-11-04"
    assert view.highlights == ()


def test_date_colors_follow_ascending_days(player_batch):
    view = derive(player_batch)
    assert list(view.date_colors) == ["2025-11-02", "2025-11-04", "2025-11-06"]

    later = derive(player_batch + [dict(player_batch[0], date="2025-11-09T10:00:00")])
    for key, color in view.date_colors.items():
        assert later.date_colors[key] == color


def test_single_day_view(player_batch):
    view = derive(player_batch, DeriveConfig(player_id=7, day_key="2025-11-04"))
    assert view.mode == MATCH_MODE
    assert len(view.rows) == 2
    assert {r.source for r in view.rows} == {MATCH_MODE}
    assert view.summary.total_matches == 2
    assert view.summary.days_count == 1
    assert view.summary.scope_label == "04/11/2025"
    assert [r.goals for r in view.highlights] == [2, 1]
    # days and the trend still cover the whole period
    assert len(view.days) == 3
    assert len(view.trend.labels) == 4


def test_club_and_date_filters(player_batch):
    bruno = derive(player_batch, DeriveConfig(club_ids=frozenset({352016})))
    assert {r.player_name for r in bruno.records} == {"Bruno"}

    ranged = derive(player_batch, DeriveConfig(date_from=date(2025, 11, 4), date_to=date(2025, 11, 6)))
    assert [d.date for d in ranged.days] == ["2025-11-06", "2025-11-04"]
    assert ranged.summary.scope_label == "04/11/2025 — 06/11/2025"


def test_top_n_from_config(player_batch):
    view = derive(player_batch, DeriveConfig(top_n=1))
    assert all(len(r) == 1 for r in view.rankings.values())


def test_empty_batch():
    for batch in ([], None):
        view = derive(batch)
        assert view.mode == DAY_MODE
        assert view.days == ()
        assert view.rows == ()
        assert view.summary is None
        assert view.best_day is None
        assert view.date_colors == {}
        assert view.trend == TrendSeries()
        assert all(len(r) == 0 for r in view.rankings.values())


def test_derive_is_idempotent_and_leaves_input_untouched(player_batch):
    snapshot = copy.deepcopy(player_batch)
    config = DeriveConfig(player_id=7)
    assert derive(player_batch, config) == derive(player_batch, config)
    assert player_batch == snapshot


def test_club_view_by_day(player_batch):
    view = derive(player_batch)
    assert [d.date for d in view.club_days] == ["2025-11-06", "2025-11-04", "2025-11-02"]
    assert view.best_club_day.date == "2025-11-06"
    assert view.club_rankings["goal_difference"].days[0].date == "2025-11-04"
    assert view.club_summary.total_matches == 6
    assert view.club_summary.days_with_matches == 3


def test_view_mappings_are_read_only(player_batch):
    view = derive(player_batch)
    with pytest.raises(TypeError):
        view.rankings[("goals", BEST)] = None
    with pytest.raises(TypeError):
        view.date_colors["2025-11-02"] = None
    with pytest.raises(TypeError):
        view.club_rankings["win_pct"] = None
