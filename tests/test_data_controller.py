"""
Unit tests for record extraction and selection filters.
"""
from datetime import date, datetime

from clubstats.controllers.data_controller import (
    FRAME_COLUMNS, dates_for_player, extract_record, extract_records, filter_records,
    player_options, records_frame,
)
from clubstats.models.match_model import MatchStatRecord, PlayerOption


def test_camel_and_pascal_casing_extract_the_same_record():
    camel = {"playerId": 7, "date": "2025-11-04T14:02:00", "totalGoals": 2, "totalAssists": 1,
             "totalPassesMade": 8, "totalPassAttempts": 10, "avgRating": 7.5}
    pascal = {"PlayerId": 7, "Date": "2025-11-04T14:02:00", "TotalGoals": 2, "TotalAssists": 1,
              "TotalPassesMade": 8, "TotalPassAttempts": 10, "AvgRating": 7.5}
    assert extract_record(camel) == extract_record(pascal)


def test_first_present_value_wins_across_casings():
    rec = extract_record({"totalGoals": 1, "TotalGoals": 4, "TotalAssists": 2})
    assert rec.goals == 1
    assert rec.assists == 2


def test_missing_fields_default_to_zero():
    rec = extract_record({})
    assert rec == MatchStatRecord()
    assert rec.goals == 0
    assert rec.rating == 0
    assert rec.timestamp is None
    assert rec.day is None


def test_non_finite_and_junk_values_resolve_to_zero():
    rec = extract_record({"totalGoals": float("nan"), "totalShots": "inf", "avgRating": "n/a",
                          "totalSaves": "4"})
    assert rec.goals == 0
    assert rec.shots == 0
    assert rec.rating == 0
    assert rec.saves == 4


def test_non_mapping_input_never_raises():
    assert extract_record(None) == MatchStatRecord()
    assert extract_record("garbage") == MatchStatRecord()


def test_extract_records_skips_non_mappings():
    records = extract_records([None, 5, {"totalGoals": 1}])
    assert len(records) == 1
    assert records[0].goals == 1
    assert extract_records(None) == ()
    assert extract_records([]) == ()


def test_supplied_percentage_takes_precedence():
    rec = extract_record({"totalPassesMade": 5, "totalPassAttempts": 10, "passAccuracyPercent": 80})
    assert rec.pass_pct == 80


def test_percentage_computed_when_not_supplied():
    rec = extract_record({"totalPassesMade": 5, "totalPassAttempts": 10,
                          "totalTacklesMade": 1, "totalTackleAttempts": 4})
    assert rec.pass_pct == 50
    assert rec.tackle_pct == 25


def test_zero_attempts_give_zero_percentage():
    rec = extract_record({"totalPassesMade": 0, "totalPassAttempts": 0})
    assert rec.pass_pct == 0
    assert rec.tackle_pct == 0


def test_timestamp_and_time_flag():
    rec = extract_record({"date": "2025-11-04T14:02:00"})
    assert rec.timestamp == datetime(2025, 11, 4, 14, 2)
    assert rec.has_time is True
    assert rec.day == "2025-11-04"

    day_only = extract_record({"date": "2025-11-04"})
    assert day_only.day == "2025-11-04"
    assert day_only.has_time is False

    broken = extract_record({"date": "yesterday-ish"})
    assert broken.timestamp is None


def test_result_from_field_or_counters():
    assert extract_record({"result": "W"}).result == "W"
    assert extract_record({"Result": "draw"}).result == "D"
    assert extract_record({"totalLosses": 1}).result == "L"
    assert extract_record({"totalWins": 1, "totalLosses": 1}).result is None
    assert extract_record({}).result is None


def test_ids_and_names():
    rec = extract_record({"MatchId": 991, "PlayerId": "7", "proName": "Ana", "ClubId": 0})
    assert rec.match_id == "991"
    assert rec.player_id == 7
    assert rec.player_name == "Ana"
    assert rec.club_id is None


def test_participations_include_pre_assists():
    rec = extract_record({"totalGoals": 1, "totalAssists": 2, "totalPreAssists": 1})
    assert rec.participations == 4


def test_records_frame_columns():
    empty = records_frame([])
    assert list(empty.columns) == FRAME_COLUMNS
    assert empty.empty

    frame = records_frame([extract_record({"date": "2025-11-04T14:02:00", "totalGoals": 2})])
    assert frame.loc[0, "day"] == "2025-11-04"
    assert frame.loc[0, "time"] == "14:02"
    assert frame.loc[0, "goals"] == 2


def test_filter_by_player_and_club(player_batch):
    records = extract_records(player_batch)
    ana = filter_records(records, player_id=7)
    assert {r.player_id for r in ana} == {7}
    assert len(ana) == 4

    club = filter_records(records, club_ids={352016})
    assert {r.player_name for r in club} == {"Bruno"}


def test_filter_date_range_is_inclusive(player_batch):
    records = extract_records(player_batch)
    kept = filter_records(records, date_from=date(2025, 11, 4), date_to=date(2025, 11, 6))
    assert sorted({r.day for r in kept}) == ["2025-11-04", "2025-11-06"]

    only_first = filter_records(records, date_to=date(2025, 11, 2))
    assert [r.day for r in only_first] == ["2025-11-02"]


def test_filter_range_drops_untimed_records():
    records = extract_records([{"totalGoals": 1}, {"date": "2025-11-04", "totalGoals": 2}])
    assert len(filter_records(records)) == 2
    kept = filter_records(records, date_from=date(2025, 11, 1))
    assert [r.goals for r in kept] == [2]


def test_player_options_sorted_by_name(player_batch):
    records = extract_records(player_batch + [{"playerId": 3}])
    assert player_options(records) == [
        PlayerOption(player_id=7, name="Ana"),
        PlayerOption(player_id=9, name="Bruno"),
        PlayerOption(player_id=3, name="Player 3"),
    ]


def test_dates_for_player_most_recent_first(player_batch):
    records = extract_records(player_batch)
    assert dates_for_player(records, 7) == ["2025-11-06", "2025-11-04", "2025-11-02"]
    assert dates_for_player(records, 42) == []
