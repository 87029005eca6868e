"""
Shared pytest fixtures for the statistics engine tests.

Raw batches mimic the retrieval layer: loosely-typed mappings that use either
camelCase or PascalCase keys for the same field.
"""
import time

import pytest

from clubstats.controllers.data_controller import extract_record


@pytest.fixture
def local_zone(monkeypatch):
    """Pin the process-local time zone by name (POSIX only)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def _set(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()
    yield _set
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def make_raw():
    """Factory for one raw camelCase player-match mapping."""
    def _make(date=None, goals=0, assists=0, rating=0.0, player_id=7, player_name="Ana", **extra):
        raw = {
            "playerId": player_id,
            "playerName": player_name,
            "clubId": 355651,
            "totalGoals": goals,
            "totalAssists": assists,
            "avgRating": rating,
        }
        if date is not None:
            raw["date"] = date
        raw.update(extra)
        return raw
    return _make


@pytest.fixture
def make_record(make_raw):
    """Factory for one extracted `MatchStatRecord`."""
    def _make(date=None, **kwargs):
        return extract_record(make_raw(date=date, **kwargs))
    return _make


@pytest.fixture
def player_batch(make_raw):
    """
    Two players over three days; Ana plays twice on 2025-11-04.

    Yields raw mappings in mixed casing and unsorted order.
    """
    return [
        make_raw("2025-11-04T16:45:00", goals=1, assists=0, rating=8.0,
                 totalPassesMade=9, totalPassAttempts=19, totalTacklesMade=2, totalTackleAttempts=4),
        {
            "PlayerId": 7,
            "PlayerName": "Ana",
            "ClubId": 355651,
            "Date": "2025-11-04T14:02:00",
            "TotalGoals": 2,
            "TotalAssists": 1,
            "AvgRating": 7.0,
            "TotalPassesMade": 1,
            "TotalPassAttempts": 1,
            "TotalTacklesMade": 1,
            "TotalTackleAttempts": 1,
        },
        make_raw("2025-11-02T20:10:00", goals=0, assists=2, rating=6.5,
                 totalPassesMade=30, totalPassAttempts=40),
        make_raw("2025-11-06T21:00:00", goals=3, assists=0, rating=9.1,
                 totalPassesMade=12, totalPassAttempts=12, totalWins=1),
        make_raw("2025-11-04T15:00:00", goals=1, assists=1, rating=7.2,
                 player_id=9, player_name="Bruno", clubId=352016),
        make_raw("2025-11-06T22:00:00", goals=0, assists=0, rating=5.0,
                 player_id=9, player_name="Bruno", clubId=352016),
    ]
