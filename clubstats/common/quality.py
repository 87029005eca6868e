from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Dict, Optional

from clubstats.common.metrics import percentage


@dataclass(frozen=True)
class Thresholds:
    poor: float
    decent: float
    good: float
    very_good: float


@dataclass(frozen=True)
class QualityInfo:
    level: str
    color: str
    bg_color: str
    label: str


LEVELS = ("poor", "decent", "good", "very_good")

STAT_THRESHOLDS: Dict[str, Thresholds] = {
    "shot_to_goal_conversion": Thresholds(10, 15, 25, 35),
    "shots_on_target":         Thresholds(40, 60, 75, 90),
    "pass_completion":         Thresholds(75, 85, 90, 90),
    "goals_per_match":         Thresholds(2.0, 3.0, 4.0, 4.0),
    "tackle_duel_win":         Thresholds(50, 60, 70, 70),
    "team_possession":         Thresholds(45, 55, 65, 65),
    "win_rate":                Thresholds(30, 50, 60, 75),
    "save_percentage":         Thresholds(50, 60, 70, 80),
}

STAT_NAMES = {
    "shot_to_goal_conversion": "Shot conversion",
    "shots_on_target":         "Shots on target",
    "pass_completion":         "Pass accuracy",
    "goals_per_match":         "Goals per match",
    "tackle_duel_win":         "Tackle success",
    "team_possession":         "Possession",
    "win_rate":                "Win rate",
    "save_percentage":         "Save percentage",
}

QUALITY: Dict[str, QualityInfo] = {
    "poor":      QualityInfo("poor", "text-red-600", "bg-red-100", "Poor"),
    "decent":    QualityInfo("decent", "text-orange-600", "bg-orange-100", "Decent"),
    "good":      QualityInfo("good", "text-green-600", "bg-green-100", "Good"),
    "very_good": QualityInfo("very_good", "text-blue-600", "bg-blue-100", "Excellent"),
}


def classify_stat(stat_type: str, value: float) -> Optional[QualityInfo]:
    """Quality tier of a stat value, or None for unknown stats / non-finite values."""
    t = STAT_THRESHOLDS.get(stat_type)
    if t is None or value is None or not math.isfinite(value):
        return None
    if value < t.poor:
        return QUALITY["poor"]
    if value < t.decent:
        return QUALITY["decent"]
    if value < t.good:
        return QUALITY["good"]
    return QUALITY["very_good"]


def shot_to_goal_conversion(goals: float, shots: float) -> float:
    return percentage(goals, shots)


def quality_details(stat_type: str, value: float) -> Optional[str]:
    """
    Multi-line description: the value with its tier, the distance to the next
    tier (or a max-tier note) and the margin above the previous tier.
    """
    quality = classify_stat(stat_type, value)
    if quality is None:
        return None
    t = STAT_THRESHOLDS[stat_type]
    name = STAT_NAMES.get(stat_type, stat_type)
    lines = [f"{name}: {value:.1f}% ({quality.label})"]

    idx = LEVELS.index(quality.level)
    if quality.level != "very_good":
        nxt = LEVELS[idx + 1]
        next_threshold = (t.decent, t.good, t.very_good)[idx]
        lines.append(f"↑ Next tier ({QUALITY[nxt].label}): +{next_threshold - value:.1f}%")
    else:
        lines.append("✓ Top tier reached!")

    if quality.level != "poor":
        prv = LEVELS[idx - 1]
        prev_threshold = (t.poor, t.decent, t.good)[idx - 1]
        lines.append(f"↓ Previous tier ({QUALITY[prv].label}): -{value - prev_threshold:.1f}%")
    return "\n".join(lines)
