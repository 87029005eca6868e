from typing import Dict, Tuple

TOP_N            = 5            # rows kept per ranking list
SMOOTHING_WINDOW = 5            # trailing window for trend lines
GOLDEN_ANGLE     = 137.508      # degrees between successive key hues
ALL_DAYS         = "all"        # day key that selects day mode
NO_DATE          = "nodate"     # id fragment for match rows without a timestamp

DAY_MODE   = "day"
MATCH_MODE = "match"

BEST  = "best"
WORST = "worst"

# Key colors (HSL saturation/lightness for background and border)
BG_SATURATION, BG_LIGHTNESS         = 80, 88
BORDER_SATURATION, BORDER_LIGHTNESS = 75, 45
FOREGROUND                          = "#111827"
FALLBACK_COLOR = {"bg": "#E5E7EB", "border": "#9CA3AF", "fg": "#111827"}

# Canonical field -> source keys, first present value wins.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "match_id":        ("matchId", "MatchId", "idMatch", "IdMatch"),
    "player_id":       ("playerId", "PlayerId"),
    "player_name":     ("playerName", "PlayerName", "proName", "ProName"),
    "club_id":         ("clubId", "ClubId"),
    "timestamp":       ("date", "Date", "timestamp", "Timestamp"),
    "goals":           ("totalGoals", "TotalGoals", "goals", "Goals", "goalsFor", "GoalsFor"),
    "assists":         ("totalAssists", "TotalAssists", "assists", "Assists"),
    "pre_assists":     ("totalPreAssists", "TotalPreAssists", "preAssists", "PreAssists"),
    "shots":           ("totalShots", "TotalShots", "shots", "Shots"),
    "passes_made":     ("totalPassesMade", "TotalPassesMade", "passesMade", "PassesMade"),
    "pass_attempts":   ("totalPassAttempts", "TotalPassAttempts", "passAttempts", "PassAttempts"),
    "tackles_made":    ("totalTacklesMade", "TotalTacklesMade", "tacklesMade", "TacklesMade"),
    "tackle_attempts": ("totalTackleAttempts", "TotalTackleAttempts", "tackleAttempts", "TackleAttempts"),
    "saves":           ("totalSaves", "TotalSaves", "saves", "Saves"),
    "red_cards":       ("totalRedCards", "TotalRedCards", "redCards", "RedCards"),
    "goals_conceded":  ("totalGoalsConceded", "TotalGoalsConceded", "goalsAgainst", "GoalsAgainst"),
    "wins":            ("totalWins", "TotalWins"),
    "draws":           ("totalDraws", "TotalDraws"),
    "losses":          ("totalLosses", "TotalLosses"),
    "rating":          ("avgRating", "AvgRating", "rating", "Rating"),
    "pass_pct":        ("passAccuracyPercent", "PassAccuracyPercent", "passSuccessPct", "PassSuccessPct"),
    "tackle_pct":      ("tackleSuccessPercent", "TackleSuccessPercent"),
    "result":          ("result", "Result"),
}

COUNTER_FIELDS = (
    "goals", "assists", "pre_assists", "shots",
    "passes_made", "pass_attempts", "tackles_made", "tackle_attempts",
    "saves", "red_cards", "goals_conceded", "wins", "draws", "losses",
)

RESULTS = ("W", "D", "L")
