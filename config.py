"""
Swing Progression Engine — Configuration & Constants.

Metric keys, grade thresholds, zone layout, trend/coaching rule tables,
and level fallbacks live here.
"""
import os

# ── Levels ─────────────────────────────────────
DEFAULT_LEVEL = os.environ.get("PROGRESSION_DEFAULT_LEVEL", "High School")
UNKNOWN_LEVEL = "N/A"

# Team field -> level, checked in order (first populated field wins).
LEVEL_BY_TEAM_FIELD = [
    ("college", "College"),
    ("high_school", "High School"),
    ("travel_team", "Youth/Travel"),
    ("indy", "Independent"),
    ("affiliate", "Affiliate"),
    ("little_league", "Little League"),
]

SESSION_TYPES = {"hittrax", "blast"}

# ── Metric keys ────────────────────────────────
AVG_EV = "avg_ev"
MAX_EV = "max_ev"
AVG_BS = "avg_bs"
MAX_BS = "max_bs"
BARREL_PCT = "barrel_pct"
AVG_LA = "avg_la"
LA_TOP5 = "la_top5"
AVG_DIST = "avg_dist"
AVG_TTC = "avg_ttc"
HOT_ZONE_EVS = "hot_zone_evs"

# Scalar metrics in MetricVector order (hot zones are a map, not graded).
SCALAR_METRICS = [AVG_EV, MAX_EV, AVG_BS, MAX_BS, BARREL_PCT, AVG_LA, LA_TOP5, AVG_DIST, AVG_TTC]

# Metrics tracked on the progression views (trends, milestones, consistency).
TRACKED_METRICS = [AVG_EV, MAX_EV, AVG_BS, MAX_BS, BARREL_PCT]

METRIC_LABELS = {
    AVG_EV: "Average Exit Velocity",
    MAX_EV: "Maximum Exit Velocity",
    AVG_BS: "Average Bat Speed",
    MAX_BS: "Maximum Bat Speed",
    BARREL_PCT: "Barrel Percentage",
    AVG_LA: "Average Launch Angle",
    LA_TOP5: "Hard-Hit Launch Angle",
    AVG_DIST: "Average Distance",
    AVG_TTC: "Average Time to Contact",
}

# camelCase keys used by the web client -> engine keys
METRIC_ALIASES = {
    "avgEv": AVG_EV, "maxEv": MAX_EV, "avgBs": AVG_BS, "maxBs": MAX_BS,
    "barrelPct": BARREL_PCT, "avgLa": AVG_LA, "launchAngleTop5": LA_TOP5,
    "avgDist": AVG_DIST, "avgTtc": AVG_TTC, "hotZoneEVs": HOT_ZONE_EVS,
}

# SwingRecord field aliases (vendor/web casing -> snake_case)
SWING_FIELD_ALIASES = {
    "sessionId": "session_id",
    "exitVelocity": "exit_velocity",
    "launchAngle": "launch_angle",
    "batSpeed": "bat_speed",
    "timeToContact": "time_to_contact",
    "strikeZone": "strike_zone",
}

# ── Swing thresholds ───────────────────────────
# Hard-hit style "barrel": EV only, launch angle ignored. Downstream grades
# were calibrated against this exact cutoff.
BARREL_EV_THRESHOLD = 95.0
TOP_EV_FRACTION = 0.05

# ── Strike zone layout ─────────────────────────
IN_ZONE_IDS = list(range(1, 10))
CHASE_ZONE_IDS = [10, 11, 12, 13]
ALL_ZONE_IDS = IN_ZONE_IDS + CHASE_ZONE_IDS

# 5-row render layout; None marks an empty cell between chase corners.
ZONE_LAYOUT = [
    [10, None, 11],
    [1, 2, 3],
    [4, 5, 6],
    [7, 8, 9],
    [12, None, 13],
]
ZONE_ROW_LABELS = ["Chase High", "Top", "Middle", "Bottom", "Chase Low"]

# ── Grades ─────────────────────────────────────
GRADE_AVERAGE = 50
GRADE_STEP = 10
GRADE_MIN = 20
GRADE_MAX = 80

MILESTONE_THRESHOLDS = [
    (40, "Below Average"),
    (50, "Average"),
    (60, "Above Average"),
    (70, "Well Above Average"),
    (80, "Elite"),
]

# Upper bound (inclusive) -> label; anything above the last bound is Elite.
GRADE_BANDS = [
    (30, "Well Below Average"),
    (40, "Below Average"),
    (50, "Average"),
    (60, "Above Average"),
    (70, "Well Above Average"),
]
GRADE_BAND_TOP = "Elite"

# ── Trends ─────────────────────────────────────
UP = "up"
DOWN = "down"
FLAT = "flat"
STRONG_UP = "strong_up"
STRONG_DOWN = "strong_down"
IMPROVING_DIRECTIONS = {UP, STRONG_UP}

STRONG_CHANGE_PCT = 5.0
RECENT_WINDOW_SESSIONS = 4

# Evaluated in order: (predicate on percent change, direction)
DIRECTION_RULES = [
    (lambda pct: pct > STRONG_CHANGE_PCT, STRONG_UP),
    (lambda pct: pct > 0, UP),
    (lambda pct: pct < -STRONG_CHANGE_PCT, STRONG_DOWN),
    (lambda pct: pct < 0, DOWN),
]

ALERT_LOOKBACK_SESSIONS = 3
ALERT_IMPROVEMENT_PCT = 10.0

# ── Goals ──────────────────────────────────────
GOAL_ACTIVE = "active"
GOAL_ACHIEVED = "achieved"
GOAL_MISSED = "missed"
GOAL_STATUSES = {GOAL_ACTIVE, GOAL_ACHIEVED, GOAL_MISSED}

PROJECTION_LOOKBACK_SESSIONS = 3
PROJECTION_DAYS_PER_SESSION = 7

# ── Coaching tips ──────────────────────────────
COACHING_METRICS = [AVG_EV, MAX_EV, AVG_BS, BARREL_PCT]
COACHING_GRADE_CEILING = 60
COACHING_LOW_GRADE = 40
COACHING_GRADE_STEP = 10

# metric -> (tip when grade < COACHING_LOW_GRADE, tip otherwise)
COACHING_TIPS = {
    AVG_EV: (
        "Focus on fundamentals and swing mechanics",
        "Work on lower-half sequencing and hip rotation drills",
    ),
    MAX_EV: (
        "Refine swing mechanics for maximum bat speed transfer",
        "Incorporate explosive lower-body exercises and rotational power work",
    ),
    AVG_BS: (
        "Work on swing mechanics and barrel control",
        "Practice quick hands and bat path efficiency",
    ),
    BARREL_PCT: (
        "Refine swing path and barrel control",
        "Practice hitting the ball on the sweet spot consistently",
    ),
}


# ── Utility functions ──────────────────────────

def canonical_metric(key):
    """Map a web-client metric key (``avgEv``) to the engine key (``avg_ev``)."""
    return METRIC_ALIASES.get(key, key)
