"""Analytics computations — session metrics, grades, trends, milestones."""
from analytics.swing_metrics import compute_session_metrics, swings_frame
from analytics.hot_zones import compute_hot_zone_evs, zone_grid, hottest_zone
from analytics.grades import (
    DegenerateBenchmark, grade_of, target_value_for, display_grade,
    grade_label, grade_change, grade_metrics, percentile_rank,
)
from analytics.summary import build_session_summary, sort_sessions, latest_session
from analytics.trends import (
    ENDPOINT, RECENT_WINDOW, TREND_STRATEGIES,
    compute_trend, analyze_trends, consistency_score,
    session_deltas, performance_alerts,
)
from analytics.milestones import find_milestones, upcoming_milestones
