"""Data contracts and benchmark tables."""
from data.models import (
    SwingRecord, LevelBenchmark, SessionSummary, TimeWindow, Trend,
    SessionDelta, Alert, Milestone, UpcomingMilestone, Goal, GoalProgress,
    GoalAchievement, GoalProjection, CoachingTip, as_date,
)
from data.benchmarks import BenchmarkTable, read_benchmarks, player_level
