"""Goal progress: latest session vs. a coach-set target.

Nothing here changes a goal's status; the goal-management side decides when
an active goal becomes achieved or missed.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Iterable, Optional

from config import (
    GOAL_ACHIEVED,
    GOAL_ACTIVE,
    PROJECTION_DAYS_PER_SESSION,
    PROJECTION_LOOKBACK_SESSIONS,
    canonical_metric,
)
from analytics.summary import sort_sessions
from data.models import (
    Goal,
    GoalAchievement,
    GoalProgress,
    GoalProjection,
    SessionSummary,
    as_date,
)

logger = logging.getLogger(__name__)


def days_left(end_date, today) -> int:
    """Whole days until ``end_date``; negative once overdue."""
    return (as_date(end_date) - as_date(today)).days


def progress_toward(current: Optional[float], target: float) -> float:
    if current is None:
        return 0.0
    if target <= 0:
        return 100.0
    return min(100.0, current / target * 100)


def goal_progress(goal: Goal, latest: Optional[SessionSummary], today) -> GoalProgress:
    current = latest.metric(goal.goal_type) if latest is not None else None
    if goal.status == GOAL_ACHIEVED:
        progress = 100.0
    else:
        progress = progress_toward(current, float(goal.target_value))
    return GoalProgress(
        goal_id=goal.id,
        goal_type=goal.goal_type,
        current_value=current,
        progress=progress,
        days_left=days_left(goal.end_date, today),
    )


def check_goal_achievement(goal: Goal, session: SessionSummary) -> Optional[GoalAchievement]:
    """Whether ``session`` meets an active goal's target.

    Returns the achievement details for the caller to record; the goal
    itself is left untouched.
    """
    if goal.status != GOAL_ACTIVE:
        return None
    current = session.metric(goal.goal_type)
    if current is None or current < float(goal.target_value):
        return None
    logger.info("Goal %s reached: %s %.2f >= %.2f (session %s)",
                goal.id, goal.goal_type, current, float(goal.target_value), session.session_id)
    return GoalAchievement(
        goal_id=goal.id,
        achieved_date=session.session_date,
        session_id=session.session_id,
        current_value=current,
    )


def project_goal(sessions: Iterable[SessionSummary], metric: str, target: float,
                 today) -> Optional[GoalProjection]:
    """Estimate when ``target`` will be reached from recent session-over-session gains.

    Needs at least three sessions carrying the metric and a positive average
    gain across the last three; assumes one session per week.
    """
    metric = canonical_metric(metric)
    values = [s.metric(metric) for s in sort_sessions(sessions)]
    values = [v for v in values if v is not None]
    if len(values) < PROJECTION_LOOKBACK_SESSIONS:
        return None
    recent = values[-PROJECTION_LOOKBACK_SESSIONS:]
    gains = [b - a for a, b in zip(recent, recent[1:])]
    per_session = sum(gains) / len(gains)
    if per_session <= 0:
        return None
    current = values[-1]
    n_sessions = max(0, int(math.ceil((float(target) - current) / per_session)))
    return GoalProjection(
        metric=metric,
        current_value=current,
        goal_value=float(target),
        improvement_per_session=per_session,
        sessions_to_goal=n_sessions,
        estimated_date=as_date(today) + dt.timedelta(days=n_sessions * PROJECTION_DAYS_PER_SESSION),
    )
