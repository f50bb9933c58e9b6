"""Build a SessionSummary by normalizing a session's swings and grading them."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from analytics.grades import grade_metrics
from analytics.swing_metrics import compute_session_metrics
from data.models import SessionSummary

logger = logging.getLogger(__name__)


def build_session_summary(session_id, session_date, session_type, swings,
                          table=None, level: Optional[str] = None) -> SessionSummary:
    """Build the immutable SessionSummary for one session.

    Without a benchmark table the grade vector is empty. Re-uploads produce a
    new summary; nothing here is cached.
    """
    total, metrics = compute_session_metrics(swings)
    grades = grade_metrics(metrics, table, level) if table is not None else {}
    logger.debug("Session %s (%s): %d swings, %d graded metrics",
                 session_id, session_type, total, sum(g is not None for g in grades.values()))
    return SessionSummary(
        session_id=session_id,
        session_date=session_date,
        session_type=session_type,
        total_swings=total,
        metrics=metrics,
        grades=grades,
    )


def sort_sessions(sessions: Iterable[SessionSummary]) -> List[SessionSummary]:
    """Chronological order by session date; same-day sessions keep input order."""
    return sorted(sessions, key=lambda s: s.session_date)


def latest_session(sessions: Iterable[SessionSummary]) -> Optional[SessionSummary]:
    ordered = sort_sessions(sessions)
    return ordered[-1] if ordered else None
