"""Longitudinal trends over a player's session history.

Two trend strategies live side by side:

  - ``endpoint``: first vs. last metric-bearing session in the window.
  - ``recent_window``: same first/last percent change, plus the mean of the
    last four metric-bearing sessions as ``recent_average``.

Callers pick one by name (``TREND_STRATEGIES``). "Today" is always passed
in so results are reproducible for fixed dates.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from config import (
    ALERT_IMPROVEMENT_PCT,
    ALERT_LOOKBACK_SESSIONS,
    AVG_EV,
    DIRECTION_RULES,
    FLAT,
    IMPROVING_DIRECTIONS,
    METRIC_LABELS,
    RECENT_WINDOW_SESSIONS,
    TRACKED_METRICS,
    canonical_metric,
)
from data.models import Alert, SessionDelta, SessionSummary, TimeWindow, Trend
from analytics.summary import sort_sessions

logger = logging.getLogger(__name__)

ENDPOINT = "endpoint"
RECENT_WINDOW = "recent_window"


def filter_sessions(sessions: Iterable[SessionSummary], window: Optional[TimeWindow] = None,
                    today: Optional[dt.date] = None) -> List[SessionSummary]:
    """Chronologically sorted sessions whose date falls inside ``window``."""
    ordered = sort_sessions(sessions)
    if window is None or window.kind == "all":
        return ordered
    return [s for s in ordered if window.contains(s.session_date, today)]


def _metric_points(sessions: Sequence[SessionSummary], metric: str) -> List[Tuple[SessionSummary, float]]:
    points = []
    for s in sessions:
        val = s.metric(metric)
        if val is not None:
            points.append((s, float(val)))
    return points


def percent_change(first: Optional[float], last: Optional[float]) -> Optional[float]:
    """(last - first) / first * 100; None when undefined (missing or zero base)."""
    if first is None or last is None or first == 0:
        return None
    return (last - first) / first * 100


def classify_direction(pct: Optional[float]) -> Optional[str]:
    if pct is None:
        return None
    for matches, direction in DIRECTION_RULES:
        if matches(pct):
            return direction
    return FLAT


def _no_data(metric: str, strategy: str, n: int) -> Trend:
    return Trend(metric=metric, strategy=strategy, has_data=False, sessions_analyzed=n)


def endpoint_trend(sessions, metric: str, window: Optional[TimeWindow] = None,
                   today: Optional[dt.date] = None) -> Trend:
    """First vs. last metric-bearing session; sessions in between are ignored."""
    metric = canonical_metric(metric)
    points = _metric_points(filter_sessions(sessions, window, today), metric)
    if len(points) < 2:
        return _no_data(metric, ENDPOINT, len(points))
    first, last = points[0][1], points[-1][1]
    pct = percent_change(first, last)
    return Trend(
        metric=metric,
        strategy=ENDPOINT,
        has_data=True,
        first_value=first,
        last_value=last,
        percent_change=pct,
        direction=classify_direction(pct),
        sessions_analyzed=len(points),
    )


def recent_window_trend(sessions, metric: str, window: Optional[TimeWindow] = None,
                        today: Optional[dt.date] = None) -> Trend:
    """Series first/last percent change plus the recent four-session average."""
    metric = canonical_metric(metric)
    points = _metric_points(filter_sessions(sessions, window, today), metric)
    if len(points) < 2:
        return _no_data(metric, RECENT_WINDOW, len(points))
    values = [v for _, v in points]
    pct = percent_change(values[0], values[-1])
    return Trend(
        metric=metric,
        strategy=RECENT_WINDOW,
        has_data=True,
        first_value=values[0],
        last_value=values[-1],
        percent_change=pct,
        direction=classify_direction(pct),
        sessions_analyzed=len(values),
        recent_average=float(np.mean(values[-RECENT_WINDOW_SESSIONS:])),
    )


TREND_STRATEGIES = {
    ENDPOINT: endpoint_trend,
    RECENT_WINDOW: recent_window_trend,
}


def compute_trend(sessions, metric: str, strategy: str = ENDPOINT,
                  window: Optional[TimeWindow] = None, today: Optional[dt.date] = None) -> Trend:
    try:
        fn = TREND_STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown trend strategy: {strategy!r}") from None
    return fn(sessions, metric, window=window, today=today)


def analyze_trends(sessions, metrics: Sequence[str] = TRACKED_METRICS, strategy: str = ENDPOINT,
                   window: Optional[TimeWindow] = None, today: Optional[dt.date] = None) -> Dict[str, Trend]:
    sessions = list(sessions)
    return {canonical_metric(m): compute_trend(sessions, m, strategy, window, today) for m in metrics}


def consistency_score(trends) -> Optional[int]:
    """Percent of metrics with data that are trending up; None when none have data."""
    if isinstance(trends, dict):
        trends = trends.values()
    with_data = [t for t in trends if t.has_data]
    if not with_data:
        return None
    improving = sum(1 for t in with_data if t.direction in IMPROVING_DIRECTIONS)
    return int(np.floor(improving / len(with_data) * 100 + 0.5))


def session_deltas(sessions, metrics: Sequence[str] = TRACKED_METRICS) -> List[SessionDelta]:
    """Session-over-session change for each metric (None when either side is missing)."""
    ordered = sort_sessions(sessions)
    out = []
    for prev, curr in zip(ordered, ordered[1:]):
        deltas = {}
        for m in metrics:
            a, b = prev.metric(m), curr.metric(m)
            deltas[canonical_metric(m)] = round(b - a, 2) if a is not None and b is not None else None
        out.append(SessionDelta(session_id=curr.session_id, session_date=curr.session_date, deltas=deltas))
    return out


def performance_alerts(sessions, metric: str = AVG_EV) -> List[Alert]:
    """Backslide warning over the last three sessions and a big-improvement note."""
    metric = canonical_metric(metric)
    label = METRIC_LABELS.get(metric, metric)
    ordered = sort_sessions(sessions)
    alerts = []

    recent = [v for _, v in _metric_points(ordered[-ALERT_LOOKBACK_SESSIONS:], metric)]
    if len(ordered) >= ALERT_LOOKBACK_SESSIONS and len(recent) >= 2 and recent[0] > recent[-1]:
        alerts.append(Alert(
            kind="warning",
            metric=metric,
            message=f"{label} declining over last {ALERT_LOOKBACK_SESSIONS} sessions",
        ))

    points = _metric_points(ordered, metric)
    if len(points) >= 2:
        pct = percent_change(points[0][1], points[-1][1])
        if pct is not None and pct > ALERT_IMPROVEMENT_PCT:
            alerts.append(Alert(
                kind="success",
                metric=metric,
                message=f"Significant improvement: +{int(round(pct))}% in {label}",
            ))
    return alerts
