"""Milestones: first session at which a metric reaches each grade threshold."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from config import METRIC_LABELS, MILESTONE_THRESHOLDS, TRACKED_METRICS, canonical_metric
from analytics.grades import DegenerateBenchmark, target_value_for
from analytics.summary import sort_sessions
from data.models import Milestone, SessionSummary, UpcomingMilestone

logger = logging.getLogger(__name__)


def _thresholds_for(table, level, metric) -> List[Tuple[int, str, float]]:
    """(grade, label, target value) per threshold; empty if the benchmark is unusable."""
    bench = table.get(level, metric)
    if bench is None:
        return []
    try:
        return [(g, label, target_value_for(g, bench.mean, bench.sd)) for g, label in MILESTONE_THRESHOLDS]
    except DegenerateBenchmark as e:
        logger.warning("No milestones for %s at level %s: %s", metric, bench.level, e)
        return []


def _description(label: str, metric: str) -> str:
    return f"Reached {label} {METRIC_LABELS.get(metric, metric)}"


def find_milestones(sessions: Iterable[SessionSummary], table, level: Optional[str],
                    metrics: Sequence[str] = TRACKED_METRICS,
                    achieved: Optional[Iterable[Milestone]] = None) -> List[Milestone]:
    """Every (metric, threshold) the player has crossed, oldest first.

    Sessions are scanned earliest-first and the first session at or above the
    target wins, not the best one. Milestones passed in ``achieved`` are kept
    as-is, so a later benchmark revision never moves an earned date.
    """
    ordered = sort_sessions(sessions)
    prior: Dict[Tuple[str, int], Milestone] = {}
    for m in achieved or ():
        prior[(canonical_metric(m.metric), m.grade)] = m

    out: List[Milestone] = []
    for metric in metrics:
        metric = canonical_metric(metric)
        targets = _thresholds_for(table, level, metric)
        known = {g for (mk, g) in prior if mk == metric}
        for grade in sorted(known):
            out.append(prior[(metric, grade)])
        for grade, label, target in targets:
            if grade in known:
                continue
            hit = next((s for s in ordered if s.metric(metric) is not None and s.metric(metric) >= target), None)
            if hit is None:
                continue
            out.append(Milestone(
                metric=metric,
                grade=grade,
                label=label,
                target_value=target,
                achieved_date=hit.session_date,
                session_id=hit.session_id,
                description=_description(label, metric),
            ))
    # Stable: same-day milestones keep metric, then threshold order.
    return sorted(out, key=lambda m: m.achieved_date)


def upcoming_milestones(latest: Optional[SessionSummary], table, level: Optional[str],
                        metrics: Sequence[str] = TRACKED_METRICS,
                        achieved: Optional[Iterable[Milestone]] = None) -> List[UpcomingMilestone]:
    """Thresholds not yet earned, with progress of the latest session toward each."""
    done = {(canonical_metric(m.metric), m.grade) for m in achieved or ()}
    out = []
    for metric in metrics:
        metric = canonical_metric(metric)
        current = latest.metric(metric) if latest is not None else None
        for grade, label, target in _thresholds_for(table, level, metric):
            if (metric, grade) in done:
                continue
            if current is None or target <= 0:
                progress = 0.0 if current is None else 100.0
            else:
                progress = min(100.0, current / target * 100)
            out.append(UpcomingMilestone(
                metric=metric,
                grade=grade,
                label=label,
                target_value=target,
                current_value=current,
                progress=progress,
            ))
    return out
