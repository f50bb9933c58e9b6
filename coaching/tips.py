"""Rule-based coaching tips from the latest session's grades."""
from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from config import (
    COACHING_GRADE_CEILING,
    COACHING_GRADE_STEP,
    COACHING_LOW_GRADE,
    COACHING_METRICS,
    COACHING_TIPS,
    canonical_metric,
)
from data.models import CoachingTip, SessionSummary


def tip_text(metric: str, grade: int) -> Optional[str]:
    rule = COACHING_TIPS.get(canonical_metric(metric))
    if rule is None:
        return None
    low, mid = rule
    return low if grade < COACHING_LOW_GRADE else mid


def coaching_tips(grades, metrics: Sequence[str] = COACHING_METRICS) -> List[CoachingTip]:
    """One tip per allowlisted metric graded below 60.

    ``grades`` may be a SessionSummary or a plain grade mapping.
    """
    if isinstance(grades, SessionSummary):
        grades = grades.grades
    grades: Mapping = {canonical_metric(k): v for k, v in (grades or {}).items()}
    tips = []
    for metric in metrics:
        metric = canonical_metric(metric)
        if metric not in COACHING_TIPS:
            continue
        current = grades.get(metric)
        if current is None or current >= COACHING_GRADE_CEILING:
            continue
        target = min(COACHING_GRADE_CEILING, current + COACHING_GRADE_STEP)
        tips.append(CoachingTip(
            metric=metric,
            current_grade=current,
            target_grade=target,
            tip=f"To improve from {current} to {target}: {tip_text(metric, current)}",
        ))
    return tips
