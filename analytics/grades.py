"""20-80 scouting grades from a z-score against a level benchmark.

50 = level average, each 10 points = one standard deviation. Grades are
kept unclamped; ``display_grade`` clamps to the 20-80 scale for rendering.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Mapping, Optional

import numpy as np
import pandas as pd
from scipy.stats import percentileofscore

from config import (
    GRADE_AVERAGE,
    GRADE_BAND_TOP,
    GRADE_BANDS,
    GRADE_MAX,
    GRADE_MIN,
    GRADE_STEP,
    SCALAR_METRICS,
)
from data.models import _is_bad

logger = logging.getLogger(__name__)


class DegenerateBenchmark(ValueError):
    """Benchmark cannot be used for grading (missing mean/sd or sd <= 0)."""


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _check_benchmark(mean, sd):
    if _is_bad(mean) or _is_bad(sd):
        raise DegenerateBenchmark(f"benchmark needs mean and sd (mean={mean}, sd={sd})")
    if sd <= 0:
        raise DegenerateBenchmark(f"benchmark sd must be positive (sd={sd})")


def grade_of(value: Optional[float], mean: float, sd: float) -> Optional[int]:
    """Raw (unclamped) 20-80 grade for a metric value; None for a missing value."""
    _check_benchmark(mean, sd)
    if _is_bad(value):
        return None
    z = (float(value) - float(mean)) / float(sd)
    return _round_half_up(GRADE_AVERAGE + GRADE_STEP * z)


def target_value_for(grade: float, mean: float, sd: float) -> float:
    """Metric value that sits exactly on ``grade`` (inverse of grade_of)."""
    _check_benchmark(mean, sd)
    return float(mean) + ((grade - GRADE_AVERAGE) / GRADE_STEP) * float(sd)


def display_grade(grade: Optional[int]) -> Optional[int]:
    if grade is None:
        return None
    return int(min(GRADE_MAX, max(GRADE_MIN, grade)))


def grade_label(grade: Optional[int]) -> Optional[str]:
    if grade is None:
        return None
    for upper, label in GRADE_BANDS:
        if grade <= upper:
            return label
    return GRADE_BAND_TOP


def grade_change(old_grade: Optional[int], new_grade: Optional[int]) -> Optional[Dict[str, Any]]:
    if old_grade is None or new_grade is None:
        return None
    change = new_grade - old_grade
    return {
        "old_grade": old_grade,
        "new_grade": new_grade,
        "change": change,
        "direction": "up" if change > 0 else "down" if change < 0 else "stable",
        "magnitude": abs(change),
    }


def grade_metrics(metrics: Mapping[str, Any], table, level: Optional[str]) -> Dict[str, Optional[int]]:
    """Grade every scalar metric in a MetricVector against ``table`` at ``level``.

    Degrades per metric: a missing or degenerate benchmark leaves that grade
    None and the rest of the vector is still graded.
    """
    grades: Dict[str, Optional[int]] = {}
    for key in SCALAR_METRICS:
        if key not in metrics:
            continue
        bench = table.get(level, key)
        if bench is None:
            grades[key] = None
            continue
        try:
            grades[key] = grade_of(metrics[key], bench.mean, bench.sd)
        except DegenerateBenchmark as e:
            logger.warning("Skipping grade for %s at level %s: %s", key, bench.level, e)
            grades[key] = None
    return grades


def percentile_rank(value, cohort_values):
    """Percentile (0-100) of ``value`` within a cohort sample; NaN without data."""
    series = pd.Series(cohort_values, dtype=float).dropna()
    if _is_bad(value) or series.empty:
        return np.nan
    return percentileofscore(series, value, kind="rank")
