"""Session metric normalization (raw swings -> MetricVector)."""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from config import (
    AVG_BS,
    AVG_DIST,
    AVG_EV,
    AVG_LA,
    AVG_TTC,
    BARREL_EV_THRESHOLD,
    BARREL_PCT,
    HOT_ZONE_EVS,
    LA_TOP5,
    MAX_BS,
    MAX_EV,
    TOP_EV_FRACTION,
)
from data.models import SwingRecord
from analytics.hot_zones import compute_hot_zone_evs

logger = logging.getLogger(__name__)

SWING_COLUMNS = ["exit_velocity", "launch_angle", "distance", "bat_speed", "time_to_contact", "strike_zone"]

# metric key -> (column, reducer)
_COLUMN_METRICS = [
    (AVG_EV, "exit_velocity", "mean"),
    (MAX_EV, "exit_velocity", "max"),
    (AVG_BS, "bat_speed", "mean"),
    (MAX_BS, "bat_speed", "max"),
    (AVG_LA, "launch_angle", "mean"),
    (AVG_DIST, "distance", "mean"),
    (AVG_TTC, "time_to_contact", "mean"),
]


def _opt(x) -> Optional[float]:
    return None if pd.isna(x) else float(x)


def swings_frame(swings: Iterable[Union[SwingRecord, Mapping[str, Any]]]) -> pd.DataFrame:
    """One row per swing in original order; missing readings are NaN."""
    rows = []
    for s in swings:
        rec = s if isinstance(s, SwingRecord) else SwingRecord.from_dict(s)
        rows.append({c: getattr(rec, c) for c in SWING_COLUMNS})
    df = pd.DataFrame(rows, columns=SWING_COLUMNS)
    for c in SWING_COLUMNS:
        df[c] = pd.to_numeric(df[c], errors="coerce")
    return df.reset_index(drop=True)


def _launch_angle_top_ev(df: pd.DataFrame) -> Optional[float]:
    """Mean LA of the top 5% of swings by EV (at least one swing)."""
    paired = df.dropna(subset=["exit_velocity", "launch_angle"])
    if paired.empty:
        return None
    n_top = max(1, math.ceil(len(paired) * TOP_EV_FRACTION))
    # Stable descending order keeps the earlier swing on EV ties.
    order = np.argsort(-paired["exit_velocity"].to_numpy(), kind="stable")
    top = paired.iloc[order[:n_top]]
    return float(top["launch_angle"].mean())


def compute_session_metrics(swings) -> Tuple[int, Dict[str, Any]]:
    """Reduce one session's swings to (total_swings, MetricVector).

    Every aggregate only sees swings that report the underlying field;
    ``total_swings`` counts every swing. An empty session is not an error:
    all metrics come back None and the hot zone map is empty.
    """
    df = swings if isinstance(swings, pd.DataFrame) else swings_frame(swings)
    total = int(len(df))

    metrics: Dict[str, Any] = {}
    for key, col, how in _COLUMN_METRICS:
        vals = df[col].dropna()
        metrics[key] = _opt(getattr(vals, how)()) if not vals.empty else None

    if total > 0:
        hard_hits = int((df["exit_velocity"] >= BARREL_EV_THRESHOLD).sum())
        metrics[BARREL_PCT] = round(hard_hits / total * 100, 1)
    else:
        metrics[BARREL_PCT] = None

    metrics[LA_TOP5] = _launch_angle_top_ev(df)
    metrics[HOT_ZONE_EVS] = compute_hot_zone_evs(df)

    logger.debug("Normalized %d swings: avg_ev=%s barrel_pct=%s zones=%d",
                 total, metrics[AVG_EV], metrics[BARREL_PCT], len(metrics[HOT_ZONE_EVS]))
    return total, metrics
