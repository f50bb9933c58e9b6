"""Per-zone average exit velocity on the 13-zone layout."""

import numpy as np
import pandas as pd

from config import ALL_ZONE_IDS, ZONE_LAYOUT, ZONE_ROW_LABELS


def compute_hot_zone_evs(df):
    """Average EV per strike zone label.

    Expects ``strike_zone`` and ``exit_velocity`` columns. Zones with no
    EV-bearing swing are omitted (not set to NaN); labels outside 1..13 are
    ignored. Values are rounded to 0.1 mph.
    """
    if df is None or df.empty:
        return {}
    zoned = df.dropna(subset=["strike_zone", "exit_velocity"])
    zoned = zoned[zoned["strike_zone"].isin(ALL_ZONE_IDS)]
    if zoned.empty:
        return {}
    means = zoned.groupby(zoned["strike_zone"].astype(int))["exit_velocity"].mean()
    return {int(zone): round(float(ev), 1) for zone, ev in means.items()}


def zone_grid(hot_zone_evs):
    """Lay hot zone EVs onto the 5-row render grid.

    Returns (grid, zone_ids, row_labels). ``grid`` is a 5x3 float array with
    NaN for zones without data and for the two spacer cells.
    """
    hot_zone_evs = hot_zone_evs or {}
    grid = np.full((len(ZONE_LAYOUT), 3), np.nan)
    for r, row in enumerate(ZONE_LAYOUT):
        for c, zone in enumerate(row):
            if zone is None:
                continue
            val = hot_zone_evs.get(zone)
            if val is not None and not pd.isna(val):
                grid[r, c] = val
    return grid, [list(row) for row in ZONE_LAYOUT], list(ZONE_ROW_LABELS)


def hottest_zone(hot_zone_evs):
    """Zone id with the highest average EV (lowest id wins ties), or None."""
    if not hot_zone_evs:
        return None
    return max(sorted(hot_zone_evs), key=lambda z: hot_zone_evs[z])
