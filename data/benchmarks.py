"""Level benchmark lookup (mean/sd per level and metric) and player level resolution."""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from config import DEFAULT_LEVEL, LEVEL_BY_TEAM_FIELD, UNKNOWN_LEVEL, canonical_metric
from data.models import LevelBenchmark

logger = logging.getLogger(__name__)

_REQUIRED_COLS = ["level", "metric", "mean", "sd"]


class BenchmarkTable:
    """Read-only ``(level, metric) -> LevelBenchmark`` lookup.

    Unknown levels fall back to ``fallback_level`` (``config.DEFAULT_LEVEL``).
    A metric missing at a known level is not borrowed from the fallback.
    """

    def __init__(self, rows: Iterable[LevelBenchmark], fallback_level: Optional[str] = DEFAULT_LEVEL):
        self._rows: Dict[Tuple[str, str], LevelBenchmark] = {}
        for row in rows:
            key = (row.level, canonical_metric(row.metric))
            if key in self._rows:
                raise ValueError(f"Duplicate benchmark for level={row.level!r} metric={row.metric!r}")
            self._rows[key] = LevelBenchmark(row.level, key[1], row.mean, row.sd)
        self.fallback_level = fallback_level

    def __len__(self):
        return len(self._rows)

    def __iter__(self):
        return iter(self._rows.values())

    @property
    def levels(self) -> List[str]:
        return sorted({lvl for lvl, _ in self._rows})

    def has_level(self, level: str) -> bool:
        return any(lvl == level for lvl, _ in self._rows)

    def resolve_level(self, level: Optional[str]) -> Optional[str]:
        if level is not None and self.has_level(level):
            return level
        if self.fallback_level is not None and self.has_level(self.fallback_level):
            logger.debug("No benchmarks for level %r; using %r", level, self.fallback_level)
            return self.fallback_level
        return None

    def get(self, level: Optional[str], metric: str) -> Optional[LevelBenchmark]:
        lvl = self.resolve_level(level)
        if lvl is None:
            return None
        return self._rows.get((lvl, canonical_metric(metric)))

    def metrics_for(self, level: Optional[str]) -> List[str]:
        """Metric keys benchmarked at a level, in insertion order."""
        lvl = self.resolve_level(level)
        return [m for (row_lvl, m) in self._rows if row_lvl == lvl]

    # ── Constructors ─────────────────────────────

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], **kwargs) -> "BenchmarkTable":
        rows = []
        for rec in records:
            missing = [c for c in _REQUIRED_COLS if c not in rec]
            if missing:
                raise ValueError(f"Benchmark row missing {missing}: {dict(rec)}")
            rows.append(LevelBenchmark(
                level=str(rec["level"]),
                metric=str(rec["metric"]),
                mean=_num(rec["mean"]),
                sd=_num(rec["sd"]),
            ))
        return cls(rows, **kwargs)

    @classmethod
    def from_frame(cls, df: pd.DataFrame, **kwargs) -> "BenchmarkTable":
        missing = [c for c in _REQUIRED_COLS if c not in df.columns]
        if missing:
            raise ValueError(f"Benchmark frame missing columns: {missing}")
        return cls.from_records(df[_REQUIRED_COLS].to_dict("records"), **kwargs)

    @classmethod
    def from_nested(cls, nested: Mapping[str, Mapping[str, Mapping[str, Any]]], **kwargs) -> "BenchmarkTable":
        """Build from ``{level: {metric: {"mean": .., "sd": ..}}}``."""
        records = []
        for level, by_metric in nested.items():
            for metric, stats in by_metric.items():
                records.append({"level": level, "metric": metric,
                                "mean": stats.get("mean"), "sd": stats.get("sd")})
        return cls.from_records(records, **kwargs)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([r.to_dict() for r in self], columns=_REQUIRED_COLS)


def _num(x: Any) -> Optional[float]:
    if x is None:
        return None
    val = pd.to_numeric(x, errors="coerce")
    return None if pd.isna(val) else float(val)


def read_benchmarks(path: str, **kwargs) -> BenchmarkTable:
    """Load a benchmark export (CSV rows or nested/row-list JSON)."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Benchmark file not found: {path}")
    if path.endswith(".json"):
        with open(path) as f:
            payload = json.load(f)
        if isinstance(payload, list):
            return BenchmarkTable.from_records(payload, **kwargs)
        return BenchmarkTable.from_nested(payload, **kwargs)
    return BenchmarkTable.from_frame(pd.read_csv(path), **kwargs)


def player_level(player: Optional[Mapping[str, Any]]) -> str:
    """Level from a player's team affiliations (first populated field wins)."""
    if not player:
        return UNKNOWN_LEVEL
    for field_name, level in LEVEL_BY_TEAM_FIELD:
        if player.get(field_name):
            return level
    return UNKNOWN_LEVEL
