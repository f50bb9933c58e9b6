"""Data contracts for swings, session summaries, and derived progression records."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

import numpy as np
import pandas as pd

from config import (
    GOAL_ACTIVE,
    GOAL_STATUSES,
    SESSION_TYPES,
    SWING_FIELD_ALIASES,
    canonical_metric,
)


def _is_bad(x: Any) -> bool:
    """True for None and any scalar NaN/NaT (python, numpy or pandas)."""
    return x is None or (np.ndim(x) == 0 and not isinstance(x, Mapping) and bool(pd.isna(x)))


def as_date(value: Any) -> Optional[dt.date]:
    """Coerce a date, datetime, Timestamp or ISO string to a plain date."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        return None
    return ts.date()


class FrozenDict(dict):
    """Read-only dict; still picklable and deep-copyable."""

    def _readonly(self, *args, **kwargs):
        raise TypeError(f"{type(self).__name__} is read-only")

    __setitem__ = __delitem__ = __ior__ = _readonly
    clear = pop = popitem = setdefault = update = _readonly

    def __reduce__(self):
        return (type(self), (dict(self),))

    def __repr__(self):
        return f"{type(self).__name__}({dict.__repr__(self)})"


def _frozen_map(mapping: Optional[Mapping]) -> FrozenDict:
    if mapping is None:
        return FrozenDict()
    return FrozenDict(
        (k, _frozen_map(v) if isinstance(v, Mapping) else v) for k, v in mapping.items()
    )


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dt.date):
        return value.isoformat()
    return value


class _Serializable:
    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}


# ── Inputs ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SwingRecord(_Serializable):
    """One raw swing. Any measurement may be missing."""
    session_id: Any = None
    exit_velocity: Optional[float] = None
    launch_angle: Optional[float] = None
    distance: Optional[float] = None
    bat_speed: Optional[float] = None
    time_to_contact: Optional[float] = None
    strike_zone: Optional[int] = None

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "SwingRecord":
        """Build from a parsed upload row; camelCase keys are accepted."""
        names = {f.name for f in fields(cls)}
        kwargs = {}
        for key, val in row.items():
            key = SWING_FIELD_ALIASES.get(key, key)
            if key in names:
                kwargs[key] = None if _is_bad(val) else val
        zone = kwargs.get("strike_zone")
        if zone is not None:
            try:
                kwargs["strike_zone"] = int(zone)
            except (TypeError, ValueError):
                kwargs["strike_zone"] = None
        return cls(**kwargs)


@dataclass(frozen=True)
class LevelBenchmark(_Serializable):
    level: str
    metric: str
    mean: Optional[float]
    sd: Optional[float]


# ── Session summary ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SessionSummary(_Serializable):
    """Per-session metric and grade vectors. Built once, never mutated."""
    session_id: Any
    session_date: dt.date
    session_type: str
    total_swings: int
    metrics: Mapping[str, Any] = field(default_factory=dict)
    grades: Mapping[str, Optional[int]] = field(default_factory=dict)

    def __post_init__(self):
        if self.session_type not in SESSION_TYPES:
            raise ValueError(f"Unknown session type: {self.session_type!r}")
        object.__setattr__(self, "session_date", as_date(self.session_date))
        object.__setattr__(self, "metrics", _frozen_map(self.metrics))
        object.__setattr__(self, "grades", _frozen_map(self.grades))

    def metric(self, key: str) -> Optional[float]:
        val = self.metrics.get(canonical_metric(key))
        return None if _is_bad(val) else val

    def grade(self, key: str) -> Optional[int]:
        return self.grades.get(canonical_metric(key))

    # Identity fields only; the metric/grade maps are not hashable.
    def __hash__(self):
        return hash((self.session_id, self.session_date, self.session_type, self.total_swings))


# ── Trends ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TimeWindow:
    """Session date filter: ``all``, ``last_days`` or ``custom``."""
    kind: str = "all"
    days: Optional[int] = None
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None

    def __post_init__(self):
        if self.kind not in ("all", "last_days", "custom"):
            raise ValueError(f"Unknown time window: {self.kind!r}")
        if self.kind == "last_days" and (self.days is None or self.days < 0):
            raise ValueError("last_days window needs a non-negative day count")
        object.__setattr__(self, "start", as_date(self.start))
        object.__setattr__(self, "end", as_date(self.end))

    @classmethod
    def all(cls) -> "TimeWindow":
        return cls()

    @classmethod
    def last_days(cls, days: int) -> "TimeWindow":
        return cls(kind="last_days", days=int(days))

    @classmethod
    def custom(cls, start, end) -> "TimeWindow":
        return cls(kind="custom", start=start, end=end)

    def bounds(self, today: Optional[dt.date] = None):
        """Inclusive (start, end) dates; None means unbounded."""
        if self.kind == "last_days":
            if today is None:
                raise ValueError("last_days window needs today's date")
            today = as_date(today)
            return today - dt.timedelta(days=self.days), today
        if self.kind == "custom":
            return self.start, self.end
        return None, None

    def contains(self, day, today: Optional[dt.date] = None) -> bool:
        lo, hi = self.bounds(today)
        day = as_date(day)
        if lo is not None and day < lo:
            return False
        if hi is not None and day > hi:
            return False
        return True


@dataclass(frozen=True)
class Trend(_Serializable):
    metric: str
    strategy: str
    has_data: bool
    first_value: Optional[float] = None
    last_value: Optional[float] = None
    percent_change: Optional[float] = None
    direction: Optional[str] = None
    sessions_analyzed: int = 0
    recent_average: Optional[float] = None


@dataclass(frozen=True)
class SessionDelta(_Serializable):
    session_id: Any
    session_date: dt.date
    deltas: Mapping[str, Optional[float]]


@dataclass(frozen=True)
class Alert(_Serializable):
    kind: str  # "warning" | "success"
    metric: str
    message: str


# ── Milestones ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Milestone(_Serializable):
    metric: str
    grade: int
    label: str
    target_value: float
    achieved_date: dt.date
    session_id: Any
    description: str = ""


@dataclass(frozen=True)
class UpcomingMilestone(_Serializable):
    metric: str
    grade: int
    label: str
    target_value: float
    current_value: Optional[float]
    progress: float


# ── Goals ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Goal(_Serializable):
    id: Any
    player_id: Any
    goal_type: str
    target_value: float
    start_date: dt.date
    end_date: dt.date
    status: str = GOAL_ACTIVE
    achieved_date: Optional[dt.date] = None
    milestone_awarded: bool = False

    def __post_init__(self):
        if self.status not in GOAL_STATUSES:
            raise ValueError(f"Unknown goal status: {self.status!r}")
        object.__setattr__(self, "goal_type", canonical_metric(self.goal_type))
        object.__setattr__(self, "start_date", as_date(self.start_date))
        object.__setattr__(self, "end_date", as_date(self.end_date))
        object.__setattr__(self, "achieved_date", as_date(self.achieved_date))


@dataclass(frozen=True)
class GoalProgress(_Serializable):
    goal_id: Any
    goal_type: str
    current_value: Optional[float]
    progress: float
    days_left: int


@dataclass(frozen=True)
class GoalAchievement(_Serializable):
    goal_id: Any
    achieved_date: dt.date
    session_id: Any
    current_value: float


@dataclass(frozen=True)
class GoalProjection(_Serializable):
    metric: str
    current_value: float
    goal_value: float
    improvement_per_session: float
    sessions_to_goal: int
    estimated_date: dt.date


# ── Coaching ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CoachingTip(_Serializable):
    metric: str
    current_grade: int
    target_grade: int
    tip: str
