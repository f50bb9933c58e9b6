import datetime as dt

import pytest

from data.benchmarks import BenchmarkTable
from data.models import SessionSummary

D = dt.date


@pytest.fixture()
def benchmarks() -> BenchmarkTable:
    return BenchmarkTable.from_nested(
        {
            "High School": {
                "avg_ev": {"mean": 80, "sd": 5},
                "max_ev": {"mean": 90, "sd": 5},
                "avg_bs": {"mean": 60, "sd": 5},
                "max_bs": {"mean": 65, "sd": 5},
                "barrel_pct": {"mean": 20, "sd": 10},
            },
            "College": {
                "avg_ev": {"mean": 88, "sd": 4},
                "max_ev": {"mean": 100, "sd": 4},
            },
        },
        fallback_level="High School",
    )


@pytest.fixture()
def make_session():
    """Factory for SessionSummary records with only the metrics a test cares about."""

    def _make(session_id, session_date, session_type="hittrax", total_swings=10, grades=None, **metrics):
        return SessionSummary(
            session_id=session_id,
            session_date=session_date,
            session_type=session_type,
            total_swings=total_swings,
            metrics=metrics,
            grades=grades or {},
        )

    return _make


@pytest.fixture()
def ev_history(make_session):
    """Three weekly sessions with avg_ev 80 -> 85 -> 92."""
    return [
        make_session("s1", D(2024, 1, 1), avg_ev=80.0),
        make_session("s2", D(2024, 1, 8), avg_ev=85.0),
        make_session("s3", D(2024, 1, 15), avg_ev=92.0),
    ]
