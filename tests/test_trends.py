import datetime as dt

import pytest

from analytics.trends import (
    ENDPOINT,
    RECENT_WINDOW,
    analyze_trends,
    classify_direction,
    compute_trend,
    consistency_score,
    endpoint_trend,
    filter_sessions,
    percent_change,
    performance_alerts,
    recent_window_trend,
    session_deltas,
)
from config import TRACKED_METRICS
from data.models import TimeWindow, Trend

D = dt.date
TODAY = D(2024, 1, 15)


def _trend(direction, has_data=True):
    return Trend(metric="avg_ev", strategy=ENDPOINT, has_data=has_data, direction=direction)


def test_endpoint_percent_change(ev_history):
    t = endpoint_trend(ev_history, "avg_ev")
    assert t.has_data
    assert t.first_value == 80.0
    assert t.last_value == 92.0
    assert t.percent_change == pytest.approx(15.0)
    assert t.direction == "strong_up"
    assert t.sessions_analyzed == 3
    assert t.recent_average is None


def test_recent_window_average(make_session):
    sessions = [make_session(f"s{i}", D(2024, 1, i + 1), avg_ev=v) for i, v in enumerate([70, 80, 85, 90, 95])]
    t = recent_window_trend(sessions, "avg_ev")
    assert t.strategy == RECENT_WINDOW
    assert t.recent_average == pytest.approx(87.5)
    assert t.percent_change == pytest.approx((95 - 70) / 70 * 100)
    assert t.sessions_analyzed == 5


def test_recent_window_with_fewer_than_four(ev_history):
    t = compute_trend(ev_history, "avgEv", strategy=RECENT_WINDOW)
    assert t.metric == "avg_ev"
    assert t.recent_average == pytest.approx((80 + 85 + 92) / 3)
    assert t.percent_change == pytest.approx(15.0)


@pytest.mark.parametrize("strategy", [ENDPOINT, RECENT_WINDOW])
def test_single_session_has_no_data(make_session, strategy):
    t = compute_trend([make_session("s1", D(2024, 1, 1), avg_ev=90.0)], "avg_ev", strategy)
    assert not t.has_data
    assert t.percent_change is None
    assert t.direction is None
    assert t.sessions_analyzed == 1


@pytest.mark.parametrize("strategy", [ENDPOINT, RECENT_WINDOW])
def test_identical_values_are_flat(make_session, strategy):
    sessions = [make_session(f"s{i}", D(2024, 1, i + 1), avg_ev=88.0) for i in range(3)]
    t = compute_trend(sessions, "avg_ev", strategy)
    assert t.percent_change == 0.0
    assert t.direction == "flat"


def test_zero_first_value_has_no_percent_change(make_session):
    sessions = [
        make_session("s1", D(2024, 1, 1), barrel_pct=0.0),
        make_session("s2", D(2024, 1, 8), barrel_pct=12.5),
    ]
    t = endpoint_trend(sessions, "barrel_pct")
    assert t.has_data
    assert t.percent_change is None
    assert t.direction is None


def test_endpoint_skips_sessions_without_metric(make_session):
    sessions = [
        make_session("s3", D(2024, 1, 15), avg_ev=88.0),
        make_session("s2", D(2024, 1, 8)),
        make_session("s1", D(2024, 1, 1), avg_ev=80.0),
    ]
    t = endpoint_trend(sessions, "avg_ev")
    assert t.first_value == 80.0
    assert t.last_value == 88.0
    assert t.percent_change == pytest.approx(10.0)
    assert t.sessions_analyzed == 2


def test_last_days_window(ev_history):
    window = TimeWindow.last_days(7)
    assert [s.session_id for s in filter_sessions(ev_history, window, TODAY)] == ["s2", "s3"]
    t = endpoint_trend(ev_history, "avg_ev", window=window, today=TODAY)
    assert t.percent_change == pytest.approx((92 - 85) / 85 * 100)


def test_last_days_window_truncates_datetimes(ev_history):
    window = TimeWindow.last_days(14)
    kept = filter_sessions(ev_history, window, dt.datetime(2024, 1, 15, 23, 59))
    assert [s.session_id for s in kept] == ["s1", "s2", "s3"]


def test_custom_window(ev_history):
    window = TimeWindow.custom(D(2024, 1, 1), D(2024, 1, 8))
    t = compute_trend(ev_history, "avg_ev", ENDPOINT, window=window)
    assert t.percent_change == pytest.approx(6.25)
    assert t.direction == "strong_up"


def test_window_without_sessions(ev_history):
    window = TimeWindow.custom(D(2023, 1, 1), D(2023, 12, 31))
    assert not compute_trend(ev_history, "avg_ev", ENDPOINT, window=window).has_data


def test_last_days_needs_today(ev_history):
    with pytest.raises(ValueError):
        filter_sessions(ev_history, TimeWindow.last_days(7))


@pytest.mark.parametrize("pct,direction", [
    (15.0, "strong_up"),
    (5.01, "strong_up"),
    (5.0, "up"),
    (0.1, "up"),
    (0.0, "flat"),
    (-5.0, "down"),
    (-5.01, "strong_down"),
    (None, None),
])
def test_classify_direction(pct, direction):
    assert classify_direction(pct) == direction


def test_percent_change():
    assert percent_change(80, 92) == pytest.approx(15.0)
    assert percent_change(0, 5) is None
    assert percent_change(None, 5) is None


def test_unknown_strategy(ev_history):
    with pytest.raises(ValueError):
        compute_trend(ev_history, "avg_ev", strategy="median")


def test_analyze_trends_covers_every_metric(ev_history):
    trends = analyze_trends(ev_history)
    assert list(trends) == TRACKED_METRICS
    assert trends["avg_ev"].direction == "strong_up"
    assert not trends["max_bs"].has_data


def test_consistency_score():
    trends = {
        "avg_ev": _trend("strong_up"),
        "max_ev": _trend("down"),
        "avg_bs": _trend(None, has_data=False),
    }
    assert consistency_score(trends) == 50
    assert consistency_score([_trend("up"), _trend("strong_up"), _trend("flat")]) == 67
    assert consistency_score([_trend("flat"), _trend("strong_down")]) == 0
    assert consistency_score([_trend(None, has_data=False)]) is None
    assert consistency_score({}) is None


def test_consistency_score_from_history(ev_history):
    # Only avg_ev has two data points, and it is trending up
    assert consistency_score(analyze_trends(ev_history)) == 100


def test_session_deltas(make_session):
    sessions = [
        make_session("s2", D(2024, 1, 8), avg_ev=85.25, max_ev=99.0),
        make_session("s1", D(2024, 1, 1), avg_ev=80.0),
        make_session("s3", D(2024, 1, 15), avg_ev=92.0, max_ev=97.5),
    ]
    deltas = session_deltas(sessions, metrics=["avg_ev", "max_ev"])
    assert [d.session_id for d in deltas] == ["s2", "s3"]
    assert deltas[0].deltas == {"avg_ev": 5.25, "max_ev": None}
    assert deltas[1].deltas == {"avg_ev": 6.75, "max_ev": -1.5}
    assert session_deltas(sessions[:1]) == []


def test_declining_alert(make_session):
    sessions = [make_session(f"s{i}", D(2024, 1, i + 1), avg_ev=v) for i, v in enumerate([90.0, 92.0, 88.0, 87.0])]
    alerts = performance_alerts(sessions)
    assert [a.kind for a in alerts] == ["warning"]
    assert alerts[0].message == "Average Exit Velocity declining over last 3 sessions"


def test_improvement_alert(ev_history):
    alerts = performance_alerts(ev_history, "avgEv")
    assert len(alerts) == 1
    assert alerts[0].kind == "success"
    assert alerts[0].metric == "avg_ev"
    assert alerts[0].message == "Significant improvement: +15% in Average Exit Velocity"


def test_no_alerts_for_short_history(make_session):
    sessions = [make_session("s1", D(2024, 1, 1), avg_ev=90.0), make_session("s2", D(2024, 1, 2), avg_ev=85.0)]
    assert performance_alerts(sessions) == []
