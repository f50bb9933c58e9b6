import datetime as dt

import pytest

from coaching.goals import check_goal_achievement, days_left, goal_progress, project_goal
from data.models import Goal

D = dt.date


def _goal(target=95, goal_type="avgEv", status="active", end=D(2024, 3, 1)):
    return Goal(id=1, player_id=7, goal_type=goal_type, target_value=target,
                start_date=D(2024, 1, 1), end_date=end, status=status)


def test_progress_toward_target(make_session):
    latest = make_session("s9", D(2024, 2, 10), avg_ev=85.0)
    p = goal_progress(_goal(), latest, D(2024, 2, 20))
    assert p.goal_id == 1
    assert p.goal_type == "avg_ev"
    assert p.current_value == 85.0
    assert p.progress == pytest.approx(89.47, abs=0.01)
    assert p.days_left == 10


def test_progress_is_capped(make_session):
    latest = make_session("s9", D(2024, 2, 10), avg_ev=101.0)
    assert goal_progress(_goal(), latest, D(2024, 2, 20)).progress == 100.0


def test_achieved_goal_is_complete():
    p = goal_progress(_goal(status="achieved"), None, D(2024, 2, 20))
    assert p.progress == 100.0
    assert p.current_value is None


def test_missing_metric_is_zero(make_session):
    latest = make_session("s9", D(2024, 2, 10), max_ev=101.0)
    assert goal_progress(_goal(), latest, D(2024, 2, 20)).progress == 0.0
    assert goal_progress(_goal(), None, D(2024, 2, 20)).progress == 0.0


def test_non_positive_target(make_session):
    latest = make_session("s9", D(2024, 2, 10), avg_ev=85.0)
    assert goal_progress(_goal(target=0), latest, D(2024, 2, 20)).progress == 100.0


def test_overdue_goal_keeps_status(make_session):
    goal = _goal()
    latest = make_session("s9", D(2024, 2, 10), avg_ev=85.0)
    p = goal_progress(goal, latest, D(2024, 3, 5))
    assert p.days_left == -4
    assert goal.status == "active"


def test_days_left_accepts_datetimes():
    assert days_left(D(2024, 3, 1), dt.datetime(2024, 2, 29, 23, 0)) == 1
    assert days_left("2024-03-01", "2024-03-01") == 0


def test_check_goal_achievement(make_session):
    goal = _goal()
    hit = make_session("s10", D(2024, 2, 14), avg_ev=95.0)
    result = check_goal_achievement(goal, hit)
    assert result.goal_id == 1
    assert result.session_id == "s10"
    assert result.achieved_date == D(2024, 2, 14)
    assert result.current_value == 95.0
    assert goal.status == "active"


def test_check_goal_achievement_misses(make_session):
    below = make_session("s10", D(2024, 2, 14), avg_ev=94.9)
    hit = make_session("s11", D(2024, 2, 15), avg_ev=99.0)
    assert check_goal_achievement(_goal(), below) is None
    assert check_goal_achievement(_goal(), make_session("s12", D(2024, 2, 16))) is None
    assert check_goal_achievement(_goal(status="achieved"), hit) is None
    assert check_goal_achievement(_goal(status="missed"), hit) is None


def test_project_goal(make_session):
    sessions = [
        make_session("s1", D(2024, 1, 1), avg_ev=70.0),
        make_session("s2", D(2024, 1, 8), avg_ev=80.0),
        make_session("s3", D(2024, 1, 15), avg_ev=83.0),
        make_session("s4", D(2024, 1, 22), avg_ev=86.0),
    ]
    proj = project_goal(sessions, "avgEv", 95, D(2024, 1, 22))
    assert proj.metric == "avg_ev"
    assert proj.current_value == 86.0
    assert proj.improvement_per_session == pytest.approx(3.0)
    assert proj.sessions_to_goal == 3
    assert proj.estimated_date == D(2024, 2, 12)


def test_project_goal_already_reached(make_session):
    sessions = [make_session(f"s{i}", D(2024, 1, i + 1), avg_ev=v) for i, v in enumerate([80.0, 90.0, 100.0])]
    proj = project_goal(sessions, "avg_ev", 95, D(2024, 1, 3))
    assert proj.sessions_to_goal == 0
    assert proj.estimated_date == D(2024, 1, 3)


def test_project_goal_needs_improvement_and_history(make_session):
    flat = [make_session(f"s{i}", D(2024, 1, i + 1), avg_ev=v) for i, v in enumerate([90.0, 88.0, 88.0])]
    short = flat[:2]
    assert project_goal(flat, "avg_ev", 95, D(2024, 1, 3)) is None
    assert project_goal(short, "avg_ev", 95, D(2024, 1, 3)) is None
