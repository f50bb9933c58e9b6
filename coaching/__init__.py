"""Coaching package (goal tracking and rule-based tips).

Both read finished SessionSummary records; nothing here mutates goals or
sessions.
"""

from .goals import goal_progress, check_goal_achievement, project_goal
from .tips import coaching_tips

__all__ = [
    "goal_progress",
    "check_goal_achievement",
    "project_goal",
    "coaching_tips",
]
