#!/usr/bin/env python3
"""
Dashboard level goal analytics and recommendations across all goals of a user
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from .helper import finite_positive
from ..storage.model import (
    GoalModel, SessionModel, GoalCategory, DistanceMetric, FrequencyMetric
)
from .. import const

PRIORITY_ORDER = {'high': 0, 'medium': 1, 'low': 2}


@dataclass
class GoalAnalytics:
    """Aggregate counts over a user's goals"""
    total_goals: int = 0
    active_goals: int = 0
    completed_goals: int = 0
    dashboard_goals: int = 0
    goals_by_category: Dict[str, int] = field(default_factory=dict)
    goals_by_context: Dict[str, int] = field(default_factory=dict)
    suggestion_goals: int = 0
    auto_tracking_goals: int = 0
    average_progress: float = 0.0
    completion_rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_goals': self.total_goals,
            'active_goals': self.active_goals,
            'completed_goals': self.completed_goals,
            'dashboard_goals': self.dashboard_goals,
            'goals_by_category': dict(self.goals_by_category),
            'goals_by_context': dict(self.goals_by_context),
            'suggestion_goals': self.suggestion_goals,
            'auto_tracking_goals': self.auto_tracking_goals,
            'average_progress': round(self.average_progress, 1),
            'completion_rate': round(self.completion_rate, 1),
        }


@dataclass
class DashboardRecommendation:
    """Recommendation that concerns the user's goal set as a whole"""
    id: str
    type: str
    title: str
    description: str
    priority: str
    action: Optional[Dict[str, Any]] = None
    suggested_target: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'description': self.description,
            'priority': self.priority,
            'action': self.action,
            'suggested_target': self.suggested_target,
        }


def is_open(goal: GoalModel) -> bool:
    return goal.is_active and not goal.is_completed


def calculate_goal_analytics(goals: Iterable[GoalModel]) -> GoalAnalytics:
    goals = list(goals)
    if not goals:
        return GoalAnalytics()

    open_goals = [g for g in goals if is_open(g)]
    completed = [g for g in goals if g.is_completed]
    tracked = [g.progress_percentage for g in open_goals if g.has_target]

    return GoalAnalytics(
        total_goals=len(goals),
        active_goals=len(open_goals),
        completed_goals=len(completed),
        dashboard_goals=sum(1 for g in goals if g.show_on_dashboard),
        goals_by_category=dict(Counter(g.category.value for g in goals)),
        goals_by_context=dict(Counter(g.creation_context for g in goals)),
        suggestion_goals=sum(1 for g in goals if g.creation_context == "suggestion"),
        auto_tracking_goals=sum(1 for g in goals if g.is_auto_tracked),
        average_progress=float(np.mean(tracked)) if tracked else 0.0,
        completion_rate=len(completed) / len(goals) * 100,
    )


def has_distance_goal(goals: List[GoalModel]) -> bool:
    return any(g.category is GoalCategory.DISTANCE or isinstance(g.metric, DistanceMetric)
               for g in goals if g.is_active)


def has_frequency_goal(goals: List[GoalModel]) -> bool:
    return any(g.category is GoalCategory.FREQUENCY or isinstance(g.metric, FrequencyMetric)
               for g in goals if g.is_active)


class GoalRecommender:
    """Ranks dashboard recommendations from goals and recent sessions"""

    def recommend(self,
                  goals: Iterable[GoalModel],
                  sessions: Iterable[SessionModel] = (),
                  today: Optional[date] = None) -> List[DashboardRecommendation]:
        today = today or date.today()
        goals = list(goals)
        recommendations = self.goal_set_recommendations(goals, today)
        recommendations.extend(self.activity_suggestions(goals, list(sessions), today))
        return sorted(recommendations, key=lambda r: PRIORITY_ORDER[r.priority])

    @staticmethod
    def goal_set_recommendations(goals: List[GoalModel], today: date) -> List[DashboardRecommendation]:
        if not goals:
            return [DashboardRecommendation(
                id="create_first_goal", type="get_started", title="Create Your First Goal",
                description="Set a goal to start tracking your training progress.",
                priority="high", action={'type': 'create_goal'})]

        recommendations = []
        open_goals = [g for g in goals if is_open(g)]

        if open_goals and not any(g.show_on_dashboard for g in open_goals):
            recommendations.append(DashboardRecommendation(
                id="setup_dashboard", type="dashboard_setup", title="Set Up Dashboard Goals",
                description="Choose which goals to show on your dashboard for quick progress tracking.",
                priority="high", action={'type': 'manage_dashboard'}))

        overdue = [g for g in open_goals if g.target_date is not None and g.target_date < today]
        if overdue:
            recommendations.append(DashboardRecommendation(
                id="update_deadlines", type="overdue_goals", title="Update Goal Deadlines",
                description=f"{len(overdue)} goal(s) passed their target date. "
                            "Extend the deadline or mark them complete.",
                priority="high", action={'type': 'review_goals'}))

        if any(g.has_target and g.progress_percentage < const.LOW_PROGRESS_PERCENT for g in open_goals):
            recommendations.append(DashboardRecommendation(
                id="review_progress", type="low_progress", title="Review Goal Progress",
                description="Some goals are behind. Review targets or break them into smaller steps.",
                priority="medium", action={'type': 'review_goals'}))

        if any(g.is_completed and g.is_active for g in goals):
            recommendations.append(DashboardRecommendation(
                id="archive_completed", type="cleanup", title="Archive Completed Goals",
                description="Archive goals you have completed to keep your dashboard focused.",
                priority="low", action={'type': 'review_goals'}))

        targeted = [g for g in open_goals if g.has_target]
        if targeted and all(g.progress_percentage >= const.NEAR_COMPLETION_PERCENT for g in targeted):
            recommendations.append(DashboardRecommendation(
                id="new_challenge", type="new_challenge", title="Set a New Challenge",
                description="Your goals are nearly complete. Consider setting a new challenge.",
                priority="low", action={'type': 'create_goal'}))

        return recommendations

    @staticmethod
    def activity_suggestions(goals: List[GoalModel],
                             sessions: List[SessionModel],
                             today: date) -> List[DashboardRecommendation]:
        """Goal suggestions from the most recent sessions"""
        recent = sorted(sessions, key=lambda s: s.start_time, reverse=True)[:const.RECENT_SESSION_WINDOW]
        suggestions = []

        total_km = sum(finite_positive(s.distance) or 0.0 for s in recent) / 1000
        distance_goal = has_distance_goal(goals)
        if not distance_goal and total_km > 0:
            suggestions.append(DashboardRecommendation(
                id="suggest_distance_goal", type="goal_suggestion", title="Try a Distance Goal",
                description=f"Based on your recent activities, you've covered {round(total_km)} km. "
                            "Consider setting a distance goal to challenge yourself further.",
                priority="medium", action={'type': 'create_goal', 'category': 'distance'},
                suggested_target=float(round(total_km * const.DISTANCE_SUGGESTION_FACTOR))))

        if not has_frequency_goal(goals) and recent:
            week_ago = today - timedelta(days=7)
            last_week = sum(1 for s in recent if week_ago < s.activity_date <= today)
            suggestions.append(DashboardRecommendation(
                id="suggest_frequency_goal", type="goal_suggestion", title="Build Consistency",
                description=f"You had {last_week} sessions in the last week. "
                            "Consider setting a frequency goal to maintain consistency.",
                priority="low", action={'type': 'create_goal', 'category': 'frequency'},
                suggested_target=float(max(last_week + 1, const.MIN_FREQUENCY_SUGGESTION))))

        if not suggestions and not distance_goal:
            suggestions.append(DashboardRecommendation(
                id="suggest_general_goal", type="goal_suggestion", title="Start a Fitness Goal",
                description="Start with a general fitness goal to track your progress and build momentum.",
                priority="low", action={'type': 'create_goal', 'category': 'distance'},
                suggested_target=50.0))

        return suggestions
