#!/usr/bin/env python3
"""
Goal Service - goal analytics, recommendations, insights and progress recalculation

Reads goals, progress logs and sessions through the repository contracts and
returns computed values. Nothing is written back: persisting recalculated
progress is left to the caller.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from ..analytics.goal_analytics import (
    GoalAnalytics, GoalRecommender, DashboardRecommendation, calculate_goal_analytics
)
from ..analytics.goal_insights import GoalInsightEngine, GoalInsight
from ..analytics.goal_progress import GoalProgressCalculator, GoalProgressUpdate
from ..analytics.heart_rate_zones import build_zone_model
from ..analytics.interface import GoalNotFoundError, ZoneModelType
from ..analytics.thresholds import AthleteThresholdEstimator
from ..storage.interface import GoalRepository, SessionRepository, RepositoryError
from ..utils import get_logger

logger = get_logger(__name__)


@dataclass
class RecalculationResult:
    """Outcome of recalculating every auto-tracked goal of a user"""
    user_id: str
    updated_count: int
    updates: List[GoalProgressUpdate] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user_id': self.user_id,
            'updated_count': self.updated_count,
            'updates': [u.to_dict() for u in self.updates],
        }


class GoalService:
    """High-level service for goal analytics"""

    def __init__(self,
                 goals: GoalRepository,
                 sessions: SessionRepository,
                 insight_engine: Optional[GoalInsightEngine] = None,
                 recommender: Optional[GoalRecommender] = None,
                 estimator: Optional[AthleteThresholdEstimator] = None):
        self.goals = goals
        self.sessions = sessions
        self.insight_engine = insight_engine or GoalInsightEngine()
        self.recommender = recommender or GoalRecommender()
        self.estimator = estimator or AthleteThresholdEstimator()

    def get_goal_analytics(self, user_id: str) -> GoalAnalytics:
        logger.info(f"📊 Calculating goal analytics for user {user_id}")
        goals = self._call(self.goals.get_goals, user_id)
        analytics = calculate_goal_analytics(goals)
        logger.info(f"✅ Goal analytics for user {user_id}: {analytics.total_goals} goals, "
                    f"{analytics.active_goals} active")
        return analytics

    def get_goal_recommendations(self, user_id: str,
                                 today: Optional[date] = None) -> List[DashboardRecommendation]:
        logger.info(f"💡 Building goal recommendations for user {user_id}")
        goals = self._call(self.goals.get_goals, user_id)
        sessions = self._call(self.sessions.get_sessions, user_id)
        recommendations = self.recommender.recommend(goals, sessions, today=today)
        logger.info(f"✅ {len(recommendations)} goal recommendations for user {user_id}")
        return recommendations

    def get_goal_insights(self, goal_id: str, today: Optional[date] = None) -> GoalInsight:
        """
        Insight report of a single goal

        Raises:
            GoalNotFoundError: If the goal does not exist
            RepositoryError: If the goal or its progress cannot be fetched
        """
        goal = self._call(self.goals.get_goal, goal_id)
        if goal is None:
            logger.warning(f"⚠️ Goal {goal_id} not found")
            raise GoalNotFoundError(f"Goal {goal_id} not found", {'goal_id': goal_id})

        records = self._call(self.goals.get_progress_records, goal_id)
        insight = self.insight_engine.generate(goal, records, today=today)
        logger.info(f"✅ Insights for goal {goal_id}: {insight.trend.direction.value} trend, "
                    f"{insight.success_probability}% success probability")
        return insight

    def recalculate_all_progress(self, user_id: str,
                                 today: Optional[date] = None) -> RecalculationResult:
        """
        Recompute progress of every active auto-tracked goal from all sessions

        The result depends only on the stored goals and sessions, so repeated or
        concurrent calls for the same user produce identical updates.
        """
        logger.info(f"🔄 Recalculating goal progress for user {user_id}")
        goals = self._call(self.goals.get_goals, user_id)
        sessions = self._call(self.sessions.get_sessions, user_id)

        thresholds = self.estimator.estimate(sessions)
        calculator = GoalProgressCalculator(build_zone_model(ZoneModelType.FIVE_ZONE, thresholds))
        updates = calculator.recalculate_all(goals, sessions, today=today)

        changed = sum(1 for u in updates if u.changed)
        logger.info(f"✅ Recalculated {len(updates)} goals for user {user_id} ({changed} changed)")
        return RecalculationResult(user_id=user_id, updated_count=len(updates), updates=updates)

    @staticmethod
    def _call(fetch, key: str):
        try:
            return fetch(key)
        except RepositoryError as e:
            logger.error(f"❌ Repository read failed for {key} (retryable: {e.retryable}): {e}")
            raise
