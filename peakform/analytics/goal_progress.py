#!/usr/bin/env python3
"""
Goal progress recalculation

Rebuilds the progress of auto-tracked goals from the session history. The
result always overwrites previous progress rather than adding to it, so
running the recalculation again on the same input yields the same updates.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .helper import finite_positive, normalize_sport, week_start, month_start
from .heart_rate_zones import ZoneModel
from .zone_distribution import ZoneClassifier
from ..storage.model import (
    SessionModel, GoalModel, GoalProgressRecord, MetricPeriod,
    DistanceMetric, FrequencyMetric, TimeMetric, ElevationMetric, ZoneMetric
)
from ..utils import get_logger

logger = get_logger(__name__)


@dataclass
class GoalProgressUpdate:
    """Recomputed progress of one goal, for the caller to persist"""
    goal_id: str
    previous_progress: float
    current_progress: float
    progress_percentage: float
    is_completed: bool
    records: List[GoalProgressRecord] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.previous_progress != self.current_progress

    def to_dict(self) -> Dict[str, Any]:
        return {
            'goal_id': self.goal_id,
            'previous_progress': self.previous_progress,
            'current_progress': self.current_progress,
            'progress_percentage': round(self.progress_percentage, 1),
            'is_completed': self.is_completed,
            'records': [r.to_dict() for r in self.records],
        }


class GoalProgressCalculator:
    """Computes goal progress from sessions for each metric kind"""

    def __init__(self, zone_model: Optional[ZoneModel] = None):
        self.classifier = ZoneClassifier(zone_model) if zone_model is not None else None

    def recalculate_all(self,
                        goals: Iterable[GoalModel],
                        sessions: Iterable[SessionModel],
                        today: Optional[date] = None) -> List[GoalProgressUpdate]:
        today = today or date.today()
        sessions = sorted(sessions, key=lambda s: (s.start_time, s.id))
        updates = []
        for goal in goals:
            update = self.calculate(goal, sessions, today)
            if update is not None:
                updates.append(update)
        return updates

    def calculate(self,
                  goal: GoalModel,
                  sessions: Iterable[SessionModel],
                  today: date) -> Optional[GoalProgressUpdate]:
        """Progress of one active auto-tracked goal, None for anything else"""
        metric = goal.metric
        if metric is None or not goal.is_active:
            return None

        start, end = self.period_window(goal, today)
        wanted_sport = normalize_sport(metric.sport_type) if metric.sport_type else None

        records = []
        for session in sessions:
            day = session.activity_date
            if not start <= day < end:
                continue
            if wanted_sport and normalize_sport(session.sport_type) != wanted_sport:
                continue
            amount = self.contribution(metric, session)
            if amount is None:
                continue
            records.append(GoalProgressRecord(
                activity_date=day,
                contribution_amount=amount,
                value_achieved=amount if isinstance(metric, DistanceMetric)
                and metric.aggregation == "max" else None,
                source_id=session.id,
            ))

        amounts = [r.contribution_amount for r in records]
        if isinstance(metric, DistanceMetric) and metric.aggregation == "max":
            progress = max(amounts, default=0.0)
        else:
            progress = sum(amounts)
        progress = round(progress, 3)

        percentage = min(100.0, progress / goal.target_value * 100) if goal.has_target else 0.0
        completed = goal.has_target and progress >= goal.target_value

        logger.debug(f"🎯 Goal {goal.id}: {goal.current_progress} -> {progress} "
                     f"from {len(records)} sessions ({metric.kind}, {metric.period.value})")
        return GoalProgressUpdate(
            goal_id=goal.id,
            previous_progress=goal.current_progress,
            current_progress=progress,
            progress_percentage=percentage,
            is_completed=completed,
            records=records,
        )

    @staticmethod
    def period_window(goal: GoalModel, today: date) -> Tuple[date, date]:
        """Half-open [start, end) date window the goal's metric accumulates over"""
        period = goal.metric.period
        if period is MetricPeriod.WEEKLY:
            start = week_start(today)
            return start, start + timedelta(days=7)
        if period is MetricPeriod.MONTHLY:
            start = month_start(today)
            next_month = (start + timedelta(days=32)).replace(day=1)
            return start, next_month

        end = today
        if goal.target_date is not None and goal.target_date < end:
            end = goal.target_date
        return goal.created_at.date(), end + timedelta(days=1)

    def contribution(self, metric, session: SessionModel) -> Optional[float]:
        if isinstance(metric, DistanceMetric):
            distance = finite_positive(session.distance)
            return round(distance / 1000, 3) if distance else None
        if isinstance(metric, FrequencyMetric):
            return 1.0
        if isinstance(metric, TimeMetric):
            moving = finite_positive(session.moving_time)
            return round(moving / 3600, 3) if moving else None
        if isinstance(metric, ElevationMetric):
            return finite_positive(session.elevation_gain)
        if isinstance(metric, ZoneMetric):
            if self.classifier is None:
                return None
            zone = self.classifier.classify(session.average_heart_rate)
            moving = finite_positive(session.moving_time)
            if zone is None or zone.number != metric.zone_number or not moving:
                return None
            return round(moving / 60, 2)
        return None
