#!/usr/bin/env python3
"""
Training Load Service - per-session loads and load balance for a user's sessions
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..analytics.interface import AthleteThresholds
from ..analytics.thresholds import AthleteThresholdEstimator
from ..analytics.training_load import (
    TrainingLoadCalculator, SessionLoad, TrainingLoadPoint, TrainingLoadMetrics
)
from ..storage.interface import SessionRepository, RepositoryError
from ..utils import get_logger

logger = get_logger(__name__)


@dataclass
class TrainingLoadReport:
    thresholds: AthleteThresholds
    sessions: List[SessionLoad] = field(default_factory=list)
    daily: List[TrainingLoadPoint] = field(default_factory=list)
    metrics: TrainingLoadMetrics = field(default_factory=TrainingLoadMetrics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'thresholds': self.thresholds.to_dict(),
            'sessions': [s.to_dict() for s in self.sessions],
            'daily': [p.to_dict() for p in self.daily],
            'metrics': self.metrics.to_dict(),
        }


class TrainingLoadService:
    """High-level service for training load calculation"""

    def __init__(self, sessions: SessionRepository,
                 estimator: Optional[AthleteThresholdEstimator] = None):
        self.sessions = sessions
        self.estimator = estimator or AthleteThresholdEstimator()

    def get_training_load(self, user_id: str) -> TrainingLoadReport:
        logger.info(f"🧮 Calculating training load for user {user_id}")
        try:
            sessions = self.sessions.get_sessions(user_id)
        except RepositoryError as e:
            logger.error(f"❌ Failed to load sessions for user {user_id} "
                         f"(retryable: {e.retryable}): {e}")
            raise

        thresholds = self.estimator.estimate(sessions)
        calculator = TrainingLoadCalculator(thresholds)
        ordered = sorted(sessions, key=lambda s: s.start_time)
        daily = calculator.process_sessions(ordered)
        report = TrainingLoadReport(
            thresholds=thresholds,
            sessions=[calculator.session_load(s) for s in ordered],
            daily=daily,
            metrics=calculator.calculate_load_metrics(daily),
        )
        logger.info(f"✅ Training load for user {user_id}: {len(daily)} training days, "
                    f"status {report.metrics.status}")
        return report
