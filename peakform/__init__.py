#!/usr/bin/env python3
"""
PeakForm - Training load, heart rate zone and goal insight analytics
Computes athlete-specific metrics from a finite session history, read through
pluggable repositories (in-memory, Elasticsearch).
"""

# Setup logging first
from .config import get_settings
from .utils import setup_peakform_logging

_settings = get_settings()
setup_peakform_logging(_settings.logging.level, _settings.logging.log_dir)

# Storage interfaces and implementations
from .storage import (
    SessionRepository, GoalRepository,
    RepositoryError, RepositoryUnavailableError, MalformedDataError,
    SessionModel, GoalModel, GoalProgressRecord,
    InMemorySessionRepository, InMemoryGoalRepository, ElasticsearchRepository
)

# Analytics
from .analytics import (
    AthleteThresholdEstimator, TrainingLoadCalculator, ZoneModelBuilder, ZoneClassifier,
    GoalInsightEngine, AnalyticsError, InvalidParameterError, GoalNotFoundError
)

# Services
from .services import ZoneAnalysisService, GoalService, TrainingLoadService

__version__ = "0.1.0"

__all__ = [
    # Storage
    'SessionRepository', 'GoalRepository',
    'RepositoryError', 'RepositoryUnavailableError', 'MalformedDataError',
    'SessionModel', 'GoalModel', 'GoalProgressRecord',
    'InMemorySessionRepository', 'InMemoryGoalRepository', 'ElasticsearchRepository',

    # Analytics
    'AthleteThresholdEstimator', 'TrainingLoadCalculator', 'ZoneModelBuilder', 'ZoneClassifier',
    'GoalInsightEngine', 'AnalyticsError', 'InvalidParameterError', 'GoalNotFoundError',

    # Services
    'ZoneAnalysisService', 'GoalService', 'TrainingLoadService',
]
