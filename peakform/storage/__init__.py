"""
PeakForm storage layer - repository contracts, models and implementations
"""
from .interface import (
    DataType, DocumentQuery, SessionRepository, GoalRepository,
    RepositoryError, RepositoryUnavailableError, MalformedDataError
)
from .model import (
    SessionModel, GoalModel, GoalProgressRecord, GoalCategory, MetricPeriod,
    DistanceMetric, FrequencyMetric, TimeMetric, ElevationMetric, ZoneMetric, GoalMetric
)
from .memory import InMemorySessionRepository, InMemoryGoalRepository
from .elasticsearch import ElasticsearchRepository

__all__ = [
    'DataType', 'DocumentQuery', 'SessionRepository', 'GoalRepository',
    'RepositoryError', 'RepositoryUnavailableError', 'MalformedDataError',
    'SessionModel', 'GoalModel', 'GoalProgressRecord', 'GoalCategory', 'MetricPeriod',
    'DistanceMetric', 'FrequencyMetric', 'TimeMetric', 'ElevationMetric', 'ZoneMetric',
    'GoalMetric',
    'InMemorySessionRepository', 'InMemoryGoalRepository',
    'ElasticsearchRepository',
]
