#!/usr/bin/env python3
"""
Analytics
"""

from .interface import (
    ThresholdSource, DataQuality, Confidence, TrendDirection, ZoneModelType, ZoneBasis,
    AthleteThresholds,
    AnalyticsError, InvalidParameterError, GoalNotFoundError
)

from .thresholds import AthleteThresholdEstimator

from .training_load import (
    TrainingLoadCalculator, NormalizedLoad, SessionLoad, TrainingLoadPoint, TrainingLoadMetrics,
    LoadStrategy, PowerTSSStrategy, HeartRateTRIMPStrategy, DurationFallbackStrategy,
    calculate_trimp, calculate_tss
)

from .heart_rate_zones import (
    Zone, ZoneModel, ZoneModelCalculator,
    FiveZoneCalculator, ThreeZoneCalculator, CogganZoneCalculator,
    HeartRateStats, SportZoneAnalysis, ZoneAnalysisResult, ZoneModelBuilder,
    build_zone_model, grade_data_quality, grade_confidence
)

from .zone_distribution import ZoneClassifier, HeartRateSample, ZoneTime

from .goal_insights import GoalInsightEngine, GoalInsight, InsightRecommendation, success_probability

from .goal_progress import GoalProgressCalculator, GoalProgressUpdate

from .goal_analytics import (
    GoalAnalytics, DashboardRecommendation, GoalRecommender, calculate_goal_analytics
)

__all__ = [
    # Enums and thresholds
    'ThresholdSource', 'DataQuality', 'Confidence', 'TrendDirection', 'ZoneModelType', 'ZoneBasis',
    'AthleteThresholds',

    # Exceptions
    'AnalyticsError', 'InvalidParameterError', 'GoalNotFoundError',

    # Thresholds and training load
    'AthleteThresholdEstimator',
    'TrainingLoadCalculator', 'NormalizedLoad', 'SessionLoad', 'TrainingLoadPoint',
    'TrainingLoadMetrics', 'LoadStrategy', 'PowerTSSStrategy', 'HeartRateTRIMPStrategy',
    'DurationFallbackStrategy', 'calculate_trimp', 'calculate_tss',

    # Zones
    'Zone', 'ZoneModel', 'ZoneModelCalculator',
    'FiveZoneCalculator', 'ThreeZoneCalculator', 'CogganZoneCalculator',
    'HeartRateStats', 'SportZoneAnalysis', 'ZoneAnalysisResult', 'ZoneModelBuilder',
    'build_zone_model', 'grade_data_quality', 'grade_confidence',
    'ZoneClassifier', 'HeartRateSample', 'ZoneTime',

    # Goals
    'GoalInsightEngine', 'GoalInsight', 'InsightRecommendation', 'success_probability',
    'GoalProgressCalculator', 'GoalProgressUpdate',
    'GoalAnalytics', 'DashboardRecommendation', 'GoalRecommender', 'calculate_goal_analytics',
]
