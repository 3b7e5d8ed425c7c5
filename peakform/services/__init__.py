#!/usr/bin/env python3
"""
Services package - High-level services over the repositories
"""

from .zone_service import ZoneAnalysisService, CustomZoneRequest
from .goal_service import GoalService, RecalculationResult
from .training_load_service import TrainingLoadService, TrainingLoadReport

__all__ = [
    'ZoneAnalysisService', 'CustomZoneRequest',
    'GoalService', 'RecalculationResult',
    'TrainingLoadService', 'TrainingLoadReport',
]
