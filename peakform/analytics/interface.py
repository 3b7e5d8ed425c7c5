#!/usr/bin/env python3
"""
Analytics interface definitions and data structures.

This module defines the enums, threshold container and exception hierarchy
shared across the analytics package.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ThresholdSource(Enum):
    """Where a threshold value came from"""
    ESTIMATED = "estimated"
    MEASURED = "measured"


class DataQuality(Enum):
    """Grade of the heart rate history behind a zone model"""
    NONE = "none"
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


class Confidence(Enum):
    """Summary grade of how trustworthy derived zones are"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TrendDirection(Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class ZoneModelType(Enum):
    """Supported heart rate zone models"""
    FIVE_ZONE = "5-zone"
    THREE_ZONE = "3-zone"
    COGGAN = "coggan"


class ZoneBasis(Enum):
    """Reference heart rate the zone percentages apply to"""
    MAX_HEART_RATE = "max_heart_rate"
    THRESHOLD_HEART_RATE = "threshold_heart_rate"


@dataclass
class AthleteThresholds:
    """Physiological thresholds of one athlete, each tagged with its source"""
    max_heart_rate: int
    resting_heart_rate: int
    max_heart_rate_source: ThresholdSource = ThresholdSource.ESTIMATED
    resting_heart_rate_source: ThresholdSource = ThresholdSource.ESTIMATED

    threshold_power: Optional[float] = None
    threshold_power_source: Optional[ThresholdSource] = None
    threshold_speed: Optional[float] = None  # m/s, running
    lactate_threshold_heart_rate: Optional[int] = None

    heart_rate_sessions: int = 0
    total_sessions: int = 0

    @property
    def is_max_heart_rate_estimated(self) -> bool:
        return self.max_heart_rate_source is ThresholdSource.ESTIMATED

    def to_dict(self) -> Dict[str, Any]:
        """Convert thresholds to dictionary format"""
        return {
            'max_heart_rate': self.max_heart_rate,
            'max_heart_rate_source': self.max_heart_rate_source.value,
            'resting_heart_rate': self.resting_heart_rate,
            'resting_heart_rate_source': self.resting_heart_rate_source.value,
            'threshold_power': self.threshold_power,
            'threshold_power_source': (self.threshold_power_source.value
                                       if self.threshold_power_source else None),
            'threshold_speed': self.threshold_speed,
            'lactate_threshold_heart_rate': self.lactate_threshold_heart_rate,
            'heart_rate_sessions': self.heart_rate_sessions,
            'total_sessions': self.total_sessions,
        }


# Exception classes
class AnalyticsError(Exception):
    """Base exception for analytics operations"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class InvalidParameterError(AnalyticsError):
    """Raised when invalid parameters are provided"""
    pass


class GoalNotFoundError(InvalidParameterError):
    """Raised when a goal id does not resolve to a goal"""
    pass
