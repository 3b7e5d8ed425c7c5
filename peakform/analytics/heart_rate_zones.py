#!/usr/bin/env python3
"""
Heart Rate Zones Analytics Module

Builds personalized heart rate zone models from an athlete's session history:
- 5-Zone (percent of max HR) - Recovery, Base/Aerobic, Tempo, Threshold, VO2 Max
- 3-Zone (percent of max HR) - Easy, Moderate, Hard
- Coggan style (percent of lactate threshold HR) - five bands topped at max HR

Every model is contiguous: each boundary heart rate is rounded once and shared
by the two zones that meet there. Alongside the models, the analysis grades how
much heart rate history backs them (data quality), how far they can be trusted
(confidence) and explains degraded results through recommendations.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .interface import (
    AthleteThresholds, DataQuality, Confidence, ZoneModelType, ZoneBasis,
    InvalidParameterError
)
from .thresholds import AthleteThresholdEstimator
from .helper import finite_positive, percentile, round_half_up, normalize_sport
from ..storage.model import SessionModel
from .. import const
from ..utils import get_logger

logger = get_logger(__name__)


@dataclass
class Zone:
    """Represents a single heart rate training zone"""
    number: int
    name: str
    description: str
    min_percent: float
    max_percent: float
    min_hr: int
    max_hr: int
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'name': self.name,
            'description': self.description,
            'min_percent': self.min_percent,
            'max_percent': self.max_percent,
            'min_hr': self.min_hr,
            'max_hr': self.max_hr,
            'color': self.color,
        }


@dataclass
class ZoneModel:
    """Named, ordered, contiguous partition of a heart rate range"""
    name: str
    model_type: Optional[ZoneModelType] = None
    description: str = ""
    basis: ZoneBasis = ZoneBasis.MAX_HEART_RATE
    reference_heart_rate: Optional[int] = None
    zones: List[Zone] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.zones

    def zone(self, number: int) -> Optional[Zone]:
        for zone in self.zones:
            if zone.number == number:
                return zone
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'model_type': self.model_type.value if self.model_type else None,
            'description': self.description,
            'basis': self.basis.value,
            'reference_heart_rate': self.reference_heart_rate,
            'zones': [z.to_dict() for z in self.zones],
        }


# (name, description, color) per zone
ZoneBand = Tuple[str, str, str]


class ZoneModelCalculator(ABC):
    """Abstract base class for heart rate zone model calculators"""

    model_type: ZoneModelType
    name: str
    description: str
    basis: ZoneBasis = ZoneBasis.MAX_HEART_RATE
    bands: Sequence[ZoneBand] = ()

    @abstractmethod
    def boundaries(self, thresholds: AthleteThresholds) -> Tuple[int, List[float]]:
        """Reference heart rate and the ascending percent boundaries (len(bands) + 1)"""
        pass

    def calculate(self, thresholds: AthleteThresholds) -> ZoneModel:
        reference, percents = self.boundaries(thresholds)
        boundary_hr = [round_half_up(p / 100 * reference) for p in percents]
        # The top of every model is the athlete's max heart rate
        boundary_hr[-1] = max(boundary_hr[-2], thresholds.max_heart_rate)

        zones = [
            Zone(number=i + 1, name=name, description=description,
                 min_percent=percents[i], max_percent=percents[i + 1],
                 min_hr=boundary_hr[i], max_hr=boundary_hr[i + 1], color=color)
            for i, (name, description, color) in enumerate(self.bands)
        ]
        return ZoneModel(name=self.name, model_type=self.model_type,
                         description=self.description, basis=self.basis,
                         reference_heart_rate=reference, zones=zones)


class FiveZoneCalculator(ZoneModelCalculator):
    """Classic 5-zone model at 50-60-70-80-90-100% of max HR"""

    model_type = ZoneModelType.FIVE_ZONE
    name = "5-Zone Model"
    description = "Classic 5-zone heart rate training model"
    bands = (
        ("Recovery", "Active recovery, very easy effort", "#22c55e"),
        ("Base/Aerobic", "Comfortable, conversational pace", "#3b82f6"),
        ("Tempo", "Comfortably hard, moderate effort", "#f59e0b"),
        ("Threshold", "Hard effort, lactate threshold", "#f97316"),
        ("VO2 Max", "Very hard, maximum effort", "#ef4444"),
    )

    def boundaries(self, thresholds):
        return thresholds.max_heart_rate, [50.0, 60.0, 70.0, 80.0, 90.0, 100.0]


class ThreeZoneCalculator(ZoneModelCalculator):
    """Simplified 3-zone model at 50-70-85-100% of max HR"""

    model_type = ZoneModelType.THREE_ZONE
    name = "3-Zone Model"
    description = "Simplified 3-zone model for beginners"
    bands = (
        ("Easy", "Easy, aerobic base building", "#22c55e"),
        ("Moderate", "Moderate, tempo efforts", "#f59e0b"),
        ("Hard", "Hard, threshold and VO2 max", "#ef4444"),
    )

    def boundaries(self, thresholds):
        return thresholds.max_heart_rate, [50.0, 70.0, 85.0, 100.0]


class CogganZoneCalculator(ZoneModelCalculator):
    """
    Coggan style zones anchored on lactate threshold heart rate.

    Bands at 50-68-83-94-105% of LTHR; the top zone runs from 105% of LTHR up to
    the athlete's max heart rate, expressed as a percentage of LTHR.
    """

    model_type = ZoneModelType.COGGAN
    name = "Coggan Model"
    description = "Coggan-style zones relative to lactate threshold heart rate"
    basis = ZoneBasis.THRESHOLD_HEART_RATE
    bands = (
        ("Active Recovery", "Active recovery, below 68% of LTHR", "#22c55e"),
        ("Endurance", "Endurance, 68-83% of LTHR", "#3b82f6"),
        ("Tempo", "Tempo, 83-94% of LTHR", "#f59e0b"),
        ("Threshold", "Lactate threshold, 94-105% of LTHR", "#f97316"),
        ("VO2 Max", "VO2 max, above 105% of LTHR", "#ef4444"),
    )

    def boundaries(self, thresholds):
        lthr = thresholds.lactate_threshold_heart_rate or round_half_up(
            thresholds.max_heart_rate * const.LTHR_FRACTION_OF_MAX)
        top = max(105.0, round(thresholds.max_heart_rate / lthr * 100, 1))
        return lthr, [50.0, 68.0, 83.0, 94.0, 105.0, top]


ZONE_CALCULATORS: Dict[ZoneModelType, ZoneModelCalculator] = {
    ZoneModelType.FIVE_ZONE: FiveZoneCalculator(),
    ZoneModelType.THREE_ZONE: ThreeZoneCalculator(),
    ZoneModelType.COGGAN: CogganZoneCalculator(),
}


def build_zone_model(model_type: ZoneModelType, thresholds: AthleteThresholds) -> ZoneModel:
    return ZONE_CALCULATORS[model_type].calculate(thresholds)


def parse_zone_model_type(value: Any) -> ZoneModelType:
    """Resolve a zone model name such as '5-zone', raising InvalidParameterError"""
    if isinstance(value, ZoneModelType):
        return value
    try:
        return ZoneModelType(str(value).strip().lower())
    except ValueError:
        valid = [t.value for t in ZoneModelType]
        raise InvalidParameterError(f"Unknown zone model: {value!r}",
                                    {'zone_model': value, 'valid': valid})


def grade_data_quality(heart_rate_sessions: int, total_sessions: int) -> DataQuality:
    """
    Grade heart rate history by share of HR sessions and their absolute count

    none: no HR sessions
    poor: share < 20% or fewer than 5
    fair: share < 50% or fewer than 10
    good: share < 80% or fewer than 20
    excellent: otherwise
    """
    share = heart_rate_sessions / total_sessions * 100 if total_sessions > 0 else 0.0
    if heart_rate_sessions == 0 or share == 0:
        return DataQuality.NONE
    if share < const.QUALITY_POOR_SHARE or heart_rate_sessions < const.QUALITY_POOR_COUNT:
        return DataQuality.POOR
    if share < const.QUALITY_FAIR_SHARE or heart_rate_sessions < const.QUALITY_FAIR_COUNT:
        return DataQuality.FAIR
    if share < const.QUALITY_GOOD_SHARE or heart_rate_sessions < const.QUALITY_GOOD_COUNT:
        return DataQuality.GOOD
    return DataQuality.EXCELLENT


def grade_confidence(quality: DataQuality, total_sessions: int) -> Confidence:
    if quality is DataQuality.EXCELLENT and total_sessions >= const.CONFIDENCE_HIGH_SESSIONS:
        return Confidence.HIGH
    if (quality in (DataQuality.GOOD, DataQuality.EXCELLENT)
            and total_sessions >= const.CONFIDENCE_MEDIUM_SESSIONS):
        return Confidence.MEDIUM
    return Confidence.LOW


def zone_reference_max(observed_max: Optional[float]) -> int:
    """Observed max HR when plausible, else the population default"""
    if observed_max and const.MIN_PLAUSIBLE_MAX_HR <= observed_max <= const.MAX_PLAUSIBLE_MAX_HR:
        return round_half_up(observed_max)
    return const.DEFAULT_MAX_HEART_RATE


@dataclass
class HeartRateStats:
    """Aggregate heart rate statistics of a session set"""
    max_heart_rate: Optional[int]
    average_heart_rate: Optional[int]
    resting_heart_rate: int
    heart_rate_sessions: int
    total_sessions: int
    data_quality: DataQuality
    percentiles: Dict[str, Optional[float]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'max_heart_rate': self.max_heart_rate,
            'average_heart_rate': self.average_heart_rate,
            'resting_heart_rate': self.resting_heart_rate,
            'heart_rate_sessions': self.heart_rate_sessions,
            'total_sessions': self.total_sessions,
            'data_quality': self.data_quality.value,
            'percentiles': dict(self.percentiles),
        }


@dataclass
class SportZoneAnalysis:
    """Heart rate aggregation and zones for one sport group"""
    sport: str
    max_heart_rate: int
    average_heart_rate: Optional[int]
    session_count: int
    zone_model: ZoneModel

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sport': self.sport,
            'max_heart_rate': self.max_heart_rate,
            'average_heart_rate': self.average_heart_rate,
            'session_count': self.session_count,
            'zones': [z.to_dict() for z in self.zone_model.zones],
        }


@dataclass
class ZoneAnalysisResult:
    """Result of a zone analysis; built fresh per request and never modified"""
    overall: HeartRateStats
    sport_breakdown: List[SportZoneAnalysis]
    suggested_model: ZoneModel
    alternative_models: List[ZoneModel]
    confidence: Confidence
    needs_more_data: bool
    recommendations: List[str]
    thresholds: AthleteThresholds
    is_custom: bool = False
    custom_parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary format"""
        return {
            'overall': self.overall.to_dict(),
            'sport_breakdown': [s.to_dict() for s in self.sport_breakdown],
            'suggested_model': self.suggested_model.to_dict(),
            'alternative_models': [m.to_dict() for m in self.alternative_models],
            'confidence': self.confidence.value,
            'needs_more_data': self.needs_more_data,
            'recommendations': list(self.recommendations),
            'thresholds': self.thresholds.to_dict(),
            'is_custom': self.is_custom,
            'custom_parameters': dict(self.custom_parameters),
        }


class ZoneModelBuilder:
    """Derives zone models, quality grades and recommendations from sessions"""

    def __init__(self, estimator: Optional[AthleteThresholdEstimator] = None):
        self.estimator = estimator or AthleteThresholdEstimator()

    def analyze(self,
                sessions: Iterable[SessionModel],
                thresholds: Optional[AthleteThresholds] = None,
                zone_model: ZoneModelType = ZoneModelType.FIVE_ZONE) -> ZoneAnalysisResult:
        """Automatic analysis: thresholds are estimated unless supplied"""
        sessions = list(sessions)
        if thresholds is None:
            thresholds = self.estimator.estimate(sessions)

        overall = self.heart_rate_stats(sessions, thresholds)
        breakdown = self.sport_breakdown(sessions)
        models = {t: build_zone_model(t, thresholds) for t in ZoneModelType}
        confidence = grade_confidence(overall.data_quality, overall.total_sessions)

        result = ZoneAnalysisResult(
            overall=overall,
            sport_breakdown=breakdown,
            suggested_model=models[zone_model],
            alternative_models=[m for t, m in models.items() if t is not zone_model],
            confidence=confidence,
            needs_more_data=confidence is Confidence.LOW,
            recommendations=self.recommendations(overall, breakdown, thresholds),
            thresholds=thresholds,
        )
        logger.debug(f"📊 Zone analysis: quality {overall.data_quality.value}, "
                     f"confidence {confidence.value}, {len(breakdown)} sport groups")
        return result

    def analyze_custom(self,
                       sessions: Iterable[SessionModel],
                       max_heart_rate: Optional[float] = None,
                       zone_model: Any = ZoneModelType.FIVE_ZONE,
                       sport_filter: Optional[str] = None) -> ZoneAnalysisResult:
        """
        Analysis with caller overrides applied

        Args:
            sessions: Athlete sessions
            max_heart_rate: Max heart rate to use instead of the estimate (100-250 bpm)
            zone_model: One of '5-zone', '3-zone', 'coggan'
            sport_filter: Only analyze sessions of this sport

        Raises:
            InvalidParameterError: If an override is out of range or unknown
        """
        model_type = parse_zone_model_type(zone_model)
        if max_heart_rate is not None:
            max_heart_rate = validate_max_heart_rate(max_heart_rate)

        sessions = list(sessions)
        if sport_filter:
            wanted = normalize_sport(sport_filter)
            sessions = [s for s in sessions if normalize_sport(s.sport_type) == wanted]

        thresholds = self.estimator.estimate(sessions)
        if max_heart_rate is not None:
            thresholds = self.estimator.with_overrides(thresholds, max_heart_rate=max_heart_rate)

        base = self.analyze(sessions, thresholds=thresholds, zone_model=model_type)

        notes = []
        if max_heart_rate is not None:
            notes.append(f"Using custom max heart rate of {max_heart_rate} BPM")
        if sport_filter:
            notes.append(f"Zones based on {normalize_sport(sport_filter)} sessions only")

        return ZoneAnalysisResult(
            overall=base.overall,
            sport_breakdown=base.sport_breakdown,
            suggested_model=base.suggested_model,
            alternative_models=base.alternative_models,
            confidence=base.confidence,
            needs_more_data=base.needs_more_data,
            recommendations=notes + base.recommendations,
            thresholds=thresholds,
            is_custom=True,
            custom_parameters={
                'max_heart_rate': max_heart_rate,
                'zone_model': model_type.value,
                'sport_filter': sport_filter,
            },
        )

    def heart_rate_stats(self, sessions: List[SessionModel],
                         thresholds: AthleteThresholds) -> HeartRateStats:
        representative = [
            hr for hr in (finite_positive(s.representative_heart_rate) for s in sessions) if hr
        ]
        averages = [
            hr for hr in (finite_positive(s.average_heart_rate) for s in sessions) if hr
        ]
        quality = grade_data_quality(len(representative), len(sessions))

        return HeartRateStats(
            max_heart_rate=round_half_up(max(representative)) if representative else None,
            average_heart_rate=round_half_up(float(np.mean(averages))) if averages else None,
            resting_heart_rate=thresholds.resting_heart_rate,
            heart_rate_sessions=len(representative),
            total_sessions=len(sessions),
            data_quality=quality,
            percentiles=percentile_table(representative),
        )

    def sport_breakdown(self, sessions: List[SessionModel]) -> List[SportZoneAnalysis]:
        """Per sport stats for groups with at least three HR sessions, largest first"""
        groups: Dict[str, List[SessionModel]] = defaultdict(list)
        for session in sessions:
            if finite_positive(session.representative_heart_rate):
                groups[normalize_sport(session.sport_type)].append(session)

        breakdown = []
        for sport, group in groups.items():
            if len(group) < const.MIN_SPORT_SESSIONS:
                continue
            observed_max = max(finite_positive(s.representative_heart_rate) for s in group)
            averages = [a for a in (finite_positive(s.average_heart_rate) for s in group) if a]
            reference_max = zone_reference_max(observed_max)
            group_thresholds = AthleteThresholds(
                max_heart_rate=reference_max,
                resting_heart_rate=const.DEFAULT_RESTING_HEART_RATE,
            )
            breakdown.append(SportZoneAnalysis(
                sport=sport,
                max_heart_rate=round_half_up(observed_max),
                average_heart_rate=round_half_up(float(np.mean(averages))) if averages else None,
                session_count=len(group),
                zone_model=build_zone_model(ZoneModelType.FIVE_ZONE, group_thresholds),
            ))

        breakdown.sort(key=lambda s: s.session_count, reverse=True)
        return breakdown

    @staticmethod
    def recommendations(stats: HeartRateStats,
                        breakdown: List[SportZoneAnalysis],
                        thresholds: AthleteThresholds) -> List[str]:
        recommendations = []
        if stats.data_quality in (DataQuality.POOR, DataQuality.NONE):
            recommendations.append(
                "Consider using a heart rate monitor for more activities to improve zone accuracy")
        if stats.heart_rate_sessions < const.MORE_DATA_HR_SESSIONS:
            recommendations.append("More heart rate data will improve zone recommendations")
        if len(breakdown) > 1:
            recommendations.append(
                "Consider sport-specific zones as your heart rate patterns vary between activities")
        if stats.max_heart_rate and stats.max_heart_rate < const.LOW_OBSERVED_MAX_HR:
            recommendations.append(
                "Your max heart rate seems low - consider a max HR test for better accuracy")
        if thresholds.is_max_heart_rate_estimated:
            recommendations.append(
                f"Zones use an estimated max heart rate of {thresholds.max_heart_rate} BPM "
                "until a reliable maximum is recorded")
        return recommendations


def percentile_table(values: Sequence[float]) -> Dict[str, Optional[float]]:
    table = {}
    for pct in const.HR_PERCENTILES:
        value = percentile(values, pct)
        table[f"p{pct}"] = round(value, 1) if value is not None else None
    return table


def validate_max_heart_rate(value: Any) -> int:
    low, high = const.CUSTOM_MAX_HR_RANGE
    number = finite_positive(value) if not isinstance(value, bool) else None
    if number is None or not low <= number <= high:
        raise InvalidParameterError(f"Max heart rate must be between {low} and {high} BPM",
                                    {'max_heart_rate': value})
    return round_half_up(number)
