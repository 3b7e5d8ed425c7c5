#!/usr/bin/env python3
"""
Athlete Threshold Estimation

Derives maximum and resting heart rate, functional threshold power and a
running threshold speed from an athlete's session history. Estimation never
fails: whenever the history cannot support a value, a population default is
used and the value is tagged as estimated.
"""

from typing import Iterable, List, Optional

from .interface import AthleteThresholds, ThresholdSource
from .helper import finite_positive, percentile, round_half_up, normalize_sport
from ..storage.model import SessionModel
from .. import const
from ..utils import get_logger

logger = get_logger(__name__)


class AthleteThresholdEstimator:
    """Estimate athlete thresholds from historical sessions"""

    def estimate(self, sessions: Iterable[SessionModel]) -> AthleteThresholds:
        sessions = list(sessions)
        hr_sessions = [s for s in sessions if s.has_heart_rate]

        max_hr, max_source = self.estimate_max_heart_rate(hr_sessions)
        resting_hr = self.estimate_resting_heart_rate(hr_sessions, max_hr)
        threshold_power = self.estimate_threshold_power(sessions)

        thresholds = AthleteThresholds(
            max_heart_rate=max_hr,
            max_heart_rate_source=max_source,
            resting_heart_rate=resting_hr,
            resting_heart_rate_source=ThresholdSource.ESTIMATED,
            threshold_power=threshold_power,
            threshold_power_source=ThresholdSource.ESTIMATED if threshold_power else None,
            threshold_speed=self.estimate_threshold_speed(sessions),
            lactate_threshold_heart_rate=lactate_threshold(max_hr),
            heart_rate_sessions=len(hr_sessions),
            total_sessions=len(sessions),
        )
        logger.debug(f"🫀 Thresholds from {len(sessions)} sessions: max HR {max_hr} "
                     f"({max_source.value}), resting HR {resting_hr}, FTP {threshold_power}")
        return thresholds

    def with_overrides(self,
                       thresholds: AthleteThresholds,
                       max_heart_rate: Optional[int] = None,
                       resting_heart_rate: Optional[int] = None,
                       threshold_power: Optional[float] = None) -> AthleteThresholds:
        """Return a copy of the thresholds with caller-supplied values marked as measured"""
        result = AthleteThresholds(**vars(thresholds))
        if max_heart_rate is not None:
            result.max_heart_rate = int(max_heart_rate)
            result.max_heart_rate_source = ThresholdSource.MEASURED
            result.lactate_threshold_heart_rate = lactate_threshold(result.max_heart_rate)
        if resting_heart_rate is not None:
            result.resting_heart_rate = int(resting_heart_rate)
            result.resting_heart_rate_source = ThresholdSource.MEASURED
        if threshold_power is not None:
            result.threshold_power = float(threshold_power)
            result.threshold_power_source = ThresholdSource.MEASURED
        return result

    @staticmethod
    def estimate_max_heart_rate(sessions: List[SessionModel]):
        """Highest plausible recorded heart rate, else the population default"""
        plausible = []
        for session in sessions:
            value = finite_positive(session.representative_heart_rate)
            if value and const.MIN_PLAUSIBLE_MAX_HR <= value <= const.MAX_PLAUSIBLE_MAX_HR:
                plausible.append(value)

        if not plausible:
            return const.DEFAULT_MAX_HEART_RATE, ThresholdSource.ESTIMATED
        return round_half_up(max(plausible)), ThresholdSource.MEASURED

    @staticmethod
    def estimate_resting_heart_rate(sessions: List[SessionModel], max_heart_rate: int) -> int:
        """
        Lowest stable average heart rate of low-intensity sessions.

        Uses the 5th percentile of session averages below 75% of max HR, which
        needs at least three such sessions and must land in a plausible resting
        range. Anything else yields the default.
        """
        ceiling = max_heart_rate * const.LOW_INTENSITY_HR_FRACTION
        averages = [
            avg for avg in (finite_positive(s.average_heart_rate) for s in sessions)
            if avg and avg < ceiling
        ]
        if len(averages) < const.MIN_LOW_INTENSITY_SESSIONS:
            return const.DEFAULT_RESTING_HEART_RATE

        value = round_half_up(percentile(averages, const.RESTING_HR_PERCENTILE))
        if not const.MIN_PLAUSIBLE_RESTING_HR <= value <= const.MAX_PLAUSIBLE_RESTING_HR:
            return const.DEFAULT_RESTING_HEART_RATE
        return value

    @staticmethod
    def estimate_threshold_power(sessions: List[SessionModel]) -> Optional[float]:
        """90th percentile of average power over sessions longer than 20 minutes"""
        powers = [
            p for p in (finite_positive(s.average_power) for s in sessions
                        if s.moving_time > const.THRESHOLD_MIN_DURATION_SECONDS)
            if p
        ]
        if not powers:
            return None
        return round(percentile(powers, const.THRESHOLD_PERCENTILE), 1)

    @staticmethod
    def estimate_threshold_speed(sessions: List[SessionModel]) -> Optional[float]:
        """90th percentile of running speed (m/s) over runs longer than 20 minutes"""
        speeds = [
            v for v in (finite_positive(s.average_speed) for s in sessions
                        if normalize_sport(s.sport_type) == "Running"
                        and s.moving_time > const.THRESHOLD_MIN_DURATION_SECONDS)
            if v
        ]
        if not speeds:
            return None
        return round(percentile(speeds, const.THRESHOLD_PERCENTILE), 3)


def lactate_threshold(max_heart_rate: int) -> int:
    return round_half_up(max_heart_rate * const.LTHR_FRACTION_OF_MAX)
