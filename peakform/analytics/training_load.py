#!/usr/bin/env python3
"""
Training Load Calculation

Per-session load scores and the daily load series built from them:

- TRIMP (Banister): minutes × HRr × 0.64 × e^(1.92 × HRr), with the heart rate
  reserve fraction HRr = (avgHR − restHR) / (maxHR − restHR) clipped to [0, 1]
- TSS: seconds × IF² / 3600 × 100, where IF is average power over threshold
  power, or for runs without power, speed over threshold speed
- Normalized Load: the first applicable strategy of power TSS, heart rate TRIMP
  and a duration fallback (hours × 50 × sport multiplier)

Every score is finite and non-negative. Missing inputs yield 0 or make a
strategy decline, they never raise.

The daily series feeds chronic (42-day) and acute (7-day) exponential averages,
their balance (TSB), a week-over-week ramp rate and a training status.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from .interface import AthleteThresholds
from .helper import finite_positive, normalize_sport
from ..storage.model import SessionModel
from .. import const
from ..utils import get_logger

logger = get_logger(__name__)


def calculate_trimp(duration_seconds: float,
                    average_heart_rate: Optional[float],
                    max_heart_rate: Optional[float],
                    resting_heart_rate: Optional[float]) -> float:
    """Banister TRIMP for one session, 0 when it cannot be computed"""
    duration = finite_positive(duration_seconds)
    avg_hr = finite_positive(average_heart_rate)
    max_hr = finite_positive(max_heart_rate)
    rest_hr = finite_positive(resting_heart_rate)
    if not duration or not avg_hr or not max_hr or not rest_hr or max_hr <= rest_hr:
        return 0.0

    hrr = min(1.0, max(0.0, (avg_hr - rest_hr) / (max_hr - rest_hr)))
    minutes = duration / 60
    return float(minutes * hrr * const.TRIMP_WEIGHT * np.exp(const.TRIMP_EXPONENT * hrr))


def calculate_tss(duration_seconds: float, intensity_factor: Optional[float]) -> float:
    """TSS from duration and intensity factor, 0 when either is missing"""
    duration = finite_positive(duration_seconds)
    intensity = finite_positive(intensity_factor)
    if not duration or not intensity:
        return 0.0
    return duration * intensity ** 2 / const.THRESHOLD_DURATION_SECONDS * 100


def sport_multiplier(sport_type: Optional[str]) -> float:
    return const.SPORT_MULTIPLIERS.get(sport_type or "", const.DEFAULT_SPORT_MULTIPLIER)


@dataclass
class NormalizedLoad:
    """Blended load of one session and the strategy that produced it"""
    value: float
    method: str


class LoadStrategy(ABC):
    """One way of scoring a session; returns None to let the next strategy try"""

    name: str = "abstract"

    @abstractmethod
    def calculate(self, session: SessionModel, thresholds: AthleteThresholds) -> Optional[float]:
        pass


class PowerTSSStrategy(LoadStrategy):
    """Power based TSS, needs average power and a threshold power"""

    name = "power_tss"

    def calculate(self, session, thresholds):
        power = finite_positive(session.average_power)
        ftp = finite_positive(thresholds.threshold_power)
        if not power or not ftp:
            return None
        return calculate_tss(session.moving_time, power / ftp)


class HeartRateTRIMPStrategy(LoadStrategy):
    """Heart rate TRIMP, needs an average heart rate and a usable reserve"""

    name = "heart_rate_trimp"

    def calculate(self, session, thresholds):
        if not finite_positive(session.average_heart_rate):
            return None
        if thresholds.max_heart_rate <= thresholds.resting_heart_rate:
            return None
        return calculate_trimp(session.moving_time, session.average_heart_rate,
                               thresholds.max_heart_rate, thresholds.resting_heart_rate)


class DurationFallbackStrategy(LoadStrategy):
    """Moving time scaled by a sport intensity multiplier, always applicable"""

    name = "duration"

    def calculate(self, session, thresholds):
        hours = (finite_positive(session.moving_time) or 0.0) / 3600
        return hours * const.DURATION_LOAD_PER_HOUR * sport_multiplier(session.sport_type)


DEFAULT_LOAD_STRATEGIES = (
    PowerTSSStrategy(),
    HeartRateTRIMPStrategy(),
    DurationFallbackStrategy(),
)


@dataclass
class SessionLoad:
    """All load scores of a single session"""
    session_id: str
    activity_date: date
    sport_type: str
    duration: float
    trimp: float
    tss: float
    normalized_load: float
    method: str

    def to_dict(self) -> Dict[str, object]:
        return {
            'session_id': self.session_id,
            'activity_date': self.activity_date.isoformat(),
            'sport_type': self.sport_type,
            'duration': self.duration,
            'trimp': round(self.trimp, 1),
            'tss': round(self.tss, 1),
            'normalized_load': round(self.normalized_load, 1),
            'method': self.method,
        }


@dataclass
class TrainingLoadPoint:
    """Load of one calendar day"""
    day: date
    trimp: float = 0.0
    tss: float = 0.0
    normalized_load: float = 0.0
    duration: float = 0.0
    session_count: int = 0
    sport_type: str = ""

    def to_dict(self) -> Dict[str, object]:
        return {
            'date': self.day.isoformat(),
            'trimp': round(self.trimp, 1),
            'tss': round(self.tss, 1),
            'normalized_load': round(self.normalized_load, 1),
            'duration': self.duration,
            'session_count': self.session_count,
            'sport_type': self.sport_type,
        }


STATUS_RECOMMENDATIONS = {
    'peak': 'High training stress detected. Consider reducing intensity and incorporating recovery.',
    'build': 'Good building phase. Maintain current training progression while monitoring recovery.',
    'maintain': 'Steady training load. Consider varying intensity or adding progressive overload.',
    'recover': 'Low training stress. Good time for recovery or gradually increasing training load.',
}
EMPTY_HISTORY_RECOMMENDATION = 'Start building your training load gradually'


@dataclass
class TrainingLoadMetrics:
    """Acute/chronic load summary of a load series"""
    acute: float = 0.0
    chronic: float = 0.0
    balance: float = 0.0
    ramp_rate: float = 0.0
    status: str = 'recover'
    recommendation: str = EMPTY_HISTORY_RECOMMENDATION

    def to_dict(self) -> Dict[str, object]:
        return {
            'acute': round(self.acute),
            'chronic': round(self.chronic),
            'balance': round(self.balance),
            'ramp_rate': round(self.ramp_rate, 1),
            'status': self.status,
            'recommendation': self.recommendation,
        }


class TrainingLoadCalculator:
    """Scores sessions against one athlete's thresholds"""

    def __init__(self,
                 thresholds: AthleteThresholds,
                 strategies: Optional[Sequence[LoadStrategy]] = None):
        self.thresholds = thresholds
        self.strategies = tuple(strategies) if strategies is not None else DEFAULT_LOAD_STRATEGIES

    def trimp(self, session: SessionModel) -> float:
        return calculate_trimp(session.moving_time, session.average_heart_rate,
                               self.thresholds.max_heart_rate, self.thresholds.resting_heart_rate)

    def intensity_factor(self, session: SessionModel) -> Optional[float]:
        """Power based IF, else a pace proxy for runs, else None"""
        power = finite_positive(session.average_power)
        ftp = finite_positive(self.thresholds.threshold_power)
        if power and ftp:
            return power / ftp

        speed = finite_positive(session.average_speed)
        threshold_speed = finite_positive(self.thresholds.threshold_speed)
        if speed and threshold_speed and normalize_sport(session.sport_type) == "Running":
            return speed / threshold_speed
        return None

    def tss(self, session: SessionModel) -> float:
        return calculate_tss(session.moving_time, self.intensity_factor(session))

    def normalized_load(self, session: SessionModel) -> NormalizedLoad:
        """Score from the first strategy that does not decline"""
        for strategy in self.strategies:
            value = strategy.calculate(session, self.thresholds)
            if value is None:
                continue
            value = finite_positive(value) or 0.0
            return NormalizedLoad(value=value, method=strategy.name)
        return NormalizedLoad(value=0.0, method="none")

    def session_load(self, session: SessionModel) -> SessionLoad:
        load = self.normalized_load(session)
        return SessionLoad(
            session_id=session.id,
            activity_date=session.activity_date,
            sport_type=session.sport_type,
            duration=session.moving_time,
            trimp=self.trimp(session),
            tss=self.tss(session),
            normalized_load=load.value,
            method=load.method,
        )

    def process_sessions(self, sessions: Iterable[SessionModel]) -> List[TrainingLoadPoint]:
        """Aggregate sessions longer than five minutes into daily load points"""
        by_day: Dict[date, List[SessionModel]] = defaultdict(list)
        for session in sessions:
            if session.moving_time > const.MIN_LOAD_SESSION_SECONDS:
                by_day[session.activity_date].append(session)

        points = []
        for day in sorted(by_day):
            day_sessions = by_day[day]
            point = TrainingLoadPoint(day=day, session_count=len(day_sessions))
            for session in day_sessions:
                load = self.session_load(session)
                point.trimp += load.trimp
                point.tss += load.tss
                point.normalized_load += load.normalized_load
                point.duration += session.moving_time
            point.sport_type = day_sessions[0].sport_type if len(day_sessions) == 1 else "Mixed"
            points.append(point)

        logger.debug(f"📈 Built {len(points)} daily load points from "
                     f"{sum(p.session_count for p in points)} sessions")
        return points

    @staticmethod
    def calculate_load_metrics(points: Sequence[TrainingLoadPoint]) -> TrainingLoadMetrics:
        if not points:
            return TrainingLoadMetrics()

        ordered = sorted(points, key=lambda p: p.day)
        loads = [p.normalized_load for p in ordered]

        chronic = exponential_average(loads, const.CTL_TIME_CONSTANT)
        acute = exponential_average(loads[-const.RAMP_WINDOW_DAYS:], const.ATL_TIME_CONSTANT)
        balance = chronic - acute
        ramp = ramp_rate(loads)

        if balance < -10 and ramp > 5:
            status = 'peak'
        elif balance > 5:
            status = 'recover'
        elif ramp > 3:
            status = 'build'
        else:
            status = 'maintain'

        return TrainingLoadMetrics(acute=acute, chronic=chronic, balance=balance,
                                   ramp_rate=ramp, status=status,
                                   recommendation=STATUS_RECOMMENDATIONS[status])


def exponential_average(values: Sequence[float], time_constant: int) -> float:
    """EMA seeded with the first value, alpha = 1 / time constant"""
    if not values:
        return 0.0
    alpha = 1.0 / time_constant
    ema = values[0]
    for value in values[1:]:
        ema = alpha * value + (1 - alpha) * ema
    return ema


def ramp_rate(loads: Sequence[float]) -> float:
    """Mean load of the last seven points minus the seven before them"""
    window = const.RAMP_WINDOW_DAYS
    if len(loads) < 2 * window:
        return 0.0
    recent = loads[-2 * window:]
    return float(np.mean(recent[window:]) - np.mean(recent[:window]))
