"""
Pytest configuration and fixtures for PeakForm tests.

This module provides shared session/goal factories and a fixed reference
date so that every date dependent calculation is reproducible.
"""

import itertools
from datetime import date, datetime, timedelta

import pytest

from peakform.analytics.interface import AthleteThresholds, ThresholdSource
from peakform.storage.model import SessionModel, GoalModel, GoalProgressRecord

_ids = itertools.count(1)

# Wednesday
TODAY = date(2024, 6, 12)


def make_session(day=TODAY, **overrides) -> SessionModel:
    """Build a session starting at 07:00 on the given day"""
    data = {
        'id': f"s{next(_ids)}",
        'user_id': "athlete-1",
        'sport_type': "Run",
        'start_time': datetime.combine(day, datetime.min.time()) + timedelta(hours=7),
        'moving_time': 3600,
    }
    data.update(overrides)
    return SessionModel(**data)


def make_goal(**overrides) -> GoalModel:
    data = {
        'id': f"g{next(_ids)}",
        'user_id': "athlete-1",
        'name': "Test goal",
        'category': "distance",
        'created_at': datetime.combine(TODAY - timedelta(days=28), datetime.min.time()),
    }
    data.update(overrides)
    return GoalModel(**data)


def make_record(day, amount=1.0) -> GoalProgressRecord:
    return GoalProgressRecord(activity_date=day, contribution_amount=amount)


@pytest.fixture
def today():
    """Fixed reference date (a Wednesday)"""
    return TODAY


@pytest.fixture
def thresholds():
    """Athlete with 190 max HR, 50 resting HR and 250 W FTP"""
    return AthleteThresholds(
        max_heart_rate=190,
        resting_heart_rate=50,
        max_heart_rate_source=ThresholdSource.MEASURED,
        threshold_power=250.0,
        threshold_power_source=ThresholdSource.MEASURED,
        threshold_speed=3.5,
        lactate_threshold_heart_rate=162,
    )


@pytest.fixture
def heart_rate_history():
    """30 sessions, 25 of them with heart rate, spread over 8 weeks"""
    sessions = []
    for i in range(30):
        day = TODAY - timedelta(days=i * 55 // 29)
        if i < 25:
            sessions.append(make_session(day, average_heart_rate=130 + i % 10,
                                         max_heart_rate=165 + i % 20))
        else:
            sessions.append(make_session(day, sport_type="Ride", distance=30000))
    return sessions
