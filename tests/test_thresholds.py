"""
Tests for athlete threshold estimation.
"""

from datetime import timedelta

import pytest

from peakform.analytics.interface import ThresholdSource
from peakform.analytics.thresholds import AthleteThresholdEstimator, lactate_threshold
from conftest import TODAY, make_session


@pytest.fixture
def estimator():
    return AthleteThresholdEstimator()


class TestMaxHeartRate:
    """Test max heart rate estimation"""

    def test_no_sessions_uses_default(self, estimator):
        """Test that an empty history falls back to the population default"""
        thresholds = estimator.estimate([])

        assert thresholds.max_heart_rate == 190
        assert thresholds.max_heart_rate_source is ThresholdSource.ESTIMATED
        assert thresholds.resting_heart_rate == 60
        assert thresholds.lactate_threshold_heart_rate == 162
        assert thresholds.total_sessions == 0

    def test_highest_recorded_value(self, estimator, heart_rate_history):
        """Test that the highest plausible session max is used and marked measured"""
        thresholds = estimator.estimate(heart_rate_history)

        assert thresholds.max_heart_rate == 184
        assert thresholds.max_heart_rate_source is ThresholdSource.MEASURED
        assert thresholds.heart_rate_sessions == 25
        assert thresholds.total_sessions == 30

    def test_implausible_values_ignored(self, estimator):
        """Test that sensor spikes outside 120-230 bpm are ignored"""
        sessions = [
            make_session(max_heart_rate=250, average_heart_rate=140),
            make_session(max_heart_rate=176, average_heart_rate=140),
        ]
        assert estimator.estimate(sessions).max_heart_rate == 176

    def test_average_used_when_max_missing(self, estimator):
        """Test that the average heart rate stands in for a missing max"""
        sessions = [make_session(average_heart_rate=150)]
        max_hr, source = estimator.estimate_max_heart_rate(sessions)

        assert max_hr == 150
        assert source is ThresholdSource.MEASURED


class TestRestingHeartRate:
    """Test resting heart rate estimation"""

    def test_low_intensity_percentile(self, estimator):
        """Test the 5th percentile of low-intensity session averages"""
        sessions = [make_session(average_heart_rate=hr, max_heart_rate=150) for hr in (54, 50, 52)]
        assert estimator.estimate(sessions).resting_heart_rate == 50

    def test_too_few_sessions_uses_default(self, estimator):
        """Test that fewer than three low-intensity sessions yield the default"""
        sessions = [make_session(average_heart_rate=hr, max_heart_rate=150) for hr in (50, 52)]
        assert estimator.estimate(sessions).resting_heart_rate == 60

    def test_implausible_result_uses_default(self, estimator):
        """Test that a result outside 30-100 bpm yields the default"""
        sessions = [make_session(average_heart_rate=hr, max_heart_rate=200) for hr in (120, 125, 130)]
        assert estimator.estimate(sessions).resting_heart_rate == 60


class TestThresholdPower:
    """Test functional threshold power and threshold speed estimation"""

    def test_ninetieth_percentile_of_long_sessions(self, estimator):
        """Test FTP from sessions longer than 20 minutes only"""
        sessions = [make_session(sport_type="Ride", average_power=p, moving_time=3600)
                    for p in range(200, 400, 20)]
        sessions.append(make_session(sport_type="Ride", average_power=1000, moving_time=600))

        thresholds = estimator.estimate(sessions)
        assert thresholds.threshold_power == pytest.approx(378.0)
        assert thresholds.threshold_power_source is ThresholdSource.ESTIMATED

    def test_no_power_data(self, estimator):
        """Test that FTP is absent without power data"""
        thresholds = estimator.estimate([make_session()])
        assert thresholds.threshold_power is None
        assert thresholds.threshold_power_source is None

    def test_threshold_speed_from_runs(self, estimator):
        """Test running threshold speed ignores other sports"""
        sessions = [
            make_session(distance=10800, moving_time=3600),
            make_session(sport_type="Ride", distance=36000, moving_time=3600),
        ]
        assert estimator.estimate(sessions).threshold_speed == pytest.approx(3.0)


class TestOverrides:
    """Test caller supplied threshold overrides"""

    def test_max_heart_rate_override(self, estimator):
        """Test that an override is marked measured and LTHR follows it"""
        base = estimator.estimate([])
        thresholds = estimator.with_overrides(base, max_heart_rate=200)

        assert thresholds.max_heart_rate == 200
        assert thresholds.max_heart_rate_source is ThresholdSource.MEASURED
        assert thresholds.lactate_threshold_heart_rate == 170
        assert base.max_heart_rate == 190

    def test_power_override(self, estimator):
        thresholds = estimator.with_overrides(estimator.estimate([]), threshold_power=280)
        assert thresholds.threshold_power == 280.0
        assert thresholds.threshold_power_source is ThresholdSource.MEASURED

    def test_lactate_threshold_rounding(self):
        assert lactate_threshold(190) == 162
        assert lactate_threshold(184) == 156


def test_estimation_ignores_session_order(estimator, heart_rate_history):
    """Test that the estimate does not depend on session order"""
    forward = estimator.estimate(heart_rate_history)
    backward = estimator.estimate(list(reversed(heart_rate_history)))
    assert forward == backward


def test_sessions_without_heart_rate(estimator):
    """Test that sessions without any heart rate do not count as HR sessions"""
    sessions = [make_session(TODAY - timedelta(days=i)) for i in range(5)]
    thresholds = estimator.estimate(sessions)

    assert thresholds.heart_rate_sessions == 0
    assert thresholds.is_max_heart_rate_estimated
