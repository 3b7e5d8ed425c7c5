#!/usr/bin/env python3
"""
Test suite for goal insights: streaks, trends, success probability and recommendations.
"""

import random
from datetime import datetime, time, timedelta

import pytest

from peakform.analytics.goal_insights import (
    GoalInsightEngine, calculate_streak, weekly_buckets, detect_trend, improvement_rate,
    success_probability, format_projected_completion
)
from peakform.analytics.interface import TrendDirection
from peakform.storage.model import GoalProgressRecord
from conftest import TODAY, make_goal, make_record


@pytest.fixture
def engine():
    return GoalInsightEngine()


class TestStreak:
    """Test consecutive activity days"""

    def test_streak_ignores_record_order(self):
        days = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2), TODAY - timedelta(days=4)]
        records = [make_record(d) for d in days]
        random.Random(7).shuffle(records)

        assert calculate_streak(records, TODAY) == 3

    def test_duplicate_days_count_once(self):
        records = [make_record(TODAY), make_record(TODAY), make_record(TODAY - timedelta(days=1))]
        assert calculate_streak(records, TODAY) == 2

    def test_time_of_day_is_ignored(self):
        """Test that records stamped with a full timestamp count by calendar day"""
        records = [
            GoalProgressRecord(activity_date=datetime.combine(TODAY, time(18, 30)), contribution_amount=1.0),
            GoalProgressRecord(activity_date=datetime.combine(TODAY, time(6, 5)), contribution_amount=1.0),
            GoalProgressRecord(activity_date=f"{TODAY - timedelta(days=1)}T21:45:00Z", contribution_amount=1.0),
        ]

        assert records[2].activity_date == TODAY - timedelta(days=1)
        assert calculate_streak(records, TODAY) == 2

    def test_no_activity_today(self):
        records = [make_record(TODAY - timedelta(days=1))]
        assert calculate_streak(records, TODAY) == 0
        assert calculate_streak([], TODAY) == 0


class TestWeeklyBuckets:
    """Test Monday based weekly aggregation"""

    def test_gaps_are_zero_filled(self):
        records = [make_record(TODAY - timedelta(days=15), 3.0), make_record(TODAY, 2.0)]
        buckets = weekly_buckets(records, TODAY)

        assert [b.value for b in buckets] == [3.0, 0.0, 2.0]
        assert all(b.week_start.weekday() == 0 for b in buckets)

    def test_empty(self):
        assert weekly_buckets([], TODAY) == []


class TestTrend:
    """Test trend detection"""

    @pytest.mark.parametrize("values,direction,description", [
        ([], TrendDirection.STABLE, "Need more data"),
        ([5.0], TrendDirection.STABLE, "Need more data"),
        ([0.0, 0.0, 5.0], TrendDirection.IMPROVING, "New activity vs previous period"),
        ([0.0, 0.0], TrendDirection.STABLE, "No activity in recent periods"),
        ([10.0, 10.5], TrendDirection.STABLE, "Consistent performance"),
    ])
    def test_directions(self, values, direction, description):
        trend = detect_trend(values)
        assert trend.direction is direction
        assert trend.description == description

    def test_improving(self):
        trend = detect_trend([10.0, 10.0, 10.0, 20.0, 20.0, 20.0])

        assert trend.direction is TrendDirection.IMPROVING
        assert trend.change_percent == pytest.approx(100.0)
        assert trend.description == "+100.0% vs previous period"

    def test_declining(self):
        trend = detect_trend([99.0, 20.0, 20.0, 20.0, 10.0, 10.0, 10.0])

        assert trend.direction is TrendDirection.DECLINING
        assert trend.change_percent == pytest.approx(-50.0)

    def test_improvement_rate(self):
        assert improvement_rate([10.0, 5.0, 15.0]) == pytest.approx(50.0)
        assert improvement_rate([0.0, 5.0]) == 0.0
        assert improvement_rate([5.0]) == 0.0


class TestSuccessProbability:
    """Test tiered success probability"""

    @pytest.mark.parametrize("average,required,expected", [
        (12.0, 10.0, 95),
        (10.0, 10.0, 85),
        (8.0, 10.0, 70),
        (6.0, 10.0, 50),
        (5.9, 10.0, 25),
        (0.0, 10.0, 25),
        (0.0, 0.0, 95),
    ])
    def test_tiers(self, average, required, expected):
        assert success_probability(average, required) == expected

    def test_monotonic_in_pace(self):
        probabilities = [success_probability(avg / 10, 10.0) for avg in range(0, 200)]
        assert probabilities == sorted(probabilities)

    @pytest.mark.parametrize("days,expected", [
        (0, "Already achieved"),
        (-3, "Already achieved"),
        (3.2, "4 days"),
        (7, "1 weeks"),
        (10, "2 weeks"),
        (45, "2 months"),
    ])
    def test_projected_completion(self, days, expected):
        assert format_projected_completion(days) == expected


class TestGoalInsightEngine:
    """Test full insight reports"""

    def test_behind_schedule(self, engine):
        goal = make_goal(target_value=100, current_progress=20, target_unit="km",
                         target_date=TODAY + timedelta(days=28))
        insight = engine.generate(goal, [], today=TODAY)

        assert insight.weekly_average == pytest.approx(5.0)
        assert insight.remaining_progress == pytest.approx(80.0)
        assert insight.days_remaining == 28
        assert insight.required_weekly_rate == pytest.approx(20.0)
        assert insight.success_probability == 25
        assert insight.projected_completion == "4 months"
        assert [r.kind for r in insight.recommendations] == ["low_progress", "low_probability"]

    def test_without_target(self, engine):
        goal = make_goal(category="general")
        insight = engine.generate(goal, [], today=TODAY)

        assert insight.success_probability == 75
        assert insight.projected_completion == "Unable to calculate"
        assert insight.days_remaining is None

    def test_without_target_date(self, engine):
        goal = make_goal(target_value=100, current_progress=50)
        insight = engine.generate(goal, [], today=TODAY)

        assert insight.success_probability == 75
        assert insight.required_weekly_rate == pytest.approx(50 / 52)

    def test_already_achieved(self, engine):
        goal = make_goal(target_value=100, current_progress=120, target_date=TODAY + timedelta(days=7))
        insight = engine.generate(goal, [], today=TODAY)

        assert insight.projected_completion == "Already achieved"
        assert insight.remaining_progress == 0.0
        assert insight.success_probability == 95
        assert insight.progress_percentage == 100.0

    def test_past_target_date(self, engine):
        goal = make_goal(target_value=100, current_progress=10, target_date=TODAY - timedelta(days=3))
        assert engine.generate(goal, [], today=TODAY).days_remaining == 0

    def test_ahead_of_pace(self, engine):
        goal = make_goal(target_value=100, current_progress=60, target_date=TODAY + timedelta(days=56))
        insight = engine.generate(goal, [], today=TODAY)

        assert insight.success_probability == 95
        assert [r.kind for r in insight.recommendations] == ["ahead_of_pace"]

    def test_recommendations_capped_at_three(self, engine):
        """Test that a struggling frequency goal gets the three highest ranked items"""
        monday = TODAY - timedelta(days=TODAY.weekday())
        records = [make_record(monday - timedelta(weeks=k), 10.0 if k >= 3 else 1.0)
                   for k in range(6)]
        goal = make_goal(category="frequency", target_value=100, current_progress=5,
                         target_date=TODAY + timedelta(days=28))
        insight = engine.generate(goal, records, today=TODAY)

        assert insight.trend.direction is TrendDirection.DECLINING
        assert [r.kind for r in insight.recommendations] == [
            "low_progress", "declining_trend", "low_probability"]
        assert insight.current_streak == 0
        assert insight.best_week == 10.0

    def test_to_dict(self, engine):
        goal = make_goal(category="frequency", target_value=12, current_progress=4,
                         target_date=TODAY + timedelta(days=14))
        records = [make_record(TODAY), make_record(TODAY - timedelta(days=1))]
        result = engine.generate(goal, records, today=TODAY).to_dict()

        assert result['goal_id'] == goal.id
        assert result['current_streak'] == 2
        assert result['progress_percentage'] == 33
        assert result['weekly_history'] == [{'week': "2024-06-10", 'value': 2.0}]
        assert len(result['recommendations']) <= 3
