#!/usr/bin/env python3
"""
Goal Insight Engine

Turns a goal and its progress log into a read-only insight report: activity
streak, weekly pace, trend, remaining workload, a projected completion and a
tiered success probability, plus up to three ranked recommendations.

All functions are pure. The reference date is passed in explicitly (defaulting
to today) so that results are reproducible.
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np

from .interface import TrendDirection
from .helper import week_start
from ..storage.model import GoalModel, GoalProgressRecord, GoalCategory, FrequencyMetric
from .. import const


@dataclass(frozen=True)
class Trend:
    direction: TrendDirection
    description: str
    change_percent: Optional[float] = None


@dataclass(frozen=True)
class InsightRecommendation:
    """A ranked, human readable suggestion"""
    kind: str
    title: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {'kind': self.kind, 'title': self.title, 'description': self.description}


@dataclass
class WeeklyBucket:
    week_start: date
    value: float


@dataclass
class GoalInsight:
    """Insight report of one goal"""
    goal_id: str
    current_streak: int
    weekly_average: float
    best_week: float
    improvement_rate: float
    trend: Trend
    progress_percentage: float
    days_remaining: Optional[int]
    remaining_progress: float
    required_weekly_rate: float
    projected_completion: str
    success_probability: int
    recommendations: List[InsightRecommendation] = field(default_factory=list)
    weekly_history: List[WeeklyBucket] = field(default_factory=list)
    target_unit: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'goal_id': self.goal_id,
            'current_streak': self.current_streak,
            'weekly_average': round(self.weekly_average, 1),
            'best_week': round(self.best_week, 1),
            'improvement_rate': round(self.improvement_rate, 1),
            'trend': self.trend.direction.value,
            'trend_description': self.trend.description,
            'progress_percentage': round(self.progress_percentage),
            'days_remaining': self.days_remaining,
            'remaining_progress': round(self.remaining_progress, 2),
            'required_weekly_rate': round(self.required_weekly_rate, 1),
            'projected_completion': self.projected_completion,
            'success_probability': self.success_probability,
            'recommendations': [r.to_dict() for r in self.recommendations],
            'weekly_history': [
                {'week': b.week_start.isoformat(), 'value': b.value} for b in self.weekly_history
            ],
            'target_unit': self.target_unit,
        }


def calculate_streak(records: Iterable[GoalProgressRecord], today: date) -> int:
    """Consecutive days with progress, counted back from today"""
    active_days = {record.activity_date for record in records}
    streak = 0
    day = today
    while day in active_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def weekly_buckets(records: Iterable[GoalProgressRecord], today: date) -> List[WeeklyBucket]:
    """Contributions per Monday-starting week, zero-filled through the reference week"""
    totals: Dict[date, float] = defaultdict(float)
    for record in records:
        totals[week_start(record.activity_date)] += record.contribution_amount
    if not totals:
        return []

    first = min(totals)
    last = max(max(totals), week_start(today))
    buckets = []
    week = first
    while week <= last:
        buckets.append(WeeklyBucket(week_start=week, value=totals.get(week, 0.0)))
        week += timedelta(days=7)
    return buckets


def detect_trend(values: Sequence[float]) -> Trend:
    """
    Compare the latest periods against the ones just before them.

    The window is three periods, shrunk to half the history when fewer than six
    periods exist. A change beyond ±10% counts as improving/declining.
    """
    if len(values) < 2:
        return Trend(TrendDirection.STABLE, "Need more data")

    window = min(const.TREND_WINDOW, len(values) // 2)
    recent = float(np.mean(values[-window:]))
    earlier = float(np.mean(values[-2 * window:-window]))

    if earlier == 0:
        if recent > 0:
            return Trend(TrendDirection.IMPROVING, "New activity vs previous period")
        return Trend(TrendDirection.STABLE, "No activity in recent periods")

    change = (recent - earlier) / earlier * 100
    if change > const.TREND_THRESHOLD_PERCENT:
        return Trend(TrendDirection.IMPROVING, f"+{change:.1f}% vs previous period", change)
    if change < -const.TREND_THRESHOLD_PERCENT:
        return Trend(TrendDirection.DECLINING, f"{change:.1f}% vs previous period", change)
    return Trend(TrendDirection.STABLE, "Consistent performance", change)


def improvement_rate(values: Sequence[float]) -> float:
    """Percent change from the first to the last period"""
    if len(values) < 2 or values[0] <= 0:
        return 0.0
    return (values[-1] - values[0]) / values[0] * 100


def success_probability(weekly_average: float, required_weekly_rate: float) -> int:
    """Tiered probability of finishing on time from the pace ratio"""
    if required_weekly_rate <= 0:
        return const.SUCCESS_PROBABILITY_TIERS[0][1]
    ratio = weekly_average / required_weekly_rate
    for minimum_ratio, probability in const.SUCCESS_PROBABILITY_TIERS:
        if ratio >= minimum_ratio:
            return probability
    return const.SUCCESS_PROBABILITY_FLOOR


def format_projected_completion(days_to_complete: float) -> str:
    if days_to_complete <= 0:
        return "Already achieved"
    if days_to_complete < 7:
        return f"{math.ceil(days_to_complete)} days"
    if days_to_complete < 30:
        return f"{math.ceil(days_to_complete / 7)} weeks"
    return f"{math.ceil(days_to_complete / 30)} months"


def is_frequency_goal(goal: GoalModel) -> bool:
    return goal.category is GoalCategory.FREQUENCY or isinstance(goal.metric, FrequencyMetric)


class GoalInsightEngine:
    """Builds GoalInsight reports"""

    def generate(self,
                 goal: GoalModel,
                 records: Iterable[GoalProgressRecord],
                 today: Optional[date] = None) -> GoalInsight:
        today = today or date.today()
        records = list(records)

        days_active = max(1, (today - goal.created_at.date()).days)
        weeks_active = max(1, days_active // 7)
        weekly_average = goal.current_progress / weeks_active

        history = weekly_buckets(records, today)
        values = [bucket.value for bucket in history]
        trend = detect_trend(values)
        best_week = max(values) if values else weekly_average

        days_remaining = None
        if goal.target_date is not None:
            days_remaining = max(0, (goal.target_date - today).days)

        remaining = max(0.0, goal.target_value - goal.current_progress) if goal.has_target else 0.0
        remaining_weeks = (max(1, days_remaining // 7) if days_remaining is not None
                           else const.ONGOING_GOAL_WEEKS)
        required_rate = remaining / remaining_weeks

        if not goal.has_target or goal.target_date is None:
            probability = const.NEUTRAL_SUCCESS_PROBABILITY
        else:
            probability = success_probability(weekly_average, required_rate)

        if goal.has_target and remaining <= 0:
            projected = format_projected_completion(0)
        elif goal.has_target and weekly_average > 0:
            projected = format_projected_completion(remaining / weekly_average * 7)
        else:
            projected = "Unable to calculate"

        insight = GoalInsight(
            goal_id=goal.id,
            current_streak=calculate_streak(records, today),
            weekly_average=weekly_average,
            best_week=best_week,
            improvement_rate=improvement_rate(values),
            trend=trend,
            progress_percentage=goal.progress_percentage,
            days_remaining=days_remaining,
            remaining_progress=remaining,
            required_weekly_rate=required_rate,
            projected_completion=projected,
            success_probability=probability,
            weekly_history=history,
            target_unit=goal.target_unit,
        )
        insight.recommendations = self.recommendations(goal, insight)
        return insight

    @staticmethod
    def recommendations(goal: GoalModel, insight: GoalInsight) -> List[InsightRecommendation]:
        """Recommendations in fixed priority order, at most three"""
        recommendations = []
        if insight.progress_percentage < const.LOW_PROGRESS_PERCENT:
            recommendations.append(InsightRecommendation(
                "low_progress", "Start Small",
                "Break this goal into smaller weekly targets to build momentum and consistency."))
        if insight.trend.direction is TrendDirection.DECLINING:
            recommendations.append(InsightRecommendation(
                "declining_trend", "Reverse the Trend",
                "Your progress has been declining. Consider adjusting your training schedule "
                "or reducing the target temporarily."))
        if insight.success_probability < 50:
            recommendations.append(InsightRecommendation(
                "low_probability", "Adjust Expectations",
                "Based on current progress, consider extending the timeline or reducing the "
                "target to maintain motivation."))
        if (goal.has_target and insight.remaining_progress > 0
                and insight.weekly_average > insight.required_weekly_rate * const.AHEAD_OF_PACE_FACTOR):
            recommendations.append(InsightRecommendation(
                "ahead_of_pace", "Ahead of Schedule",
                "Great work! You're exceeding your target pace. Consider setting a more "
                "ambitious goal."))
        if is_frequency_goal(goal):
            recommendations.append(InsightRecommendation(
                "schedule", "Schedule Consistency",
                "Plan your sessions for specific days of the week to build a sustainable routine."))
        return recommendations[:const.MAX_RECOMMENDATIONS]
