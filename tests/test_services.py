#!/usr/bin/env python3
"""
Test suite for the zone analysis, goal and training load services.

Services are exercised against the in-memory repositories; repository failures
are simulated with mocks.
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from peakform.analytics.interface import (
    Confidence, ZoneModelType, InvalidParameterError, GoalNotFoundError
)
from peakform.services import (
    ZoneAnalysisService, GoalService, TrainingLoadService, CustomZoneRequest
)
from peakform.storage import (
    InMemorySessionRepository, InMemoryGoalRepository, SessionRepository, GoalRepository,
    RepositoryUnavailableError, MalformedDataError
)
from conftest import TODAY, make_goal, make_session, make_record


@pytest.fixture
def session_repository(heart_rate_history):
    return InMemorySessionRepository(heart_rate_history)


@pytest.fixture
def failing_sessions():
    repository = Mock(spec=SessionRepository)
    repository.get_sessions.side_effect = RepositoryUnavailableError("Search on fitness-sessions failed")
    return repository


class TestZoneAnalysisService:
    """Test zone analysis entry points"""

    def test_analyze_user_zones(self, session_repository):
        result = ZoneAnalysisService(session_repository).analyze_user_zones("athlete-1")

        assert result.confidence is Confidence.HIGH
        assert result.overall.total_sessions == 30

    def test_unknown_user_gets_defaults(self, session_repository):
        result = ZoneAnalysisService(session_repository).analyze_user_zones("nobody")

        assert result.overall.total_sessions == 0
        assert result.needs_more_data is True

    def test_custom_request_from_camel_case(self, session_repository):
        service = ZoneAnalysisService(session_repository)
        result = service.analyze_custom_zones(
            "athlete-1", {'maxHeartRate': 200, 'zoneModel': "3-zone", 'sportFilter': "Run"})

        assert result.is_custom is True
        assert result.suggested_model.model_type is ZoneModelType.THREE_ZONE
        assert result.suggested_model.zones[-1].max_hr == 200
        assert result.custom_parameters['sport_filter'] == "Run"

    def test_custom_request_model(self, session_repository):
        request = CustomZoneRequest(zone_model="coggan")
        result = ZoneAnalysisService(session_repository).analyze_custom_zones("athlete-1", request)
        assert result.suggested_model.model_type is ZoneModelType.COGGAN

    def test_custom_defaults(self, session_repository):
        result = ZoneAnalysisService(session_repository).analyze_custom_zones("athlete-1")

        assert result.is_custom is True
        assert result.custom_parameters['zone_model'] == "5-zone"

    @pytest.mark.parametrize("request_data", [
        {'maxHeartRate': 300},
        {'maxHeartRate': 80},
        {'zoneModel': "polarized"},
        {'maxHeartRate': "fast"},
        {'unexpected': 1},
    ])
    def test_invalid_request_rejected_before_fetch(self, request_data):
        """Test that invalid overrides fail without touching the repository"""
        sessions = Mock(spec=SessionRepository)
        service = ZoneAnalysisService(sessions)

        with pytest.raises(InvalidParameterError):
            service.analyze_custom_zones("athlete-1", request_data)
        sessions.get_sessions.assert_not_called()

    def test_repository_error_propagates(self, failing_sessions):
        service = ZoneAnalysisService(failing_sessions)

        with pytest.raises(RepositoryUnavailableError) as exc_info:
            service.analyze_user_zones("athlete-1")
        assert exc_info.value.retryable is True


class TestGoalService:
    """Test goal analytics, recommendations, insights and recalculation"""

    @pytest.fixture
    def goals(self):
        return [
            make_goal(id="distance", metric={'kind': "distance"}, target_value=100,
                      current_progress=10, target_date=TODAY + timedelta(days=28)),
            make_goal(id="zone", category="performance", metric={'kind': "zone", 'zone_number': 3},
                      target_value=60),
            make_goal(id="done", is_active=False, is_completed=True, target_value=5,
                      current_progress=5),
            make_goal(id="other-user", user_id="athlete-2"),
        ]

    @pytest.fixture
    def service(self, goals):
        sessions = [make_session(TODAY - timedelta(days=i), distance=8000, moving_time=1800,
                                 average_heart_rate=140, max_heart_rate=180)
                    for i in range(6)]
        progress = {'distance': [make_record(TODAY - timedelta(days=i), 8.0) for i in range(3)]}
        return GoalService(InMemoryGoalRepository(goals, progress), InMemorySessionRepository(sessions))

    def test_goal_analytics(self, service):
        analytics = service.get_goal_analytics("athlete-1")

        assert analytics.total_goals == 3
        assert analytics.active_goals == 2
        assert analytics.completed_goals == 1

    def test_goal_recommendations(self, service):
        recommendations = service.get_goal_recommendations("athlete-1", today=TODAY)

        assert recommendations[0].id == "setup_dashboard"
        assert "review_progress" in [r.id for r in recommendations]

    def test_goal_insights(self, service):
        insight = service.get_goal_insights("distance", today=TODAY)

        assert insight.goal_id == "distance"
        assert insight.current_streak == 3

    def test_missing_goal(self, service):
        with pytest.raises(GoalNotFoundError):
            service.get_goal_insights("missing", today=TODAY)

    def test_missing_goal_is_invalid_parameter(self, service):
        with pytest.raises(InvalidParameterError):
            service.get_goal_insights("missing", today=TODAY)

    def test_recalculate_all_progress(self, service, goals):
        result = service.recalculate_all_progress("athlete-1", today=TODAY)
        updates = {u.goal_id: u for u in result.updates}

        assert result.updated_count == 2
        assert set(updates) == {"distance", "zone"}
        assert updates["distance"].current_progress == pytest.approx(48.0)
        # max HR 180 puts 140 bpm in zone 3 (126-144)
        assert updates["zone"].current_progress == pytest.approx(180.0)
        assert updates["zone"].is_completed is True
        assert goals[0].current_progress == 10

    def test_recalculation_repeatable(self, service):
        first = service.recalculate_all_progress("athlete-1", today=TODAY).to_dict()
        second = service.recalculate_all_progress("athlete-1", today=TODAY).to_dict()
        assert first == second

    def test_repository_errors_propagate(self, failing_sessions):
        goals = Mock(spec=GoalRepository)
        goals.get_goals.return_value = []
        goals.get_goal.side_effect = MalformedDataError("Malformed GoalModel document")
        service = GoalService(goals, failing_sessions)

        with pytest.raises(RepositoryUnavailableError):
            service.recalculate_all_progress("athlete-1", today=TODAY)
        with pytest.raises(MalformedDataError) as exc_info:
            service.get_goal_insights("g1", today=TODAY)
        assert exc_info.value.retryable is False


class TestTrainingLoadService:
    """Test the training load report"""

    def test_report(self, session_repository):
        report = TrainingLoadService(session_repository).get_training_load("athlete-1")

        assert len(report.sessions) == 30
        assert len(report.daily) == 30
        assert report.thresholds.max_heart_rate == 184
        assert report.metrics.status in {'peak', 'build', 'maintain', 'recover'}

        result = report.to_dict()
        assert set(result) == {'thresholds', 'sessions', 'daily', 'metrics'}
        assert result['daily'][0]['date'] < result['daily'][-1]['date']

    def test_repository_error_propagates(self, failing_sessions):
        with pytest.raises(RepositoryUnavailableError):
            TrainingLoadService(failing_sessions).get_training_load("athlete-1")
