#!/usr/bin/env python3
"""
Zone Analysis Service - heart rate zone analysis for a user's stored sessions

Backs the two zone-analysis entry points: the automatic analysis (all
thresholds estimated) and the custom analysis (caller overrides applied).
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..analytics.heart_rate_zones import (
    ZoneModelBuilder, ZoneAnalysisResult, parse_zone_model_type, validate_max_heart_rate
)
from ..analytics.interface import InvalidParameterError
from ..storage.interface import SessionRepository, RepositoryError
from ..utils import get_logger

logger = get_logger(__name__)


class CustomZoneRequest(BaseModel):
    """Overrides accepted by the custom zone analysis"""

    max_heart_rate: Optional[float] = Field(None, alias="maxHeartRate")
    zone_model: str = Field("5-zone", alias="zoneModel")
    sport_filter: Optional[str] = Field(None, alias="sportFilter")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class ZoneAnalysisService:
    """High-level service for heart rate zone analysis"""

    def __init__(self, sessions: SessionRepository, builder: Optional[ZoneModelBuilder] = None):
        """
        Initialize zone analysis service

        Args:
            sessions: Session repository implementation (e.g., ElasticsearchRepository)
            builder: Zone model builder, a default one is created when omitted
        """
        self.sessions = sessions
        self.builder = builder or ZoneModelBuilder()

    def analyze_user_zones(self, user_id: str) -> ZoneAnalysisResult:
        """
        Analyze a user's zones from all stored sessions

        Raises:
            RepositoryError: If sessions cannot be fetched (check ``retryable``)
        """
        logger.info(f"🔍 Starting zone analysis for user {user_id}")
        sessions = self._fetch_sessions(user_id)
        result = self.builder.analyze(sessions)
        logger.info(f"✅ Zone analysis completed for user {user_id}: "
                    f"{result.overall.data_quality.value} data, {result.confidence.value} confidence")
        return result

    def analyze_custom_zones(self,
                             user_id: str,
                             request: Union[CustomZoneRequest, Dict[str, Any], None] = None) -> ZoneAnalysisResult:
        """
        Analyze a user's zones with overrides applied

        Args:
            user_id: User identifier
            request: CustomZoneRequest or a dict using either snake_case or
                camelCase keys (maxHeartRate, zoneModel, sportFilter)

        Raises:
            InvalidParameterError: If the request is invalid, before any data is read
            RepositoryError: If sessions cannot be fetched
        """
        request = self._parse_request(request)
        model_type = parse_zone_model_type(request.zone_model)
        max_heart_rate = (validate_max_heart_rate(request.max_heart_rate)
                          if request.max_heart_rate is not None else None)

        logger.info(f"🔍 Custom zone analysis for user {user_id} "
                    f"(max HR: {max_heart_rate}, model: {model_type.value}, sport: {request.sport_filter})")
        sessions = self._fetch_sessions(user_id)
        result = self.builder.analyze_custom(
            sessions,
            max_heart_rate=max_heart_rate,
            zone_model=model_type,
            sport_filter=request.sport_filter,
        )
        logger.info(f"✅ Custom zone analysis completed for user {user_id}")
        return result

    @staticmethod
    def _parse_request(request) -> CustomZoneRequest:
        if request is None:
            return CustomZoneRequest()
        if isinstance(request, CustomZoneRequest):
            return request
        try:
            return CustomZoneRequest.model_validate(request)
        except ValidationError as e:
            raise InvalidParameterError("Invalid custom zone request",
                                        {'errors': [err['msg'] for err in e.errors()]}) from e

    def _fetch_sessions(self, user_id: str):
        try:
            return self.sessions.get_sessions(user_id)
        except RepositoryError as e:
            logger.error(f"❌ Failed to load sessions for user {user_id} "
                         f"(retryable: {e.retryable}): {e}")
            raise
