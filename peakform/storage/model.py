#!/usr/bin/env python3
"""
Pydantic Data Models for Sessions, Goals and Goal Progress

Sessions tolerate unknown fields so that documents written by other tools can
be read back without losing data, while core numeric fields stay validated.
Goal metrics are a closed set of variants discriminated on ``kind``.
"""

from datetime import datetime, date
from typing import Annotated, Any, Dict, Literal, Optional, Union
from pydantic import BaseModel, Field, ConfigDict, field_validator
from enum import Enum


class SessionModel(BaseModel):
    """A single recorded exercise session (read-only input)"""

    id: str = Field(..., description="Session identifier")
    user_id: Optional[str] = Field(None, description="Owning athlete")
    sport_type: str = Field("Workout", description="Sport category as recorded")
    start_time: datetime = Field(..., description="Session start timestamp")
    moving_time: float = Field(0.0, ge=0, description="Moving duration in seconds")

    distance: Optional[float] = Field(None, ge=0, description="Distance in meters")
    average_heart_rate: Optional[float] = Field(None, ge=0, description="Average heart rate in bpm")
    max_heart_rate: Optional[float] = Field(None, ge=0, description="Maximum heart rate in bpm")
    average_power: Optional[float] = Field(None, ge=0, description="Average power in watts")
    calories: Optional[float] = Field(None, ge=0, description="Energy expenditure in kcal")
    elevation_gain: Optional[float] = Field(None, ge=0, description="Elevation gain in meters")

    model_config = ConfigDict(extra="allow")

    @property
    def has_heart_rate(self) -> bool:
        return bool(self.average_heart_rate) or bool(self.max_heart_rate)

    @property
    def representative_heart_rate(self) -> Optional[float]:
        """Session max heart rate, falling back to the average"""
        if self.max_heart_rate:
            return self.max_heart_rate
        if self.average_heart_rate:
            return self.average_heart_rate
        return None

    @property
    def average_speed(self) -> Optional[float]:
        """Average moving speed in m/s"""
        if not self.distance or not self.moving_time:
            return None
        return self.distance / self.moving_time

    @property
    def activity_date(self) -> date:
        return self.start_time.date()


class GoalCategory(str, Enum):
    """Goal categories"""

    DISTANCE = "distance"
    TIME = "time"
    FREQUENCY = "frequency"
    PACE = "pace"
    EVENT = "event"
    GENERAL = "general"
    HEALTH = "health"
    HABIT = "habit"
    PERFORMANCE = "performance"


class MetricPeriod(str, Enum):
    """Window over which a goal metric is accumulated"""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    OVERALL = "overall"


class _MetricBase(BaseModel):
    period: MetricPeriod = MetricPeriod.OVERALL
    sport_type: Optional[str] = Field(None, description="Only count sessions of this sport")

    model_config = ConfigDict(extra="forbid")


class DistanceMetric(_MetricBase):
    """Distance in kilometers, summed or best single session"""

    kind: Literal["distance"] = "distance"
    aggregation: Literal["sum", "max"] = "sum"


class FrequencyMetric(_MetricBase):
    """Number of sessions"""

    kind: Literal["frequency"] = "frequency"


class TimeMetric(_MetricBase):
    """Moving time in hours"""

    kind: Literal["time"] = "time"


class ElevationMetric(_MetricBase):
    """Elevation gain in meters"""

    kind: Literal["elevation"] = "elevation"


class ZoneMetric(_MetricBase):
    """Minutes spent in a 5-zone heart rate zone"""

    kind: Literal["zone"] = "zone"
    zone_number: int = Field(..., ge=1, le=5)


def _day_only(value: Any) -> Any:
    """Truncate datetimes and ISO timestamp strings to their calendar day"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


GoalMetric = Annotated[
    Union[DistanceMetric, FrequencyMetric, TimeMetric, ElevationMetric, ZoneMetric],
    Field(discriminator="kind"),
]


class GoalModel(BaseModel):
    """A user goal as read from the goal repository"""

    id: str
    user_id: Optional[str] = None
    name: str = ""
    category: GoalCategory = GoalCategory.GENERAL
    metric: Optional[GoalMetric] = None

    target_value: Optional[float] = Field(None, ge=0)
    target_unit: Optional[str] = None
    target_date: Optional[date] = None
    created_at: datetime

    current_progress: float = Field(0.0, ge=0)
    is_active: bool = True
    is_completed: bool = False
    priority: int = Field(1, ge=0)
    show_on_dashboard: bool = False
    creation_context: str = "manual"

    model_config = ConfigDict(extra="allow")

    @field_validator("target_date", mode="before")
    @classmethod
    def truncate_target_date(cls, v):
        return _day_only(v)

    @property
    def has_target(self) -> bool:
        return bool(self.target_value) and self.target_value > 0

    @property
    def is_auto_tracked(self) -> bool:
        return self.metric is not None

    @property
    def progress_percentage(self) -> float:
        if not self.has_target:
            return 0.0
        return min(100.0, self.current_progress / self.target_value * 100)


class GoalProgressRecord(BaseModel):
    """One contribution to a goal's progress (append-only log entry)"""

    activity_date: date
    contribution_amount: float = 0.0
    value_achieved: Optional[float] = None
    source_id: Optional[str] = None

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("activity_date", mode="before")
    @classmethod
    def truncate_activity_date(cls, v):
        """Records may carry the full activity timestamp; only the day counts"""
        return _day_only(v)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'activity_date': self.activity_date.isoformat(),
            'contribution_amount': self.contribution_amount,
            'value_achieved': self.value_achieved,
            'source_id': self.source_id,
        }
