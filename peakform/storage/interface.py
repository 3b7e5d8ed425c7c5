#!/usr/bin/env python3
"""
Repository interfaces - separate the analytics core from where sessions and goals live

The analytics core only reads through these contracts. Implementations translate
backend failures into ``RepositoryError`` subclasses that tell the caller whether
a retry makes sense; the core itself never retries.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum

from .model import SessionModel, GoalModel, GoalProgressRecord


class DataType(Enum):
    """Kinds of stored documents"""

    SESSION = "session"
    GOAL = "goal"
    GOAL_PROGRESS = "goal_progress"


@dataclass
class DocumentQuery:
    """Exact-match lookup of the documents owned by one user or one goal"""

    terms: Dict[str, Any] = field(default_factory=dict)
    order_by: List[Tuple[str, bool]] = field(default_factory=list)  # (field, ascending)
    size: int = 1000

    def where(self, field_name: str, value: Any) -> "DocumentQuery":
        self.terms[field_name] = value
        return self

    def sort(self, field_name: str, ascending: bool = True) -> "DocumentQuery":
        self.order_by.append((field_name, ascending))
        return self

    def limit(self, size: int) -> "DocumentQuery":
        self.size = size
        return self


class RepositoryError(Exception):
    """Base exception for repository reads"""

    retryable = False

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class RepositoryUnavailableError(RepositoryError):
    """
    Raised when the backend cannot be reached.

    Examples:
    - Connection refused or reset
    - Request timeout
    - Server-side (5xx) errors
    """

    retryable = True


class MalformedDataError(RepositoryError):
    """
    Raised when stored data cannot be interpreted.

    Retrying returns the same documents, so this is never retryable.
    """

    retryable = False


class SessionRepository(ABC):
    """Read-only source of an athlete's sessions"""

    @abstractmethod
    def get_sessions(self, user_id: str) -> List[SessionModel]:
        """Return every session recorded for the athlete"""
        pass


class GoalRepository(ABC):
    """Read-only source of goals and their progress logs"""

    @abstractmethod
    def get_goals(self, user_id: str) -> List[GoalModel]:
        """Return all goals of the user"""
        pass

    @abstractmethod
    def get_goal(self, goal_id: str) -> Optional[GoalModel]:
        """Return a single goal, or None when it does not exist"""
        pass

    @abstractmethod
    def get_progress_records(self, goal_id: str) -> List[GoalProgressRecord]:
        """Return the goal's progress log ordered by activity date"""
        pass
