#!/usr/bin/env python3
"""
In-memory repository implementation - for callers that already hold the data
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .interface import SessionRepository, GoalRepository
from .model import SessionModel, GoalModel, GoalProgressRecord


class InMemorySessionRepository(SessionRepository):
    """Sessions kept in a dict keyed by user id"""

    def __init__(self, sessions: Iterable[SessionModel] = ()):
        self._sessions: Dict[str, List[SessionModel]] = defaultdict(list)
        for session in sessions:
            self.add(session)

    def add(self, session: SessionModel) -> None:
        self._sessions[session.user_id or ""].append(session)

    def get_sessions(self, user_id: str) -> List[SessionModel]:
        return list(self._sessions.get(user_id, []))


class InMemoryGoalRepository(GoalRepository):
    """Goals and progress logs kept in dicts"""

    def __init__(self,
                 goals: Iterable[GoalModel] = (),
                 progress: Optional[Dict[str, List[GoalProgressRecord]]] = None):
        self._goals: Dict[str, GoalModel] = {}
        self._progress: Dict[str, List[GoalProgressRecord]] = defaultdict(list)
        for goal in goals:
            self._goals[goal.id] = goal
        for goal_id, records in (progress or {}).items():
            self._progress[goal_id].extend(records)

    def add_progress(self, goal_id: str, record: GoalProgressRecord) -> None:
        self._progress[goal_id].append(record)

    def get_goals(self, user_id: str) -> List[GoalModel]:
        return [goal for goal in self._goals.values() if goal.user_id == user_id]

    def get_goal(self, goal_id: str) -> Optional[GoalModel]:
        return self._goals.get(goal_id)

    def get_progress_records(self, goal_id: str) -> List[GoalProgressRecord]:
        return sorted(self._progress.get(goal_id, []), key=lambda r: r.activity_date)
