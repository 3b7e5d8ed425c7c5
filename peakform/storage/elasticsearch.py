#!/usr/bin/env python3
"""
Elasticsearch repository - read-only SessionRepository and GoalRepository backed by three indices

Client failures are mapped onto the repository error taxonomy:
- transport level failures (connection refused, timeouts) and 5xx responses
  raise RepositoryUnavailableError, which is worth retrying
- other API errors and documents that fail model validation raise
  MalformedDataError, which is not
"""
from elasticsearch import Elasticsearch, ApiError, NotFoundError, TransportError
from pydantic import BaseModel, ValidationError
from typing import Dict, List, Any, Optional, Type, TypeVar

from .interface import (
    SessionRepository, GoalRepository, DataType, DocumentQuery,
    RepositoryError, RepositoryUnavailableError, MalformedDataError
)
from .model import SessionModel, GoalModel, GoalProgressRecord
from ..config import ElasticsearchSettings, get_settings
from ..utils import get_logger


logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ElasticsearchRepository(SessionRepository, GoalRepository):
    """Sessions, goals and goal progress read from Elasticsearch"""

    def __init__(self, es: Elasticsearch, settings: Optional[ElasticsearchSettings] = None):
        """
        Args:
            es: Configured Elasticsearch client
            settings: Index names and fetch limit, read from the environment when omitted
        """
        self.es = es
        self.settings = settings or get_settings().elasticsearch
        self.index_names = {
            DataType.SESSION: self.settings.session_index,
            DataType.GOAL: self.settings.goal_index,
            DataType.GOAL_PROGRESS: self.settings.progress_index,
        }

    @classmethod
    def from_settings(cls, settings: Optional[ElasticsearchSettings] = None) -> "ElasticsearchRepository":
        settings = settings or get_settings().elasticsearch
        logger.info(f"🔌 Connecting to Elasticsearch at {settings.host}")
        return cls(Elasticsearch(**settings.to_dict()), settings)

    def get_sessions(self, user_id: str) -> List[SessionModel]:
        sessions = self._read_all(DataType.SESSION, SessionModel,
                                  self._owned_by("user_id", user_id).sort("start_time"))
        logger.debug(f"📋 Loaded {len(sessions)} sessions for user {user_id}")
        return sessions

    def get_goals(self, user_id: str) -> List[GoalModel]:
        return self._read_all(DataType.GOAL, GoalModel,
                              self._owned_by("user_id", user_id).sort("created_at"))

    def get_goal(self, goal_id: str) -> Optional[GoalModel]:
        document = self.fetch_document(DataType.GOAL, goal_id)
        if document is None:
            return None
        # Goal documents are keyed by _id and may not repeat it in the body
        document.setdefault("id", goal_id)
        return self._parse(GoalModel, document)

    def get_progress_records(self, goal_id: str) -> List[GoalProgressRecord]:
        return self._read_all(DataType.GOAL_PROGRESS, GoalProgressRecord,
                              self._owned_by("goal_id", goal_id).sort("activity_date"))

    def _owned_by(self, field_name: str, value: str) -> DocumentQuery:
        return DocumentQuery().where(field_name, value).limit(self.settings.fetch_limit)

    def _read_all(self, data_type: DataType, model: Type[ModelT], query: DocumentQuery) -> List[ModelT]:
        return [self._parse(model, doc) for doc in self.find_documents(data_type, query)]

    def find_documents(self, data_type: DataType, query: DocumentQuery) -> List[Dict[str, Any]]:
        """Return the _source of every hit of the query"""
        index_name = self.index_names[data_type]
        try:
            response = self.es.search(index=index_name, size=query.size, **self.search_body(query))
        except (ApiError, TransportError) as e:
            raise self._translate_error(e, f"Search on {index_name} failed") from e

        try:
            return [hit['_source'] for hit in response['hits']['hits']]
        except (KeyError, TypeError) as e:
            raise MalformedDataError(f"Unexpected search response from {index_name}",
                                     {'error': str(e)}) from e

    def fetch_document(self, data_type: DataType, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return one document's _source, or None when the id is unknown"""
        index_name = self.index_names[data_type]
        try:
            response = self.es.get(index=index_name, id=doc_id)
        except NotFoundError:
            return None
        except (ApiError, TransportError) as e:
            raise self._translate_error(e, f"Get {doc_id} from {index_name} failed") from e
        return dict(response['_source'])

    @staticmethod
    def search_body(query: DocumentQuery) -> Dict[str, Any]:
        """Search keyword arguments: a filter-only bool query plus sort clauses"""
        if query.terms:
            body: Dict[str, Any] = {
                "query": {"bool": {"filter": [{"term": {k: v}} for k, v in query.terms.items()]}}
            }
        else:
            body = {"query": {"match_all": {}}}
        if query.order_by:
            body["sort"] = [{name: {"order": "asc" if ascending else "desc"}}
                            for name, ascending in query.order_by]
        return body

    @staticmethod
    def _parse(model: Type[ModelT], document: Dict[str, Any]) -> ModelT:
        try:
            return model.model_validate(document)
        except ValidationError as e:
            logger.error(f"❌ Malformed {model.__name__} document {document.get('id')}: "
                         f"{e.error_count()} errors")
            raise MalformedDataError(f"Malformed {model.__name__} document",
                                     {'id': document.get('id'), 'errors': e.error_count()}) from e

    @staticmethod
    def _translate_error(error: Exception, message: str) -> RepositoryError:
        if isinstance(error, TransportError):
            logger.error(f"❌ {message}: {error}")
            return RepositoryUnavailableError(message, {'error': str(error)})

        status = getattr(error, 'status_code', None)
        logger.error(f"❌ {message} (status {status}): {error}")
        if status is not None and status >= 500:
            return RepositoryUnavailableError(message, {'status': status})
        return MalformedDataError(message, {'status': status})
