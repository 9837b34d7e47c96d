# backend/soc_analyst/services/events/event_store_service.py

from typing import Callable, List, Optional
from datetime import datetime
import logging
import uuid

from sqlalchemy.orm import Session, sessionmaker

from soc_analyst.schemas.events import (
    EventIngestRequest,
    SecurityEvent,
    SecurityEventMetadata,
)
from soc_analyst.models.security_event import SecurityEventRecord
from soc_analyst.db.session import SessionLocal

logger = logging.getLogger(__name__)


def _to_event(record: SecurityEventRecord) -> SecurityEvent:
    metadata = (
        SecurityEventMetadata.model_validate(record.event_metadata)
        if record.event_metadata
        else None
    )
    return SecurityEvent(
        id=record.id,
        timestamp=record.timestamp,
        event_type=record.event_type,
        severity=record.severity,
        source=record.source,
        destination=record.destination,
        user=record.user,
        description=record.description,
        action=record.action,
        status=record.status,
        category=record.category,
        rule_name=record.rule_name,
        tactic=record.tactic,
        technique=record.technique,
        raw_log=record.raw_log,
        metadata=metadata,
    )


class EventStoreService:
    """
    DB-backed security event corpus (Postgres via SQLAlchemy).

    The analyst engine only reads from it: `list_events` returns the whole
    corpus newest first and `filter_events` narrows it with a predicate.
    `store_event` is the ingestion path used by the events API.
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal) -> None:
        self._session_factory = session_factory

    def _get_db(self) -> Session:
        return self._session_factory()

    # --------------------------------------------------------
    # Create / store
    # --------------------------------------------------------
    def store_event(self, payload: EventIngestRequest) -> SecurityEvent:
        """
        Persist a new event and return it with its generated id.
        """
        db = self._get_db()
        try:
            record = SecurityEventRecord(
                id=str(uuid.uuid4()),
                timestamp=payload.timestamp or datetime.utcnow(),
                event_type=payload.event_type,
                severity=payload.severity.value,    # Enum -> str
                source=payload.source,
                destination=payload.destination,
                user=payload.user,
                description=payload.description,
                action=payload.action,
                status=payload.status,
                category=payload.category,
                rule_name=payload.rule_name,
                tactic=payload.tactic,
                technique=payload.technique,
                raw_log=payload.raw_log,
                event_metadata=(
                    payload.metadata.model_dump(mode="json", exclude_none=True)
                    if payload.metadata
                    else None
                ),
                created_at=datetime.utcnow(),
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            logger.info(
                "Stored security event %s (%s / %s)",
                record.id, record.event_type, record.severity,
            )
            return _to_event(record)
        finally:
            db.close()

    # --------------------------------------------------------
    # Read single
    # --------------------------------------------------------
    def get_event(self, event_id: str) -> Optional[SecurityEvent]:
        db = self._get_db()
        try:
            record = (
                db.query(SecurityEventRecord)
                .filter(SecurityEventRecord.id == event_id)
                .one_or_none()
            )
            return _to_event(record) if record else None
        finally:
            db.close()

    # --------------------------------------------------------
    # Read list
    # --------------------------------------------------------
    def list_events(self) -> List[SecurityEvent]:
        """
        Return every event ordered by timestamp desc (most recent first).
        """
        db = self._get_db()
        try:
            q = (
                db.query(SecurityEventRecord)
                .order_by(
                    SecurityEventRecord.timestamp.desc(),
                    SecurityEventRecord.created_at.desc(),
                )
            )
            return [_to_event(r) for r in q]
        finally:
            db.close()

    def filter_events(
        self, predicate: Callable[[SecurityEvent], bool]
    ) -> List[SecurityEvent]:
        """
        Events matching `predicate`, keeping the most-recent-first order.
        """
        return [e for e in self.list_events() if predicate(e)]


event_store_service = EventStoreService()
