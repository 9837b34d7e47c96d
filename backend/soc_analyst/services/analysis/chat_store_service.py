# backend/soc_analyst/services/analysis/chat_store_service.py

from typing import List, Optional
from datetime import datetime
import logging
import uuid

from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker

from soc_analyst.db.session import SessionLocal
from soc_analyst.models.analysis_session import AnalysisSessionRecord
from soc_analyst.models.chat_message import ChatMessageRecord
from soc_analyst.schemas.analysis import (
    DEFAULT_SESSION_TITLE,
    MESSAGE_TYPES,
    AnalysisSession,
    ChatMessage,
    MessageContext,
    SessionStatus,
)

logger = logging.getLogger(__name__)


def _to_session(record: AnalysisSessionRecord) -> AnalysisSession:
    return AnalysisSession.model_validate(record)


def _to_message(record: ChatMessageRecord) -> ChatMessage:
    fields = dict(
        id=record.id,
        session_id=record.session_id,
        user_id=record.user_id,
        content=record.content,
        timestamp=record.timestamp,
        context=MessageContext.model_validate(record.context) if record.context else None,
    )
    if record.role == "assistant":
        fields["token_count"] = record.token_count or 0
    return MESSAGE_TYPES[record.role](**fields)


class ChatStoreService:
    """
    Durable analysis sessions and their ordered chat turns.

    Messages are append-only. Sessions only ever change title / status,
    with a plain single-row update (last write wins).
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal) -> None:
        self._session_factory = session_factory

    def _get_db(self) -> Session:
        return self._session_factory()

    # --------------------------------------------------------
    # Sessions
    # --------------------------------------------------------
    def create_session(
        self,
        user_id: Optional[str] = None,
        title: Optional[str] = None,
        status: str = SessionStatus.ACTIVE.value,
    ) -> AnalysisSession:
        db = self._get_db()
        try:
            now = datetime.utcnow()
            record = AnalysisSessionRecord(
                id=str(uuid.uuid4()),
                user_id=user_id,
                title=title or DEFAULT_SESSION_TITLE,
                status=status,
                created_at=now,
                updated_at=now,
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            logger.info("Created analysis session %s", record.id)
            return _to_session(record)
        finally:
            db.close()

    def get_session(self, session_id: str) -> Optional[AnalysisSession]:
        db = self._get_db()
        try:
            record = db.get(AnalysisSessionRecord, session_id)
            return _to_session(record) if record else None
        finally:
            db.close()

    def list_sessions(self, user_id: Optional[str] = None) -> List[AnalysisSession]:
        """
        Sessions ordered by updated_at desc; only `user_id`'s when given.
        """
        db = self._get_db()
        try:
            q = db.query(AnalysisSessionRecord)
            if user_id:
                q = q.filter(AnalysisSessionRecord.user_id == user_id)
            q = q.order_by(AnalysisSessionRecord.updated_at.desc())
            return [_to_session(r) for r in q]
        finally:
            db.close()

    def update_session(
        self,
        session_id: str,
        title: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Optional[AnalysisSession]:
        db = self._get_db()
        try:
            record = db.get(AnalysisSessionRecord, session_id)
            if record is None:
                return None
            if title is not None:
                record.title = title
            if status is not None:
                record.status = status
            record.updated_at = datetime.utcnow()
            db.commit()
            db.refresh(record)
            return _to_session(record)
        finally:
            db.close()

    # --------------------------------------------------------
    # Messages
    # --------------------------------------------------------
    def list_messages(self, session_id: str) -> List[ChatMessage]:
        """
        All turns of a session, oldest first. Unknown sessions give [].
        """
        db = self._get_db()
        try:
            q = (
                db.query(ChatMessageRecord)
                .filter(ChatMessageRecord.session_id == session_id)
                .order_by(ChatMessageRecord.timestamp, ChatMessageRecord.sequence)
            )
            return [_to_message(r) for r in q]
        finally:
            db.close()

    def create_message(
        self,
        session_id: str,
        role: str,
        content: str,
        user_id: Optional[str] = None,
        context: Optional[MessageContext] = None,
        token_count: Optional[int] = None,
    ) -> ChatMessage:
        if role not in MESSAGE_TYPES:
            raise ValueError(f"Unknown chat role: {role}")

        db = self._get_db()
        try:
            last_sequence = (
                db.query(func.max(ChatMessageRecord.sequence))
                .filter(ChatMessageRecord.session_id == session_id)
                .scalar()
            )
            record = ChatMessageRecord(
                id=str(uuid.uuid4()),
                session_id=session_id,
                user_id=user_id,
                role=role,
                content=content,
                timestamp=datetime.utcnow(),
                sequence=(last_sequence or 0) + 1,
                context=(
                    context.model_dump(mode="json", exclude_none=True)
                    if context
                    else None
                ),
                token_count=token_count if role == "assistant" else None,
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            return _to_message(record)
        finally:
            db.close()


chat_store_service = ChatStoreService()
