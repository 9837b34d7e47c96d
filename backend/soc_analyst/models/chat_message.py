# backend/soc_analyst/models/chat_message.py
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from soc_analyst.db.base_class import Base, JSONType


class ChatMessageRecord(Base):
    __tablename__ = "ai_chat_messages"

    id = Column(String, primary_key=True, index=True)
    session_id = Column(
        String,
        ForeignKey("ai_analysis_sessions.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    user_id = Column(String, nullable=True)
    role = Column(String, nullable=False)       # user | assistant | system
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow, index=True, nullable=False)

    # per-session insertion counter, breaks timestamp ties
    sequence = Column(Integer, nullable=False, default=0)

    context = Column(JSONType, nullable=True)   # {"event_ids": [...], "filters": {...}}
    token_count = Column(Integer, nullable=True)

    session = relationship("AnalysisSessionRecord", back_populates="messages")
