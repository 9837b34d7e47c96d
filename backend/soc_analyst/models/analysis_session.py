# backend/soc_analyst/models/analysis_session.py
from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from soc_analyst.db.base_class import Base


class AnalysisSessionRecord(Base):
    __tablename__ = "ai_analysis_sessions"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=True)
    title = Column(String, nullable=False)
    status = Column(String, nullable=False, default="active")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, index=True, nullable=False)

    messages = relationship(
        "ChatMessageRecord",
        back_populates="session",
        cascade="all, delete-orphan",
    )
