# backend/soc_analyst/models/security_event.py
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text

from soc_analyst.db.base_class import Base, JSONType


class SecurityEventRecord(Base):
    __tablename__ = "security_events"

    id = Column(String, primary_key=True, index=True)   # store UUID as string
    timestamp = Column(DateTime, index=True, nullable=False)
    event_type = Column(String, index=True, nullable=False)
    severity = Column(String, index=True, nullable=False)
    source = Column(String, index=True, nullable=False)
    destination = Column(String, nullable=True)
    user = Column(String, nullable=True)
    description = Column(Text, nullable=False)

    action = Column(String, nullable=True)
    status = Column(String, nullable=True)
    category = Column(String, index=True, nullable=True)
    rule_name = Column(String, nullable=True)
    tactic = Column(String, nullable=True)
    technique = Column(String, nullable=True)
    raw_log = Column(Text, nullable=True)

    # "metadata" is reserved on declarative classes
    event_metadata = Column("metadata", JSONType, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
