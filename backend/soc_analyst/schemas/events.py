# backend/soc_analyst/schemas/events.py
from typing import List, Optional
from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field

from soc_analyst.schemas.common import CamelModel


class EventSeverity(str, Enum):
    """Closed severity set, most severe first."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    INFO = "Info"


class SecurityEventMetadata(CamelModel):
    """
    Optional per-event detail. Every field is optional and unset fields are
    left out when serialized, so prompt payloads only carry what is known.
    Unknown keys sent at ingestion are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    # Network
    protocol: Optional[str] = None
    source_port: Optional[int] = None
    destination_port: Optional[int] = None
    bytes_in: Optional[int] = None
    bytes_out: Optional[int] = None
    packets_in: Optional[int] = None
    packets_out: Optional[int] = None
    duration: Optional[int] = None

    # Threat intel
    threat_score: Optional[int] = None
    threat_category: Optional[str] = None

    # Geolocation
    source_country: Optional[str] = None
    source_city: Optional[str] = None
    destination_country: Optional[str] = None
    destination_city: Optional[str] = None

    # Host / device
    host_name: Optional[str] = None
    host_os: Optional[str] = None
    device_vendor: Optional[str] = None
    device_product: Optional[str] = None
    mitre_technique: Optional[str] = None
    tags: Optional[List[str]] = None

    # Authentication
    auth_method: Optional[str] = None
    auth_result: Optional[str] = None
    session_id: Optional[str] = None

    # Process
    process_name: Optional[str] = None
    process_id: Optional[int] = None
    parent_process: Optional[str] = None
    command_line: Optional[str] = None

    # File
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    file_hash: Optional[str] = None
    file_size: Optional[int] = None

    # HTTP
    http_method: Optional[str] = None
    http_status_code: Optional[int] = None
    url: Optional[str] = None
    user_agent: Optional[str] = None


class EventIngestRequest(CamelModel):
    """
    Normalized security event as pushed by the SIEM / log pipeline.
    """
    timestamp: Optional[datetime] = Field(
        None,
        description="When the event occurred. If omitted, backend will set to now().",
    )
    event_type: str = Field(..., description="e.g. Malware Detected, SQL Injection Attempt")
    severity: EventSeverity = EventSeverity.LOW
    source: str = Field(..., description="Source host / IP")
    destination: Optional[str] = None
    user: Optional[str] = None
    description: str

    action: Optional[str] = None
    status: Optional[str] = None
    category: Optional[str] = None
    rule_name: Optional[str] = None
    tactic: Optional[str] = Field(None, description="MITRE ATT&CK tactic")
    technique: Optional[str] = Field(None, description="MITRE ATT&CK technique id")
    raw_log: Optional[str] = None

    metadata: Optional[SecurityEventMetadata] = None


class SecurityEvent(EventIngestRequest):
    """A stored, immutable security event."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime


class EventFilters(CamelModel):
    """
    Field filters for context selection. All provided fields must match
    exactly; missing fields match anything.
    """
    severity: Optional[str] = None
    event_type: Optional[str] = None
    source: Optional[str] = None
    category: Optional[str] = None
