# backend/soc_analyst/api/v1/routes_events.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from soc_analyst.api.deps import get_event_store
from soc_analyst.schemas.events import EventFilters, EventIngestRequest, SecurityEvent
from soc_analyst.services.analysis.context_selector import matches_filters
from soc_analyst.services.events.event_store_service import EventStoreService

router = APIRouter(
    prefix="/events",
    tags=["events", "siem"],
)


@router.post(
    "",
    response_model=SecurityEvent,
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_none=True,
    summary="Ingest a security event",
)
def ingest_event(
    payload: EventIngestRequest,
    store: EventStoreService = Depends(get_event_store),
) -> SecurityEvent:
    return store.store_event(payload)


@router.get(
    "",
    response_model=List[SecurityEvent],
    response_model_exclude_none=True,
    summary="List security events",
)
def list_events(
    severity: Optional[str] = None,
    event_type: Optional[str] = Query(None, alias="eventType"),
    source: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = Query(50, ge=1, le=1000),
    store: EventStoreService = Depends(get_event_store),
) -> List[SecurityEvent]:
    """
    Most recent first. Filters combine with AND, the same way they do when
    grounding an analysis turn.
    """
    filters = EventFilters(
        severity=severity, event_type=event_type, source=source, category=category
    )
    return store.filter_events(matches_filters(filters))[:limit]


@router.get(
    "/{event_id}",
    response_model=SecurityEvent,
    response_model_exclude_none=True,
    summary="Get a single security event",
)
def get_event(
    event_id: str,
    store: EventStoreService = Depends(get_event_store),
) -> SecurityEvent:
    event = store.get_event(event_id)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {event_id} not found",
        )
    return event
