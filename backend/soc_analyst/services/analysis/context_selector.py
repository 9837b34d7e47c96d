# backend/soc_analyst/services/analysis/context_selector.py
from typing import Callable, List, Optional, Sequence

from soc_analyst.schemas.analysis import AnalysisMode
from soc_analyst.schemas.events import EventFilters, SecurityEvent


# How many events ground a turn when the caller does not pick them
FILTERED_CONTEXT_LIMIT = 20
DEFAULT_CONTEXT_LIMITS = {
    AnalysisMode.ANALYSIS: 15,
    AnalysisMode.QUICK: 10,
}


def matches_filters(filters: EventFilters) -> Callable[[SecurityEvent], bool]:
    """
    Build a predicate that is true when an event matches every provided
    filter field exactly. Unset fields match anything.
    """

    def _predicate(event: SecurityEvent) -> bool:
        if filters.severity and event.severity.value != filters.severity:
            return False
        if filters.event_type and event.event_type != filters.event_type:
            return False
        if filters.source and event.source != filters.source:
            return False
        if filters.category and event.category != filters.category:
            return False
        return True

    return _predicate


def select_context(
    all_events: Sequence[SecurityEvent],
    event_ids: Optional[Sequence[str]] = None,
    filters: Optional[EventFilters] = None,
    mode: AnalysisMode = AnalysisMode.ANALYSIS,
) -> List[SecurityEvent]:
    """
    Pick the events that ground one conversation turn.

    `all_events` is the corpus as returned by the event store, most recent
    first; the result keeps that order.

      1. explicit event ids -> exactly those events, no cap
      2. filters            -> AND-match, first 20
      3. nothing            -> 15 most recent (analysis) / 10 (quick)

    An empty result is valid and is passed through as-is.
    """
    if event_ids:
        wanted = set(event_ids)
        return [e for e in all_events if e.id in wanted]

    if filters is not None and mode is AnalysisMode.ANALYSIS:
        predicate = matches_filters(filters)
        return [e for e in all_events if predicate(e)][:FILTERED_CONTEXT_LIMIT]

    return list(all_events[: DEFAULT_CONTEXT_LIMITS[mode]])
