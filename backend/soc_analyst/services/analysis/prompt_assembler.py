# backend/soc_analyst/services/analysis/prompt_assembler.py
import json
from typing import Any, Dict, List, Sequence

from soc_analyst.schemas.analysis import AnalysisMode, ChatMessage
from soc_analyst.schemas.events import SecurityEvent


HISTORY_LIMIT = 10

# Roles that are replayed to the model; stored system turns are audit only
REPLAYED_ROLES = ("user", "assistant")

# Event fields shown to the model, keyed by their prompt (camelCase) name
ANALYSIS_EVENT_FIELDS = (
    "id", "timestamp", "eventType", "severity", "source", "destination",
    "user", "description", "action", "status", "category", "tactic",
    "technique", "ruleName", "metadata", "rawLog",
)
QUICK_EVENT_FIELDS = (
    "id", "timestamp", "eventType", "severity", "source", "destination",
    "description", "action", "tactic", "technique", "metadata",
)

ANALYSIS_SYSTEM_PROMPT = """You are an expert SIEM security analyst AI assistant. You help security operations center (SOC) analysts understand and investigate security events, alerts, and incidents.

Your capabilities:
- Analyze security event patterns and identify potential threats
- Explain MITRE ATT&CK tactics and techniques
- Correlate events across different sources to identify attack chains
- Provide threat intelligence insights and recommended response actions
- Explain the significance of specific log entries and network traffic patterns
- Identify false positives and help prioritize alerts
- Suggest investigation steps and remediation strategies

When analyzing events, consider:
- Temporal patterns (timing of events)
- Source/destination relationships
- User behavior anomalies
- Known attack patterns and TTPs
- Network protocol analysis
- Threat severity and business impact

Format your responses clearly with:
- Key findings highlighted
- Risk assessment when relevant
- Actionable recommendations
- References to MITRE ATT&CK when applicable

Current security event context ({count} events):
{events_json}"""

QUICK_SYSTEM_PROMPT = (
    "You are an expert SIEM security analyst. Provide concise, actionable "
    "analysis of security events. Current events context:\n{events_json}"
)


def project_event(event: SecurityEvent, fields: Sequence[str]) -> Dict[str, Any]:
    """
    Compact JSON-ready view of an event. Keys without a value are left out.
    """
    data = event.model_dump(mode="json", by_alias=True, exclude_none=True)
    return {name: data[name] for name in fields if name in data}


def render_events(events: Sequence[SecurityEvent], mode: AnalysisMode) -> str:
    fields = ANALYSIS_EVENT_FIELDS if mode is AnalysisMode.ANALYSIS else QUICK_EVENT_FIELDS
    return json.dumps([project_event(e, fields) for e in events], indent=2)


def build_system_prompt(events: Sequence[SecurityEvent], mode: AnalysisMode) -> str:
    events_json = render_events(events, mode)
    if mode is AnalysisMode.QUICK:
        return QUICK_SYSTEM_PROMPT.format(events_json=events_json)
    return ANALYSIS_SYSTEM_PROMPT.format(count=len(events), events_json=events_json)


def replay_history(history: Sequence[ChatMessage]) -> List[Dict[str, str]]:
    """
    The last HISTORY_LIMIT user/assistant turns, oldest first.
    System turns are dropped before the limit is applied.
    """
    turns = [m for m in history if m.role in REPLAYED_ROLES]
    return [{"role": m.role, "content": m.content} for m in turns[-HISTORY_LIMIT:]]


def assemble(
    context_events: Sequence[SecurityEvent],
    history: Sequence[ChatMessage],
    new_message: str,
    mode: AnalysisMode,
) -> List[Dict[str, str]]:
    """
    Build the message list sent to the model backend:

        system prompt (with event context)
        + up to HISTORY_LIMIT prior turns (analysis mode only)
        + the new user turn
    """
    messages = [{"role": "system", "content": build_system_prompt(context_events, mode)}]

    if mode is AnalysisMode.ANALYSIS:
        messages.extend(replay_history(history))

    messages.append({"role": "user", "content": new_message})
    return messages
