import json
from datetime import datetime, timedelta

from soc_analyst.schemas.analysis import (
    AnalysisMode,
    AssistantMessage,
    SystemMessage,
    UserMessage,
)
from soc_analyst.schemas.events import (
    EventSeverity,
    SecurityEvent,
    SecurityEventMetadata,
)
from soc_analyst.services.analysis.prompt_assembler import (
    HISTORY_LIMIT,
    assemble,
    build_system_prompt,
    project_event,
    ANALYSIS_EVENT_FIELDS,
    QUICK_EVENT_FIELDS,
)

T0 = datetime(2025, 6, 1, 12, 0, 0)


def sample_event(**overrides) -> SecurityEvent:
    data = dict(
        id="evt-1",
        timestamp=T0,
        event_type="SQL Injection Attempt",
        severity=EventSeverity.CRITICAL,
        source="203.0.113.7",
        destination="10.0.0.1",
        user="user3",
        description="SQL Injection Attempt detected from 203.0.113.7",
        action="Block",
        status="Blocked",
        category="Application",
        rule_name="Unauthorized Access Attempt",
        tactic="Initial Access",
        technique="T1190",
        raw_log='web-server-01 WAF: [Critical] SQL Injection Attempt src=203.0.113.7',
        metadata=SecurityEventMetadata(protocol="HTTPS", destination_port=443, threat_score=95),
    )
    data.update(overrides)
    return SecurityEvent(**data)


def history_of(n: int, session_id: str = "s1") -> list:
    turns = []
    for i in range(n):
        cls = UserMessage if i % 2 == 0 else AssistantMessage
        turns.append(
            cls(
                id=f"m{i}",
                session_id=session_id,
                content=f"turn {i}",
                timestamp=T0 + timedelta(seconds=i),
            )
        )
    return turns


def events_json(prompt: str) -> list:
    return json.loads(prompt[prompt.index("["):])


class TestProjection:
    def test_analysis_projection_uses_camel_case_keys(self):
        projected = project_event(sample_event(), ANALYSIS_EVENT_FIELDS)
        assert list(projected) == list(ANALYSIS_EVENT_FIELDS)
        assert projected["eventType"] == "SQL Injection Attempt"
        assert projected["severity"] == "Critical"
        assert projected["ruleName"] == "Unauthorized Access Attempt"
        assert projected["metadata"] == {
            "protocol": "HTTPS",
            "destinationPort": 443,
            "threatScore": 95,
        }

    def test_quick_projection_is_trimmed(self):
        projected = project_event(sample_event(), QUICK_EVENT_FIELDS)
        for dropped in ("user", "status", "category", "ruleName", "rawLog"):
            assert dropped not in projected
        assert projected["technique"] == "T1190"

    def test_absent_fields_are_omitted_not_null(self):
        event = sample_event(user=None, raw_log=None, metadata=None)
        projected = project_event(event, ANALYSIS_EVENT_FIELDS)
        assert "user" not in projected
        assert "rawLog" not in projected
        assert "metadata" not in projected
        assert None not in projected.values()


class TestSystemPrompt:
    def test_analysis_prompt_states_role_and_count(self):
        prompt = build_system_prompt([sample_event(), sample_event(id="evt-2")], AnalysisMode.ANALYSIS)
        assert prompt.startswith("You are an expert SIEM security analyst")
        assert "Your capabilities:" in prompt
        assert "When analyzing events, consider:" in prompt
        assert "Current security event context (2 events):" in prompt
        assert [e["id"] for e in events_json(prompt)] == ["evt-1", "evt-2"]

    def test_empty_context_states_zero(self):
        prompt = build_system_prompt([], AnalysisMode.ANALYSIS)
        assert "(0 events)" in prompt
        assert prompt.endswith("[]")

    def test_quick_prompt(self):
        prompt = build_system_prompt([sample_event()], AnalysisMode.QUICK)
        assert prompt.startswith("You are an expert SIEM security analyst. Provide concise")
        assert "rawLog" not in events_json(prompt)[0]

    def test_rendering_is_deterministic(self):
        events = [sample_event()]
        assert build_system_prompt(events, AnalysisMode.ANALYSIS) == build_system_prompt(
            events, AnalysisMode.ANALYSIS
        )


class TestAssemble:
    def test_order_is_system_history_new_turn(self):
        messages = assemble([sample_event()], history_of(2), "what next?", AnalysisMode.ANALYSIS)
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[-1] == {"role": "user", "content": "what next?"}

    def test_history_capped_to_most_recent_turns(self):
        messages = assemble([], history_of(25), "latest", AnalysisMode.ANALYSIS)
        replayed = messages[1:-1]
        assert len(replayed) == HISTORY_LIMIT
        assert [m["content"] for m in replayed] == [f"turn {i}" for i in range(15, 25)]
        assert len(messages) == HISTORY_LIMIT + 2

    def test_system_turns_not_replayed(self):
        history = history_of(3) + [
            SystemMessage(id="sys", session_id="s1", content="audit note", timestamp=T0)
        ]
        messages = assemble([], history, "q", AnalysisMode.ANALYSIS)
        contents = [m["content"] for m in messages[1:]]
        assert "audit note" not in contents
        assert all(m["role"] in ("user", "assistant") for m in messages[1:])

    def test_system_turns_do_not_use_up_the_cap(self):
        history = [
            SystemMessage(id=f"sys{i}", session_id="s1", content="note", timestamp=T0)
            for i in range(5)
        ] + history_of(10)
        messages = assemble([], history, "q", AnalysisMode.ANALYSIS)
        assert len(messages[1:-1]) == 10

    def test_quick_mode_has_no_history(self):
        messages = assemble([sample_event()], history_of(6), "quick?", AnalysisMode.QUICK)
        assert [m["role"] for m in messages] == ["system", "user"]
