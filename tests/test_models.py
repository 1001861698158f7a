"""Tests for session models, personas and localization helpers."""

from datetime import datetime, timezone

from forge_export.localization import format_long_date, format_short, iso_timestamp, label, mode_name
from forge_export.models import LocalizedText, Message, Session, resolve
from forge_export.personas import AgentPersona, PersonaRegistry, default_registry


def test_resolve_prefers_hebrew_only_when_present():
    text = LocalizedText("Hello", "שלום")
    assert resolve(text, "he") == "שלום"
    assert resolve(text, "en") == "Hello"
    assert resolve(LocalizedText("Hello"), "he") == "Hello"
    assert resolve(LocalizedText("Hello", ""), "he") == "Hello"


def test_session_reads_camel_case_keys():
    """Session files written by the desktop app use camelCase keys."""
    session = Session.model_validate(
        {
            "id": "s1",
            "config": {"projectName": "Campaign", "goal": "Goal", "enabledAgents": ["ronit"]},
            "messages": [
                {
                    "id": "m1",
                    "timestamp": "2024-01-15T10:05:00Z",
                    "agentId": "ronit",
                    "type": "argument",
                    "content": "Hi",
                    "contentHe": "היי",
                    "replyTo": None,
                }
            ],
            "currentPhase": "brainstorming",
            "startedAt": "2024-01-15T10:00:00Z",
        }
    )
    assert session.config.project_name == "Campaign"
    assert session.messages[0].agent_id == "ronit"
    assert session.messages[0].text == LocalizedText("Hi", "היי")
    assert session.current_phase == "brainstorming"


def test_draft_title_falls_back_to_section(sample_session):
    draft = sample_session.drafts[0]
    untitled = draft.model_copy(update={"content": draft.content.model_copy(update={"title": None})})
    assert untitled.title_text.base == "email_body"
    assert draft.title_text.base == "Email body"


def test_message_text_without_hebrew():
    message = Message(
        id="m", timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc), agent_id="noa", type="question", content="Why?"
    )
    assert message.text == LocalizedText("Why?", None)


def test_default_registry_has_builtin_personas():
    registry = default_registry()
    assert "ronit" in registry
    assert registry.get("ronit").name_he == "רונית"
    assert "researcher_stats" not in registry
    assert registry.get("unknown") is None


def test_registry_register_replaces():
    registry = PersonaRegistry([AgentPersona(id="a", name="A", name_he="א")])
    registry.register(AgentPersona(id="a", name="B", name_he="ב"))
    assert [p.name for p in registry.list_personas()] == ["B"]


def test_format_short():
    dt = datetime(2024, 1, 15, 10, 5, tzinfo=timezone.utc)
    assert format_short(dt, "en") == "1/15/24, 10:05 AM"
    assert format_short(dt, "he") == "15.1.2024, 10:05"
    assert format_short(datetime(2024, 1, 15, 0, 30), "en") == "1/15/24, 12:30 AM"
    assert format_short(datetime(2024, 1, 15, 13, 0), "en") == "1/15/24, 1:00 PM"


def test_format_long_date():
    dt = datetime(2024, 1, 15, tzinfo=timezone.utc)
    assert format_long_date(dt, "en") == "January 15, 2024"
    assert format_long_date(dt, "he") == "15 בינואר 2024"


def test_iso_timestamp_has_milliseconds_and_z():
    assert iso_timestamp(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)) == "2024-01-15T12:00:00.000Z"


def test_labels():
    assert label("decisions", "en") == "Decisions"
    assert label("decisions", "he") == "החלטות"
    assert label("not-a-label", "he") == "not-a-label"
    assert mode_name("debate", "he") == "דיון"
    assert mode_name("debate", "en") == "debate"
