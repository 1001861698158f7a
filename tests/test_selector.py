"""Tests for content selection."""

from forge_export.export import ContentSelector, ExportOptions


def select(session, **options):
    return ContentSelector().select(session, ExportOptions(**options))


def test_metadata_copied(sample_session):
    content = select(sample_session)
    assert content.session.id == "session-1"
    assert content.session.project_name == "Test Campaign"
    assert content.session.mode == "debate"
    assert content.session.current_phase == "synthesis"


def test_transcript_only_by_default(sample_session):
    content = select(sample_session)
    assert [m.id for m in content.messages] == ["msg-1", "msg-2", "msg-3"]
    assert content.decisions == []
    assert content.drafts == []
    assert content.summary is None


def test_system_messages_included_on_request(sample_session):
    content = select(sample_session, include_system_messages=True)
    assert content.messages[0].id == "msg-0"


def test_agent_filter_keeps_human(sample_session):
    content = select(sample_session, agents=["yossi"])
    assert [m.agent_id for m in content.messages] == ["human", "yossi"]


def test_empty_agent_filter_is_ignored(sample_session):
    assert len(select(sample_session, agents=[]).messages) == 3


def test_phase_filter(sample_session):
    content = select(sample_session, content_types=["decisions"], phases=["synthesis"])
    assert [d.id for d in content.decisions] == ["dec-2"]
    assert content.messages == []


def test_full_selects_everything(sample_session):
    content = select(sample_session, content_types=["full"])
    assert len(content.messages) == 3
    assert len(content.decisions) == 2
    assert len(content.drafts) == 1
    assert content.summary


def test_empty_content_types_selects_nothing(sample_session):
    content = select(sample_session, content_types=[])
    assert content.is_empty()


def test_selection_does_not_mutate_session(sample_session):
    before = sample_session.model_dump()
    select(sample_session, content_types=["full"], agents=["ronit"], phases=["synthesis"])
    assert sample_session.model_dump() == before


def test_summary_text(sample_session):
    summary = ContentSelector().generate_summary(sample_session)
    assert summary.split("\n") == [
        "Project: Test Campaign",
        "Goal: Write a fundraising email",
        "Phase: synthesis",
        "Messages: 4",
        "Decisions: 2",
        "Drafts: 1",
        "",
        "Participation:",
        "  - system: 1 messages",
        "  - ronit: 1 messages",
        "  - human: 1 messages",
        "  - yossi: 1 messages",
    ]


def test_summary_counts_whole_session(sample_session):
    """Filters narrow the selection but not the summary counts."""
    content = select(sample_session, content_types=["summary", "transcript"], agents=["ronit"])
    assert len(content.messages) == 2
    assert "Messages: 4" in content.summary


def test_summary_without_messages(sample_session):
    session = sample_session.model_copy(update={"messages": []})
    summary = ContentSelector().generate_summary(session)
    assert "Participation:" not in summary
    assert summary.endswith("Drafts: 1")
