import pytest
from datetime import datetime, timezone

from forge_export.export import ContentSelector, ExportOptions
from forge_export.export.pdf import PageSetup
from forge_export.models import (
    Decision,
    DecisionOption,
    Draft,
    DraftContent,
    DraftFeedback,
    Message,
    MessageType,
    Session,
    SessionConfig,
    Vote,
)

FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def ts(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, 15, hour, minute, tzinfo=timezone.utc)


class FakeRenderer:
    """PDF renderer that records its calls and returns fixed bytes."""

    def __init__(self, output: bytes = b"%PDF-1.4 fake", error: Exception | None = None):
        self.output = output
        self.error = error
        self.calls: list[tuple[str, PageSetup | None]] = []

    async def render(self, html: str, page: PageSetup | None = None) -> bytes:
        self.calls.append((html, page))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-01-15 12:00 UTC."""
    return lambda: FIXED_NOW


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def sample_session():
    """Create a sample debate Session for testing."""
    return Session(
        id="session-1",
        config=SessionConfig(
            project_name="Test Campaign",
            goal="Write a fundraising email",
            mode="debate",
            enabled_agents=["ronit", "yossi", "noa"],
        ),
        messages=[
            Message(
                id="msg-0",
                timestamp=ts(10, 0),
                agent_id="system",
                type=MessageType.SYSTEM,
                content="Session started",
            ),
            Message(
                id="msg-1",
                timestamp=ts(10, 5),
                agent_id="ronit",
                type=MessageType.ARGUMENT,
                content="We should focus on emotional appeal",
                content_he="כדאי להתמקד בפנייה רגשית",
            ),
            Message(
                id="msg-2",
                timestamp=ts(10, 7),
                agent_id="human",
                type=MessageType.HUMAN_INPUT,
                content="Keep it short",
            ),
            Message(
                id="msg-3",
                timestamp=ts(10, 9),
                agent_id="yossi",
                type=MessageType.DISAGREEMENT,
                content="Numbers convince donors",
                reply_to="msg-1",
            ),
        ],
        decisions=[
            Decision(
                id="dec-1",
                topic="Tone of voice",
                topic_he="טון הדיבור",
                options=[
                    DecisionOption(
                        id="opt-1",
                        description="Emotional storytelling",
                        proposed_by="ronit",
                        pros=["Memorable"],
                        cons=["Can feel manipulative"],
                    ),
                    DecisionOption(
                        id="opt-2",
                        description="Data driven",
                        proposed_by="yossi",
                        pros=["Credible"],
                    ),
                ],
                votes=[
                    Vote(agent_id="ronit", option_id="opt-1", confidence=90),
                    Vote(agent_id="noa", option_id="opt-1", confidence=70),
                    Vote(agent_id="yossi", option_id="opt-2", confidence=80),
                ],
                outcome="Emotional storytelling",
                reasoning="Donors respond to stories",
                made_at=ts(11, 0),
                phase="brainstorming",
            ),
            Decision(
                id="dec-2",
                topic="Call to action",
                reasoning="Single clear ask",
                made_at=ts(11, 30),
                phase="synthesis",
            ),
        ],
        drafts=[
            Draft(
                id="draft-1",
                version=2,
                section="email_body",
                content=DraftContent(
                    title="Email body",
                    body="First paragraph\n\nSecond paragraph",
                    body_he="פסקה ראשונה\n\nפסקה שנייה",
                ),
                created_by="ronit",
                feedback=[
                    DraftFeedback(
                        agent_id="noa",
                        rating=4,
                        comments="Needs a statistic",
                        suggestions=["Add one number"],
                    )
                ],
                created_at=ts(11, 45),
                status="review",
            )
        ],
        current_phase="synthesis",
        started_at=ts(10, 0),
    )


@pytest.fixture
def sample_content(sample_session):
    """Everything selected from the sample session."""
    return ContentSelector().select(sample_session, ExportOptions(content_types=["full"]))
