"""Session content models for forge-export.

This module defines the data models for a multi-agent debate session as the
export pipeline sees it: the session snapshot, its messages, decisions and
drafts. Field names are snake_case in Python and accept the camelCase keys
written by the desktop application (``projectName``, ``agentId``, ...).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Reserved agent ids that never resolve through the persona registry
HUMAN_AGENT_ID = "human"
SYSTEM_AGENT_ID = "system"


class LocalizedText(NamedTuple):
    """A bilingual text value: the base (English) text and an optional
    Hebrew alternative."""

    base: str
    alt: str | None = None


def resolve(text: LocalizedText, language: str) -> str:
    """Pick the text to render for a language.

    The Hebrew alternative wins only when the language is ``he`` and the
    alternative is non-empty; otherwise the base text is used.

    Args:
        text: The bilingual value.
        language: Export language (``en`` or ``he``).

    Returns:
        The text to render.
    """
    if language == "he" and text.alt:
        return text.alt
    return text.base


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageType(str, Enum):
    """Kinds of message posted during a debate."""

    ARGUMENT = "argument"
    QUESTION = "question"
    PROPOSAL = "proposal"
    AGREEMENT = "agreement"
    DISAGREEMENT = "disagreement"
    SYNTHESIS = "synthesis"
    RESEARCH_REQUEST = "research_request"
    RESEARCH_RESULT = "research_result"
    HUMAN_INPUT = "human_input"
    SYSTEM = "system"
    CONSENSUS = "consensus"
    VOTE = "vote"
    METHODOLOGY = "methodology"


class Message(CamelModel):
    """A single message in the debate transcript."""

    id: str
    timestamp: datetime
    agent_id: str
    type: MessageType
    content: str
    content_he: str | None = None
    reply_to: str | None = None  # id of another message, not ownership
    metadata: dict[str, Any] | None = None

    @property
    def text(self) -> LocalizedText:
        return LocalizedText(self.content, self.content_he)


class DecisionOption(CamelModel):
    """One of the choices weighed in a decision."""

    id: str
    description: str
    description_he: str | None = None
    proposed_by: str = ""
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)

    @property
    def description_text(self) -> LocalizedText:
        return LocalizedText(self.description, self.description_he)


class Vote(CamelModel):
    """An agent's vote for a decision option."""

    agent_id: str
    option_id: str
    confidence: int = Field(ge=0, le=100)
    reasoning: str = ""


class Decision(CamelModel):
    """A decision reached during the session."""

    id: str
    topic: str
    topic_he: str | None = None
    options: list[DecisionOption] = Field(default_factory=list)
    votes: list[Vote] = Field(default_factory=list)
    outcome: str | None = None
    reasoning: str = ""
    made_at: datetime
    phase: str

    @property
    def topic_text(self) -> LocalizedText:
        return LocalizedText(self.topic, self.topic_he)


class DraftContent(CamelModel):
    """The body of a draft section."""

    type: Literal["text", "visual", "mixed"] = "text"
    title: str | None = None
    title_he: str | None = None
    body: str | None = None
    body_he: str | None = None
    visual_description: str | None = None


class DraftFeedback(CamelModel):
    """Feedback an agent left on a draft."""

    agent_id: str
    rating: int = Field(ge=1, le=5)
    comments: str = ""
    suggestions: list[str] = Field(default_factory=list)
    timestamp: datetime | None = None


class Draft(CamelModel):
    """A versioned draft of one copy section."""

    id: str
    version: int = Field(default=1, ge=1)
    section: str
    content: DraftContent = Field(default_factory=DraftContent)
    created_by: str = ""
    feedback: list[DraftFeedback] = Field(default_factory=list)
    created_at: datetime
    status: Literal["draft", "review", "approved", "rejected"] = "draft"

    @property
    def title_text(self) -> LocalizedText:
        """Draft title, falling back to the section label."""
        return LocalizedText(self.content.title or self.section, self.content.title_he)

    @property
    def body_text(self) -> LocalizedText:
        return LocalizedText(self.content.body or "", self.content.body_he)


class SessionConfig(CamelModel):
    """Configuration a debate session was started with."""

    id: str | None = None
    project_name: str
    goal: str = ""
    goal_he: str | None = None
    mode: str | None = None
    enabled_agents: list[str] = Field(default_factory=list)
    methodology: dict[str, Any] | None = None
    human_participation: bool = True
    max_rounds: int | None = None
    consensus_threshold: float | None = None
    language: str | None = None


class Session(CamelModel):
    """A snapshot of a debate session.

    The session is owned by the orchestration layer; the export pipeline only
    reads it and never mutates it.
    """

    id: str
    config: SessionConfig
    messages: list[Message] = Field(default_factory=list)
    decisions: list[Decision] = Field(default_factory=list)
    drafts: list[Draft] = Field(default_factory=list)
    current_phase: str = "initialization"
    current_round: int = 0
    started_at: datetime
    ended_at: datetime | None = None
    status: Literal["idle", "running", "paused", "completed"] = "idle"
