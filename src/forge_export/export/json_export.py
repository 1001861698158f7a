"""JSON exporter for debate sessions.

The export is a single versioned envelope::

    {"version": "1.0.0", "exportedAt": ..., "session": {...},
     "content": {...}, "metadata": {...}}

Content arrays that were not selected (or are empty) are left out of the
envelope instead of being written as ``[]``, so consumers can tell what was
requested by key presence.
"""

from __future__ import annotations

from pydantic import Field

from forge_export.export.base import BaseExporter
from forge_export.export.types import ExportOptions, SelectedContent
from forge_export.localization import iso_timestamp
from forge_export.models import CamelModel, Decision, Draft, LocalizedText, Message

# JSON envelope schema version
JSON_EXPORT_VERSION = "1.0.0"


class ExportedSession(CamelModel):
    """Session metadata as written to the envelope."""

    id: str
    project_name: str
    goal: str
    mode: str | None = None
    started_at: str
    ended_at: str | None = None
    phase: str


class ExportedAgent(CamelModel):
    id: str
    name: str
    role: str | None = None


class ExportedMessage(CamelModel):
    id: str
    timestamp: str
    agent: ExportedAgent
    type: str
    content: str
    reply_to: str | None = None


class ExportedOption(CamelModel):
    id: str
    description: str
    proposed_by: str
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)


class ExportedVote(CamelModel):
    agent_id: str
    option_id: str
    confidence: int


class ExportedDecision(CamelModel):
    """A decision; ``options`` and ``votes`` are only set for the detailed style."""

    id: str
    topic: str
    outcome: str | None = None
    reasoning: str
    phase: str
    made_at: str
    options: list[ExportedOption] | None = None
    votes: list[ExportedVote] | None = None


class ExportedDraftContent(CamelModel):
    type: str
    title: str | None = None
    body: str | None = None


class ExportedDraft(CamelModel):
    id: str
    version: int
    section: str
    status: str
    created_by: str
    created_at: str
    content: ExportedDraftContent
    feedback_count: int


class ExportedContent(CamelModel):
    summary: str | None = None
    messages: list[ExportedMessage] | None = None
    decisions: list[ExportedDecision] | None = None
    drafts: list[ExportedDraft] | None = None


class ExportedMetadata(CamelModel):
    format: str
    style: str
    language: str
    content_types: list[str]
    message_count: int
    decision_count: int
    draft_count: int


class JSONExport(CamelModel):
    """The root export envelope."""

    version: str = JSON_EXPORT_VERSION
    exported_at: str
    session: ExportedSession
    content: ExportedContent
    metadata: ExportedMetadata


class JSONExporter(BaseExporter):
    """Export selected session content to the JSON envelope.

    Minimal style writes compact JSON; other styles are indented by two
    spaces. Non-ASCII text (Hebrew) is written as-is.
    """

    format = "json"
    mime_type = "application/json"
    extension = "json"
    display_name = "JSON"

    async def render(self, content: SelectedContent, options: ExportOptions) -> str:
        envelope = self.build_export(content, options)
        indent = None if options.style == "minimal" else 2
        return envelope.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    def build_export(self, content: SelectedContent, options: ExportOptions) -> JSONExport:
        """Build the envelope model for selected content."""
        session = content.session
        return JSONExport(
            exported_at=self.exported_at(),
            session=ExportedSession(
                id=session.id,
                project_name=session.project_name,
                goal=session.goal,
                mode=session.mode,
                started_at=iso_timestamp(session.started_at),
                ended_at=iso_timestamp(session.ended_at) if session.ended_at else None,
                phase=session.current_phase,
            ),
            content=ExportedContent(
                summary=content.summary or None,
                messages=[self._export_message(m, options) for m in content.messages] or None,
                decisions=[self._export_decision(d, options) for d in content.decisions] or None,
                drafts=[self._export_draft(d, options) for d in content.drafts] or None,
            ),
            metadata=ExportedMetadata(
                format=self.format,
                style=options.style,
                language=options.language,
                content_types=list(options.content_types),
                message_count=len(content.messages),
                decision_count=len(content.decisions),
                draft_count=len(content.drafts),
            ),
        )

    def _export_message(self, message: Message, options: ExportOptions) -> ExportedMessage:
        agent = ExportedAgent(id=message.agent_id, name=self.agent_name(message.agent_id, options))
        if options.include_agent_metadata:
            persona = self.personas.get(message.agent_id)
            if persona is not None and persona.role:
                agent.role = persona.role

        return ExportedMessage(
            id=message.id,
            timestamp=iso_timestamp(message.timestamp),
            agent=agent,
            type=message.type.value,
            content=self.localize(message.text, options),
            reply_to=message.reply_to,
        )

    def _export_decision(self, decision: Decision, options: ExportOptions) -> ExportedDecision:
        exported = ExportedDecision(
            id=decision.id,
            topic=self.localize(decision.topic_text, options),
            outcome=decision.outcome,
            reasoning=decision.reasoning,
            phase=decision.phase,
            made_at=iso_timestamp(decision.made_at),
        )

        if options.style == "detailed":
            if decision.options:
                exported.options = [
                    ExportedOption(
                        id=option.id,
                        description=self.localize(option.description_text, options),
                        proposed_by=option.proposed_by,
                        pros=option.pros,
                        cons=option.cons,
                    )
                    for option in decision.options
                ]
            if decision.votes:
                exported.votes = [
                    ExportedVote(agent_id=vote.agent_id, option_id=vote.option_id, confidence=vote.confidence)
                    for vote in decision.votes
                ]

        return exported

    def _export_draft(self, draft: Draft, options: ExportOptions) -> ExportedDraft:
        title = LocalizedText(draft.content.title or "", draft.content.title_he)
        return ExportedDraft(
            id=draft.id,
            version=draft.version,
            section=draft.section,
            status=draft.status,
            created_by=draft.created_by,
            created_at=iso_timestamp(draft.created_at),
            content=ExportedDraftContent(
                type=draft.content.type,
                title=self.localize(title, options) or None,
                body=self.localize(draft.body_text, options) or None,
            ),
            feedback_count=len(draft.feedback),
        )
