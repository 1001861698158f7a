"""Content selection: project a session onto the parts an export asked for."""

from __future__ import annotations

from forge_export.export.types import ExportOptions, SelectedContent, SessionMetadata
from forge_export.models import HUMAN_AGENT_ID, Decision, Draft, Message, MessageType, Session


class ContentSelector:
    """Builds the ``SelectedContent`` every exporter reads.

    Selection is pure: the session is never modified and nothing is cached
    between calls. An empty ``content_types`` list selects nothing; applying
    defaults is the export manager's job.
    """

    def select(self, session: Session, options: ExportOptions) -> SelectedContent:
        return SelectedContent(
            session=self._extract_metadata(session),
            messages=self._select_messages(session, options),
            decisions=self._select_decisions(session, options),
            drafts=self._select_drafts(session, options),
            summary=self.generate_summary(session) if self._wants(options, "summary") else None,
        )

    @staticmethod
    def _wants(options: ExportOptions, content_type: str) -> bool:
        return content_type in options.content_types or "full" in options.content_types

    def _extract_metadata(self, session: Session) -> SessionMetadata:
        return SessionMetadata(
            id=session.id,
            project_name=session.config.project_name,
            goal=session.config.goal,
            mode=session.config.mode,
            started_at=session.started_at,
            ended_at=session.ended_at,
            current_phase=session.current_phase,
        )

    def _select_messages(self, session: Session, options: ExportOptions) -> list[Message]:
        if not self._wants(options, "transcript"):
            return []

        messages = list(session.messages)

        if not options.include_system_messages:
            messages = [m for m in messages if m.type != MessageType.SYSTEM]

        if options.agents:
            # Human input is kept regardless of the agent filter
            allowed = set(options.agents)
            messages = [m for m in messages if m.agent_id in allowed or m.agent_id == HUMAN_AGENT_ID]

        return messages

    def _select_decisions(self, session: Session, options: ExportOptions) -> list[Decision]:
        if not self._wants(options, "decisions"):
            return []

        decisions = list(session.decisions)
        if options.phases:
            phases = set(options.phases)
            decisions = [d for d in decisions if d.phase in phases]
        return decisions

    def _select_drafts(self, session: Session, options: ExportOptions) -> list[Draft]:
        if not self._wants(options, "drafts"):
            return []
        return list(session.drafts)

    def generate_summary(self, session: Session) -> str:
        """Build the plain-text session summary.

        Counts are taken from the whole session, not the filtered selection,
        and agents are listed in the order they first spoke.

        Args:
            session: The session to summarize.

        Returns:
            Newline-joined summary text.
        """
        lines = [
            f"Project: {session.config.project_name}",
            f"Goal: {session.config.goal}",
            f"Phase: {session.current_phase}",
            f"Messages: {len(session.messages)}",
            f"Decisions: {len(session.decisions)}",
            f"Drafts: {len(session.drafts)}",
        ]

        agent_counts: dict[str, int] = {}
        for message in session.messages:
            agent_counts[message.agent_id] = agent_counts.get(message.agent_id, 0) + 1

        if agent_counts:
            lines.append("")
            lines.append("Participation:")
            for agent_id, count in agent_counts.items():
                lines.append(f"  - {agent_id}: {count} messages")

        return "\n".join(lines)
