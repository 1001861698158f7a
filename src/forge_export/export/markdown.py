"""Markdown exporter for debate sessions."""

from __future__ import annotations

from forge_export import localization
from forge_export.export.base import BaseExporter
from forge_export.export.types import ExportOptions, SelectedContent
from forge_export.models import Decision, Draft, Message

STATUS_BADGES = {
    "approved": "✅",
    "rejected": "❌",
    "review": "👀",
}
DEFAULT_STATUS_BADGE = "📝"


class MarkdownExporter(BaseExporter):
    """Export selected session content to Markdown."""

    format = "md"
    mime_type = "text/markdown"
    extension = "md"
    display_name = "Markdown"

    async def render(self, content: SelectedContent, options: ExportOptions) -> str:
        return self.render_markdown(content, options)

    def render_markdown(self, content: SelectedContent, options: ExportOptions) -> str:
        """Convert selected content to a Markdown string.

        Args:
            content: Selected session content.
            options: Resolved export options.

        Returns:
            Markdown text; identical inputs and clock give identical output.
        """
        lines: list[str] = []

        lines.extend(self._render_header(content, options))

        if content.summary:
            lines.extend(self._render_summary(content.summary, options))
        if content.messages:
            lines.extend(self._render_transcript(content.messages, options))
        if content.decisions:
            lines.extend(self._render_decisions(content.decisions, options))
        if content.drafts:
            lines.extend(self._render_drafts(content.drafts, options))

        lines.extend(self._render_footer(options))

        return "\n".join(lines)

    def _render_header(self, content: SelectedContent, options: ExportOptions) -> list[str]:
        session = content.session
        lines = [f"# {session.project_name}", ""]

        if options.style != "minimal":
            lines.append(f"**{self.label('goal', options)}:** {session.goal}")
            if session.mode:
                lines.append(f"**{self.label('mode', options)}:** {session.mode}")
            if options.include_timestamps:
                started = self.format_timestamp(session.started_at, options)
                lines.append(f"**{self.label('date', options)}:** {started}")
            lines.append(f"**{self.label('phase', options)}:** {session.current_phase}")
            lines.append("")

        lines.append("---")
        lines.append("")
        return lines

    def _section(self, key: str, body: list[str], options: ExportOptions) -> list[str]:
        return [f"## {self.label(key, options)}", "", *body, "---", ""]

    def _render_summary(self, summary: str, options: ExportOptions) -> list[str]:
        return self._section("summary", [summary, ""], options)

    def _render_transcript(self, messages: list[Message], options: ExportOptions) -> list[str]:
        body: list[str] = []
        for message in messages:
            body.extend(self._render_message(message, options))
        return self._section("transcript", body, options)

    def _render_message(self, message: Message, options: ExportOptions) -> list[str]:
        name = self.agent_name(message.agent_id, options)
        lines = []

        if options.include_timestamps:
            lines.append(f"### {name} *{self.format_timestamp(message.timestamp, options)}*")
        else:
            lines.append(f"### {name}")
        lines.append("")

        lines.append(self.localize(message.text, options))
        lines.append("")

        if options.style == "detailed":
            lines.append(f"> *Type: {message.type.value}*")
            if message.reply_to:
                lines.append(f"> *Reply to: {message.reply_to}*")
            lines.append("")

        return lines

    def _render_decisions(self, decisions: list[Decision], options: ExportOptions) -> list[str]:
        body: list[str] = []
        for decision in decisions:
            body.extend(self._render_decision(decision, options))
        return self._section("decisions", body, options)

    def _render_decision(self, decision: Decision, options: ExportOptions) -> list[str]:
        lines = [f"### {self.localize(decision.topic_text, options)}", ""]

        if decision.outcome:
            lines.append(f"**{self.label('outcome', options)}:** {decision.outcome}")
            lines.append("")

        lines.append(f"**{self.label('reasoning', options)}:** {decision.reasoning}")
        lines.append("")

        if options.style != "detailed":
            return lines

        if decision.options:
            lines.append(f"**{self.label('options', options)}:**")
            lines.append("")
            for option in decision.options:
                lines.append(f"- **{self.localize(option.description_text, options)}**")
                if option.pros:
                    lines.append(f"  - {self.label('pros', options)}: {', '.join(option.pros)}")
                if option.cons:
                    lines.append(f"  - {self.label('cons', options)}: {', '.join(option.cons)}")
            lines.append("")

        if decision.votes:
            lines.append(f"**{self.label('votes', options)}:**")
            for vote in decision.votes:
                lines.append(f"- {self.agent_name(vote.agent_id, options)}: {vote.confidence}% confidence")
            lines.append("")

        return lines

    def _render_drafts(self, drafts: list[Draft], options: ExportOptions) -> list[str]:
        body: list[str] = []
        for draft in drafts:
            body.extend(self._render_draft(draft, options))
        return self._section("drafts", body, options)

    def _render_draft(self, draft: Draft, options: ExportOptions) -> list[str]:
        badge = STATUS_BADGES.get(draft.status, DEFAULT_STATUS_BADGE)
        lines = [
            f"### {self.localize(draft.title_text, options)} (v{draft.version})",
            "",
            f"*{badge} {draft.status}*",
            "",
        ]

        body = self.localize(draft.body_text, options)
        if body:
            lines.append(body)
            lines.append("")

        if options.style == "detailed" and draft.feedback:
            lines.append(f"**{self.label('feedback', options)}:**")
            lines.append("")
            for feedback in draft.feedback:
                lines.append(f"> **{self.agent_name(feedback.agent_id, options)}** ({feedback.rating}/5)")
                lines.append(f"> {feedback.comments}")
                if feedback.suggestions:
                    lines.append(f"> Suggestions: {'; '.join(feedback.suggestions)}")
                lines.append("")

        return lines

    def _render_footer(self, options: ExportOptions) -> list[str]:
        if options.style == "minimal":
            return []

        exported = localization.format_short(self.clock(), options.language)
        return ["", f"*{self.label('exported_on', options)} {exported} {self.label('via_forge', options)}*"]
