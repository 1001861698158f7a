"""Standalone HTML rendering of a debate session.

Generates a single HTML file with all CSS inline. The same document is the
``html`` export and the page source the PDF exporter prints.
"""

from __future__ import annotations

import html
from string import Template
from typing import NamedTuple

from forge_export import localization
from forge_export.export.base import BaseExporter
from forge_export.export.types import ExportOptions, SelectedContent
from forge_export.models import Decision, Draft, Message


class StylePreset(NamedTuple):
    """Colors, type and page margin for one style preset."""

    primary_color: str
    secondary_color: str
    header_bg: str
    font_family: str
    font_size: str
    line_height: str
    margin: str


STYLE_PRESETS: dict[str, StylePreset] = {
    "minimal": StylePreset(
        primary_color="#333333",
        secondary_color="#666666",
        header_bg="#f8f9fa",
        font_family="'Segoe UI', Tahoma, Geneva, Verdana, sans-serif",
        font_size="11pt",
        line_height="1.5",
        margin="0.5in",
    ),
    "professional": StylePreset(
        primary_color="#1a365d",
        secondary_color="#4a5568",
        header_bg="#edf2f7",
        font_family="'Georgia', 'Times New Roman', serif",
        font_size="11pt",
        line_height="1.6",
        margin="0.75in",
    ),
    "detailed": StylePreset(
        primary_color="#2c5282",
        secondary_color="#4a5568",
        header_bg="#e2e8f0",
        font_family="'Segoe UI', Tahoma, Geneva, Verdana, sans-serif",
        font_size="10pt",
        line_height="1.5",
        margin="0.75in",
    ),
}

HEBREW_FONT_STACK = "'David', 'Segoe UI', 'Arial Hebrew', Arial, sans-serif"

_CSS = Template("""<style>
* { box-sizing: border-box; margin: 0; padding: 0; }
body {
  font-family: $font_family;
  font-size: $font_size;
  line-height: $line_height;
  color: $primary;
  direction: $direction;
  text-align: $start;
}
.cover-page {
  page-break-after: always;
  display: flex;
  flex-direction: column;
  justify-content: center;
  align-items: center;
  min-height: 90vh;
  text-align: center;
  padding: 2rem;
}
.cover-logo { max-width: 200px; max-height: 100px; margin-bottom: 2rem; }
.cover-title { font-size: 2.5rem; color: $primary; margin-bottom: 1rem; font-weight: bold; }
.cover-goal { font-size: 1.25rem; color: $secondary; margin-bottom: 2rem; max-width: 600px; }
.cover-meta { font-size: 0.9rem; color: $secondary; margin-top: auto; }
.simple-header { margin-bottom: 2rem; padding-bottom: 1rem; border-bottom: 2px solid $primary; }
.simple-header h1 { font-size: 1.75rem; color: $primary; margin-bottom: 0.5rem; }
.simple-header .meta { font-size: 0.9rem; color: $secondary; }
.toc { page-break-after: always; padding: 2rem; }
.toc h2 {
  font-size: 1.5rem;
  color: $primary;
  margin-bottom: 1.5rem;
  border-bottom: 2px solid $header_bg;
  padding-bottom: 0.5rem;
}
.toc-item {
  display: flex;
  justify-content: space-between;
  align-items: baseline;
  padding: 0.5rem 0;
  border-bottom: 1px dotted $header_bg;
}
.toc-subitem { padding-$start: 1.5rem; font-size: 0.9rem; }
.toc-title { color: $primary; }
.toc-title a { color: inherit; text-decoration: none; }
.toc-page { color: $secondary; }
section { margin-bottom: 2rem; }
section h2 {
  font-size: 1.5rem;
  color: $primary;
  margin-bottom: 1rem;
  padding-bottom: 0.5rem;
  border-bottom: 2px solid $header_bg;
}
.message {
  margin-bottom: 1.5rem;
  padding: 1rem;
  background: $header_bg;
  border-radius: 4px;
  page-break-inside: avoid;
}
.message-header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 0.5rem; }
.message-agent { font-weight: bold; color: $primary; }
.message-time { font-size: 0.85rem; color: $secondary; }
.message-content { color: $primary; white-space: pre-wrap; }
.message-meta { font-size: 0.8rem; color: $secondary; margin-top: 0.5rem; }
.decision {
  margin-bottom: 1.5rem;
  padding: 1rem;
  border: 1px solid $header_bg;
  border-$start: 4px solid $primary;
  border-radius: 4px;
  page-break-inside: avoid;
}
.decision h3 { color: $primary; margin-bottom: 0.75rem; }
.decision-outcome { background: $header_bg; padding: 0.75rem; border-radius: 4px; margin-bottom: 0.75rem; }
.decision-outcome strong { color: $primary; }
.decision-reasoning { font-style: italic; color: $secondary; }
.options-list { margin-top: 1rem; padding-$start: 1.5rem; }
.option-item { margin-bottom: 0.5rem; }
.option-title { font-weight: bold; }
.pros-cons { font-size: 0.9rem; color: $secondary; margin-$start: 1rem; }
.pros { color: #38a169; }
.cons { color: #e53e3e; }
.votes { margin-top: 1rem; font-size: 0.9rem; }
.vote-item {
  display: inline-block;
  margin-$end: 1rem;
  padding: 0.25rem 0.5rem;
  background: $header_bg;
  border-radius: 4px;
}
.draft {
  margin-bottom: 1.5rem;
  padding: 1rem;
  border: 1px solid $header_bg;
  border-radius: 4px;
  page-break-inside: avoid;
}
.draft-header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 0.75rem; }
.draft h3 { color: $primary; }
.draft-status { padding: 0.25rem 0.5rem; border-radius: 4px; font-size: 0.85rem; font-weight: bold; }
.status-approved { background: #c6f6d5; color: #276749; }
.status-rejected { background: #fed7d7; color: #c53030; }
.status-review { background: #feebc8; color: #c05621; }
.status-draft { background: $header_bg; color: $secondary; }
.draft-content {
  white-space: pre-wrap;
  background: #fff;
  padding: 1rem;
  border: 1px solid $header_bg;
  border-radius: 4px;
}
.feedback-section { margin-top: 1rem; padding-top: 1rem; border-top: 1px solid $header_bg; }
.feedback-item { margin-bottom: 0.75rem; padding: 0.75rem; background: $header_bg; border-radius: 4px; }
.feedback-header { display: flex; justify-content: space-between; margin-bottom: 0.5rem; }
.feedback-agent { font-weight: bold; }
.feedback-rating { color: #ecc94b; }
.summary-content {
  padding: 1rem;
  background: $header_bg;
  border-radius: 4px;
  font-style: italic;
  white-space: pre-wrap;
}
</style>""")


def _esc(s: object) -> str:
    return html.escape(str(s)) if s else ""


def style_preset(style: str) -> StylePreset:
    """Preset for a style name; unknown names use the minimal preset."""
    return STYLE_PRESETS.get(style, STYLE_PRESETS["minimal"])


def is_rtl(options: ExportOptions) -> bool:
    return options.language == "he"


class HTMLExporter(BaseExporter):
    """Export selected session content as a standalone HTML document.

    Every interpolated value is HTML-escaped, so agent-generated text never
    becomes live markup. Hebrew output is laid out right-to-left.
    """

    format = "html"
    mime_type = "text/html"
    extension = "html"
    display_name = "HTML"

    async def render(self, content: SelectedContent, options: ExportOptions) -> str:
        return self.render_html(content, options)

    def render_html(self, content: SelectedContent, options: ExportOptions) -> str:
        """Render the complete HTML document.

        Args:
            content: Selected session content.
            options: Resolved export options.

        Returns:
            Complete HTML document as a string.
        """
        preset = style_preset(options.style)
        language = "he" if is_rtl(options) else "en"
        direction = "rtl" if is_rtl(options) else "ltr"

        sections = []
        if options.include_cover_page:
            sections.append(self._render_cover_page(content, options))
        else:
            sections.append(self._render_simple_header(content, options))
        if options.include_table_of_contents:
            sections.append(self._render_toc(content, options))
        if content.summary:
            sections.append(self._render_summary(content.summary, options))
        if content.messages:
            sections.append(self._render_transcript(content.messages, options))
        if content.decisions:
            sections.append(self._render_decisions(content.decisions, options))
        if content.drafts:
            sections.append(self._render_drafts(content.drafts, options))

        body = "\n".join(s for s in sections if s)

        return f"""<!DOCTYPE html>
<html lang="{language}" dir="{direction}">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{_esc(content.session.project_name)}</title>
{self._css(preset, is_rtl(options))}
</head>
<body>
{body}
</body>
</html>"""

    def _css(self, preset: StylePreset, rtl: bool) -> str:
        return _CSS.substitute(
            font_family=HEBREW_FONT_STACK if rtl else preset.font_family,
            font_size=preset.font_size,
            line_height=preset.line_height,
            primary=preset.primary_color,
            secondary=preset.secondary_color,
            header_bg=preset.header_bg,
            direction="rtl" if rtl else "ltr",
            start="right" if rtl else "left",
            end="left" if rtl else "right",
        )

    def _render_cover_page(self, content: SelectedContent, options: ExportOptions) -> str:
        session = content.session
        logo = ""
        if options.include_logo and options.logo_path:
            logo = f'<img src="{_esc(options.logo_path)}" alt="Logo" class="cover-logo" />'

        mode = (
            localization.mode_name(session.mode, options.language)
            if session.mode
            else self.label("standard_mode", options)
        )
        # The cover always shows the start date, even with timestamps off
        started = localization.format_short(session.started_at, options.language)

        return f"""<div class="cover-page">
{logo}
<h1 class="cover-title">{_esc(session.project_name)}</h1>
<p class="cover-goal">{_esc(session.goal)}</p>
<div class="cover-meta">
<p><strong>{self.label('mode', options)}:</strong> {_esc(mode)}</p>
<p><strong>{self.label('phase', options)}:</strong> {_esc(session.current_phase)}</p>
<p><strong>{self.label('date', options)}:</strong> {_esc(started)}</p>
</div>
</div>"""

    def _render_simple_header(self, content: SelectedContent, options: ExportOptions) -> str:
        session = content.session
        started = self.format_timestamp(session.started_at, options)
        date = f' | <span>{_esc(started)}</span>' if started else ""
        return f"""<div class="simple-header">
<h1>{_esc(session.project_name)}</h1>
<div class="meta"><span>{_esc(session.goal)}</span>{date}</div>
</div>"""

    def _render_toc(self, content: SelectedContent, options: ExportOptions) -> str:
        entries: list[tuple[str, str, int | None]] = []
        if content.summary:
            entries.append(("summary", self.label("summary", options), None))
        if content.messages:
            entries.append(("transcript", self.label("transcript", options), len(content.messages)))
        if content.decisions:
            entries.append(("decisions", self.label("decisions", options), len(content.decisions)))
        if content.drafts:
            entries.append(("drafts", self.label("drafts", options), len(content.drafts)))

        items = []
        for anchor, title, count in entries:
            page = f"({count})" if count is not None else ""
            items.append(
                f'<div class="toc-item"><span class="toc-title"><a href="#{anchor}">{_esc(title)}</a></span>'
                f'<span class="toc-page">{page}</span></div>'
            )
            if anchor == "decisions":
                for i, decision in enumerate(content.decisions, start=1):
                    topic = self.localize(decision.topic_text, options)
                    items.append(
                        f'<div class="toc-item toc-subitem"><span class="toc-title">'
                        f'<a href="#decision-{i}">{i}. {_esc(topic)}</a></span></div>'
                    )

        return f"""<div class="toc">
<h2>{self.label('toc', options)}</h2>
{"".join(items)}
</div>"""

    def _render_summary(self, summary: str, options: ExportOptions) -> str:
        return f"""<section id="summary">
<h2>{self.label('summary', options)}</h2>
<div class="summary-content">{_esc(summary)}</div>
</section>"""

    def _render_transcript(self, messages: list[Message], options: ExportOptions) -> str:
        body = "".join(self._render_message(m, options) for m in messages)
        return f"""<section id="transcript">
<h2>{self.label('transcript', options)}</h2>
{body}
</section>"""

    def _render_message(self, message: Message, options: ExportOptions) -> str:
        name = self.agent_name(message.agent_id, options)
        timestamp = self.format_timestamp(message.timestamp, options)
        time_html = f'<span class="message-time">{_esc(timestamp)}</span>' if timestamp else ""

        meta = ""
        if options.style == "detailed":
            reply = f" | Reply to: {_esc(message.reply_to)}" if message.reply_to else ""
            meta = f'<div class="message-meta">Type: {_esc(message.type.value)}{reply}</div>'

        return f"""<div class="message">
<div class="message-header"><span class="message-agent">{_esc(name)}</span>{time_html}</div>
<div class="message-content">{_esc(self.localize(message.text, options))}</div>
{meta}
</div>"""

    def _render_decisions(self, decisions: list[Decision], options: ExportOptions) -> str:
        body = "".join(self._render_decision(i, d, options) for i, d in enumerate(decisions, start=1))
        return f"""<section id="decisions">
<h2>{self.label('decisions', options)}</h2>
{body}
</section>"""

    def _render_decision(self, index: int, decision: Decision, options: ExportOptions) -> str:
        outcome = ""
        if decision.outcome:
            outcome = (
                f'<div class="decision-outcome"><strong>{self.label("outcome", options)}:</strong> '
                f"{_esc(decision.outcome)}</div>"
            )

        options_html = ""
        votes_html = ""
        if options.style == "detailed":
            if decision.options:
                items = []
                for option in decision.options:
                    pros = f'<span class="pros">+ {_esc(", ".join(option.pros))}</span>' if option.pros else ""
                    cons = f'<span class="cons">- {_esc(", ".join(option.cons))}</span>' if option.cons else ""
                    items.append(
                        f'<div class="option-item"><span class="option-title">'
                        f"{_esc(self.localize(option.description_text, options))}</span>"
                        f'<div class="pros-cons">{pros} {cons}</div></div>'
                    )
                options_html = (
                    f'<div class="options-list"><strong>{self.label("options", options)}:</strong>'
                    f'{"".join(items)}</div>'
                )

            if decision.votes:
                votes = "".join(
                    f'<span class="vote-item">{_esc(self.agent_name(v.agent_id, options))}: {v.confidence}%</span>'
                    for v in decision.votes
                )
                votes_html = f'<div class="votes"><strong>{self.label("votes", options)}:</strong> {votes}</div>'

        return f"""<div class="decision" id="decision-{index}">
<h3>{_esc(self.localize(decision.topic_text, options))}</h3>
{outcome}
<p class="decision-reasoning"><strong>{self.label('reasoning', options)}:</strong> {_esc(decision.reasoning)}</p>
{options_html}
{votes_html}
</div>"""

    def _render_drafts(self, drafts: list[Draft], options: ExportOptions) -> str:
        body = "".join(self._render_draft(d, options) for d in drafts)
        return f"""<section id="drafts">
<h2>{self.label('drafts', options)}</h2>
{body}
</section>"""

    def _render_draft(self, draft: Draft, options: ExportOptions) -> str:
        title = self.localize(draft.title_text, options)
        body = self.localize(draft.body_text, options)
        body_html = f'<div class="draft-content">{_esc(body)}</div>' if body else ""

        feedback_html = ""
        if options.style == "detailed" and draft.feedback:
            items = []
            for feedback in draft.feedback:
                stars = "★" * feedback.rating + "☆" * (5 - feedback.rating)
                suggestions = ""
                if feedback.suggestions:
                    suggestions = (
                        f"<p><em>{self.label('suggestions', options)}: "
                        f"{_esc('; '.join(feedback.suggestions))}</em></p>"
                    )
                items.append(
                    f'<div class="feedback-item"><div class="feedback-header">'
                    f'<span class="feedback-agent">{_esc(self.agent_name(feedback.agent_id, options))}</span>'
                    f'<span class="feedback-rating">{stars}</span></div>'
                    f"<p>{_esc(feedback.comments)}</p>{suggestions}</div>"
                )
            feedback_html = (
                f'<div class="feedback-section"><strong>{self.label("feedback", options)}:</strong>'
                f'{"".join(items)}</div>'
            )

        return f"""<div class="draft">
<div class="draft-header">
<h3>{_esc(title)} (v{draft.version})</h3>
<span class="draft-status status-{draft.status}">{draft.status.capitalize()}</span>
</div>
{body_html}
{feedback_html}
</div>"""
