"""DOCX exporter: builds a Word document with python-docx.

Sizes in the style presets are in the units Word stores: half-points for
fonts and twentieths of a point (twips) for line spacing and margins.
"""

from __future__ import annotations

import base64
import io
import re
import zipfile
from typing import NamedTuple

from docx import Document
from docx.document import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor, Twips
from docx.text.paragraph import Paragraph

from forge_export import localization
from forge_export.export.base import BaseExporter
from forge_export.export.types import ExportOptions, SelectedContent
from forge_export.models import Decision

HEBREW_FONT = "David"

# Fixed timestamp for every zip entry so identical documents give identical bytes
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)

# Characters XML 1.0 does not allow; tab, newline and carriage return are kept
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

# Paragraph properties that must follow <w:bidi> in a <w:pPr>
_BIDI_SUCCESSORS = (
    "w:adjustRightInd",
    "w:snapToGrid",
    "w:spacing",
    "w:ind",
    "w:contextualSpacing",
    "w:mirrorIndents",
    "w:suppressOverlap",
    "w:jc",
    "w:textDirection",
    "w:textAlignment",
    "w:textboxTightWrap",
    "w:outlineLvl",
    "w:divId",
    "w:cnfStyle",
    "w:rPr",
    "w:sectPr",
    "w:pPrChange",
)

_THEME_FONT_ATTRS = ("w:asciiTheme", "w:hAnsiTheme", "w:eastAsiaTheme", "w:cstheme")


class DocxStyle(NamedTuple):
    """Fonts, colors and spacing for one style preset."""

    font: str
    primary_color: str
    secondary_color: str
    header_color: str
    title_size: int  # half-points
    heading_size: int  # half-points
    body_size: int  # half-points
    line_spacing: int  # twips, 240 is single spacing
    margin: int  # twips


DOCX_STYLES: dict[str, DocxStyle] = {
    "minimal": DocxStyle(
        font="Arial",
        primary_color="333333",
        secondary_color="666666",
        header_color="333333",
        title_size=56,
        heading_size=28,
        body_size=22,
        line_spacing=276,
        margin=720,
    ),
    "professional": DocxStyle(
        font="Times New Roman",
        primary_color="1A365D",
        secondary_color="4A5568",
        header_color="1A365D",
        title_size=64,
        heading_size=32,
        body_size=22,
        line_spacing=360,
        margin=1080,
    ),
    "detailed": DocxStyle(
        font="Calibri",
        primary_color="2C5282",
        secondary_color="4A5568",
        header_color="2C5282",
        title_size=60,
        heading_size=28,
        body_size=20,
        line_spacing=276,
        margin=1080,
    ),
}


def _half_points(size: int) -> Pt:
    return Pt(size / 2)


def _set_font_name(rpr_owner, name: str) -> None:
    """Set every font slot, including complex script, on a style or run element."""
    rfonts = rpr_owner.get_or_add_rPr().get_or_add_rFonts()
    for attr in _THEME_FONT_ATTRS:
        rfonts.attrib.pop(qn(attr), None)
    for attr in ("w:ascii", "w:hAnsi", "w:eastAsia", "w:cs"):
        rfonts.set(qn(attr), name)


def _xml_safe(text: str) -> str:
    return _XML_ILLEGAL.sub("", text)


def _set_bidi(paragraph: Paragraph) -> None:
    ppr = paragraph._p.get_or_add_pPr()
    if ppr.find(qn("w:bidi")) is None:
        ppr.insert_element_before(OxmlElement("w:bidi"), *_BIDI_SUCCESSORS)


def _normalize_zip(data: bytes) -> bytes:
    """Rewrite a zip package with fixed entry timestamps."""
    out = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(data)) as src, zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as dst:
        for item in src.infolist():
            info = zipfile.ZipInfo(item.filename, date_time=ZIP_TIMESTAMP)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = item.external_attr
            dst.writestr(info, src.read(item.filename))
    return out.getvalue()


class DOCXExporter(BaseExporter):
    """Export selected session content to a Word document.

    Decisions and drafts become numbered Heading 2 paragraphs under their
    Heading 1 section. Hebrew output uses the David font and marks every
    paragraph right-to-left. The result content is the base64 encoding of
    the ``.docx`` package.
    """

    format = "docx"
    mime_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    extension = "docx"
    display_name = "DOCX"

    async def render(self, content: SelectedContent, options: ExportOptions) -> str:
        return base64.b64encode(self.build_docx(content, options)).decode("ascii")

    def build_docx(self, content: SelectedContent, options: ExportOptions) -> bytes:
        """Build the document and return the ``.docx`` bytes."""
        builder = _DocumentBuilder(self, options)
        builder.build(content)
        return builder.to_bytes()


class _DocumentBuilder:
    """Writes one document; created per export call."""

    def __init__(self, exporter: DOCXExporter, options: ExportOptions) -> None:
        self.exporter = exporter
        self.options = options
        self.style = DOCX_STYLES.get(options.style, DOCX_STYLES["minimal"])
        self.rtl = options.language == "he"
        self.font = HEBREW_FONT if self.rtl else self.style.font
        self.doc: DocxDocument = Document()
        self._setup_document()

    # -- setup --------------------------------------------------------------

    def _setup_document(self) -> None:
        style = self.style
        for section in self.doc.sections:
            section.top_margin = Twips(style.margin)
            section.bottom_margin = Twips(style.margin)
            section.left_margin = Twips(style.margin)
            section.right_margin = Twips(style.margin)

        normal = self.doc.styles["Normal"]
        _set_font_name(normal.element, self.font)
        normal.font.size = _half_points(style.body_size)
        normal.paragraph_format.line_spacing = style.line_spacing / 240

        self._configure_style("Title", style.title_size, style.primary_color, space_before=0, space_after=400)
        self._configure_style("Heading 1", style.heading_size, style.header_color, space_before=400, space_after=200)
        self._configure_style(
            "Heading 2", style.heading_size - 4, style.secondary_color, space_before=300, space_after=150
        )

    def _configure_style(self, name: str, size: int, color: str, space_before: int, space_after: int) -> None:
        paragraph_style = self.doc.styles[name]
        _set_font_name(paragraph_style.element, self.font)
        paragraph_style.font.size = _half_points(size)
        paragraph_style.font.bold = True
        paragraph_style.font.italic = False
        paragraph_style.font.color.rgb = RGBColor.from_string(color)
        paragraph_style.paragraph_format.space_before = Twips(space_before)
        paragraph_style.paragraph_format.space_after = Twips(space_after)

    def to_bytes(self) -> bytes:
        props = self.doc.core_properties
        exported = self.exporter.clock()
        props.author = "Forge"
        props.last_modified_by = "Forge"
        props.created = exported
        props.modified = exported
        props.revision = 1

        buffer = io.BytesIO()
        self.doc.save(buffer)
        return _normalize_zip(buffer.getvalue())

    # -- paragraph helpers --------------------------------------------------

    def _align(self, paragraph: Paragraph, center: bool = False) -> Paragraph:
        if center:
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        else:
            paragraph.alignment = WD_ALIGN_PARAGRAPH.RIGHT if self.rtl else WD_ALIGN_PARAGRAPH.LEFT
        if self.rtl:
            _set_bidi(paragraph)
        return paragraph

    def _paragraph(
        self,
        text: str = "",
        *,
        size: int | None = None,
        bold: bool = False,
        italic: bool = False,
        color: str | None = None,
        center: bool = False,
        space_before: int | None = None,
        space_after: int | None = None,
        indent: int | None = None,
    ) -> Paragraph:
        paragraph = self.doc.add_paragraph()
        if text:
            run = paragraph.add_run(_xml_safe(text))
            _set_font_name(run._element, self.font)
            run.font.size = _half_points(size or self.style.body_size)
            run.font.bold = bold or None
            run.font.italic = italic or None
            if color:
                run.font.color.rgb = RGBColor.from_string(color)
            if self.rtl:
                run.font.rtl = True

        fmt = paragraph.paragraph_format
        if space_before is not None:
            fmt.space_before = Twips(space_before)
        if space_after is not None:
            fmt.space_after = Twips(space_after)
        if indent:
            if self.rtl:
                fmt.right_indent = Twips(indent)
            else:
                fmt.left_indent = Twips(indent)
        return self._align(paragraph, center)

    def _heading(self, text: str, level: int) -> Paragraph:
        paragraph = self.doc.add_heading(_xml_safe(text), level=level)
        if self.rtl:
            for run in paragraph.runs:
                run.font.rtl = True
        return self._align(paragraph)

    def _lines(self, text: str) -> None:
        # Blank lines stay as empty paragraphs
        for line in text.split("\n"):
            if line.strip():
                self._paragraph(line)
            else:
                self._paragraph(space_after=100)

    def _label(self, key: str) -> str:
        return self.exporter.label(key, self.options)

    def _agent(self, agent_id: str) -> str:
        return self.exporter.agent_name(agent_id, self.options)

    # -- document structure -------------------------------------------------

    def build(self, content: SelectedContent) -> None:
        if self.options.include_cover_page:
            self._cover_page(content)
            self.doc.add_page_break()
        if self.options.include_table_of_contents:
            self._table_of_contents(content)
            self.doc.add_page_break()

        sections = []
        if content.messages:
            sections.append(self._transcript)
        if content.decisions:
            sections.append(self._decisions)
        if content.drafts:
            sections.append(self._drafts)
        if content.summary:
            sections.append(self._summary)

        for i, write_section in enumerate(sections):
            if i > 0:
                self.doc.add_page_break()
            write_section(content)

        self.doc.core_properties.title = _xml_safe(content.session.project_name)

    def _cover_page(self, content: SelectedContent) -> None:
        session = content.session
        style = self.style
        language = self.options.language

        self._paragraph(space_before=2000)
        self._paragraph(
            session.project_name,
            size=style.title_size,
            bold=True,
            color=style.primary_color,
            center=True,
            space_after=400,
        )
        if session.goal:
            self._paragraph(
                session.goal,
                size=style.heading_size - 4,
                color=style.secondary_color,
                center=True,
                space_after=800,
            )
        if session.mode:
            self._paragraph(
                localization.mode_name(session.mode, language),
                color=style.secondary_color,
                center=True,
                space_after=1200,
            )

        started = localization.format_long_date(session.started_at, language)
        self._paragraph(f"{self._label('date')}: {started}", color=style.secondary_color, center=True, space_after=200)
        self._paragraph(
            f"{self._label('current_phase')}: {session.current_phase}", color=style.secondary_color, center=True
        )

    def _table_of_contents(self, content: SelectedContent) -> None:
        style = self.style
        self._paragraph(
            self._label("toc"), size=style.heading_size, bold=True, color=style.primary_color, space_after=400
        )

        entries: list[tuple[str, int]] = []
        if content.messages:
            entries.append((self._label("discussion_transcript"), 0))
        if content.decisions:
            entries.append((self._label("decisions"), 0))
            for i, decision in enumerate(content.decisions, start=1):
                entries.append((f"{i}. {self.exporter.localize(decision.topic_text, self.options)}", 1))
        if content.drafts:
            entries.append((self._label("drafts"), 0))
        if content.summary:
            entries.append((self._label("summary"), 0))

        for text, level in entries:
            color = style.primary_color if level == 0 else style.secondary_color
            self._paragraph(text, color=color, space_after=100, indent=level * 360)

    def _transcript(self, content: SelectedContent) -> None:
        style = self.style
        self._heading(self._label("discussion_transcript"), level=1)

        for message in content.messages:
            name = self._agent(message.agent_id)
            timestamp = self.exporter.format_timestamp(message.timestamp, self.options)
            header = f"{name} ({timestamp})" if timestamp else name
            self._paragraph(header, bold=True, color=style.primary_color, space_before=200, space_after=100)
            self._paragraph(self.exporter.localize(message.text, self.options), space_after=200)

            if self.options.style == "detailed":
                meta = f"Type: {message.type.value}"
                if message.reply_to:
                    meta += f" | Reply to: {message.reply_to}"
                self._paragraph(meta, size=style.body_size - 2, italic=True, color=style.secondary_color)

    def _decisions(self, content: SelectedContent) -> None:
        self._heading(self._label("decisions"), level=1)
        for i, decision in enumerate(content.decisions, start=1):
            self._decision(i, decision)

    def _decision(self, index: int, decision: Decision) -> None:
        style = self.style
        small = style.body_size - 2
        self._heading(f"{index}. {self.exporter.localize(decision.topic_text, self.options)}", level=2)

        if decision.outcome:
            self._paragraph(f"{self._label('outcome')}: {decision.outcome}", bold=True, space_after=150)
        if decision.reasoning:
            self._paragraph(f"{self._label('reasoning')}: {decision.reasoning}", space_after=150)

        if self.options.style == "detailed":
            if decision.options:
                self._paragraph(f"{self._label('options')}:", bold=True, space_after=100)
                for option in decision.options:
                    self._paragraph(
                        f"• {self.exporter.localize(option.description_text, self.options)}", indent=360
                    )
                    if option.pros:
                        self._paragraph(
                            f"{self._label('pros')}: {', '.join(option.pros)}",
                            size=small,
                            color=style.secondary_color,
                            indent=720,
                        )
                    if option.cons:
                        self._paragraph(
                            f"{self._label('cons')}: {', '.join(option.cons)}",
                            size=small,
                            color=style.secondary_color,
                            indent=720,
                        )

            if decision.votes:
                votes = ", ".join(f"{self._agent(v.agent_id)}: {v.confidence}%" for v in decision.votes)
                self._paragraph(f"{self._label('votes')}: {votes}", size=small, space_after=100)
                average = round(sum(v.confidence for v in decision.votes) / len(decision.votes))
                self._paragraph(
                    f"{self._label('confidence')}: {average}%",
                    size=small,
                    italic=True,
                    color=style.secondary_color,
                    space_after=100,
                )

        if self.options.include_agent_metadata:
            supporters = _supporters(decision)
            if supporters:
                names = ", ".join(self._agent(agent_id) for agent_id in supporters)
                self._paragraph(
                    f"{self._label('supported_by')}: {names}",
                    size=small,
                    italic=True,
                    color=style.secondary_color,
                    space_after=200,
                )

    def _drafts(self, content: SelectedContent) -> None:
        style = self.style
        self._heading(self._label("drafts"), level=1)

        for i, draft in enumerate(content.drafts, start=1):
            self._heading(f"{i}. {self.exporter.localize(draft.title_text, self.options)}", level=2)

            if self.options.style != "minimal":
                self._paragraph(
                    f"{self._label('version')}: {draft.version}",
                    size=style.body_size - 2,
                    italic=True,
                    color=style.secondary_color,
                    space_after=100,
                )

            body = self.exporter.localize(draft.body_text, self.options)
            if body:
                self._lines(body)
            self._paragraph(space_after=300)

    def _summary(self, content: SelectedContent) -> None:
        self._heading(self._label("summary"), level=1)
        self._lines(content.summary or "")


def _supporters(decision: Decision) -> list[str]:
    """Agents that voted for the option matching the decision outcome."""
    if not decision.outcome:
        return []
    winning = {o.id for o in decision.options if decision.outcome in (o.id, o.description, o.description_he)}
    supporters: list[str] = []
    for vote in decision.votes:
        if vote.option_id in winning and vote.agent_id not in supporters:
            supporters.append(vote.agent_id)
    return supporters
