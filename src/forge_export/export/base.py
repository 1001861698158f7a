"""Exporter interface and the shared helpers format exporters build on."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from forge_export import localization
from forge_export.export.types import CONTENT_TYPES, EXPORT_STYLES, ExportOptions, ExportResult, SelectedContent
from forge_export.models import HUMAN_AGENT_ID, SYSTEM_AGENT_ID, LocalizedText, resolve
from forge_export.personas import PersonaRegistry, default_registry

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

MAX_SLUG_LENGTH = 40
FALLBACK_SLUG = "export"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@runtime_checkable
class Exporter(Protocol):
    """Anything that turns selected content into one output format.

    Implementations are registered with an ``ExportManager`` by ``format``.
    ``export`` must not raise; failures are returned as a failed result.
    """

    format: str
    mime_type: str
    extension: str

    def supports(self, options: ExportOptions) -> bool: ...

    async def export(self, content: SelectedContent, options: ExportOptions) -> ExportResult: ...


class BaseExporter(ABC):
    """Base class with the helpers every built-in exporter shares.

    Subclasses set ``format``, ``mime_type``, ``extension`` and
    ``display_name`` and implement ``render``. ``export`` wraps ``render``
    so that any fault becomes a failed result naming the format.

    Args:
        personas: Registry used to resolve agent display names.
            Defaults to the built-in personas.
        clock: Returns the current time; used for export dates and
            filenames. Defaults to UTC now.
    """

    format: str
    mime_type: str
    extension: str
    display_name: str
    styles: frozenset[str] = frozenset(EXPORT_STYLES)

    def __init__(self, personas: PersonaRegistry | None = None, clock: Clock | None = None) -> None:
        self.personas = personas if personas is not None else default_registry()
        self.clock = clock or utc_now

    def supports(self, options: ExportOptions) -> bool:
        """Check the format matches and the style is one this exporter renders."""
        return options.format == self.format and options.style in self.styles

    async def export(self, content: SelectedContent, options: ExportOptions) -> ExportResult:
        """Render content and wrap it in a result.

        Args:
            content: Selected session content.
            options: Fully resolved export options.

        Returns:
            A successful result with the rendered document, or a failed
            result describing the fault. Never raises.
        """
        try:
            document = await self.render(content, options)
            filename = self.generate_filename(content, options)
        except Exception as e:
            logger.warning("%s export of session %s failed: %s", self.display_name, content.session.id, e)
            return self.error(f"{self.display_name} export failed: {e}")
        return self.success(document, filename)

    @abstractmethod
    async def render(self, content: SelectedContent, options: ExportOptions) -> str:
        """Produce the document text (base64 for binary formats)."""
        ...

    def generate_filename(self, content: SelectedContent, options: ExportOptions) -> str:
        """Build the output filename.

        A caller-supplied filename only gains the extension when it does not
        already end with it. Otherwise the name is a slug of the project name
        (at most 40 characters, ``export`` when nothing survives slugging)
        followed by the export date.
        """
        suffix = f".{self.extension}"
        if options.filename:
            if options.filename.endswith(suffix):
                return options.filename
            return options.filename + suffix

        slug = _NON_ALNUM.sub("-", content.session.project_name.lower()).strip("-")[:MAX_SLUG_LENGTH]
        date = self.exported_at()[:10]
        return f"{slug or FALLBACK_SLUG}-{date}{suffix}"

    def format_timestamp(self, dt: datetime, options: ExportOptions) -> str:
        """Short localized date and time, or an empty string when timestamps are off."""
        if not options.include_timestamps:
            return ""
        return localization.format_short(dt, options.language)

    def agent_name(self, agent_id: str, options: ExportOptions) -> str:
        """Display name for an agent id, falling back to the raw id."""
        if agent_id == HUMAN_AGENT_ID:
            return localization.label("you", options.language)
        if agent_id == SYSTEM_AGENT_ID:
            return localization.label("system", options.language)

        persona = self.personas.get(agent_id)
        if persona is None:
            return agent_id
        return resolve(LocalizedText(persona.name, persona.name_he), options.language)

    def content_type_label(self, content_type: str, options: ExportOptions) -> str:
        if content_type not in CONTENT_TYPES:
            return content_type
        return localization.label(content_type, options.language)

    def label(self, key: str, options: ExportOptions) -> str:
        return localization.label(key, options.language)

    def localize(self, text: LocalizedText, options: ExportOptions) -> str:
        return resolve(text, options.language)

    def exported_at(self) -> str:
        """The clock's current time as an ISO-8601 UTC string."""
        return localization.iso_timestamp(self.clock())

    def success(self, content: str, filename: str) -> ExportResult:
        return ExportResult.ok(content, filename, self.mime_type)

    def error(self, message: str) -> ExportResult:
        return ExportResult.failure(message)
