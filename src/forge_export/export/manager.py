"""Export manager: the exporter registry and the export pipeline entry point."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from forge_export.export.base import Clock, Exporter
from forge_export.export.docx_export import DOCXExporter
from forge_export.export.errors import (
    ExportError,
    MissingSessionMetadataError,
    NoContentSelectedError,
    UnsupportedFormatError,
    UnsupportedOptionsError,
)
from forge_export.export.html_document import HTMLExporter
from forge_export.export.json_export import JSONExporter
from forge_export.export.markdown import MarkdownExporter
from forge_export.export.pdf import PDFExporter, PDFRenderer
from forge_export.export.selector import ContentSelector
from forge_export.export.types import EXPORT_STYLES, ExportOptions, ExportResult, SelectedContent
from forge_export.models import Session
from forge_export.personas import PersonaRegistry

logger = logging.getLogger(__name__)

OptionsInput = ExportOptions | Mapping[str, Any] | None


class ExportManager:
    """Registry of exporters keyed by format, and the export orchestrator.

    Every public export operation returns an ``ExportResult``; no exception
    escapes. Registration is meant to happen at startup, before exports run.

    Args:
        exporters: Exporters to register. Defaults to the built-in Markdown
            and JSON exporters.
        selector: Content selector. Defaults to a new ``ContentSelector``.
    """

    def __init__(
        self,
        exporters: Iterable[Exporter] | None = None,
        selector: ContentSelector | None = None,
    ) -> None:
        self._exporters: dict[str, Exporter] = {}
        self.selector = selector or ContentSelector()

        if exporters is None:
            exporters = [MarkdownExporter(), JSONExporter()]

        for exporter in exporters:
            self.register_exporter(exporter)

    def register_exporter(self, exporter: Exporter) -> None:
        """Register an exporter; it replaces any exporter for the same format."""
        self._exporters[exporter.format] = exporter

    def unregister_exporter(self, format: str) -> bool:
        """Remove the exporter for a format.

        Returns:
            True if an exporter was registered for the format.
        """
        return self._exporters.pop(format, None) is not None

    def get_exporter(self, format: str) -> Exporter | None:
        return self._exporters.get(format)

    def get_supported_formats(self) -> list[str]:
        return list(self._exporters)

    def supports_format(self, format: str) -> bool:
        return format in self._exporters

    def get_format_info(self, format: str) -> dict[str, str] | None:
        """MIME type and file extension for a registered format, or None."""
        exporter = self._exporters.get(format)
        if exporter is None:
            return None
        return {"mime_type": exporter.mime_type, "extension": exporter.extension}

    async def export(self, session: Session, options: OptionsInput = None) -> ExportResult:
        """Select content from a session and export it.

        Args:
            session: Session snapshot; it is only read.
            options: Full or partial export options. Unset fields take their
                defaults.

        Returns:
            The exporter's result, or a failed result naming what went wrong.
        """
        return await self._run(options, session=session)

    async def export_content(self, content: SelectedContent, options: OptionsInput = None) -> ExportResult:
        """Export content the caller has already selected."""
        return await self._run(options, content=content)

    async def preview(self, session: Session, options: OptionsInput = None) -> ExportResult:
        """Same as ``export``; the caller decides not to persist the result."""
        return await self.export(session, options)

    async def _run(
        self,
        options: OptionsInput,
        session: Session | None = None,
        content: SelectedContent | None = None,
    ) -> ExportResult:
        try:
            resolved = self._resolve_options(options)
            exporter = self._exporter_for(resolved)

            if content is None:
                content = self.selector.select(session, resolved)
            self._validate_content(content)

            logger.info(
                "Exporting session %s as %s (%s)",
                content.session.id,
                resolved.format,
                ", ".join(resolved.content_types),
            )
            result = await exporter.export(content, resolved)
        except ExportError as e:
            result = ExportResult.failure(str(e), error_type=e.kind)
        except Exception as e:
            result = ExportResult.failure(f"Export failed: {e}")

        if result.success:
            logger.info("Exported %s (%s)", result.filename, result.mime_type)
        else:
            logger.warning("Export failed [%s]: %s", result.error_type, result.error)
        return result

    def _resolve_options(self, options: OptionsInput) -> ExportOptions:
        try:
            return ExportOptions.resolve(options)
        except ValidationError as e:
            fmt = options.get("format", "md") if isinstance(options, Mapping) else "md"
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise UnsupportedOptionsError(
                f"Exporter '{fmt}' does not support the given options (invalid: {fields})"
            ) from e

    def _exporter_for(self, options: ExportOptions) -> Exporter:
        exporter = self._exporters.get(options.format)
        if exporter is None:
            raise UnsupportedFormatError(options.format, self.get_supported_formats())

        if not exporter.supports(options):
            message = f"Exporter '{options.format}' does not support the given options"
            if options.style not in EXPORT_STYLES:
                message += f" (unknown style: {options.style})"
            raise UnsupportedOptionsError(message)
        return exporter

    def _validate_content(self, content: SelectedContent) -> None:
        if content.is_empty():
            raise NoContentSelectedError()
        if not content.session.id or not content.session.project_name:
            raise MissingSessionMetadataError()


def build_default_manager(
    renderer: PDFRenderer | None = None,
    clock: Clock | None = None,
    personas: PersonaRegistry | None = None,
) -> ExportManager:
    """Create a manager with every built-in exporter registered.

    Args:
        renderer: PDF renderer. Defaults to ``PlaywrightRenderer``.
        clock: Clock shared by all exporters. Defaults to UTC now.
        personas: Persona registry shared by all exporters.

    Returns:
        A manager supporting md, json, html, pdf and docx.
    """
    return ExportManager(
        [
            MarkdownExporter(personas=personas, clock=clock),
            JSONExporter(personas=personas, clock=clock),
            HTMLExporter(personas=personas, clock=clock),
            PDFExporter(personas=personas, clock=clock, renderer=renderer),
            DOCXExporter(personas=personas, clock=clock),
        ]
    )
