"""Export pipeline for forge sessions.

This package selects content from a debate session and renders it to
Markdown, JSON, HTML, PDF or DOCX through a registry of exporters.
"""

from forge_export.export.base import BaseExporter, Exporter
from forge_export.export.docx_export import DOCXExporter
from forge_export.export.errors import (
    ExportError,
    ExportExecutionError,
    MissingSessionMetadataError,
    NoContentSelectedError,
    UnsupportedFormatError,
    UnsupportedOptionsError,
)
from forge_export.export.html_document import HTMLExporter
from forge_export.export.json_export import JSON_EXPORT_VERSION, JSONExporter
from forge_export.export.manager import ExportManager, build_default_manager
from forge_export.export.markdown import MarkdownExporter
from forge_export.export.pdf import PageSetup, PDFExporter, PDFRenderer, PlaywrightRenderer
from forge_export.export.selector import ContentSelector
from forge_export.export.types import (
    CONTENT_TYPES,
    EXPORT_FORMATS,
    EXPORT_STYLES,
    ExportOptions,
    ExportResult,
    SelectedContent,
    SessionMetadata,
)

__all__ = [
    # Pipeline
    "ContentSelector",
    "ExportManager",
    "build_default_manager",
    # Exporters
    "BaseExporter",
    "DOCXExporter",
    "Exporter",
    "HTMLExporter",
    "JSONExporter",
    "JSON_EXPORT_VERSION",
    "MarkdownExporter",
    "PDFExporter",
    # PDF rendering
    "PDFRenderer",
    "PageSetup",
    "PlaywrightRenderer",
    # Types
    "CONTENT_TYPES",
    "EXPORT_FORMATS",
    "EXPORT_STYLES",
    "ExportOptions",
    "ExportResult",
    "SelectedContent",
    "SessionMetadata",
    # Errors
    "ExportError",
    "ExportExecutionError",
    "MissingSessionMetadataError",
    "NoContentSelectedError",
    "UnsupportedFormatError",
    "UnsupportedOptionsError",
]
