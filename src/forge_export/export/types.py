"""Types shared by the export pipeline: options, selected content, results."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from forge_export.models import CamelModel, Decision, Draft, Message

EXPORT_FORMATS = ("md", "json", "html", "pdf", "docx")
CONTENT_TYPES = ("transcript", "decisions", "drafts", "summary", "full")
EXPORT_STYLES = ("minimal", "professional", "detailed")

ContentType = Literal["transcript", "decisions", "drafts", "summary", "full"]
Language = Literal["en", "he"]


class ExportOptions(CamelModel):
    """Controls what is exported and how.

    ``format`` and ``style`` are plain strings so that an unknown value is
    reported by the manager or the exporter as a failed result rather than
    rejected during parsing.
    """

    # Format selection
    format: str = "md"

    # Content selection
    content_types: list[ContentType] = Field(default_factory=lambda: ["transcript"])

    # Filters
    include_system_messages: bool = False
    include_timestamps: bool = True
    include_agent_metadata: bool = False
    phases: list[str] | None = None
    agents: list[str] | None = None

    # Presentation
    style: str = "minimal"
    language: Language = "en"

    # Branding
    include_logo: bool = False
    logo_path: str | None = None

    # Document structure (PDF/DOCX)
    include_table_of_contents: bool = False
    include_cover_page: bool = False

    # Output
    filename: str | None = None
    output_dir: str | None = None

    @classmethod
    def resolve(cls, options: ExportOptions | Mapping[str, Any] | None = None) -> ExportOptions:
        """Merge caller options over the defaults.

        Args:
            options: Full options, a partial mapping (snake_case or camelCase
                keys), or None for all defaults. Keys explicitly set to None
                fall back to their defaults.

        Returns:
            Options with every field resolved.

        Raises:
            pydantic.ValidationError: If a value has the wrong type.
        """
        if options is None:
            return cls()
        if isinstance(options, ExportOptions):
            return options.model_copy(deep=True)
        return cls.model_validate({k: v for k, v in options.items() if v is not None})


class SessionMetadata(CamelModel):
    """Flattened session metadata carried into every export."""

    id: str
    project_name: str
    goal: str = ""
    mode: str | None = None
    started_at: datetime
    ended_at: datetime | None = None
    current_phase: str = ""


class SelectedContent(CamelModel):
    """The filtered projection of a session that exporters read.

    Built fresh for each export call by the content selector.
    """

    session: SessionMetadata
    messages: list[Message] = Field(default_factory=list)
    decisions: list[Decision] = Field(default_factory=list)
    drafts: list[Draft] = Field(default_factory=list)
    summary: str | None = None

    def is_empty(self) -> bool:
        return not (self.messages or self.decisions or self.drafts or self.summary)


class ExportResult(CamelModel):
    """Outcome of an export: content on success, an error message on failure."""

    success: bool
    content: str | None = None
    filename: str | None = None
    mime_type: str | None = None
    error: str | None = None
    error_type: str | None = None

    @classmethod
    def ok(cls, content: str, filename: str, mime_type: str) -> ExportResult:
        return cls(success=True, content=content, filename=filename, mime_type=mime_type)

    @classmethod
    def failure(cls, error: str, error_type: str = "ExportExecutionFailure") -> ExportResult:
        return cls(success=False, error=error, error_type=error_type)
