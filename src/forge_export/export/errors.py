"""Export error taxonomy.

These exceptions never leave the export pipeline: the manager converts each
one into a failed ``ExportResult`` whose ``error_type`` is the class ``kind``.
"""


class ExportError(Exception):
    """Base class for export failures."""

    kind = "ExportExecutionFailure"


class UnsupportedFormatError(ExportError):
    """No exporter is registered for the requested format."""

    kind = "UnsupportedFormat"

    def __init__(self, format: str, supported: list[str]) -> None:
        self.format = format
        self.supported = supported
        available = ", ".join(supported) or "none"
        super().__init__(f"Unsupported export format: {format}. Supported: {available}")


class UnsupportedOptionsError(ExportError):
    """The exporter rejects the option combination."""

    kind = "UnsupportedOptions"


class NoContentSelectedError(ExportError):
    """Selection produced no messages, decisions, drafts or summary."""

    kind = "NoContentSelected"

    def __init__(self) -> None:
        super().__init__("No content selected for export. Adjust content type filters.")


class MissingSessionMetadataError(ExportError):
    """The session has no id or project name."""

    kind = "MissingSessionMetadata"

    def __init__(self) -> None:
        super().__init__("Session missing required metadata (id, projectName)")


class ExportExecutionError(ExportError):
    """An exporter failed while producing output."""

    kind = "ExportExecutionFailure"
