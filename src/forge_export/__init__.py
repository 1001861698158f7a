"""
forge_export - Forge Session Export

Export multi-agent debate sessions (transcripts, decisions, drafts and
summaries) to Markdown, JSON, HTML, PDF and DOCX.
"""

__version__ = "0.1.0"

from forge_export.models import (
    Decision,
    DecisionOption,
    Draft,
    DraftContent,
    DraftFeedback,
    LocalizedText,
    Message,
    MessageType,
    Session,
    SessionConfig,
    Vote,
    resolve,
)
from forge_export.personas import AgentPersona, PersonaRegistry, default_registry
from forge_export.export import (
    ContentSelector,
    ExportManager,
    ExportOptions,
    ExportResult,
    SelectedContent,
    build_default_manager,
)
from forge_export.loader import SessionLoadError, load_session

__all__ = [
    "__version__",
    # Models
    "Session",
    "SessionConfig",
    "Message",
    "MessageType",
    "Decision",
    "DecisionOption",
    "Vote",
    "Draft",
    "DraftContent",
    "DraftFeedback",
    "LocalizedText",
    "resolve",
    # Personas
    "AgentPersona",
    "PersonaRegistry",
    "default_registry",
    # Export
    "ContentSelector",
    "ExportManager",
    "ExportOptions",
    "ExportResult",
    "SelectedContent",
    "build_default_manager",
    # Loading
    "SessionLoadError",
    "load_session",
]
