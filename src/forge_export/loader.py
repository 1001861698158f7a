"""Load session snapshots from disk.

Two layouts are supported:

* a single JSON document holding the whole session (``config``,
  ``messages``, ``decisions``, ``drafts``, ...);
* a session directory as written by the desktop app, with a flat
  ``session.json`` metadata file, messages appended to ``messages.jsonl``
  and optional ``decisions.json`` / ``drafts.json`` arrays.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from forge_export.models import Session

logger = logging.getLogger(__name__)

SESSION_FILE = "session.json"
MESSAGES_FILE = "messages.jsonl"
DECISIONS_FILE = "decisions.json"
DRAFTS_FILE = "drafts.json"

# Keys of the flat session.json metadata that belong to the session config
_CONFIG_KEYS = ("projectName", "goal", "goalHe", "mode", "enabledAgents", "methodology", "language")


class SessionLoadError(Exception):
    """A session could not be read or does not match the session model."""


def load_session(path: Path) -> Session:
    """Load a session from a JSON file or a session directory.

    Args:
        path: Session JSON file, or directory containing ``session.json``.

    Returns:
        The parsed session.

    Raises:
        SessionLoadError: If the path is missing, unreadable, or invalid.
    """
    path = Path(path).expanduser()
    if path.is_dir():
        data = _read_session_dir(path)
    elif path.is_file():
        data = _read_json(path)
    else:
        raise SessionLoadError(f"Session not found: {path}")

    if not isinstance(data, dict):
        raise SessionLoadError(f"Expected a JSON object in {path}")

    if "config" not in data:
        data = _from_flat_metadata(data)

    try:
        return Session.model_validate(data)
    except ValidationError as e:
        raise SessionLoadError(f"Invalid session data in {path}: {e}") from e


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        raise SessionLoadError(f"Failed to read {path}: {e}") from e


def _read_jsonl(path: Path) -> list[dict[str, Any]]:
    """Read and parse a JSONL file, skipping blank and malformed lines."""
    entries: list[dict[str, Any]] = []
    try:
        with path.open("r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(json.loads(line))
                except json.JSONDecodeError:
                    logger.warning("Skipping malformed line %d in %s", lineno, path)
    except OSError as e:
        raise SessionLoadError(f"Failed to read {path}: {e}") from e
    return entries


def _read_session_dir(directory: Path) -> dict[str, Any]:
    session_file = directory / SESSION_FILE
    if not session_file.exists():
        raise SessionLoadError(f"No {SESSION_FILE} in {directory}")

    data = _read_json(session_file)
    if not isinstance(data, dict):
        raise SessionLoadError(f"Expected a JSON object in {session_file}")

    messages_file = directory / MESSAGES_FILE
    if messages_file.exists():
        data["messages"] = _read_jsonl(messages_file)

    for key, filename in (("decisions", DECISIONS_FILE), ("drafts", DRAFTS_FILE)):
        extra = directory / filename
        if extra.exists():
            data[key] = _read_json(extra)

    logger.debug(
        "Loaded session directory %s (%d messages)", directory, len(data.get("messages", []))
    )
    return data


def _from_flat_metadata(data: dict[str, Any]) -> dict[str, Any]:
    """Nest the flat session.json metadata into the session model's shape."""
    nested = {k: v for k, v in data.items() if k not in _CONFIG_KEYS}
    nested["config"] = {k: data[k] for k in _CONFIG_KEYS if k in data}
    nested.setdefault("currentPhase", "initialization")
    # Written by the desktop app but not part of the session model
    nested.pop("messageCount", None)
    return nested
