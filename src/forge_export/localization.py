"""Localized labels and date formatting shared by every exporter.

All fixed UI strings live in ``LABELS`` so each exporter renders the same
English/Hebrew wording. Dates are formatted the way the en-US and he-IL
locales print them, without depending on the host's locale settings.
"""

from __future__ import annotations

from datetime import datetime, timezone

LABELS: dict[str, dict[str, str]] = {
    # Sections
    "summary": {"en": "Summary", "he": "סיכום"},
    "transcript": {"en": "Transcript", "he": "תמליל"},
    "discussion_transcript": {"en": "Discussion Transcript", "he": "תמליל הדיון"},
    "decisions": {"en": "Decisions", "he": "החלטות"},
    "drafts": {"en": "Drafts", "he": "טיוטות"},
    "toc": {"en": "Table of Contents", "he": "תוכן עניינים"},
    # Session metadata
    "goal": {"en": "Goal", "he": "מטרה"},
    "mode": {"en": "Mode", "he": "מצב"},
    "date": {"en": "Date", "he": "תאריך"},
    "phase": {"en": "Phase", "he": "שלב"},
    "current_phase": {"en": "Phase", "he": "שלב נוכחי"},
    "standard_mode": {"en": "Standard", "he": "Standard"},
    # Decisions
    "outcome": {"en": "Outcome", "he": "תוצאה"},
    "reasoning": {"en": "Reasoning", "he": "נימוק"},
    "options": {"en": "Options", "he": "אפשרויות"},
    "pros": {"en": "Pros", "he": "יתרונות"},
    "cons": {"en": "Cons", "he": "חסרונות"},
    "votes": {"en": "Votes", "he": "הצבעות"},
    "confidence": {"en": "Confidence", "he": "רמת ביטחון"},
    "supported_by": {"en": "Supported by", "he": "תומכים"},
    # Drafts
    "version": {"en": "Version", "he": "גרסה"},
    "feedback": {"en": "Feedback", "he": "משוב"},
    "suggestions": {"en": "Suggestions", "he": "הצעות"},
    # Agents
    "you": {"en": "You", "he": "אתה"},
    "system": {"en": "System", "he": "מערכת"},
    # Footers
    "exported_on": {"en": "Exported on", "he": "יוצא ב"},
    "via_forge": {"en": "via Forge", "he": "באמצעות Forge"},
    "generated_by": {"en": "Generated by Forge", "he": "נוצר עם Forge"},
    "page": {"en": "Page", "he": "עמוד"},
}

HEBREW_MODE_NAMES = {
    "debate": "דיון",
    "brainstorm": "סיעור מוחות",
    "critique": "ביקורת",
    "consensus": "הסכמה",
}

ENGLISH_MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

HEBREW_MONTHS = [
    "בינואר",
    "בפברואר",
    "במרץ",
    "באפריל",
    "במאי",
    "ביוני",
    "ביולי",
    "באוגוסט",
    "בספטמבר",
    "באוקטובר",
    "בנובמבר",
    "בדצמבר",
]


def label(key: str, language: str) -> str:
    """Look up a fixed label.

    Args:
        key: Label key from ``LABELS``.
        language: ``en`` or ``he``; anything else renders English.

    Returns:
        The label text, or the key itself when it is not in the table.
    """
    entry = LABELS.get(key)
    if entry is None:
        return key
    return entry["he"] if language == "he" else entry["en"]


def mode_name(mode: str, language: str) -> str:
    """Display name of a session mode; Hebrew names for the known modes."""
    if language == "he":
        return HEBREW_MODE_NAMES.get(mode, mode)
    return mode


def locale_tag(language: str) -> str:
    return "he-IL" if language == "he" else "en-US"


def _as_utc(dt: datetime) -> datetime:
    # Naive timestamps from session files are UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_short(dt: datetime, language: str) -> str:
    """Short date and time, e.g. ``1/15/24, 10:05 AM`` or ``15.1.2024, 10:05``."""
    dt = _as_utc(dt)
    if language == "he":
        return f"{dt.day}.{dt.month}.{dt.year}, {dt:%H:%M}"

    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{dt.month}/{dt.day}/{dt:%y}, {hour}:{dt:%M} {suffix}"


def format_long_date(dt: datetime, language: str) -> str:
    """Long date, e.g. ``January 15, 2024`` or ``15 בינואר 2024``."""
    dt = _as_utc(dt)
    if language == "he":
        return f"{dt.day} {HEBREW_MONTHS[dt.month - 1]} {dt.year}"
    return f"{ENGLISH_MONTHS[dt.month - 1]} {dt.day}, {dt.year}"


def iso_timestamp(dt: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return _as_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")
