"""Tests for the Markdown exporter."""

import pytest

from forge_export.export import ExportOptions, MarkdownExporter


@pytest.fixture
def exporter(fixed_clock):
    return MarkdownExporter(clock=fixed_clock)


def render(exporter, content, **options):
    return exporter.render_markdown(content, ExportOptions(**options))


def test_minimal_document(exporter, sample_content):
    md = render(exporter, sample_content)

    assert md.startswith("# Test Campaign\n\n---")
    assert "**Goal:**" not in md
    assert "## Summary" in md
    assert "## Transcript" in md
    assert "### Ronit *1/15/24, 10:05 AM*" in md
    assert "We should focus on emotional appeal" in md
    assert "### You *1/15/24, 10:07 AM*" in md
    assert "Exported on" not in md


def test_section_order(exporter, sample_content):
    md = render(exporter, sample_content)
    positions = [md.index(h) for h in ("## Summary", "## Transcript", "## Decisions", "## Drafts")]
    assert positions == sorted(positions)


def test_professional_header_and_footer(exporter, sample_content):
    md = render(exporter, sample_content, style="professional")

    assert "**Goal:** Write a fundraising email" in md
    assert "**Mode:** debate" in md
    assert "**Date:** 1/15/24, 10:00 AM" in md
    assert "**Phase:** synthesis" in md
    assert md.endswith("*Exported on 1/15/24, 12:00 PM via Forge*")


def test_timestamps_off(exporter, sample_content):
    md = render(exporter, sample_content, include_timestamps=False, style="professional")
    assert "### Ronit\n" in md
    assert "**Date:**" not in md


def test_detailed_decision_structures(exporter, sample_content):
    detailed = render(exporter, sample_content, style="detailed")
    minimal = render(exporter, sample_content, style="minimal")

    for md in (detailed, minimal):
        assert "### Tone of voice" in md
        assert "**Outcome:** Emotional storytelling" in md
        assert "**Reasoning:** Donors respond to stories" in md

    assert "**Options:**" in detailed
    assert "- **Emotional storytelling**" in detailed
    assert "  - Pros: Memorable" in detailed
    assert "  - Cons: Can feel manipulative" in detailed
    assert "**Votes:**" in detailed
    assert "- Ronit: 90% confidence" in detailed

    assert "**Options:**" not in minimal
    assert "**Votes:**" not in minimal


def test_detailed_message_metadata(exporter, sample_content):
    md = render(exporter, sample_content, style="detailed")
    assert "> *Type: disagreement*" in md
    assert "> *Reply to: msg-1*" in md


def test_drafts(exporter, sample_content):
    md = render(exporter, sample_content, style="detailed")
    assert "### Email body (v2)" in md
    assert "*👀 review*" in md
    assert "First paragraph\n\nSecond paragraph" in md
    assert "> **Noa** (4/5)" in md
    assert "> Suggestions: Add one number" in md


def test_hebrew(exporter, sample_content):
    md = render(exporter, sample_content, language="he", style="professional")

    assert "## תמליל" in md
    assert "### רונית" in md
    assert "כדאי להתמקד בפנייה רגשית" in md
    # No Hebrew counterpart: the English text is used
    assert "Numbers convince donors" in md
    assert "### טון הדיבור" in md
    assert "באמצעות Forge" in md


def test_deterministic(exporter, sample_content):
    assert render(exporter, sample_content, style="detailed") == render(exporter, sample_content, style="detailed")
