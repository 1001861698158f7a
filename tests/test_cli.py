"""Tests for the forge-export command line."""

import json
import zipfile

import pytest
from click.testing import CliRunner

from conftest import FakeRenderer
from forge_export.cli import cli
from forge_export.config import Config
from forge_export.export import build_default_manager


@pytest.fixture
def session_file(tmp_path, sample_session):
    path = tmp_path / "session.json"
    path.write_text(sample_session.model_dump_json(by_alias=True), encoding="utf-8")
    return path


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "exports"


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch, fixed_clock, tmp_path):
    """Use default config and a fake PDF renderer for every CLI run."""
    config = Config()
    config.export.output_dir = str(tmp_path / "default-exports")
    monkeypatch.setattr("forge_export.cli.get_config", lambda: config)
    monkeypatch.setattr(
        "forge_export.cli.make_manager",
        lambda: build_default_manager(renderer=FakeRenderer(), clock=fixed_clock),
    )


def invoke(*args):
    return CliRunner().invoke(cli, [str(a) for a in args])


def test_export_markdown(session_file, out_dir):
    result = invoke("export", session_file, "-o", out_dir)

    assert result.exit_code == 0, result.output
    written = out_dir / "test-campaign-2024-01-15.md"
    assert written.read_text(encoding="utf-8").startswith("# Test Campaign")


def test_export_json_with_options(session_file, out_dir):
    result = invoke(
        "export", session_file, "-f", "json", "-c", "decisions", "-c", "drafts",
        "--style", "detailed", "--language", "he", "--phase", "brainstorming", "-o", out_dir,
    )

    assert result.exit_code == 0, result.output
    data = json.loads((out_dir / "test-campaign-2024-01-15.json").read_text(encoding="utf-8"))
    assert data["metadata"]["contentTypes"] == ["decisions", "drafts"]
    assert data["metadata"]["language"] == "he"
    assert [d["id"] for d in data["content"]["decisions"]] == ["dec-1"]
    assert "votes" in data["content"]["decisions"][0]
    assert "messages" not in data["content"]


def test_export_docx_is_decoded(session_file, out_dir):
    result = invoke("export", session_file, "--format", "docx", "--cover", "--toc", "--filename", "report", "-o", out_dir)

    assert result.exit_code == 0, result.output
    assert zipfile.is_zipfile(out_dir / "report.docx")


def test_export_pdf_is_decoded(session_file, out_dir):
    result = invoke("export", session_file, "--format", "pdf", "-o", out_dir)

    assert result.exit_code == 0, result.output
    assert (out_dir / "test-campaign-2024-01-15.pdf").read_bytes() == b"%PDF-1.4 fake"


def test_export_uses_configured_output_dir(session_file, tmp_path):
    result = invoke("export", session_file)

    assert result.exit_code == 0, result.output
    assert (tmp_path / "default-exports" / "test-campaign-2024-01-15.md").exists()


def test_export_failure_exits_1(session_file, out_dir):
    result = invoke("export", session_file, "--format", "rtf", "-o", out_dir)

    assert result.exit_code == 1
    assert "Unsupported export format: rtf" in result.output
    assert not out_dir.exists()


def test_no_content_exits_1(tmp_path, sample_session, out_dir):
    path = tmp_path / "empty.json"
    empty = sample_session.model_copy(update={"messages": [], "decisions": [], "drafts": []})
    path.write_text(empty.model_dump_json(by_alias=True), encoding="utf-8")

    result = invoke("export", path, "-c", "decisions", "-o", out_dir)

    assert result.exit_code == 1
    assert "No content selected" in result.output


def test_invalid_session_exits_1(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{", encoding="utf-8")

    result = invoke("export", path)

    assert result.exit_code == 1
    assert "Error" in result.output


def test_preview_prints_without_writing(session_file, tmp_path):
    result = invoke("preview", session_file, "--no-timestamps", "--agent", "ronit")

    assert result.exit_code == 0, result.output
    assert "Ronit" in result.output
    assert "Numbers convince donors" not in result.output
    assert not (tmp_path / "default-exports").exists()


def test_preview_binary_format(session_file):
    result = invoke("preview", session_file, "-f", "pdf")

    assert result.exit_code == 0, result.output
    assert "application/pdf" in result.output


def test_formats_table():
    result = invoke("formats")

    assert result.exit_code == 0, result.output
    for fmt in ("md", "json", "html", "pdf", "docx"):
        assert fmt in result.output
    assert "text/markdown" in result.output
