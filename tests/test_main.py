"""Tests for the CLI entry point."""

import json

import pytest
from click.testing import CliRunner

from config import settings
from main import main


SESSION_ARGS = [
    "--account", "Harbor Freightways",
    "--icp", "iot_industrial",
    "--business-area", "fleet maintenance",
    "--context", "unplanned downtime",
]


@pytest.fixture
def notes_file(tmp_path):
    path = tmp_path / "notes.json"
    path.write_text(json.dumps({
        "Pain Points & Challenges": [
            "Critical sensor failures cost 40 hours a month",
            "The SCADA system needs real-time alerts",
        ],
        "Technical Requirements": ["unknown"],
    }))
    return path


class TestCompletenessOnly:

    def test_scores_notes_file(self, notes_file):
        result = CliRunner().invoke(main, ["--notes", str(notes_file), "--completeness-only"])
        assert result.exit_code == 0, result.output
        assert "50% (low)" in result.output
        assert "Technical Requirements: Needs more exploration (1/2 minimum)" in result.output

    def test_requires_notes(self):
        result = CliRunner().invoke(main, ["--completeness-only"])
        assert result.exit_code == 1
        assert "requires --notes" in result.output

    def test_rejects_malformed_notes(self, tmp_path):
        path = tmp_path / "notes.json"
        path.write_text(json.dumps({"Area": "not a list"}))
        result = CliRunner().invoke(main, ["--notes", str(path), "--completeness-only"])
        assert result.exit_code != 0
        assert "must map area names to lists of notes" in result.output


class TestSessionRun:

    def test_missing_session_fields(self):
        result = CliRunner().invoke(main, ["--account", "Acme"])
        assert result.exit_code == 1
        assert "--icp" in result.output

    def test_imported_notes_produce_report(self, notes_file, tmp_path):
        out = tmp_path / "out"
        result = CliRunner().invoke(
            main,
            SESSION_ARGS + ["--notes", str(notes_file), "--mock", "--output", str(out)],
        )
        assert result.exit_code == 0, result.output
        assert "Imported notes for 2 areas" in result.output

        session_dirs = list(out.iterdir())
        assert len(session_dirs) == 1
        report = json.loads((session_dirs[0] / "report.json").read_text())
        assert report["source"] == "fallback"
        assert report["completeness_percentage"] == 50

    def test_interactive_session(self, tmp_path):
        out = tmp_path / "out"
        # Blank answer below the minimum is refused, then two answers, then blank to move on
        answers = "\n".join([
            "",
            "the intake system fails every week",
            "we need it fixed, it costs 10 hours",
            "",
        ]) + "\n"
        result = CliRunner().invoke(
            main,
            SESSION_ARGS + ["--areas", "Pain Points & Challenges", "--mock", "--output", str(out), "-v"],
            input=answers,
        )
        assert result.exit_code == 0, result.output
        assert "At least 2 answers are needed" in result.output
        assert "Guidance:" in result.output

        session_dir = next(out.iterdir())
        saved = json.loads((session_dir / "session.json").read_text())
        notes = saved["notes"][0]["questions"]
        assert [q["notes"] for q in notes] == [
            "the intake system fails every week",
            "we need it fixed, it costs 10 hours",
        ]

    def test_list_providers(self, monkeypatch):
        monkeypatch.setattr(settings, "openai_api_key", "sk-test")
        result = CliRunner().invoke(main, ["--list-providers"])
        assert result.exit_code == 0
        assert "openai" in result.output
        assert "anthropic" in result.output
