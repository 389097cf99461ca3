"""Tests for analysis_model/cli.py"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from analysis_model.cli import cli
from analysis_model.issue import IssueBuilder, Severity
from analysis_model.report import Report
from analysis_model.serialization import dumps, loads


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write_report(path: Path, report: Report) -> str:
    path.write_text(dumps(report), encoding="utf-8")
    return str(path)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def reports(tmp_path):
    builder = IssueBuilder().set_origin("checkstyle")
    first = Report().set_origin("checkstyle").add_all(
        builder.set_file_name("A.java").set_message("a1").set_severity(Severity.HIGH).build(),
        builder.set_file_name("A.java").set_message("a2").set_severity(Severity.LOW).build(),
    )
    first.log_error("Skipped %s", "X.java")
    second = Report().set_origin("pmd").add_all(
        builder.set_file_name("B.java").set_message("b1").set_severity(Severity.LOW).build(),
        builder.set_file_name("A.java").set_message("a1").set_severity(Severity.HIGH).build(),
    )
    return (
        _write_report(tmp_path / "first.json", first),
        _write_report(tmp_path / "second.json", second),
    )


# ---------------------------------------------------------------------------
# summary
# ---------------------------------------------------------------------------

def test_summary_merges_reports(runner, reports):
    result = runner.invoke(cli, ["summary", *reports])
    assert result.exit_code == 0, result.output

    data = json.loads(result.output)
    assert data["origin"] == "checkstyle"
    assert data["size"] == 3
    assert data["duplicates"] == 1
    assert data["priorities"] == {"high": 1, "normal": 0, "low": 2}
    assert data["properties"]["severity"] == {"HIGH": 1, "LOW": 2}
    assert data["properties"]["fileName"] == {"A.java": 2, "B.java": 1}
    assert data["errors"] == ["Skipped X.java"]


def test_summary_with_explicit_property(runner, reports):
    result = runner.invoke(cli, ["summary", reports[1], "--property", "file_name"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["properties"] == {"fileName": {"B.java": 1, "A.java": 1}}


def test_summary_unknown_property_exits(runner, reports):
    result = runner.invoke(cli, ["summary", reports[0], "--property", "lineStart"])
    assert result.exit_code == 1
    assert "Property error" in result.output


def test_summary_uses_config(runner, reports, tmp_path):
    config = tmp_path / "analysis-config.yaml"
    config.write_text("pretty: true\nsummary:\n  properties: [category]\n", encoding="utf-8")
    result = runner.invoke(cli, ["--config", str(config), "summary", reports[0]])
    assert result.exit_code == 0, result.output
    assert "\n  " in result.output
    assert list(json.loads(result.output)["properties"]) == ["category"]


def test_invalid_config_exits(runner, reports, tmp_path):
    result = runner.invoke(cli, ["--config", str(tmp_path / "missing.yaml"), "summary", reports[0]])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_invalid_report_exits(runner, tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    result = runner.invoke(cli, ["summary", str(broken)])
    assert result.exit_code == 1
    assert "Invalid report" in result.output


def test_non_utf8_report_exits(runner, tmp_path):
    latin = tmp_path / "latin.json"
    latin.write_bytes(b"\xff\xfe\x00bad")
    result = runner.invoke(cli, ["summary", str(latin)])
    assert result.exit_code == 1
    assert "Invalid report" in result.output
    assert "UTF-8" in result.output


def test_edited_copy_with_same_ids_exits(runner, reports, tmp_path):
    raw = json.loads(Path(reports[0]).read_text(encoding="utf-8"))
    raw["issues"][0]["message"] = "edited"
    edited = tmp_path / "edited.json"
    edited.write_text(json.dumps(raw), encoding="utf-8")

    result = runner.invoke(cli, ["merge", reports[0], str(edited)])
    assert result.exit_code == 1
    assert "already used" in result.output
    assert raw["issues"][0]["id"] in result.output


# ---------------------------------------------------------------------------
# group
# ---------------------------------------------------------------------------

def test_group_by_file(runner, reports):
    result = runner.invoke(cli, ["group", *reports, "--by", "fileName"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data == {
        "A.java": {"size": 2, "messages": ["a1", "a2"]},
        "B.java": {"size": 1, "messages": ["b1"]},
    }


def test_group_defaults_to_severity(runner, reports):
    result = runner.invoke(cli, ["group", reports[0]])
    assert result.exit_code == 0, result.output
    assert set(json.loads(result.output)) == {"HIGH", "LOW"}


# ---------------------------------------------------------------------------
# merge
# ---------------------------------------------------------------------------

def test_merge_writes_report(runner, reports, tmp_path):
    out = tmp_path / "merged.json"
    result = runner.invoke(cli, ["--output", str(out), "merge", *reports])
    assert result.exit_code == 0, result.output

    merged = loads(out.read_text(encoding="utf-8"))
    assert merged.origin == "checkstyle"
    assert merged.size() == 3
    assert merged.duplicates_size == 1


def test_merge_stamps_configured_origin(runner, tmp_path):
    plain = _write_report(tmp_path / "plain.json", Report().add(IssueBuilder().build()))
    config = tmp_path / "analysis-config.yaml"
    config.write_text('origin: "spotbugs"\n', encoding="utf-8")

    result = runner.invoke(cli, ["--config", str(config), "merge", plain])
    assert result.exit_code == 0, result.output
    assert loads(result.output).origin == "spotbugs"


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

def test_init_writes_template(runner, tmp_path):
    out = tmp_path / "analysis-config.yaml"
    result = runner.invoke(cli, ["init", "--output", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()


def test_init_refuses_to_overwrite(runner, tmp_path):
    out = tmp_path / "analysis-config.yaml"
    out.write_text("existing")
    result = runner.invoke(cli, ["init", "--output", str(out)])
    assert result.exit_code == 1
    assert "already exists" in result.output
