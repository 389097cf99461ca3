"""Tests for analysis_model/serialization.py"""

import json
import uuid

import pytest

from analysis_model.errors import SerializationError
from analysis_model.issue import IssueBuilder, Severity
from analysis_model.report import Report
from analysis_model.serialization import (
    dumps,
    issue_from_dict,
    issue_to_dict,
    loads,
    report_from_dict,
    report_to_dict,
)


@pytest.fixture
def report() -> Report:
    builder = IssueBuilder().set_origin("pmd").set_package_name("com.example")
    report = Report().add_all(
        builder.set_file_name("A.java").set_message("a").set_severity(Severity.HIGH).build(),
        builder.set_file_name("B.java").set_message("b").set_severity(Severity.LOW).build(),
    )
    report.add(report.get(0))
    report.set_origin("pmd").set_reference("build-42")
    report.log_info("Parsed %d files", 2)
    report.log_error("Skipped %s", "C.java")
    return report


# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------

def test_round_trip_gives_equal_report(report):
    restored = loads(dumps(report))
    assert restored == report
    assert restored.duplicates_size == 1


def test_round_trip_keeps_ids(report):
    restored = loads(dumps(report, pretty=True))
    assert [i.id for i in restored] == [i.id for i in report]
    assert restored.find_by_id(report.get(1).id) == report.get(1)


def test_round_trip_keeps_provenance_flags():
    restored = loads(dumps(Report().set_reference(Report.DEFAULT_ID)))
    assert not restored.has_origin
    assert restored.has_reference


def test_pretty_output_is_indented(report):
    assert "\n  " in dumps(report, pretty=True)
    assert "\n" not in dumps(report)


def test_issue_dict_layout():
    issue = IssueBuilder().set_message("m").set_severity(Severity.LOW).build()
    data = issue_to_dict(issue)
    assert data["id"] == str(issue.id)
    assert data["severity"] == "LOW"
    assert data["message"] == "m"
    assert issue_from_dict(data) == issue


# ---------------------------------------------------------------------------
# Legacy payloads
# ---------------------------------------------------------------------------

def test_legacy_issue_keys_are_understood():
    issue = issue_from_dict({
        "fileName": "Foo.c", "packageName": "p", "moduleName": "m",
        "message": "old", "priority": "WARNING_HIGH",
    })
    assert issue.file_name == "Foo.c"
    assert issue.package_name == "p"
    assert issue.module_name == "m"
    assert issue.severity is Severity.HIGH


def test_missing_fields_take_builder_defaults():
    issue = issue_from_dict({"message": "only a message"})
    assert issue == IssueBuilder().set_message("only a message").build()
    assert isinstance(issue.id, uuid.UUID)


def test_legacy_report_without_flags():
    report = report_from_dict({
        "origin": "checkstyle",
        "issues": [{"message": "x"}, {"message": "x"}],
    })
    assert report.origin == "checkstyle"
    assert report.has_origin
    assert report.reference == Report.DEFAULT_ID
    assert not report.has_reference
    assert report.size() == 1


def test_duplicates_are_restored_verbatim():
    raw = report_to_dict(Report().add(IssueBuilder().build()))
    raw["duplicates"] = 5
    assert report_from_dict(raw).duplicates_size == 5


def test_messages_with_percent_signs_survive():
    report = Report()
    report.log_info("100%% of %s", "files")
    assert loads(dumps(report)).info_messages == ("100% of files",)


# ---------------------------------------------------------------------------
# Malformed payloads
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text", ["not json", "[1, 2]", json.dumps({"issues": {}})])
def test_malformed_report_raises(text):
    with pytest.raises(SerializationError):
        loads(text)


def test_issue_must_be_a_mapping():
    with pytest.raises(SerializationError, match="JSON object"):
        report_from_dict({"issues": ["oops"]})


def test_invalid_severity_raises():
    with pytest.raises(SerializationError, match="Invalid issue"):
        issue_from_dict({"severity": "BLOCKER"})


def test_invalid_id_raises():
    with pytest.raises(SerializationError):
        issue_from_dict({"id": "not-a-uuid"})


def test_missing_or_null_duplicates_count_is_zero():
    assert loads('{"issues": []}').duplicates_size == 0
    assert loads('{"issues": [], "duplicates": null}').duplicates_size == 0


@pytest.mark.parametrize("count", ["-5", "1.5", "true", '"3"', "[]"])
def test_invalid_duplicates_count_raises(count):
    with pytest.raises(SerializationError, match="duplicates count"):
        loads('{"issues": [], "duplicates": %s}' % count)


def test_two_issues_with_one_id_raise():
    issue_id = str(uuid.uuid4())
    raw = {"issues": [
        {"id": issue_id, "message": "first"},
        {"id": issue_id, "message": "second"},
    ]}
    with pytest.raises(SerializationError, match=issue_id):
        report_from_dict(raw)


def test_repeated_issue_with_its_id_is_a_duplicate():
    issue_id = str(uuid.uuid4())
    raw = {"issues": [{"id": issue_id, "message": "same"}, {"id": issue_id, "message": "same"}]}
    report = report_from_dict(raw)
    assert report.size() == 1
    assert report.duplicates_size == 1
