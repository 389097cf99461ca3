"""JSON round trip for reports.

Usage:
    text   = dumps(report, pretty=True)
    report = loads(text)                 # equal to the original report

Readers stay compatible with payloads written by older revisions: absent
fields take the builder defaults, ``priority`` is read as ``severity`` and
camelCase field names are accepted next to the snake_case ones.
"""

import json
import uuid
from typing import Any

from analysis_model.errors import AnalysisModelError, InvalidArgumentError, SerializationError
from analysis_model.issue import Issue, IssueBuilder
from analysis_model.report import DEFAULT_ID, Report

FORMAT_VERSION = 2

# Descriptive fields -> builder setter
_ISSUE_FIELDS = (
    ("file_name",    "set_file_name"),
    ("package_name", "set_package_name"),
    ("module_name",  "set_module_name"),
    ("category",     "set_category"),
    ("type",         "set_type"),
    ("origin",       "set_origin"),
    ("message",      "set_message"),
)

# Older payloads
_LEGACY_KEYS = {
    "fileName":    "file_name",
    "packageName": "package_name",
    "moduleName":  "module_name",
    "priority":    "severity",
}


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------

def issue_to_dict(issue: Issue) -> dict[str, Any]:
    data: dict[str, Any] = {"id": str(issue.id)}
    data.update({name: getattr(issue, name) for name, _ in _ISSUE_FIELDS})
    data["severity"] = issue.severity.value
    return data


def issue_from_dict(raw: dict[str, Any]) -> Issue:
    """Build an issue from *raw*, keeping its ``id`` when one is present.

    Raises:
        SerializationError: if *raw* is not a mapping or holds invalid values.
    """
    if not isinstance(raw, dict):
        raise SerializationError(f"An issue must be a JSON object, got {type(raw).__name__}")

    data = {_LEGACY_KEYS.get(key, key): value for key, value in raw.items()}
    builder = IssueBuilder()
    for name, setter in _ISSUE_FIELDS:
        getattr(builder, setter)(data.get(name))

    try:
        builder.set_severity(data.get("severity"))
        issue_id = uuid.UUID(str(data["id"])) if data.get("id") else None
    except (AnalysisModelError, ValueError) as exc:
        raise SerializationError(f"Invalid issue {raw!r}: {exc}") from exc

    return builder.build(issue_id)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def report_to_dict(report: Report) -> dict[str, Any]:
    return {
        "version":        FORMAT_VERSION,
        "origin":         report.origin,
        "origin_set":     report.has_origin,
        "reference":      report.reference,
        "reference_set":  report.has_reference,
        "duplicates":     report.duplicates_size,
        "info_messages":  list(report.info_messages),
        "error_messages": list(report.error_messages),
        "issues":         [issue_to_dict(issue) for issue in report],
    }


def report_from_dict(raw: dict[str, Any]) -> Report:
    """Restore a report written by ``report_to_dict`` (any revision).

    The written duplicates count is carried over, not recomputed. Two
    different issues sharing one id are rejected.

    Raises:
        SerializationError: if the payload is malformed.
    """
    if not isinstance(raw, dict):
        raise SerializationError(f"A report must be a JSON object, got {type(raw).__name__}")

    issues = raw.get("issues")
    if issues is None:
        issues = []
    if not isinstance(issues, list):
        raise SerializationError("'issues' must be a list")

    report = Report()
    try:
        report.add_all(issue_from_dict(item) for item in issues)
    except InvalidArgumentError as exc:
        raise SerializationError(f"Invalid issues: {exc}") from exc

    origin = raw.get("origin") or DEFAULT_ID
    reference = raw.get("reference") or DEFAULT_ID
    if raw.get("origin_set", origin != DEFAULT_ID):
        report.origin = origin
    if raw.get("reference_set", reference != DEFAULT_ID):
        report.reference = reference

    for message in raw.get("info_messages") or []:
        report.log_info(str(message))
    for message in raw.get("error_messages") or []:
        report.log_error(str(message))

    duplicates = raw.get("duplicates")
    if duplicates is None:
        duplicates = 0
    try:
        report.add_duplicates(duplicates)
    except InvalidArgumentError as exc:
        raise SerializationError(f"Invalid duplicates count: {duplicates!r}") from exc

    return report


def dumps(report: Report, pretty: bool = False) -> str:
    indent = 2 if pretty else None
    return json.dumps(report_to_dict(report), indent=indent, ensure_ascii=False)


def loads(text: str) -> Report:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"Invalid JSON: {exc}") from exc
    return report_from_dict(raw)
