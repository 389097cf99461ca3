"""Issue value objects.

Usage:
    issue = IssueBuilder().set_file_name("Foo.py").set_message("unused import").build()
    other = IssueBuilder().copy(issue).set_severity(Severity.HIGH).build()

Two issues with the same descriptive fields are equal even though every
``build()`` call hands out a fresh ``id``. The ``id`` only identifies an
issue inside a report (remove / find_by_id), it never takes part in
equality or hashing.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field

from analysis_model.errors import InvalidArgumentError


# ---------------------------------------------------------------------------
# Severity
# ---------------------------------------------------------------------------

class Severity(enum.Enum):
    """Three-level priority of an issue, most severe first."""

    HIGH = "HIGH"
    NORMAL = "NORMAL"
    LOW = "LOW"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, name: str) -> Severity:
        """Parse a level name such as ``"high"`` or the legacy ``"WARNING_HIGH"``.

        Raises:
            InvalidArgumentError: if *name* does not denote one of the levels.
        """
        if isinstance(name, Severity):
            return name
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Severity must be a string, got {name!r}")
        key = name.strip().upper()
        if key.startswith("WARNING_"):
            key = key[len("WARNING_"):]
        try:
            return cls[key]
        except KeyError:
            levels = ", ".join(s.value for s in cls)
            raise InvalidArgumentError(
                f"Unknown severity '{name}'. Expected one of: {levels}"
            ) from None


# ---------------------------------------------------------------------------
# Issue
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Issue:
    """A single finding reported by an analysis tool."""

    file_name: str = ""
    package_name: str = ""
    module_name: str = ""
    category: str = ""
    type: str = ""
    origin: str = ""
    message: str = ""
    severity: Severity = Severity.NORMAL
    id: uuid.UUID = field(default_factory=uuid.uuid4, compare=False, repr=False)

    def __str__(self) -> str:
        location = self.file_name or "-"
        return f"[{self.severity.value}] {location}: {self.message}"


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class IssueBuilder:
    """Mutable, reusable factory for ``Issue`` instances.

    Unset text fields default to ``""`` and the severity to ``NORMAL``.
    Each ``build()`` takes a snapshot, so changing the builder afterwards
    never touches issues built before.
    """

    def __init__(self) -> None:
        self._file_name = ""
        self._package_name = ""
        self._module_name = ""
        self._category = ""
        self._type = ""
        self._origin = ""
        self._message = ""
        self._severity = Severity.NORMAL

    def set_file_name(self, file_name: str | None) -> IssueBuilder:
        self._file_name = _text(file_name)
        return self

    def set_package_name(self, package_name: str | None) -> IssueBuilder:
        self._package_name = _text(package_name)
        return self

    def set_module_name(self, module_name: str | None) -> IssueBuilder:
        self._module_name = _text(module_name)
        return self

    def set_category(self, category: str | None) -> IssueBuilder:
        self._category = _text(category)
        return self

    def set_type(self, type_: str | None) -> IssueBuilder:
        self._type = _text(type_)
        return self

    def set_origin(self, origin: str | None) -> IssueBuilder:
        self._origin = _text(origin)
        return self

    def set_message(self, message: str | None) -> IssueBuilder:
        self._message = _text(message)
        return self

    def set_severity(self, severity: Severity | str | None) -> IssueBuilder:
        """Set the severity; accepts a ``Severity`` or its name, ``None`` resets to NORMAL."""
        self._severity = Severity.NORMAL if severity is None else Severity.from_string(severity)
        return self

    def copy(self, issue: Issue) -> IssueBuilder:
        """Load every descriptive field of *issue* into this builder."""
        self._file_name = issue.file_name
        self._package_name = issue.package_name
        self._module_name = issue.module_name
        self._category = issue.category
        self._type = issue.type
        self._origin = issue.origin
        self._message = issue.message
        self._severity = issue.severity
        return self

    def build(self, issue_id: uuid.UUID | None = None) -> Issue:
        """Return a new issue with the current field values.

        A fresh identifier is generated unless *issue_id* is given (used when
        restoring serialized reports).
        """
        return Issue(
            file_name=self._file_name,
            package_name=self._package_name,
            module_name=self._module_name,
            category=self._category,
            type=self._type,
            origin=self._origin,
            message=self._message,
            severity=self._severity,
            id=issue_id or uuid.uuid4(),
        )


def _text(value: str | None) -> str:
    return "" if value is None else str(value)
