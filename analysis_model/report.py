"""The report: an ordered, de-duplicating collection of issues.

Usage:
    report = Report().add_all(issue_1, issue_2)
    report.remove(issue_1.id)
    by_file = report.group_by_property("fileName")   # {"Foo.py": Report, ...}
    merged  = Report(report_a, report_b)              # provenance of report_a wins

Issues keep the order of their first successful ``add``. Adding an issue
that is equal to a contained one only bumps ``duplicates_size``.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from collections.abc import Sequence
from typing import AbstractSet, Callable, Iterable, Iterator, NamedTuple

from analysis_model import properties
from analysis_model.errors import (
    InvalidArgumentError,
    NotFoundError,
    OutOfRangeError,
    UnsupportedOperationError,
)
from analysis_model.issue import Issue, Severity

logger = logging.getLogger(__name__)

DEFAULT_ID = "-"


class Priorities(NamedTuple):
    """Number of issues per severity level."""

    high: int
    normal: int
    low: int


# ---------------------------------------------------------------------------
# Read-only access
# ---------------------------------------------------------------------------

class IssueIterator:
    """Iterator over the issues of a report that cannot change the report."""

    def __init__(self, issues: Iterable[Issue]) -> None:
        self._iterator = iter(issues)

    def __iter__(self) -> IssueIterator:
        return self

    def __next__(self) -> Issue:
        return next(self._iterator)

    def remove(self) -> None:
        raise UnsupportedOperationError(
            "Issues cannot be removed through an iterator, use Report.remove(issue_id)"
        )


class IssueView(Sequence):
    """Live, read-only sequence of the issues of a report."""

    def __init__(self, report: Report) -> None:
        self._report = report

    def __len__(self) -> int:
        return len(self._report)

    def __getitem__(self, index):
        return self._report._sequence()[index]

    def __iter__(self) -> IssueIterator:
        return iter(self._report)

    def __contains__(self, issue) -> bool:
        return issue in self._report

    def __repr__(self) -> str:
        return f"IssueView({list(self._report._sequence())!r})"

    def _read_only(self, *args, **kwargs):
        raise UnsupportedOperationError("The issues of a report are read-only")

    __setitem__ = __delitem__ = _read_only
    append = extend = insert = remove = pop = clear = _read_only


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

class Report:
    """Ordered set of issues together with provenance and log messages."""

    DEFAULT_ID = DEFAULT_ID

    def __init__(self, *reports: Report) -> None:
        # id -> issue, in insertion order
        self._issues: dict[uuid.UUID, Issue] = {}
        self._values: set[Issue] = set()
        # Positional snapshot of _issues, reset on every change
        self._ordered: tuple[Issue, ...] | None = None
        self._duplicates = 0
        self._origin = DEFAULT_ID
        self._origin_set = False
        self._reference = DEFAULT_ID
        self._reference_set = False
        self._info_messages: list[str] = []
        self._error_messages: list[str] = []

        if reports:
            self.add_all(*reports)

    # ------------------------------------------------------------------
    # Provenance
    # ------------------------------------------------------------------

    @property
    def origin(self) -> str:
        """ID of the tool that produced this report."""
        return self._origin

    @origin.setter
    def origin(self, value: str) -> None:
        self._origin = _require_id("origin", value)
        self._origin_set = True

    @property
    def reference(self) -> str:
        """ID of the build or run this report belongs to."""
        return self._reference

    @reference.setter
    def reference(self, value: str) -> None:
        self._reference = _require_id("reference", value)
        self._reference_set = True

    def set_origin(self, value: str) -> Report:
        self.origin = value
        return self

    def set_reference(self, value: str) -> Report:
        self.reference = value
        return self

    @property
    def has_origin(self) -> bool:
        """Whether the origin has been set explicitly (or adopted by a merge)."""
        return self._origin_set

    @property
    def has_reference(self) -> bool:
        return self._reference_set

    # ------------------------------------------------------------------
    # Adding and removing
    # ------------------------------------------------------------------

    def add(self, issue: Issue) -> Report:
        """Append *issue* unless an equal issue is already part of the report.

        Rejected issues only increment ``duplicates_size``.

        Raises:
            InvalidArgumentError: if *issue* is not an ``Issue``, or if it is
                new but its id already belongs to another contained issue.
        """
        if not isinstance(issue, Issue):
            raise InvalidArgumentError(f"Only issues can be added to a report, got {issue!r}")

        if issue in self._values:
            self._duplicates += 1
            logger.debug("Skipping duplicate issue %s", issue)
            return self

        if issue.id in self._issues:
            raise InvalidArgumentError(
                f"Issue id {issue.id} is already used by another issue of this report"
            )
        self._issues[issue.id] = issue
        self._values.add(issue)
        self._ordered = None
        return self

    def add_duplicates(self, count: int) -> Report:
        """Record *count* duplicates rejected outside this report (e.g. before saving it).

        Raises:
            InvalidArgumentError: if *count* is not a non-negative integer.
        """
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidArgumentError(
                f"Duplicates count must be a non-negative integer, got {count!r}"
            )
        self._duplicates += count
        return self

    def add_all(self, *items: Issue | Report | Iterable[Issue]) -> Report:
        """Add issues, collections of issues, or merge whole reports.

        Items are processed in the given order. A report contributes its
        issues (de-duplicated as usual) and its info and error messages. Its
        origin and reference are adopted only if this report has none of its
        own yet, so the first report that carries them wins.
        """
        for item in items:
            if isinstance(item, Report):
                self._merge(item)
            elif isinstance(item, Issue):
                self.add(item)
            else:
                for issue in item:
                    self.add(issue)
        return self

    def _merge(self, source: Report) -> None:
        for issue in tuple(source._issues.values()):
            self.add(issue)
        self._info_messages.extend(tuple(source._info_messages))
        self._error_messages.extend(tuple(source._error_messages))

        if source._origin_set and not self._origin_set:
            logger.debug("Adopting origin '%s' from merged report", source._origin)
            self._origin = source._origin
            self._origin_set = True
        if source._reference_set and not self._reference_set:
            logger.debug("Adopting reference '%s' from merged report", source._reference)
            self._reference = source._reference
            self._reference_set = True

    def remove(self, issue_id: uuid.UUID) -> Issue:
        """Remove and return the issue with *issue_id*.

        Raises:
            NotFoundError: if no such issue is part of the report.
        """
        issue = self._issues.pop(issue_id, None)
        if issue is None:
            raise NotFoundError(f"No issue found with id {issue_id}")
        self._values.discard(issue)
        self._ordered = None
        logger.debug("Removed issue %s", issue_id)
        return issue

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_by_id(self, issue_id: uuid.UUID) -> Issue:
        """Return the issue with *issue_id*.

        Raises:
            NotFoundError: if no such issue is part of the report.
        """
        try:
            return self._issues[issue_id]
        except KeyError:
            raise NotFoundError(f"No issue found with id {issue_id}") from None

    def find_by_property(self, predicate: Callable[[Issue], bool]) -> set[Issue]:
        """Return all issues that satisfy *predicate*."""
        return {issue for issue in self._issues.values() if predicate(issue)}

    def get(self, index: int) -> Issue:
        """Return the issue at position *index* (0-based, no negative indices).

        Raises:
            OutOfRangeError: if *index* is negative or not smaller than ``size()``.
        """
        if not 0 <= index < len(self._issues):
            raise OutOfRangeError(
                f"No issue at index {index}, report contains {len(self._issues)} issues"
            )
        return self._sequence()[index]

    def _sequence(self) -> tuple[Issue, ...]:
        if self._ordered is None:
            self._ordered = tuple(self._issues.values())
        return self._ordered

    @property
    def issues(self) -> IssueView:
        """Read-only view of the issues in insertion order."""
        return IssueView(self)

    def __iter__(self) -> IssueIterator:
        return IssueIterator(self._issues.values())

    def __contains__(self, issue: object) -> bool:
        return issue in self._values

    def __len__(self) -> int:
        return len(self._issues)

    def size(self) -> int:
        return len(self._issues)

    def is_empty(self) -> bool:
        return not self._issues

    def is_not_empty(self) -> bool:
        return bool(self._issues)

    @property
    def duplicates_size(self) -> int:
        """Number of rejected attempts to add an already contained issue."""
        return self._duplicates

    def get_priorities(self) -> Priorities:
        counts = Counter(issue.severity for issue in self._issues.values())
        return Priorities(
            high=counts[Severity.HIGH],
            normal=counts[Severity.NORMAL],
            low=counts[Severity.LOW],
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def get_properties(self, accessor: Callable[[Issue], str]) -> AbstractSet[str]:
        """Return the distinct values of a property, in order of first occurrence."""
        return dict.fromkeys(accessor(issue) for issue in self._issues.values()).keys()

    def get_property_count(self, accessor: Callable[[Issue], str]) -> dict[str, int]:
        """Return the number of issues per distinct property value."""
        return dict(Counter(accessor(issue) for issue in self._issues.values()))

    def get_files(self) -> AbstractSet[str]:
        return self.get_properties(properties.file_name)

    def get_packages(self) -> AbstractSet[str]:
        return self.get_properties(properties.package_name)

    def get_modules(self) -> AbstractSet[str]:
        return self.get_properties(properties.module_name)

    def get_categories(self) -> AbstractSet[str]:
        return self.get_properties(properties.category)

    def get_types(self) -> AbstractSet[str]:
        return self.get_properties(properties.type_)

    def get_tools(self) -> AbstractSet[str]:
        return self.get_properties(properties.origin)

    def group_by_property(self, name: str) -> dict[str, Report]:
        """Partition the issues by the property called *name*.

        Every group is a new report holding the issues with the same value,
        in their original order. Groups inherit origin and reference of this
        report but start without log messages and duplicates.

        Raises:
            UnknownPropertyError: if *name* is not a known property.
        """
        accessor = properties.resolve(name)
        groups: dict[str, Report] = {}
        for issue in self._issues.values():
            value = accessor(issue)
            group = groups.get(value)
            if group is None:
                group = groups[value] = self._copy_provenance(Report())
            group.add(issue)
        return groups

    # ------------------------------------------------------------------
    # Derived reports
    # ------------------------------------------------------------------

    def filter(self, predicate: Callable[[Issue], bool]) -> Report:
        """Return a new report with the issues that satisfy *predicate*.

        Provenance, log messages and the duplicates count are carried over
        from this report.
        """
        filtered = self.copy_empty_instance()
        for issue in self._issues.values():
            if predicate(issue):
                filtered.add(issue)
        return filtered

    def copy(self) -> Report:
        """Return an independent report with the same issues and metadata."""
        copied = self.copy_empty_instance()
        copied._issues = dict(self._issues)
        copied._values = set(self._values)
        return copied

    def copy_empty_instance(self) -> Report:
        """Return a report without issues but with the metadata of this one.

        Origin, reference, log messages and the duplicates count are kept.
        """
        empty = self._copy_provenance(Report())
        empty._info_messages = list(self._info_messages)
        empty._error_messages = list(self._error_messages)
        empty._duplicates = self._duplicates
        return empty

    def __copy__(self) -> Report:
        return self.copy()

    def _copy_provenance(self, target: Report) -> Report:
        target._origin = self._origin
        target._origin_set = self._origin_set
        target._reference = self._reference
        target._reference_set = self._reference_set
        return target

    # ------------------------------------------------------------------
    # Log messages
    # ------------------------------------------------------------------

    def log_info(self, fmt: str, *args) -> None:
        """Append an info message; *args* are substituted ``%``-style."""
        self._info_messages.append(_format(fmt, args))

    def log_error(self, fmt: str, *args) -> None:
        """Append an error message; *args* are substituted ``%``-style."""
        self._error_messages.append(_format(fmt, args))

    @property
    def info_messages(self) -> tuple[str, ...]:
        return tuple(self._info_messages)

    @property
    def error_messages(self) -> tuple[str, ...]:
        return tuple(self._error_messages)

    # ------------------------------------------------------------------
    # Comparison and rendering
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Report):
            return NotImplemented
        return (
            self._origin == other._origin
            and self._reference == other._reference
            and self._duplicates == other._duplicates
            and self._info_messages == other._info_messages
            and self._error_messages == other._error_messages
            and list(self._issues.values()) == list(other._issues.values())
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"Report(origin={self._origin!r}, reference={self._reference!r}, "
            f"size={len(self._issues)}, duplicates={self._duplicates})"
        )

    def __str__(self) -> str:
        return f"{len(self._issues)} issues ({self._duplicates} duplicates)"


def _require_id(name: str, value: str) -> str:
    if value is None:
        raise InvalidArgumentError(f"The {name} of a report must not be None")
    return str(value)


def _format(fmt: str, args: tuple) -> str:
    return fmt % args if args else fmt
