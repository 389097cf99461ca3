"""Issue properties used for filtering, grouping and counting.

Two equivalent ways to read a property:

    file_name(issue)                 # typed accessor
    resolve("fileName")(issue)       # accessor selected by name at runtime

Both return the same string for the same issue. The names accepted by
``resolve`` are exactly the accessors below; the snake_case spelling of a
name is accepted as well (``"file_name"``).
"""

from typing import Callable

from analysis_model.errors import UnknownPropertyError
from analysis_model.issue import Issue, Severity

Accessor = Callable[[Issue], str]
Predicate = Callable[[Issue], bool]


# ---------------------------------------------------------------------------
# Typed accessors
# ---------------------------------------------------------------------------

def file_name(issue: Issue) -> str:
    return issue.file_name


def package_name(issue: Issue) -> str:
    return issue.package_name


def module_name(issue: Issue) -> str:
    return issue.module_name


def category(issue: Issue) -> str:
    return issue.category


def type_(issue: Issue) -> str:
    return issue.type


def origin(issue: Issue) -> str:
    return issue.origin


def message(issue: Issue) -> str:
    return issue.message


def severity(issue: Issue) -> str:
    return issue.severity.value


# ---------------------------------------------------------------------------
# Lookup by name
# ---------------------------------------------------------------------------

#: Canonical property name -> accessor
PROPERTIES: dict[str, Accessor] = {
    "fileName":    file_name,
    "packageName": package_name,
    "moduleName":  module_name,
    "category":    category,
    "type":        type_,
    "origin":      origin,
    "message":     message,
    "severity":    severity,
}

_SNAKE_CASE = {
    "file_name":    "fileName",
    "package_name": "packageName",
    "module_name":  "moduleName",
}


def canonical_name(name: str) -> str:
    """Return the canonical spelling of property *name*.

    Raises:
        UnknownPropertyError: if *name* is not a known property.
    """
    key = _SNAKE_CASE.get(name, name)
    if key not in PROPERTIES:
        available = ", ".join(PROPERTIES)
        raise UnknownPropertyError(
            f"Unknown property '{name}'. Available properties: {available}"
        )
    return key


def resolve(name: str) -> Accessor:
    """Return the accessor registered for property *name*.

    Raises:
        UnknownPropertyError: if *name* is not a known property.
    """
    return PROPERTIES[canonical_name(name)]


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def by_property(name: str, value: str) -> Predicate:
    """Predicate matching issues whose property *name* equals *value*."""
    accessor = resolve(name)
    return lambda issue: accessor(issue) == value


def by_file_name(value: str) -> Predicate:
    return lambda issue: issue.file_name == value


def by_package_name(value: str) -> Predicate:
    return lambda issue: issue.package_name == value


def by_module_name(value: str) -> Predicate:
    return lambda issue: issue.module_name == value


def by_category(value: str) -> Predicate:
    return lambda issue: issue.category == value


def by_type(value: str) -> Predicate:
    return lambda issue: issue.type == value


def by_origin(value: str) -> Predicate:
    return lambda issue: issue.origin == value


def by_severity(value: Severity | str) -> Predicate:
    level = Severity.from_string(value)
    return lambda issue: issue.severity is level
