"""In-memory model of static analysis reports: issues, builders and reports."""

__version__ = "1.0.0"

from analysis_model.errors import (  # noqa: E402
    AnalysisModelError,
    InvalidArgumentError,
    NotFoundError,
    OutOfRangeError,
    SerializationError,
    UnknownPropertyError,
    UnsupportedOperationError,
)
from analysis_model.issue import Issue, IssueBuilder, Severity  # noqa: E402
from analysis_model.report import Priorities, Report  # noqa: E402

__all__ = [
    "AnalysisModelError",
    "InvalidArgumentError",
    "Issue",
    "IssueBuilder",
    "NotFoundError",
    "OutOfRangeError",
    "Priorities",
    "Report",
    "SerializationError",
    "Severity",
    "UnknownPropertyError",
    "UnsupportedOperationError",
    "__version__",
]
