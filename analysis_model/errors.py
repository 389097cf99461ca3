"""Exceptions raised by the analysis model.

Every error derives from ``AnalysisModelError`` and from the builtin that
describes the same failure, so ``except KeyError``-style handlers written
against plain containers keep working:

    NotFoundError              remove / find_by_id with an unknown id
    OutOfRangeError            Report.get with an invalid index
    UnknownPropertyError       dynamic property lookup with an unknown name
    InvalidArgumentError       provenance setters and parsers given bad input
    UnsupportedOperationError  mutation through a read-only view or iterator
    SerializationError         malformed report payloads
"""


class AnalysisModelError(Exception):
    """Base exception for all analysis model errors."""


class NotFoundError(AnalysisModelError, LookupError):
    """Raised when no issue with the requested id is part of a report."""


class OutOfRangeError(AnalysisModelError, IndexError):
    """Raised when an index does not address an issue of a report."""


class UnknownPropertyError(AnalysisModelError, LookupError):
    """Raised when a property name is not part of the issue vocabulary."""


class InvalidArgumentError(AnalysisModelError, ValueError):
    """Raised when a required value is missing or malformed."""


class UnsupportedOperationError(AnalysisModelError, TypeError):
    """Raised when a read-only view of a report is asked to mutate."""


class SerializationError(AnalysisModelError, ValueError):
    """Raised when a serialized report cannot be decoded."""
