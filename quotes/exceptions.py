from __future__ import annotations


class QuotesError(Exception):
    """Base class for errors raised by the quotes app."""


class ParseError(QuotesError):
    """An import file could not be read as a whole; nothing is imported."""


class RowError(ParseError):
    """A single CSV row could not be read; the row is skipped."""


class PersistenceError(QuotesError):
    """The remote quote table could not be read or written."""


class WorkflowError(QuotesError):
    """An import preview transition that is not valid in the current state."""


class NothingToImport(WorkflowError):
    pass


class CommitInProgress(WorkflowError):
    pass
