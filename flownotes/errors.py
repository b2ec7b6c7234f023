from __future__ import annotations


class LedgerError(RuntimeError):
    """
    Base class for failures reported by the ledger client adapter.
    The message is shown to the user as-is.
    """


class SubmissionError(LedgerError):
    """The transaction was rejected before execution (network, auth, malformed payload)."""


class ExecutionError(LedgerError):
    """The transaction was sealed but the ledger reported an error."""


class QueryError(LedgerError):
    """A read-only script could not be executed."""
