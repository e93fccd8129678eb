"""
Engine Exceptions

Only configuration errors are raised out of the engine. Parse failures
become null fields and validation failures become report entries.
"""

from typing import Sequence


class EngineError(Exception):
    """Base class for errors that abort a pipeline run"""


class MissingKeyColumnError(EngineError, ValueError):
    """A natural-key column is absent from a source row"""

    def __init__(self, source: str, field: str, candidates: Sequence[str], row_number: int):
        self.source = source
        self.field = field
        self.candidates = tuple(candidates)
        self.row_number = row_number
        super().__init__(
            f"Source '{source}' row {row_number} has no column for key field "
            f"'{field}' (looked for: {', '.join(self.candidates)})"
        )


class UnknownSourceError(EngineError, KeyError):
    """A source name has no registered schema"""

    def __str__(self) -> str:
        return f"No source schema registered for '{self.args[0]}'"
