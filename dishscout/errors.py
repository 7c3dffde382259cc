"""Error taxonomy for the matching engine.

An empty candidate set is not an error: it comes back as a response with
``total_matches == 0``.
"""


class DishScoutError(Exception):
    """Base class for domain errors."""


class InvalidQuery(DishScoutError):
    """The caller-supplied query violates basic shape constraints."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class SourceUnavailable(DishScoutError):
    """A restaurant source failed or timed out."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"source '{source}' unavailable: {reason}")
        self.source = source
        self.reason = reason


class MalformedRecord(DishScoutError):
    """A single raw record could not be normalized."""

    def __init__(self, kind: str, reason: str, record_id: str | None = None):
        super().__init__(f"malformed {kind} record: {reason}")
        self.kind = kind
        self.reason = reason
        self.record_id = record_id
