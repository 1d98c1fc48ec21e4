"""
Exceptions raised by the engine store.

Validation and snapshot errors are raised before any mutation, so a caller
that catches them can rely on the collection being unchanged.
"""


class MultiSearchError(Exception):
    """Base class for all store errors."""


class ValidationError(MultiSearchError):
    """User input was rejected (missing field, empty query, nothing selected)."""


class SnapshotError(MultiSearchError):
    """An imported snapshot could not be parsed or has the wrong shape."""
