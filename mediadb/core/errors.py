"""
Error taxonomy for the catalog client.

Validation failures (e.g. a duplicate tag name) are not exceptions; they are
returned as results. Only transport failures and contract violations raise.
"""
from typing import Optional


class MediaDbError(Exception):
    """Base class for all mediadb errors."""
    pass


class TransportError(MediaDbError):
    """
    A backend call failed (connection, timeout, HTTP status or payload).

    Recoverable: surfaces catch it and show an error state.
    """
    def __init__(self, operation: str, message: str, status: Optional[int] = None):
        self.operation = operation
        self.status = status
        detail = f"{operation} failed: {message}"
        if status is not None:
            detail = f"{detail} (HTTP {status})"
        super().__init__(detail)


class ContractViolation(MediaDbError):
    """A caller broke an API contract. Indicates a bug, never user input."""
    pass


class TagHierarchyError(MediaDbError):
    """The tag parent graph is deeper than the configured bound (likely a cycle)."""
    def __init__(self, tag_id: int, max_depth: int):
        self.tag_id = tag_id
        self.max_depth = max_depth
        super().__init__(
            f"Tag hierarchy exceeds {max_depth} levels below tag {tag_id}; "
            f"the parent graph probably contains a cycle"
        )
