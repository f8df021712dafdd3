"""
Error taxonomy for the revision scheduler.

Every operation fails with exactly one of these. None of them roll back
other cards' state: errors are local to a single operation.
"""


class RevisionError(Exception):
    """Base class for all scheduler errors."""


class ValidationError(RevisionError, ValueError):
    """Input rejected before any store access (blank field, bad id, bad rating...)."""


class NotFoundError(RevisionError):
    """Referenced card does not exist."""


class StateError(RevisionError):
    """Operation not allowed in the card's current state (e.g. undo with empty log)."""


class StorageError(RevisionError):
    """The card store is unreachable or a write failed."""


class ConflictError(StorageError):
    """A card changed between read and write (optimistic version check failed)."""
