"""
Exceptions raised by the collection manager.

Every error is recoverable: outer layers (CLI, API) catch CollectorError,
show the message to the user and keep running.
"""


class CollectorError(Exception):
    """Base class for user-facing errors."""


class DuplicateSetError(CollectorError):
    """The set is already present in the target collection."""

    def __init__(self, set_num: str, collection_name: str):
        self.set_num = set_num
        self.collection_name = collection_name
        super().__init__(f"Set {set_num} is already in '{collection_name}'")


class LastCollectionError(CollectorError):
    """At least one collection must always exist."""

    def __init__(self):
        super().__init__("Cannot delete the last remaining collection")


class InvalidImportError(CollectorError):
    """Imported content is not a JSON array of set records."""


class SearchError(CollectorError):
    """The remote search failed (transport, HTTP status or bad JSON)."""


class ConfirmationDeclined(CollectorError):
    """A destructive action needed confirmation that was not given."""


class InvalidSetError(CollectorError):
    """A set record without a usable set_num."""


class UnknownCollectionError(CollectorError, IndexError):
    """No collection at the given position or with the given id."""
