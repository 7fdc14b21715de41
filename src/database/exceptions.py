"""Exceptions shared by the document store adapters."""


class DuplicateDocumentError(Exception):
    """Raised when an insert violates a unique index (e.g. users.email)."""

    def __init__(self, collection: str, message: str = ""):
        self.collection = collection
        super().__init__(message or f"Duplicate document in {collection}")
