"""
Error taxonomy for the document pipeline.

Route handlers translate these into HTTP responses; inside the background
worker they are terminal and only ever show up in logs and as status=failed.
"""


class DocumentServiceError(Exception):
    """Base exception for all document pipeline errors."""


class ValidationError(DocumentServiceError):
    """Raised when an upload is rejected (wrong content type, too large, empty)."""


class NotFoundError(DocumentServiceError):
    """Raised when no document exists with the requested id."""

    def __init__(self, document_id: int) -> None:
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class EngineFailure(DocumentServiceError):
    """Raised when the OCR engine could not produce text for an image."""


class PersistenceError(DocumentServiceError):
    """Raised when the document store is unavailable or a write failed."""
