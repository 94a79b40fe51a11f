"""
Document model for uploaded images.

Holds the raw image bytes, upload metadata, and the OCR outcome. The status
field follows a strict forward-only lifecycle; see DocumentStatus.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, Optional

from beanie import Document
from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentStatus(str, Enum):
    """Lifecycle states of a document in the OCR pipeline."""

    PENDING = "pending"  # Uploaded, not yet picked by worker
    PROCESSING = "processing"  # Worker is running OCR
    COMPLETED = "completed"  # Text and confidence saved
    FAILED = "failed"  # OCR could not be completed

    @property
    def is_terminal(self) -> bool:
        return self in (DocumentStatus.COMPLETED, DocumentStatus.FAILED)

    @property
    def predecessors(self) -> FrozenSet["DocumentStatus"]:
        """Statuses a document may be in immediately before entering this one."""
        return frozenset(
            status for status, targets in _TRANSITIONS.items() if self in targets
        )

    def can_transition_to(self, target: "DocumentStatus") -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS = {
    DocumentStatus.PENDING: frozenset({DocumentStatus.PROCESSING}),
    DocumentStatus.PROCESSING: frozenset({DocumentStatus.COMPLETED, DocumentStatus.FAILED}),
    DocumentStatus.COMPLETED: frozenset(),
    DocumentStatus.FAILED: frozenset(),
}


class Document(Document):
    """
    Represents an uploaded image and its OCR state.
    id is a sequential integer handed out by the store, never reused.
    extracted_text and confidence are only ever set together with COMPLETED.
    """

    id: int
    original_name: str
    content: bytes
    size: int
    mime_type: str
    uploaded_at: datetime = Field(default_factory=_utcnow)
    status: DocumentStatus = DocumentStatus.PENDING
    extracted_text: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0, le=100)

    class Settings:
        name = "documents"

    class Config:
        json_schema_extra = {
            "example": {
                "id": 42,
                "original_name": "receipt.jpg",
                "size": 184220,
                "mime_type": "image/jpeg",
                "uploaded_at": "2025-01-01T00:00:00Z",
                "status": "completed",
                "extracted_text": "Invoice #42",
                "confidence": 91.5,
            }
        }


class DocumentInfo(BaseModel):
    """
    Every Document field except the raw image bytes. Used as a Beanie
    projection so listings and searches never pull content off the database.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="_id")
    original_name: str
    size: int
    mime_type: str
    uploaded_at: datetime
    status: DocumentStatus
    extracted_text: Optional[str] = None
    confidence: Optional[float] = None

    class Settings:
        projection = {
            "_id": 1,
            "original_name": 1,
            "size": 1,
            "mime_type": 1,
            "uploaded_at": 1,
            "status": 1,
            "extracted_text": 1,
            "confidence": 1,
        }
