"""Pydantic response schemas for the documents API (camelCase on the wire)."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.document import Document, DocumentInfo, DocumentStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentSummary(CamelModel):
    """What an upload returns: identity and initial status, no content or OCR fields."""

    id: int
    original_name: str
    uploaded_at: datetime
    status: DocumentStatus

    @classmethod
    def from_document(cls, doc: Union[Document, DocumentInfo]) -> "DocumentSummary":
        return cls(
            id=doc.id,
            original_name=doc.original_name,
            uploaded_at=doc.uploaded_at,
            status=doc.status,
        )


class DocumentRead(DocumentSummary):
    """Full document record. Raw bytes are served separately by /{id}/content."""

    size: int
    mime_type: str
    extracted_text: Optional[str] = None
    confidence: Optional[float] = None

    @classmethod
    def from_document(cls, doc: Union[Document, DocumentInfo]) -> "DocumentRead":
        return cls(
            id=doc.id,
            original_name=doc.original_name,
            uploaded_at=doc.uploaded_at,
            status=doc.status,
            size=doc.size,
            mime_type=doc.mime_type,
            extracted_text=doc.extracted_text,
            confidence=doc.confidence,
        )

    @classmethod
    def from_documents(cls, docs: List[DocumentInfo]) -> List["DocumentRead"]:
        return [cls.from_document(d) for d in docs]


class UploadResponse(CamelModel):
    success: bool = True
    document: DocumentSummary
    message: str = "File uploaded successfully. OCR processing started."


class DeleteResponse(CamelModel):
    success: bool = True
    message: str = "Document deleted"


class HealthResponse(CamelModel):
    status: str
    environment: str
    tesseract_available: bool
