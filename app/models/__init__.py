"""Beanie document models."""

from app.models.document import Document, DocumentInfo, DocumentStatus
from app.models.sequence import Sequence

__all__ = ["Document", "DocumentInfo", "DocumentStatus", "Sequence"]
