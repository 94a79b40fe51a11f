"""
Document upload, listing, search and deletion APIs.

POST /documents: validate image, create record (pending), schedule OCR in the background.
GET /documents[/{id}]: read whatever status the document currently has; clients poll.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status

from app.api.schemas import DeleteResponse, DocumentRead, DocumentSummary, UploadResponse
from app.services.container import Services
from app.services.exceptions import NotFoundError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)
router = APIRouter()


def get_services(request: Request) -> Services:
    """Dependency: the service graph built at startup (see app.main.lifespan)."""
    return request.app.state.services


ServicesDep = Annotated[Services, Depends(get_services)]


def _parse_id(raw: str) -> Optional[int]:
    """Ids are positive integers; anything else names a document that cannot exist."""
    return int(raw) if raw.isascii() and raw.isdigit() else None


def _storage_error(e: PersistenceError) -> HTTPException:
    logger.error("Document store error: %s", e)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )


@router.post(
    "",
    response_model=UploadResponse,
    summary="Upload an image for OCR",
)
async def upload_document(
    services: ServicesDep,
    file: Annotated[Optional[UploadFile], File()] = None,
) -> UploadResponse:
    """
    Accept an image, store it with status=pending, and schedule OCR.
    Response returns immediately with the document id; poll GET /documents/{id}.
    """
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    content = await file.read()
    try:
        doc = await services.ingestion.upload(
            original_name=file.filename or "upload",
            content=content,
            mime_type=file.content_type,
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PersistenceError as e:
        raise _storage_error(e)

    return UploadResponse(document=DocumentSummary.from_document(doc))


@router.get(
    "",
    response_model=List[DocumentRead],
    summary="List documents",
)
async def list_documents(services: ServicesDep) -> List[DocumentRead]:
    """Return all documents, newest first."""
    try:
        docs = await services.queries.list_documents()
    except PersistenceError as e:
        raise _storage_error(e)
    return DocumentRead.from_documents(docs)


@router.get(
    "/search/{query}",
    response_model=List[DocumentRead],
    summary="Search extracted text",
)
async def search_documents(query: str, services: ServicesDep) -> List[DocumentRead]:
    """Case-insensitive substring search over OCR text, newest first."""
    try:
        docs = await services.queries.search_documents(query)
    except PersistenceError as e:
        raise _storage_error(e)
    return DocumentRead.from_documents(docs)


@router.get(
    "/{document_id}",
    response_model=DocumentRead,
    summary="Get a document",
)
async def get_document(document_id: str, services: ServicesDep) -> DocumentRead:
    doc_id = _parse_id(document_id)
    if doc_id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    try:
        doc = await services.queries.get_document(doc_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    except PersistenceError as e:
        raise _storage_error(e)
    return DocumentRead.from_document(doc)


@router.get(
    "/{document_id}/content",
    summary="Download the original image",
    response_class=Response,
)
async def get_document_content(document_id: str, services: ServicesDep) -> Response:
    doc_id = _parse_id(document_id)
    if doc_id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    try:
        doc = await services.queries.get_document(doc_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    except PersistenceError as e:
        raise _storage_error(e)
    return Response(content=doc.content, media_type=doc.mime_type)


@router.delete(
    "/{document_id}",
    response_model=DeleteResponse,
    summary="Delete a document",
)
async def delete_document(document_id: str, services: ServicesDep) -> DeleteResponse:
    """Delete whatever the status; deleting an unknown id still succeeds."""
    doc_id = _parse_id(document_id)
    if doc_id is None:
        return DeleteResponse()
    try:
        await services.queries.delete_document(doc_id)
    except PersistenceError as e:
        raise _storage_error(e)
    return DeleteResponse()
