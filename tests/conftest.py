"""Shared fixtures: in-memory MongoDB, a controllable OCR engine, sample images."""

import pytest
from mongomock_motor import AsyncMongoMockClient

from app.config import Settings
from app.database import init_models
from app.services.container import Services, build_services
from app.services.document_store import DocumentStore
from tests.helpers import FakeOCREngine, make_image_bytes


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, ocr_timeout_seconds=None, shutdown_grace_seconds=1.0)


@pytest.fixture
async def store() -> DocumentStore:
    """A DocumentStore bound to a fresh in-memory database for each test."""
    client = AsyncMongoMockClient()
    await init_models(client["ocr_documents_test"])
    return DocumentStore()


@pytest.fixture
def ocr_engine() -> FakeOCREngine:
    return FakeOCREngine()


@pytest.fixture
def services(settings: Settings, store: DocumentStore, ocr_engine: FakeOCREngine) -> Services:
    return build_services(settings, ocr_engine=ocr_engine, store=store)


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes()
