"""
Database connection and Beanie ODM initialization.

Beanie is an async ODM for MongoDB built on Motor and Pydantic.
We initialize it once at startup and close the client at shutdown.
"""

import logging
from typing import List, Type

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.config import Settings
from app.models.document import Document
from app.models.sequence import Sequence

logger = logging.getLogger(__name__)

# Document models that Beanie will manage (collections + indexes)
DOCUMENT_MODELS: List[Type] = [Document, Sequence]


async def init_models(database: AsyncIOMotorDatabase) -> None:
    """Bind the Beanie models to a database. Tests call this with an in-memory one."""
    await init_beanie(database=database, document_models=DOCUMENT_MODELS)


async def connect_to_mongo(settings: Settings) -> AsyncIOMotorClient:
    """
    Create Motor client and initialize Beanie with document models.
    Called once at application startup; the caller owns the returned client.
    """
    client = AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)
    await init_models(client[settings.mongodb_database])
    logger.info("MongoDB connection established; Beanie initialized.")
    return client


def close_mongo_connection(client: AsyncIOMotorClient) -> None:
    """Close the Motor client on application shutdown."""
    logger.info("Closing MongoDB connection.")
    client.close()
