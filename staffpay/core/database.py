"""
Database Setup
MongoDB connection, Beanie initialisation and storage error translation
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from staffpay.config import settings
from staffpay.core.exceptions import StorageError
from staffpay.models.advance import AdvanceLoan
from staffpay.models.attendance import Attendance
from staffpay.models.salary import Salary
from staffpay.models.staff import Staff

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [Staff, Attendance, Salary, AdvanceLoan]


async def init_database(client: Optional[AsyncIOMotorClient] = None) -> AsyncIOMotorClient:
    """Connect to MongoDB and register document models (creates indexes)"""
    if client is None:
        client = AsyncIOMotorClient(settings.MONGODB_URL)

    await init_beanie(
        database=client[settings.MONGODB_DB_NAME],
        document_models=DOCUMENT_MODELS,
    )
    logger.info("Connected to MongoDB: %s", settings.MONGODB_DB_NAME)
    return client


@asynccontextmanager
async def storage_errors(operation: str):
    """Translate driver failures into StorageError"""
    try:
        yield
    except PyMongoError as e:
        logger.error("Storage failure during %s: %s", operation, e)
        raise StorageError(f"Storage unavailable while trying to {operation}") from e
