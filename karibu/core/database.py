from motor.motor_asyncio import AsyncIOMotorClient
from karibu.core.config import Settings
from karibu.core.logger import get_logger
from karibu.core.store import RecordStore

logger = get_logger("database")


def create_client(settings: Settings) -> AsyncIOMotorClient:
    # Stored dates are UTC; read them back timezone-aware
    return AsyncIOMotorClient(settings.MONGODB_URL, tz_aware=True)


async def init_store(client: AsyncIOMotorClient, settings: Settings) -> RecordStore:
    """Bind a RecordStore to the configured database and make sure its indexes exist."""
    store = RecordStore(client[settings.DATABASE_NAME])
    await store.ensure_indexes()
    logger.info("Record store ready on database '%s'", settings.DATABASE_NAME)
    return store
