import asyncio

from karibu.core.config import settings
from karibu.core.database import create_client, init_store
from karibu.core.logger import get_logger, setup_logging
from karibu.core.security import get_password_hash
from karibu.models.user import User, UserRole

logger = get_logger("seed")


async def seed_manager():
    """Create (or re-create) the first Manager so someone can log in and add staff."""
    email = settings.SEED_MANAGER_EMAIL
    password = settings.SEED_MANAGER_PASSWORD
    if not email or not password:
        raise SystemExit("Set SEED_MANAGER_EMAIL and SEED_MANAGER_PASSWORD first.")

    client = create_client(settings)
    try:
        store = await init_store(client, settings)

        if await store.find_user_by_email(email):
            logger.warning("Manager '%s' already exists, re-creating it", email)
            await store.delete_user(email)

        manager = User(
            name=settings.SEED_MANAGER_NAME,
            email=email,
            hashed_password=get_password_hash(password),
            role=UserRole.MANAGER,
        )
        await store.create_user(manager)
        logger.info("Manager '%s' created. Log in at %s/auth/login", email, settings.API_PREFIX)
    finally:
        client.close()


if __name__ == "__main__":
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(seed_manager())
