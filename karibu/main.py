from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from karibu.core.config import settings
from karibu.core.database import create_client, init_store
from karibu.core.exceptions import register_exception_handlers
from karibu.core.logger import get_logger, setup_logging
from karibu.core.store import RecordStore
from karibu.routers import auth, procurement, sale, user

logger = get_logger("main")


# ---------------------------------------------------------
# 1. LIFESPAN MANAGER
# ---------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- STARTUP ---
    client = None
    if getattr(app.state, "store", None) is None:
        logger.info("Initialization started...")
        client = create_client(settings)
        app.state.store = await init_store(client, settings)

    yield

    # --- SHUTDOWN ---
    if client is not None:
        client.close()
    logger.info("System shutting down...")


# ---------------------------------------------------------
# 2. APP FACTORY
# ---------------------------------------------------------
def create_app(store: Optional[RecordStore] = None) -> FastAPI:
    """
    Builds the API. Pass a ready `store` to skip connecting to MongoDB
    at start-up (tests do this with an in-memory database).
    """
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        lifespan=lifespan,
        debug=settings.DEBUG,
        description="API for Karibu Groceries procurement and sales across the Maganjo and Matugga branches",
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    prefix = settings.API_PREFIX
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["Authentication"])
    app.include_router(user.router, prefix=f"{prefix}/users", tags=["User Management"])
    app.include_router(procurement.router, prefix=prefix)
    app.include_router(sale.router, prefix=f"{prefix}/sales", tags=["Sales"])

    @app.get("/", tags=["System"])
    async def root():
        return {
            "system": settings.APP_NAME,
            "status": "Online",
            "documentation": "/docs",
        }

    @app.get("/health", tags=["System"])
    async def health_check():
        """Liveness only; does not touch the database."""
        return {"status": "OK", "message": "Server is running"}

    return app
