"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Builds the session store, messenger and pairing connector for the
  lifetime of the app
- Registers API routes (webhook, direct control API)
- No business logic should be written here
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import time

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.schemas.response import StatusResponse
from app.services.baileys_service import BaileysBridgeConnector
from app.services.session_service import InMemorySessionStore, MongoSessionStore, SessionStore
from app.services.whatsapp_service import WhatsAppService
from app.api import webhook, baileys

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


async def create_session_store() -> SessionStore:
    """
    Builds the configured session store.
    """
    ttl_seconds = settings.session_ttl_seconds

    if settings.SESSION_BACKEND == "mongo":
        from app.db.mongo import connect_to_mongo, get_sessions_collection
        from app.db.indexes import create_indexes

        await connect_to_mongo()
        await create_indexes(ttl_seconds)
        return MongoSessionStore(get_sessions_collection(), ttl_seconds=ttl_seconds)

    return InMemorySessionStore(ttl_seconds=ttl_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting WaLink application...")

    try:
        validate_settings()
        logger.info("Configuration validated")

        app.state.session_store = await create_session_store()
        app.state.messenger = WhatsAppService()
        app.state.connector = BaileysBridgeConnector()

        if not app.state.messenger.is_configured():
            logger.warning("ACCESS_TOKEN not set, outbound replies will be rejected by the Graph API")

        logger.info(f"Session backend: {settings.SESSION_BACKEND}")
        logger.info(f"Session TTL (minutes): {settings.SESSION_TTL_MINUTES}")
        logger.info(f"Echo mode: {settings.ECHO_MODE}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down WaLink application...")

    try:
        await app.state.connector.close()
        await app.state.messenger.close()
        await app.state.session_store.close()

        if settings.SESSION_BACKEND == "mongo":
            from app.db.mongo import close_mongo_connection
            await close_mongo_connection()

        logger.info("WaLink application shut down successfully")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


# Create FastAPI app with lifespan
app = FastAPI(
    title="WaLink",
    description="WhatsApp Cloud API webhook that links a user's WhatsApp via pairing code",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Pairing calls to the bridge can take a while; anything past 5s is worth a look
    if process_time > 5.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

# Register API routes
app.include_router(webhook.router, tags=["Webhook"])
app.include_router(baileys.router, prefix=settings.BAILEYS_API_PREFIX, tags=["Baileys"])


@app.get("/", tags=["Health"], response_model=StatusResponse)
async def root():
    """Root endpoint - basic info."""
    return StatusResponse(status="success", message="Welcome to the API")


@app.get("/health", tags=["Health"], response_model=StatusResponse)
async def health_check():
    """Liveness check."""
    return StatusResponse(status="success", message="Server is healthy")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
