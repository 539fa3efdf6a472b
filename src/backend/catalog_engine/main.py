"""
Catalog Engine
FastAPI Application Entry Point
"""

import logging
import logging.handlers
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.catalog import CatalogDependencies, get_catalog_dependencies_dep
from .api.v1.catalog import router as catalog_router
from .api.v1.health import router as health_router
from .database.database import close_redis, get_redis_client, init_redis, redis_manager
from .database.settings_storage import InMemorySettingsStorage, get_settings_storage, init_settings_storage
from .middleware import LoggingMiddleware
from .services.catalog.session import init_session_registry
from .services.clients.availability_client import HttpAvailabilityClient
from .services.clients.cart_client import HttpCartClient
from .services.clients.search_client import HttpSearchClient
from .services.config.configuration_service import get_config_service

# Load environment variables
load_dotenv()


def configure_logging():
    """
    Configure structured logging using structlog.

    - Production (ENV=production): JSON output for log aggregation
    - Development (ENV=development): Human-readable console output
    - Includes automatic context: timestamp, level, logger name, correlation_id,
      catalog_session_id, load_generation
    """
    env = os.getenv("ENV", "development").lower()
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    # Shared processors for all environments
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        timestamper,
    ]

    if env == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback
        )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    # Route standard library logging through the same processors
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # Default log path at project root (3 levels up from src/backend/catalog_engine)
    project_root = Path(__file__).resolve().parent.parent.parent.parent
    default_log_path = project_root / "logs" / "catalog-engine.log"
    log_file_path = str(Path(os.getenv("LOG_FILE_PATH", str(default_log_path))).resolve())
    log_dir = os.path.dirname(log_file_path)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file_path,
        maxBytes=10 * 1024 * 1024,  # 10MB per file
        backupCount=5,
        encoding="utf-8"
    )
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(log_level)

    # Reduce noise from verbose libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return structlog.get_logger(__name__)


# Initialize structured logging
logger = configure_logging()

# Global instances
catalog_dependencies = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown"""

    logger.info("Starting Catalog Engine...")

    global catalog_dependencies

    search_url = os.getenv("SEARCH_SERVICE_URL")
    if not search_url:
        raise ValueError("Missing required environment variable SEARCH_SERVICE_URL")
    cart_url = os.getenv("CART_SERVICE_URL", search_url)
    availability_url = os.getenv("AVAILABILITY_SERVICE_URL", search_url)

    config_service = get_config_service()
    if config_service.validate_config():
        logger.info("✓ Catalog configuration validated")
    else:
        logger.warning("Catalog configuration validation found issues - check logs for details")

    # Settings storage: Redis when enabled and reachable, in-memory otherwise
    enable_redis = os.getenv("ENABLE_REDIS_CACHING", "true").lower() == "true"
    session_ttl = redis_manager.session_ttl

    if enable_redis:
        try:
            await init_redis()
            redis_client = await get_redis_client()
            init_settings_storage(redis_client, ttl=session_ttl)
            logger.info("✓ Redis settings storage initialized")
        except Exception as e:
            logger.warning(f"Redis initialization failed: {e}. Continuing with in-memory settings storage.")
            init_settings_storage(redis_client=None, ttl=session_ttl)
    else:
        logger.info("Redis disabled via ENABLE_REDIS_CACHING=false")
        init_settings_storage(redis_client=None, ttl=session_ttl)
        logger.info("✓ In-memory settings storage initialized (no persistence across restarts)")

    search = HttpSearchClient(search_url)
    cart = HttpCartClient(cart_url)
    availability = HttpAvailabilityClient(availability_url)

    registry = init_session_registry(idle_ttl=session_ttl)
    registry.start_cleanup_loop()

    catalog_dependencies = CatalogDependencies(
        search=search,
        storage=get_settings_storage(),
        registry=registry,
        config_service=config_service,
        cart=cart,
        availability=availability,
    )
    logger.info("All services initialized successfully")

    yield

    logger.info("Shutting down Catalog Engine...")

    try:
        await catalog_dependencies.registry.close_all()
        logger.info("✓ Catalog sessions closed")
    except Exception as e:
        logger.error(f"Error closing catalog sessions: {e}")

    for client in (search, cart, availability):
        await client.close()

    try:
        await close_redis()
        logger.info("✓ Redis closed")
    except Exception as e:
        logger.error(f"Error closing Redis: {e}")

    logger.info("Shutdown complete")


app = FastAPI(
    title="Catalog Engine",
    description="Catalog listing engine: search, pagination, rendering and URL sync",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Update for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)


def get_catalog_dependencies() -> CatalogDependencies:
    """Get catalog collaborators for dependency injection"""
    return catalog_dependencies


app.include_router(catalog_router)
app.include_router(health_router)

app.dependency_overrides[get_catalog_dependencies_dep] = get_catalog_dependencies


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Catalog Engine",
        "version": "1.0.0",
        "endpoints": {
            "catalog": "/api/v1/catalog/sessions",
            "docs": "/docs"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    storage = get_settings_storage()
    storage_type = "in-memory" if isinstance(storage, InMemorySettingsStorage) else "redis"

    health_status = {
        "status": "healthy",
        "services": {
            "catalog": catalog_dependencies is not None,
            "redis": redis_manager._initialized,
        },
        "settings_storage": {
            "type": storage_type,
            "ttl_seconds": storage.ttl,
            "persistent": storage_type == "redis",
        },
        "active_sessions": len(catalog_dependencies.registry) if catalog_dependencies else 0,
    }

    if catalog_dependencies is None:
        health_status["status"] = "unhealthy"

    return health_status


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catalog_engine.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
