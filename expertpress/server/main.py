"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS and
request timing), turns on Logfire monitoring when configured, and includes the
API and theme routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from expertpress.core.database.session import engine, init_db
from expertpress.core.logging_config import get_logger, setup_logging
from expertpress.core.monitoring import initialize_logfire
from expertpress.frontend import routes as frontend

from .api.v1 import experts, health, posts
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    try:
        logger.info("Starting up ExpertPress Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down ExpertPress Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    ExpertPress Server API

    This API provides the content services of the ExpertPress blogging platform.
    It supports managing posts and their experts, listing expert profiles, and rendering the theme.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

initialize_logfire(app, engine)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(posts.router, prefix=f"{constant.API_V1_STR}/posts", tags=["posts"])
app.include_router(experts.router, prefix=f"{constant.API_V1_STR}/experts", tags=["experts"])
# Catch-all slug routes go last
app.include_router(frontend.router)
