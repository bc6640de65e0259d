"""
Monitoring and Tracing Configuration Module.

This module wires ExpertPress into Logfire for tracing and structured events:
- FastAPI request traces
- SQLAlchemy statement traces
- Authorship events (post writes, experts removed with their posts)
- API request timings and error reports

Logfire is opt-in: nothing is sent unless ``LOGFIRE_ENABLED`` is true and a
``LOGFIRE_TOKEN`` is configured. The ``log_*`` helpers are no-ops otherwise,
and a failure inside Logfire never reaches the caller.
"""

from typing import Iterable, Optional

import logfire
from fastapi import FastAPI
from logfire import SamplingOptions
from sqlalchemy.ext.asyncio import AsyncEngine

from expertpress.core.logging_config import get_logger
from expertpress.server.core import constant
from expertpress.server.core.config import settings

logger = get_logger(__name__)

_configured = False


def is_configured() -> bool:
    return _configured


def initialize_logfire(app: Optional[FastAPI] = None, engine: Optional[AsyncEngine] = None) -> bool:
    """
    Configure Logfire and instrument the server.

    Args:
        app: FastAPI application whose endpoints are traced (optional)
        engine: Database engine whose statements are traced (optional)

    Returns:
        True if Logfire was configured, False if monitoring stays off
    """
    global _configured

    if not settings.logfire_enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not settings.logfire_token:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name=settings.logfire_service_name,
            service_version=constant.VERSION,
            environment=settings.logfire_environment,
            sampling=SamplingOptions(head=settings.logfire_sample_rate),
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False
    _configured = True

    if settings.logfire_trace_sqlalchemy and engine is not None:
        try:
            logfire.instrument_sqlalchemy(engine=engine)
            logger.info("Logfire: SQLAlchemy instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument SQLAlchemy: {e}")

    if settings.logfire_trace_fastapi:
        if app is not None:
            try:
                logfire.instrument_fastapi(app)
                logger.info("Logfire: FastAPI instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument FastAPI: {e}")
        else:
            logger.debug("FastAPI app instance not provided, skipping FastAPI instrumentation")

    logger.info(
        f"Logfire monitoring initialized: "
        f"environment={settings.logfire_environment}, "
        f"service={settings.logfire_service_name}"
    )
    return True


def log_post_written(action: str, post_id: str, expert_ids: Iterable[str]) -> None:
    """
    Record a post created or edited together with its ordered experts.

    Args:
        action: ``created`` or ``edited``
        post_id: Post id
        expert_ids: Expert ids in byline order, primary expert first
    """
    if not _configured:
        return
    try:
        logfire.info("Post {action}", action=action, post_id=post_id, expert_ids=list(expert_ids))
    except Exception:
        logger.debug(f"Could not log post write to Logfire: {post_id}")


def log_expert_removed(user_id: str, deleted_posts: int) -> None:
    if not _configured:
        return
    try:
        logfire.info("Expert removed", user_id=user_id, deleted_posts=deleted_posts)
    except Exception:
        logger.debug(f"Could not log expert removal to Logfire: {user_id}")


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with its timing.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    if not _configured:
        return
    try:
        logfire.info(
            "API request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log API request to Logfire: {method} {path}")


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """
    Report an unhandled error with the request context.

    Args:
        error_type: Exception class name
        error_message: Exception message
        context: Extra attributes such as the error id and path
    """
    if not _configured:
        return
    try:
        logfire.error(f"{error_type}: {error_message}", **(context or {}))
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")
