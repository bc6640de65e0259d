"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the centralized database layer using SQLModel.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def object_id() -> str:
    """Generate a 24 character hexadecimal identifier for new rows."""
    return uuid.uuid4().hex[:24]


def utc_now_naive() -> datetime:
    """Get current UTC datetime without timezone info."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
