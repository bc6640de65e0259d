"""
Core utilities and configuration for ExpertPress.

This package provides core functionality including logging configuration,
domain errors, database setup and the authorship model layer.
"""

from expertpress.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
