"""
Exception handlers for the ExpertPress server.

This package contains custom exception handlers for domain and unexpected
errors and a setup function to register them with the FastAPI application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
