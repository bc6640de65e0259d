"""
Middleware for the ExpertPress server.

Request timing and Logfire reporting for every API and theme request.
"""

from .logfire_middleware import LogfireMiddleware

__all__ = ["LogfireMiddleware"]
