"""
Database layer for ExpertPress.

Structure:
- entities/: Table models for users, roles, posts and their link tables
- repositories/: Data access layer for users and posts
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session, repo bundle)

Only the shared ``Base`` is exported here. The session and repository
modules are imported by their full path since they depend on the
authorship hooks, which in turn depend on the entities.
"""

from .base import Base

__all__ = ["Base"]
