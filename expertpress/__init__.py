"""ExpertPress.

This package contains the content-authoring layer of a blogging platform: the
relationship between posts and the users who write them ("experts"), the theme
helpers that render expert bylines, and the authorization rules deciding who may
add, edit or delete a post.

High-level architecture
-----------------------

- ``expertpress.core``:

  - SQLModel entities and async repositories for posts, users, roles and the
    ordered ``posts_experts`` join table.
  - ``authorship``: fetch option handling, save-time reconciliation of the
    deprecated primary ``expert_id`` column, post serialization and the
    ``permissible`` authorization predicate.

- ``expertpress.helpers``:

  - Jinja2 helpers (``expert``, ``experts``, ``truncate``) used by themes.

- ``expertpress.server``:

  - FastAPI application exposing the posts and experts APIs, output
    serializers and members content gating.

- ``expertpress.frontend``:

  - Theme routes rendering posts and expert pages with the helpers.
"""
