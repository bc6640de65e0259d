"""Unit tests for post serialization with the deprecated ``expert`` field."""

import pytest
from sqlalchemy import delete

from expertpress.core.authorship.options import FetchOptions, handle_options
from expertpress.core.authorship.serialization import serialize_post
from expertpress.core.database.entities.posts import PostExpertLink
from expertpress.core.errors import ValidationError


class TestSerializePost:
    async def test_experts_requested(self, repos, staff, make_post):
        post = await make_post("duo", [staff["expert"], staff["co_expert"]])
        found, options = await repos.posts.find_one(post.id, with_related=["experts"])

        data = serialize_post(found, options)

        assert [expert["id"] for expert in data["experts"]] == [staff["expert"].id, staff["co_expert"].id]
        assert data["expert"] == staff["expert"].id
        assert "expert_id" not in data
        assert data["primary_expert"]["id"] == staff["expert"].id

    async def test_legacy_expert_requested(self, repos, staff, make_post):
        post = await make_post("legacy", [staff["co_expert"], staff["expert"]])
        found, options = await repos.posts.find_one(post.id, with_related=["expert"])

        data = serialize_post(found, options)

        assert data["expert"]["id"] == staff["co_expert"].id
        assert data["expert"]["slug"] == "co-expert"
        assert "experts" not in data
        assert "expert_id" not in data
        assert data["primary_expert"] is None

    async def test_experts_fetched_for_update_are_dropped(self, repos, staff, make_post):
        post = await make_post("update", [staff["expert"]])
        found, options = await repos.posts.find_one(post.id, for_update=True)

        data = serialize_post(found, options)

        assert options.loads_experts
        assert "experts" not in data
        assert data["expert"] == staff["expert"].id

    async def test_no_relations(self, repos, staff, make_post):
        post = await make_post("plain")
        found, _ = await repos.posts.find_one(post.id)

        data = serialize_post(found)

        assert data["expert"] == staff["expert"].id
        assert data["primary_expert"] is None
        assert data["title"] == "Plain"

    async def test_columns_restrict_fields(self, repos, staff, make_post):
        post = await make_post("columns")
        found, options = await repos.posts.find_one(post.id, with_related=["experts"])

        data = serialize_post(found, options, columns=["id", "title", "experts"])

        assert set(data) == {"id", "title", "experts"}

    async def test_columns_with_expert_and_primary_expert(self, repos, staff, make_post):
        post = await make_post("columns-expert")
        found, options = await repos.posts.find_one(post.id, with_related=["experts"])

        data = serialize_post(found, options, columns=["title", "expert", "primary_expert"])

        assert data["expert"] == staff["expert"].id
        assert data["primary_expert"]["id"] == staff["expert"].id
        assert "expert_id" not in data

    async def test_legacy_expert_without_experts_rejected(self, session, repos, make_post):
        post = await make_post("orphan")
        await session.execute(delete(PostExpertLink).where(PostExpertLink.post_id == post.id))
        await session.commit()
        found, options = await repos.posts.find_one(post.id, with_related=["expert"])

        with pytest.raises(ValidationError, match="The target post has no primary expert."):
            serialize_post(found, options)

    async def test_default_options(self, repos, make_post):
        post = await make_post("defaults")
        found, _ = await repos.posts.find_one(post.id)

        assert serialize_post(found, FetchOptions()) == serialize_post(found, handle_options("fetching"))
