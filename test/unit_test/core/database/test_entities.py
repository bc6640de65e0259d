"""Unit tests for the user and post entities."""

from expertpress.core.database.base import object_id, utc_now_naive
from expertpress.core.database.entities import Post, PostStatus, PostVisibility, Role, RoleName, User


class TestBase:
    def test_object_id(self):
        first, second = object_id(), object_id()

        assert len(first) == 24
        assert int(first, 16) >= 0
        assert first != second

    def test_utc_now_naive(self):
        assert utc_now_naive().tzinfo is None


class TestUser:
    def test_defaults(self):
        user = User(name="Ezra Expert", slug="ezra", email="ezra@example.com")

        assert len(user.id) == 24
        assert user.status == "active"
        assert user.visibility == "public"
        assert user.roles == []

    def test_has_role(self):
        user = User(name="Ezra Expert", slug="ezra", email="ezra@example.com", roles=[Role(name="Expert")])

        assert user.role_names == ["Expert"]
        assert user.has_role(RoleName.EXPERT)
        assert user.has_role("Expert")
        assert not user.has_role(RoleName.OWNER)

    def test_repr(self):
        user = User(id="u1", name="Ezra Expert", slug="ezra", email="ezra@example.com")

        assert repr(user) == "User(id=u1, slug=ezra)"


class TestPost:
    def test_defaults(self):
        post = Post(title="Hello", slug="hello", expert_id="u1")

        assert post.status == PostStatus.DRAFT.value
        assert post.visibility == PostVisibility.PUBLIC.value
        assert post.published_at is None
        assert not post.featured
        assert len(post.uuid) == 36

    def test_repr(self):
        post = Post(id="p1", title="Hello", slug="hello", expert_id="u1")

        assert repr(post) == "Post(id=p1, slug=hello, expert_id=u1)"

    def test_dump_leaves_out_experts(self):
        post = Post(title="Hello", slug="hello", expert_id="u1")

        assert "experts" not in post.model_dump()
