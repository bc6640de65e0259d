"""Unit tests for the post request models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from expertpress.core.models.io import PostCreate, PostUpdate


class TestPostCreate:
    def test_minimal(self):
        attrs = PostCreate(title="Hello", slug="hello").to_attrs()

        assert attrs == {
            "title": "Hello",
            "slug": "hello",
            "status": "draft",
            "visibility": "public",
            "featured": False,
            "published_at": None,
            "experts": None,
        }

    def test_experts_references(self):
        payload = PostCreate(
            title="Hello",
            slug="hello",
            status="published",
            experts=[{"id": "u1"}, {"slug": "cora"}, {"email": "ezra@example.com"}],
        )

        attrs = payload.to_attrs()

        assert attrs["experts"] == [{"id": "u1"}, {"slug": "cora"}, {"email": "ezra@example.com"}]
        assert attrs["status"] == "published"

    def test_empty_experts_are_kept(self):
        assert PostCreate(title="Hello", slug="hello", experts=[]).to_attrs()["experts"] == []

    def test_published_at_stays_a_datetime(self):
        published_at = datetime(2024, 5, 1, 12, 30)

        attrs = PostCreate(title="Hello", slug="hello", published_at=published_at).to_attrs()

        assert attrs["published_at"] == published_at

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            PostCreate(title="Hello", slug="hello", status="archived")


class TestPostUpdate:
    def test_only_sent_fields(self):
        assert PostUpdate(title="Renamed").to_attrs() == {"title": "Renamed"}

    def test_enum_values(self):
        attrs = PostUpdate(status="published", visibility="paid").to_attrs()

        assert attrs == {"status": "published", "visibility": "paid"}

    def test_experts_sent(self):
        attrs = PostUpdate(experts=[{"slug": "cora"}]).to_attrs()

        assert attrs == {"experts": [{"slug": "cora"}]}

    def test_experts_sent_as_null(self):
        assert PostUpdate(experts=None).to_attrs() == {"experts": None}

    def test_expert_id_sent(self):
        assert PostUpdate(expert_id="u2").to_attrs() == {"expert_id": "u2"}

    @pytest.mark.parametrize("field", ["title", "slug", "status", "visibility", "featured"])
    def test_required_column_sent_as_null(self, field):
        with pytest.raises(ValidationError, match="must not be null"):
            PostUpdate(**{field: None})

    def test_nullable_column_sent_as_null(self):
        assert PostUpdate(html=None, published_at=None).to_attrs() == {"html": None, "published_at": None}
