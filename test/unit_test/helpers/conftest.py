import pytest

from expertpress.helpers.url import url_service


@pytest.fixture
def ezra():
    return {"id": "u1", "name": "Ezra Expert", "slug": "ezra", "visibility": "public"}


@pytest.fixture
def cora():
    return {"id": "u2", "name": "Cora Expert", "slug": "cora", "visibility": "public"}


@pytest.fixture
def carl():
    return {"id": "u3", "name": "Carl Contributor", "slug": "carl", "visibility": "public"}


@pytest.fixture
def registered(ezra, cora, carl):
    """Register the expert pages of all sample experts."""
    for expert in (ezra, cora, carl):
        url_service.register_expert(expert)
    return url_service
