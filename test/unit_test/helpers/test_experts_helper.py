import pytest
from markupsafe import Markup

from expertpress.helpers import create_environment, experts

EZRA = '<a href="/expert/ezra/">Ezra Expert</a>'
CORA = '<a href="/expert/cora/">Cora Expert</a>'
CARL = '<a href="/expert/carl/">Carl Contributor</a>'


@pytest.fixture
def post(ezra, cora, carl):
    return {"experts": [ezra, cora, carl]}


def test_single_expert(registered, ezra):
    output = experts({"experts": [ezra]})

    assert isinstance(output, Markup)
    assert output == EZRA


def test_multiple_experts(registered, post):
    assert experts(post) == ", ".join([EZRA, CORA, CARL])


def test_objects_as_scope(registered, ezra):
    class Scope:
        def __init__(self, **attrs):
            self.__dict__.update(attrs)

    post = Scope(experts=[Scope(**ezra)])

    assert experts(post) == EZRA


def test_autolink_disabled(post):
    assert experts(post, autolink="false") == "Ezra Expert, Cora Expert, Carl Contributor"


def test_separator_prefix_suffix(post):
    output = experts(post, autolink=False, separator=" & ", prefix="By ", suffix=".")

    assert output == "By Ezra Expert & Cora Expert & Carl Contributor."


def test_no_experts():
    assert experts({}) == ""
    assert experts({"experts": []}, prefix="By ") == ""


@pytest.mark.parametrize(
    ("kwargs", "expected"),
    [
        ({"limit": 1}, "Ezra Expert"),
        ({"limit": "2"}, "Ezra Expert, Cora Expert"),
        ({"from": 2}, "Cora Expert, Carl Contributor"),
        ({"from_": "3"}, "Carl Contributor"),
        ({"to": 2}, "Ezra Expert, Cora Expert"),
        ({"from": 2, "to": 2}, "Cora Expert"),
        ({"from": 2, "limit": 1}, "Cora Expert"),
        ({"limit": 0}, "Ezra Expert, Cora Expert, Carl Contributor"),
        ({"from": 0}, "Carl Contributor"),
        ({"from": "0", "limit": 2}, ""),
        ({"from": None}, "Ezra Expert, Cora Expert, Carl Contributor"),
    ],
)
def test_range(post, kwargs, expected):
    assert experts(post, autolink=False, **kwargs) == expected


def test_visibility_filter(ezra, cora, carl):
    cora["visibility"] = "members"
    carl.pop("visibility")
    post = {"experts": [ezra, cora, carl]}

    assert experts(post, autolink=False) == "Ezra Expert, Carl Contributor"
    assert experts(post, autolink=False, visibility="members") == "Cora Expert, Carl Contributor"
    assert experts(post, autolink=False, visibility="all") == "Ezra Expert, Cora Expert, Carl Contributor"


def test_mapping_of_experts(ezra, cora):
    post = {"experts": {"first": ezra, "second": cora}}

    assert experts(post, autolink=False) == "Ezra Expert, Cora Expert"


def test_names_are_escaped():
    assert experts({"experts": [{"name": "A & B"}]}, autolink=False) == "A &amp; B"


def test_as_filter(registered, post):
    env = create_environment()

    output = env.from_string('{{ post|experts(separator=" & ", limit=2) }}').render(post=post)

    assert output == f"{EZRA} & {CORA}"


def test_looping_over_experts_is_unaffected(post):
    env = create_environment()

    output = env.from_string("{% for e in post.experts %}{{ e.slug }} {% endfor %}").render(post=post)

    assert output == "ezra cora carl "
