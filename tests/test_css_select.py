import pytest
from cssselect import SelectorSyntaxError

from _vulcanize.css import css_filter
from _vulcanize.exceptions import InvalidOperation
from _vulcanize.filters import search
from _vulcanize.fragment import Fragment
from _vulcanize.nodes import CommentNode, TagNode

from tests.utils import tag_names


@pytest.mark.parametrize(
    ("expression", "expected"),
    (
        ("*", ["a", "b", "c", "d", "e"]),
        ("b", ["b"]),
        ("B", ["b"]),
        ("#a", ["a"]),
        (".x", ["b"]),
        (".y", ["b"]),
        (".z", []),
        ("[id]", ["a"]),
        ("[id=a]", ["a"]),
        ("[class~=y]", ["b"]),
        ("[lang|=en]", ["d"]),
        ("[lang^=en]", ["d"]),
        ("[lang$=GB]", ["d"]),
        ("[lang*=n-G]", ["d"]),
        ("[id!=a]", ["b", "c", "d", "e"]),
        (":not([id])", ["b", "c", "d", "e"]),
        ("a b", ["b"]),
        ("root b", ["b"]),
        ("root > b", []),
        ("a > c", ["c"]),
        ("b + c", ["c"]),
        ("b ~ c", ["c"]),
        ("a + d", ["d"]),
        ("c + d", []),
        (":first-child", ["a", "b", "e"]),
        (":last-child", ["c", "d", "e"]),
        (":only-child", ["e"]),
        (":empty", ["b", "c", "e"]),
        ("b, e", ["b", "e"]),
    ),
)
def test_css_filter(sample_tree, expression, expected):
    assert tag_names(search(sample_tree, css_filter(expression))) == expected


def test_css_select_on_fragment():
    fragment = Fragment.from_nodes(
        (
            TagNode("link", {"rel": "import", "href": "a.html"}),
            TagNode("div", children=(TagNode("link", {"rel": "stylesheet"}),)),
        )
    )
    result = fragment.css_select('link[rel="import"]')
    assert result == [fragment.first_node]
    assert len(fragment.css_select("link")) == 2


def test_empty_ignores_comments():
    node = TagNode("x", children=(CommentNode("c"),))
    assert css_filter(":empty")(node)


def test_filters_are_cached():
    assert css_filter("polymer-element") is css_filter("polymer-element")


@pytest.mark.parametrize(
    "expression", ("a::before", "a:nth-child(2)", "a:hover", "ns|a", ":has(b)")
)
def test_unsupported_features(expression):
    with pytest.raises(InvalidOperation):
        css_filter(expression)


def test_syntax_error():
    with pytest.raises(InvalidOperation) as excinfo:
        css_filter("a[")
    assert isinstance(excinfo.value.__cause__, SelectorSyntaxError)
