import pytest

from _vulcanize.exceptions import InvalidOperation
from _vulcanize.fragment import Fragment
from _vulcanize.nodes import TagNode, TextNode

from tests.utils import assert_consistent_fragment, assert_consistent_links, tag_names


def make_fragment(*names):
    return Fragment.from_nodes(TagNode(n) for n in names)


def test_bool_and_len():
    assert not Fragment()
    assert len(Fragment()) == 0
    assert list(Fragment()) == []

    fragment = make_fragment("a", "b", "c")
    assert fragment
    assert len(fragment) == 3


def test_contains(sample_tree):
    fragment = Fragment.from_node(sample_tree)
    assert sample_tree in fragment
    assert sample_tree.first_child not in fragment


def test_ends_must_be_given_together():
    with pytest.raises(ValueError):
        Fragment(TagNode("a"))


def test_from_nodes():
    fragment = make_fragment("a", "b", "c")
    assert tag_names(fragment) == ["a", "b", "c"]
    assert fragment.first_node.parent is None
    assert_consistent_fragment(fragment)


def test_from_nodes_requires_detached_nodes(sample_tree):
    with pytest.raises(InvalidOperation):
        Fragment.from_nodes((TagNode("x"), sample_tree.first_child))


def test_iteration_stops_at_last_node(sample_tree):
    a = sample_tree.first_child
    b, text, c = a.iterate_children()
    fragment = Fragment(b, text)
    assert list(fragment) == [b, text]


@pytest.mark.parametrize("position", (0, 1, 2))
def test_remove_top_level_member(position):
    fragment = make_fragment("a", "b", "c")
    node = list(fragment)[position]

    fragment.remove(node)

    assert node.is_detached
    assert len(fragment) == 2
    assert node not in fragment
    assert_consistent_fragment(fragment)


def test_remove_descendant(sample_tree):
    fragment = Fragment.from_node(sample_tree)
    e = sample_tree.last_child.first_child

    fragment.remove(e)

    assert e.is_detached
    assert sample_tree.last_child.first_child is None
    assert_consistent_links(sample_tree)


def test_remove_only_member():
    fragment = make_fragment("a")
    fragment.remove(fragment.first_node)
    assert not fragment
    assert_consistent_fragment(fragment)


@pytest.mark.parametrize(
    ("position", "expected"),
    (
        (0, ["x", "y", "b", "c"]),
        (1, ["a", "x", "y", "c"]),
        (2, ["a", "b", "x", "y"]),
    ),
)
def test_replace_top_level_member(position, expected):
    fragment = make_fragment("a", "b", "c")
    node = list(fragment)[position]

    fragment.replace_with_fragment(node, make_fragment("x", "y"))

    assert tag_names(fragment) == expected
    assert node.is_detached
    assert_consistent_fragment(fragment)


@pytest.mark.parametrize(
    ("position", "expected"),
    (
        (0, ["x", "y", "z", "text", "c"]),
        (2, ["b", "text", "x", "y", "z"]),
    ),
)
def test_replace_child(sample_tree, position, expected):
    a = sample_tree.first_child
    node = list(a.iterate_children())[position]
    fragment = Fragment.from_node(sample_tree)
    inserted = make_fragment("x", "y", "z")

    fragment.replace_with_fragment(node, inserted)

    assert [
        "text" if isinstance(n, TextNode) else n.local_name
        for n in a.iterate_children()
    ] == expected
    assert all(n.parent is a for n in inserted)
    assert node.is_detached
    assert_consistent_links(sample_tree)
    assert tag_names(fragment) == ["root"]


def test_replace_only_child(sample_tree):
    d = sample_tree.last_child
    e = d.first_child
    fragment = Fragment.from_node(sample_tree)

    fragment.replace_with_fragment(e, make_fragment("x", "y"))

    assert tag_names(d.iterate_children()) == ["x", "y"]
    assert d.first_child.local_name == "x"
    assert d.last_child.local_name == "y"
    assert_consistent_links(sample_tree)


def test_replace_only_member():
    fragment = make_fragment("a")
    inserted = make_fragment("x", "y")

    fragment.replace_with_fragment(fragment.first_node, inserted)

    assert tag_names(fragment) == ["x", "y"]
    assert fragment.first_node is inserted.first_node
    assert fragment.last_node is inserted.last_node
    assert_consistent_fragment(fragment)


def test_replace_with_empty_fragment_removes(sample_tree):
    fragment = Fragment.from_node(sample_tree)
    b = sample_tree.first_child.first_child

    fragment.replace_with_fragment(b, Fragment())

    assert b.is_detached
    assert len(list(sample_tree.first_child.iterate_children())) == 2
    assert_consistent_links(sample_tree)


def test_replace_with_attached_fragment_fails(sample_tree):
    fragment = make_fragment("a", "b")
    b, _, c = sample_tree.first_child.iterate_children()

    with pytest.raises(InvalidOperation):
        fragment.replace_with_fragment(fragment.first_node, Fragment(b, c))

    assert tag_names(fragment) == ["a", "b"]
    assert_consistent_links(sample_tree)


def test_replace_with_node(sample_tree):
    fragment = Fragment.from_node(sample_tree)
    d = sample_tree.last_child
    new_node = TagNode("x")

    fragment.replace_with_node(d, new_node)

    assert sample_tree.last_child is new_node
    assert new_node.parent is sample_tree
    assert_consistent_links(sample_tree)

    with pytest.raises(InvalidOperation):
        fragment.replace_with_node(new_node, sample_tree.first_child)


def test_search(sample_tree):
    fragment = Fragment.from_nodes((sample_tree, TagNode("f")))
    assert tag_names(fragment.search(lambda n: isinstance(n, TagNode))) == [
        "root",
        "a",
        "b",
        "c",
        "d",
        "e",
        "f",
    ]
    assert fragment.search(lambda n: isinstance(n, TextNode))[0].content == "text"


def test_search_allows_mutation_of_results(sample_tree):
    fragment = Fragment.from_node(sample_tree)
    for node in fragment.search(lambda n: isinstance(n, TagNode)):
        if node.local_name in ("b", "c"):
            fragment.remove(node)
    assert_consistent_links(sample_tree)
    assert tag_names(fragment.search(lambda n: isinstance(n, TagNode))) == [
        "root",
        "a",
        "d",
        "e",
    ]


def test_str():
    fragment = Fragment.from_nodes((TagNode("a"), TextNode("&"), TagNode("br")))
    assert str(fragment) == "<a></a>&amp;<br>"
