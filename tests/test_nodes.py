import pytest

from _vulcanize.exceptions import InvalidOperation
from _vulcanize.nodes import (
    CommentNode,
    DocumentNode,
    NodeKind,
    TagNode,
    TextNode,
    create_external_script,
    create_script,
    create_style,
)

from tests.utils import assert_consistent_links, tag_names


def test_append_child():
    root = TagNode("root")
    a = root.append_child(TagNode("a"))
    text = root.append_child("b")
    c = root.append_child(TagNode("c"))

    assert isinstance(text, TextNode)
    assert root.first_child is a
    assert root.last_child is c
    assert list(root.iterate_children()) == [a, text, c]
    assert_consistent_links(root)


def test_append_child_requires_detached_node(sample_tree):
    node = sample_tree.first_child
    with pytest.raises(InvalidOperation):
        TagNode("x").append_child(node)
    with pytest.raises(InvalidOperation):
        TagNode("x").append_child(DocumentNode())
    with pytest.raises(TypeError):
        TagNode("x").append_child(1)


def test_attributes_and_names_are_lower_cased():
    node = TagNode("Polymer-Element", {"NoScript": "", "name": "X-Foo"})
    assert node.local_name == "polymer-element"
    assert node.attributes == {"noscript": "", "name": "X-Foo"}

    with pytest.raises(ValueError):
        TagNode("")


def test_detach(sample_tree):
    a = sample_tree.first_child
    b, text, c = a.iterate_children()

    assert text.detach() is text
    assert text.is_detached
    assert list(a.iterate_children()) == [b, c]
    assert b.next_sibling is c
    assert c.previous_sibling is b

    b.detach()
    c.detach()
    assert a.first_child is None
    assert a.last_child is None
    assert_consistent_links(sample_tree)


def test_factories():
    script = create_script("Polymer('x-foo');")
    assert script.local_name == "script"
    assert script.attributes == {}
    assert script.text_content == "Polymer('x-foo');"
    assert script.is_detached

    external_script = create_external_script("x-foo.js")
    assert external_script.attributes == {"src": "x-foo.js"}
    assert external_script.first_child is None

    style = create_style("a { color: red }")
    assert style.local_name == "style"
    assert isinstance(style.first_child, TextNode)
    assert style.first_child is style.last_child


def test_iterate_ancestors(sample_tree):
    e = sample_tree.last_child.first_child
    assert tag_names(e.iterate_ancestors()) == ["d", "root"]


def test_iterate_descendants(sample_tree):
    result = list(sample_tree.iterate_descendants())
    assert len(result) == 6
    assert [n.kind for n in result] == [
        NodeKind.Element,
        NodeKind.Element,
        NodeKind.Text,
        NodeKind.Element,
        NodeKind.Element,
        NodeKind.Element,
    ]
    assert list(sample_tree.first_child.first_child.iterate_descendants()) == []


def test_iterate_siblings(sample_tree):
    b, text, c = sample_tree.first_child.iterate_children()
    assert list(b.iterate_following_siblings()) == [text, c]
    assert list(c.iterate_preceding_siblings()) == [text, b]


@pytest.mark.parametrize("node", (TextNode("a"), CommentNode("a")))
def test_leaf_nodes_have_no_children(node):
    with pytest.raises(InvalidOperation):
        node.append_child(TagNode("x"))
    assert node.first_child is None
    assert list(node.iterate_children()) == []


def test_leaf_node_content_must_be_string():
    with pytest.raises(TypeError):
        TextNode(None)


def test_text_content():
    node = TagNode("script")
    assert node.text_content == ""

    node.text_content = "a"
    assert isinstance(node.first_child, TextNode)
    assert node.text_content == "a"

    node.text_content = "b"
    assert node.first_child is node.last_child
    assert node.text_content == "b"


def test_text_content_requires_text_first_child():
    node = TagNode("x", children=(TagNode("y"), "z"))
    with pytest.raises(InvalidOperation):
        node.text_content
    with pytest.raises(InvalidOperation):
        node.text_content = "z"


def test_str():
    node = TagNode("div", {"class": "a"}, ("x < y", TagNode("br")))
    assert str(node) == '<div class="a">x &lt; y<br></div>'
