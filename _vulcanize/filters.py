# Copyright (C) 2018-'25  Frank Sachsenheim
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Filters are callables that take a node as only argument and return a boolean that
indicates whether the node matches. They can be passed to any method that accepts a
``*filter`` argument, multiple filters are then combined like with :func:`all_of`.

>>> from _vulcanize.nodes import TagNode
>>> link = TagNode("link", {"rel": "import", "href": "a.html"})
>>> head = TagNode("head", children=(link,))
>>> [n.attributes["href"] for n in search(head, is_import_link)]
['a.html']
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from _vulcanize.nodes import CommentNode, DocumentNode, TagNode, TextNode

if TYPE_CHECKING:
    from _vulcanize.nodes import NodeBase
    from _vulcanize.typing import Filter


# filter factories and wrappers


def all_of(*filter: Filter) -> Filter:
    """
    A node filter wrapper that matches when all of the given filters are matching, like
    a boolean ``and``. Without any filter it matches every node.
    """

    def all_of_wrapper(node: NodeBase) -> bool:
        return all(f(node) for f in filter)

    return all_of_wrapper


def any_of(*filter: Filter) -> Filter:
    """
    A node filter wrapper that matches when any of the given filters is matching, like a
    boolean ``or``. Without any filter it matches no node.
    """

    def any_of_wrapper(node: NodeBase) -> bool:
        return any(f(node) for f in filter)

    return any_of_wrapper


def has_attribute(name: str) -> Filter:
    """Returns a filter that matches tag nodes which bear the named attribute."""
    name = name.lower()

    def has_attribute_wrapper(node: NodeBase) -> bool:
        return isinstance(node, TagNode) and name in node.attributes

    return has_attribute_wrapper


def has_attribute_value(name: str, value: str) -> Filter:
    """
    Returns a filter that matches tag nodes whose named attribute has exactly the given
    value.
    """
    name = name.lower()

    def has_attribute_value_wrapper(node: NodeBase) -> bool:
        return isinstance(node, TagNode) and node.attributes.get(name) == value

    return has_attribute_value_wrapper


def has_tag_name(name: str) -> Filter:
    """Returns a filter that matches tag nodes with the given name."""
    name = name.lower()

    def has_tag_name_wrapper(node: NodeBase) -> bool:
        return isinstance(node, TagNode) and node.local_name == name

    return has_tag_name_wrapper


def not_(*filter: Filter) -> Filter:
    """
    A node filter wrapper that matches when the given filter is not matching,
    like a boolean ``not``.
    """

    def not_wrapper(node: NodeBase) -> bool:
        return not all(f(node) for f in filter)

    return not_wrapper


# node type filters


def is_comment_node(node: NodeBase) -> bool:
    """A node filter that matches :class:`CommentNode` instances."""
    return isinstance(node, CommentNode)


def is_document_node(node: NodeBase) -> bool:
    """A node filter that matches :class:`DocumentNode` instances."""
    return isinstance(node, DocumentNode)


def is_tag_node(node: NodeBase) -> bool:
    """A node filter that matches :class:`TagNode` instances."""
    return isinstance(node, TagNode)


def is_text_node(node: NodeBase) -> bool:
    """A node filter that matches :class:`TextNode` instances."""
    return isinstance(node, TextNode)


# contributed filters


is_external_script = all_of(has_tag_name("script"), has_attribute("src"))
"""Matches ``script`` elements that refer a resource."""

is_import_link = all_of(has_tag_name("link"), has_attribute_value("rel", "import"))
"""Matches HTML imports, ``link`` elements with a ``rel`` attribute ``import``."""

is_inline_javascript = all_of(
    has_tag_name("script"),
    not_(has_attribute("src")),
    any_of(
        not_(has_attribute("type")), has_attribute_value("type", "text/javascript")
    ),
)
"""Matches ``script`` elements with JavaScript content."""

is_stylesheet_link = all_of(
    has_tag_name("link"), has_attribute_value("rel", "stylesheet")
)
"""Matches ``link`` elements that refer a stylesheet."""


# queries


def closest(node: NodeBase, *filter: Filter) -> Optional[NodeBase]:
    """
    Returns the first node that matches all filters while walking from the given node
    itself up to its topmost ancestor or :obj:`None`.
    """
    pointer: Optional[NodeBase] = node
    while pointer is not None:
        if all(f(pointer) for f in filter):
            return pointer
        pointer = pointer._parent
    return None


def search(root: NodeBase, *filter: Filter) -> list[NodeBase]:
    """
    Returns all descendants of ``root`` that match all filters in document order. The
    ``root`` itself is never included.
    """
    return list(root.iterate_descendants(*filter))


#


__all__ = (
    all_of.__name__,
    any_of.__name__,
    closest.__name__,
    has_attribute.__name__,
    has_attribute_value.__name__,
    has_tag_name.__name__,
    is_comment_node.__name__,
    is_document_node.__name__,
    "is_external_script",
    "is_import_link",
    "is_inline_javascript",
    "is_stylesheet_link",
    is_tag_node.__name__,
    is_text_node.__name__,
    not_.__name__,
    search.__name__,
)
