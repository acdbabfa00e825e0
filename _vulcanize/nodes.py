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

from __future__ import annotations

from abc import ABC
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, ClassVar, Optional

from _vulcanize.exceptions import InvalidOperation
from _vulcanize.serializer import serialize
from _vulcanize.typing import NodeKind

if TYPE_CHECKING:
    from _vulcanize.typing import Filter, NodeSource


# functions


def create_external_script(src: str) -> TagNode:
    """Returns a detached ``<script>`` element that refers ``src``."""
    return TagNode("script", {"src": src})


def create_script(content: str) -> TagNode:
    """Returns a detached ``<script>`` element with ``content`` as its only child."""
    return TagNode("script", children=(content,))


def create_style(content: str) -> TagNode:
    """Returns a detached ``<style>`` element with ``content`` as its only child."""
    return TagNode("style", children=(content,))


def _unlink(node: NodeBase):
    previous, following, parent = (
        node._previous_sibling,
        node._next_sibling,
        node._parent,
    )
    if previous is not None:
        previous._next_sibling = following
    if following is not None:
        following._previous_sibling = previous
    if parent is not None:
        assert isinstance(parent, _ParentNode)
        if parent._first_child is node:
            parent._first_child = following
        if parent._last_child is node:
            parent._last_child = previous
    node._parent = node._previous_sibling = node._next_sibling = None


# nodes


class NodeBase(ABC):
    """
    The common base of all node types. A node is linked to its parent and its
    neighbouring siblings, these references are maintained by the tree manipulating
    methods of nodes and :class:`_vulcanize.fragment.Fragment` objects and can only be
    read from the outside.
    """

    kind: ClassVar[NodeKind]

    __slots__ = ("_next_sibling", "_parent", "_previous_sibling")

    def __init__(self):
        self._parent: Optional[_ParentNode] = None
        self._previous_sibling: Optional[NodeBase] = None
        self._next_sibling: Optional[NodeBase] = None

    def __str__(self) -> str:
        return serialize(self)

    def detach(self) -> NodeBase:
        """
        Removes the node from its tree and its siblings.

        :return: The node itself.
        """
        _unlink(self)
        return self

    @property
    def first_child(self) -> Optional[NodeBase]:
        return None

    @property
    def is_detached(self) -> bool:
        """Whether the node has neither a parent nor siblings."""
        return (
            self._parent is None
            and self._previous_sibling is None
            and self._next_sibling is None
        )

    def iterate_ancestors(self, *filter: Filter) -> Iterator[NodeBase]:
        """
        Iterator over the node's ancestors, beginning with the parent.

        :param filter: Any number of filters that a yielded node must match.
        """
        node = self._parent
        while node is not None:
            if all(f(node) for f in filter):
                yield node
            node = node._parent

    def iterate_children(self, *filter: Filter) -> Iterator[NodeBase]:
        return iter(())

    def iterate_descendants(self, *filter: Filter) -> Iterator[NodeBase]:
        return iter(())

    def iterate_following_siblings(self, *filter: Filter) -> Iterator[NodeBase]:
        node = self._next_sibling
        while node is not None:
            if all(f(node) for f in filter):
                yield node
            node = node._next_sibling

    def iterate_preceding_siblings(self, *filter: Filter) -> Iterator[NodeBase]:
        node = self._previous_sibling
        while node is not None:
            if all(f(node) for f in filter):
                yield node
            node = node._previous_sibling

    @property
    def last_child(self) -> Optional[NodeBase]:
        return None

    @property
    def next_sibling(self) -> Optional[NodeBase]:
        return self._next_sibling

    @property
    def parent(self) -> Optional[NodeBase]:
        return self._parent

    @property
    def previous_sibling(self) -> Optional[NodeBase]:
        return self._previous_sibling


class _LeafNode(NodeBase):
    __slots__ = ("_content",)

    def __init__(self, content: str):
        super().__init__()
        self.content = content

    def append_child(self, node: NodeSource) -> NodeBase:
        raise InvalidOperation(
            f"A {self.kind.name.lower()} node can't have children."
        )

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, value: str):
        if not isinstance(value, str):
            raise TypeError
        self._content = value


class _ParentNode(NodeBase):
    __slots__ = ("_first_child", "_last_child")

    def __init__(self, children: Iterable[NodeSource] = ()):
        super().__init__()
        self._first_child: Optional[NodeBase] = None
        self._last_child: Optional[NodeBase] = None
        for child in children:
            self.append_child(child)

    def append_child(self, node: NodeSource) -> NodeBase:
        """
        Adds a node as last child.

        :param node: Either a detached node or a string that a :class:`TextNode` is
                     created from.
        :return: The appended node.
        """
        if isinstance(node, str):
            node = TextNode(node)
        elif not isinstance(node, NodeBase):
            raise TypeError("Either node instances or strings must be provided.")
        elif isinstance(node, DocumentNode):
            raise InvalidOperation("A document node can't be a child node.")
        elif not node.is_detached:
            raise InvalidOperation(
                "Only a detached node can be added to the tree. Use "
                ":meth:`NodeBase.detach` to get one."
            )

        node._parent = self
        if (last_child := self._last_child) is None:
            self._first_child = node
        else:
            last_child._next_sibling = node
            node._previous_sibling = last_child
        self._last_child = node
        return node

    @property
    def first_child(self) -> Optional[NodeBase]:
        return self._first_child

    def iterate_children(self, *filter: Filter) -> Iterator[NodeBase]:
        node = self._first_child
        while node is not None:
            following = node._next_sibling
            if all(f(node) for f in filter):
                yield node
            node = following

    def iterate_descendants(self, *filter: Filter) -> Iterator[NodeBase]:
        """
        Iterator over the node's descendants in document order, the node itself is not
        included.

        :param filter: Any number of filters that a yielded node must match.
        """
        node = self._first_child
        while node is not None:
            if all(f(node) for f in filter):
                yield node

            if (child := node.first_child) is not None:
                node = child
                continue

            while node is not self:
                assert node is not None
                if (following := node._next_sibling) is not None:
                    node = following
                    break
                node = node._parent
            else:
                return

    @property
    def last_child(self) -> Optional[NodeBase]:
        return self._last_child


class CommentNode(_LeafNode):
    """
    The instances of this class represent comments.

    :param content: The comment's text.
    """

    kind = NodeKind.Comment

    __slots__ = ()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.content!r}) [{hex(id(self))}]>"


class DocumentNode(_ParentNode):
    """
    This node type represents a whole parsed document. It contains the nodes that
    precede, constitute and follow the document's root element.

    :param children: The document's top-level nodes.
    :param doctype: The document type declaration as it appeared in the source.
    """

    kind = NodeKind.Document

    __slots__ = ("doctype",)

    def __init__(
        self, children: Iterable[NodeSource] = (), doctype: Optional[str] = None
    ):
        super().__init__(children)
        self.doctype = doctype

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.doctype!r}) [{hex(id(self))}]>"


class TagNode(_ParentNode):
    """
    The instances of this class represent elements.

    :param local_name: The tag name, it's stored in lower case.
    :param attributes: Optional attributes, their names are stored in lower case.
    :param children: Optional child nodes, strings become :class:`TextNode` instances.

    The attributes are an ordinary :class:`dict` that can be manipulated directly:

    >>> node = TagNode("LINK", {"rel": "import"})
    >>> node.attributes["href"] = "x-foo.html"
    >>> str(node)
    '<link rel="import" href="x-foo.html">'
    """

    kind = NodeKind.Element

    __slots__ = ("attributes", "_local_name")

    def __init__(
        self,
        local_name: str,
        attributes: Optional[Mapping[str, str]] = None,
        children: Iterable[NodeSource] = (),
    ):
        self.local_name = local_name
        self.attributes: dict[str, str] = (
            {}
            if attributes is None
            else {k.lower(): v for k, v in attributes.items()}
        )
        super().__init__(children)

    def __repr__(self) -> str:
        return (
            f'<{self.__class__.__name__}("{self.local_name}", {self.attributes}) '
            f"[{hex(id(self))}]>"
        )

    @property
    def local_name(self) -> str:
        return self._local_name

    @local_name.setter
    def local_name(self, value: str):
        if not isinstance(value, str):
            raise TypeError
        if not value:
            raise ValueError("A tag name can't be empty.")
        self._local_name = value.lower()

    @property
    def text_content(self) -> str:
        """
        The content of the element's first child which must be a text node. Reading it
        from an element without children yields an empty string, setting it on such
        appends a text node.

        :raises InvalidOperation: When the first child is not a text node.
        """
        if (child := self._first_child) is None:
            return ""
        if not isinstance(child, TextNode):
            raise InvalidOperation(
                f"The first child of <{self.local_name}> is not a text node."
            )
        return child.content

    @text_content.setter
    def text_content(self, text: str):
        if (child := self._first_child) is None:
            self.append_child(TextNode(text))
        elif isinstance(child, TextNode):
            child.content = text
        else:
            raise InvalidOperation(
                f"The first child of <{self.local_name}> is not a text node."
            )


class TextNode(_LeafNode):
    """
    TextNodes contain the textual data of a document.

    :param content: The text.
    """

    kind = NodeKind.Text

    __slots__ = ()

    def __repr__(self):
        return f'<{self.__class__.__name__}(text="{self.content}") [{hex(id(self))}]>'


__all__ = (
    CommentNode.__name__,
    DocumentNode.__name__,
    NodeBase.__name__,
    NodeKind.__name__,
    TagNode.__name__,
    TextNode.__name__,
    create_external_script.__name__,
    create_script.__name__,
    create_style.__name__,
)
